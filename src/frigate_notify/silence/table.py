"""
Silence Table - Per-camera "silenced until" timestamps.

The table lives outside the pipeline (a Home Assistant input_text entity
holding a JSON object, or a file). It maps camera -> Unix timestamp.

The guard reads one snapshot per event; the updater extends the same
snapshot after a notification. The read and the write are not atomic:
two events for one camera processed concurrently can both pass the guard.
The silence window is a best-effort anti-storm measure, not a lock, and
the max-merge below only guarantees that an update never shortens an
existing (e.g. user-initiated) window.
"""

import json
import logging
from dataclasses import dataclass, field

from ..config.schemas import PipelineConfig
from ..models import Drop, EventRecord, StageResult
from ..utils.constants import SILENCE_TABLE_SENTINELS

logger = logging.getLogger(__name__)

STAGE = "silence"

SilenceTable = dict[str, float]


def parse_silence_table(raw: str | None) -> SilenceTable:
    """
    Parse a silence table snapshot.

    The entity stores JSON as a string. Single quotes may appear depending
    on how the value was written, so they are normalized to double quotes.
    "unknown"/"unavailable" mean the entity has no value yet.

    Never raises: anything that is not a JSON object parses as {}.
    Entries whose value is not a number are skipped.
    """
    if not raw or raw.strip() in SILENCE_TABLE_SENTINELS:
        return {}

    try:
        data = json.loads(raw.replace("'", '"'))
    except (ValueError, TypeError) as e:
        logger.debug(f"Failed to parse silence table: {e}")
        return {}

    if not isinstance(data, dict):
        logger.debug(f"Silence table is not an object: {type(data).__name__}")
        return {}

    table = {}
    for camera, until in data.items():
        if isinstance(until, bool) or not isinstance(until, (int, float)):
            continue
        table[str(camera)] = until
    return table


def check_silence(
    record: EventRecord, table: SilenceTable, now: float
) -> StageResult:
    """Drop the event while its camera is silenced."""
    until = table.get(record.camera, 0)
    if now < until:
        return Drop(
            STAGE,
            f'Camera "{record.camera}" silenced for {until - now:.0f}s more',
        )
    return record


@dataclass(frozen=True)
class SilenceUpdate:
    """
    Write to perform against the silence store.

    Attributes:
        entity_id: Store key (e.g. input_text.frigate_silence)
        camera: Camera whose window was extended
        until: New silenced-until timestamp for that camera
        table: Complete table to write back (replaces the stored one)
    """

    entity_id: str
    camera: str
    until: float
    table: SilenceTable = field(default_factory=dict)

    @property
    def value(self) -> str:
        """JSON-encoded table, as stored by the external entity."""
        return json.dumps(self.table)


def plan_silence_update(
    record: EventRecord,
    config: PipelineConfig,
    table: SilenceTable,
    now: float,
) -> SilenceUpdate | None:
    """
    Extend the camera's silence window after a notification.

    until = max(existing, now + auto_silence_secs), so a longer window
    already in the table survives.

    Args:
        record: Event that was just notified
        config: Effective config for the event
        table: The same snapshot the guard read (not re-fetched)
        now: Current Unix time

    Returns:
        The update to write, or None when no silence_table is configured
    """
    if not config.silence_table:
        return None

    existing = table.get(record.camera, 0)
    until = max(existing, int(now) + config.auto_silence_secs)

    updated = dict(table)
    updated[record.camera] = until

    return SilenceUpdate(
        entity_id=config.silence_table,
        camera=record.camera,
        until=until,
        table=updated,
    )
