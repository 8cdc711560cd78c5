"""
Notification Pipeline - Runs one Frigate event through every stage.

Stage order:
    normalize -> camera/overrides -> significance -> labels -> zones
    -> quality -> silence guard -> build notifications -> silence update

run_pipeline() is the pure core: given a raw event, the global config and
a way to read the silence table, it returns what should happen (payloads
and a silence table write) without doing it. NotificationPipeline is the
shell that performs the reads, deliveries and writes.

Drops are not errors. They are logged at INFO when the effective config
has debug enabled, DEBUG otherwise.
"""

import logging
import time
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from ..config.resolver import resolve_effective_config
from ..config.schemas import PipelineConfig
from ..filters import check_significance, filter_labels, filter_quality, filter_zones
from ..models import Drop, EnrichmentResponse, EventRecord, NotificationPayload
from ..notifications import build_enriched_notifications, build_notifications
from ..silence import (
    SilenceStore,
    SilenceUpdate,
    check_silence,
    parse_silence_table,
    plan_silence_update,
)
from ..utils.event_schema import EVENT_TYPE_END
from .normalizer import normalize_event

logger = logging.getLogger(__name__)

# Filters that only need the record and the effective config, in order
FILTER_STAGES = (filter_labels, filter_zones, filter_quality)

SilenceReader = Callable[[str], str | None]
Deliver = Callable[[NotificationPayload], bool]


@dataclass
class PipelineResult:
    """
    Outcome of one pipeline run.

    Attributes:
        record: Normalized record (None if normalization dropped the event)
        config: Effective config (None if dropped before it was resolved)
        drop: Why the event was dropped, or None if it was notified
        notifications: Payloads to deliver
        silence_update: Silence table write to perform, if any
    """

    record: EventRecord | None = None
    config: PipelineConfig | None = None
    drop: Drop | None = None
    notifications: list[NotificationPayload] = field(default_factory=list)
    silence_update: SilenceUpdate | None = None

    @property
    def notified(self) -> bool:
        return self.drop is None and bool(self.notifications)


def _log_drop(drop: Drop, config: PipelineConfig, record: EventRecord | None) -> None:
    level = logging.INFO if config.debug else logging.DEBUG
    subject = f"{record.object_id} " if record else ""
    logger.log(level, f"Dropped {subject}{drop}")


def run_pipeline(
    raw_event: Any,
    base_config: PipelineConfig,
    read_silence: SilenceReader | None = None,
    now: float | None = None,
) -> PipelineResult:
    """
    Run one event through the stage chain, stopping at the first Drop.

    Args:
        raw_event: Decoded Frigate message
        base_config: Global configuration
        read_silence: Returns the raw silence table for an entity id.
                      Called at most once, only if silence_table is set.
        now: Current Unix time (defaults to time.time())

    Returns:
        PipelineResult describing payloads and the silence write
    """
    now = time.time() if now is None else now

    record = normalize_event(raw_event)
    if isinstance(record, Drop):
        _log_drop(record, base_config, None)
        return PipelineResult(drop=record)

    config = resolve_effective_config(base_config, record.camera)
    if isinstance(config, Drop):
        _log_drop(config, base_config, record)
        return PipelineResult(record=record, drop=config)

    result = PipelineResult(record=record, config=config)

    outcome = check_significance(raw_event, record, config)
    for stage in FILTER_STAGES:
        if isinstance(outcome, Drop):
            break
        outcome = stage(outcome, config)

    if isinstance(outcome, Drop):
        _log_drop(outcome, config, record)
        result.drop = outcome
        return result

    raw_table = None
    if config.silence_table and read_silence is not None:
        raw_table = read_silence(config.silence_table)
    table = parse_silence_table(raw_table)

    outcome = check_silence(record, table, now)
    if isinstance(outcome, Drop):
        _log_drop(outcome, config, record)
        result.drop = outcome
        return result

    payloads, record = build_notifications(record, config, now)
    result.record = record
    result.notifications = payloads

    if payloads:
        result.silence_update = plan_silence_update(record, config, table, now)

    return result


class NotificationPipeline:
    """
    Runs events through run_pipeline() and performs the side effects.

    Events for different objects or cameras may be handled concurrently by
    the host. The silence read and write are not serialized: two events
    for one camera can both notify before either silence write lands.
    """

    def __init__(
        self,
        config: PipelineConfig,
        store: SilenceStore | None = None,
        deliver: Deliver | None = None,
        clock: Callable[[], float] = time.time,
    ):
        """
        Args:
            config: Global configuration
            store: Silence table store (None disables guard reads and writes)
            deliver: Sends one payload; None means payloads are only returned
            clock: Source of the current Unix time
        """
        self.config = config
        self.store = store
        self.deliver = deliver
        self.clock = clock

    def _read_silence(self, entity_id: str) -> str | None:
        if self.store is None:
            return None
        return self.store.read(entity_id)

    def _deliver_all(self, payloads: list[NotificationPayload]) -> int:
        if self.deliver is None:
            return 0
        sent = 0
        for payload in payloads:
            if self.deliver(payload):
                sent += 1
            else:
                logger.warning(f"Delivery failed: {payload.service} ({payload.tag})")
        return sent

    def handle(self, raw_event: Any) -> PipelineResult:
        """Process one raw event end to end."""
        result = run_pipeline(
            raw_event, self.config, read_silence=self._read_silence, now=self.clock()
        )
        if not result.notified:
            return result

        sent = self._deliver_all(result.notifications)
        logger.info(
            f"Notified {result.record.label} on {result.record.camera} "
            f"({result.record.object_id}): {sent}/{len(result.notifications)} delivered"
        )

        update = result.silence_update
        if update is not None and self.store is not None:
            if self.store.write(update):
                logger.debug(f"Camera {update.camera} silenced until {update.until}")
            else:
                logger.warning(f"Failed to extend silence for {update.camera}")

        return result

    def enrich(
        self,
        result: PipelineResult,
        enrichment: EnrichmentResponse | Mapping[str, Any] | None,
    ) -> list[NotificationPayload]:
        """
        Replace a finished event's notifications with summarized text.

        Only applies to end events that passed the pipeline; the rebuilt
        payloads keep the original tags.
        """
        if result.record is None or result.config is None or result.drop is not None:
            return []
        if result.record.event_type != EVENT_TYPE_END:
            logger.debug(f"Skipping enrichment for {result.record.event_type} event")
            return []

        payloads = build_enriched_notifications(
            result.record, result.config, enrichment, now=self.clock()
        )
        self._deliver_all(payloads)
        return payloads
