"""
Change-Significance Filter - Drops update events that carry nothing new.

Frigate republishes a tracked object whenever anything about it changes,
including cosmetic re-detections. Only updates with a material change
continue:

- False positive cleared (true -> false): Frigate's "confirmed" signal,
  fired exactly once per object and more reliable than type == "new"
- Clip became available
- Entered zones changed (append-only, so the object reached a new zone)
- Sub-label or current zones changed AND the score improved by more than
  score_improvement_pct (current zones flutter at zone boundaries)

new and end events always pass; end events finalize the record and must
never be dropped.
"""

import logging
from typing import Any

from ..config.schemas import PipelineConfig
from ..models import (
    Drop,
    EventRecord,
    StageResult,
    extract_score,
    extract_sub_label,
    normalize_zones,
)
from ..utils.event_schema import EVENT_TYPE_UPDATE, get_state

logger = logging.getLogger(__name__)

STAGE = "significance"


def _zones(state: dict[str, Any], key: str) -> list[str]:
    return list(normalize_zones(state.get(key)))


def _check_entered_zones_append_only(
    before: list[str], after: list[str], record: EventRecord
) -> None:
    """Warn when entered_zones was not extended by appending."""
    if after[: len(before)] != before:
        logger.warning(
            f"entered_zones for {record.object_id} on {record.camera} was rewritten, "
            f"not appended: {before} -> {after}"
        )


def is_significant_change(
    before: dict[str, Any],
    after: dict[str, Any],
    improvement_pct: float,
    record: EventRecord,
) -> bool:
    """
    Decide whether an update changed anything worth notifying about.

    Args:
        before: Object state before the change
        after: Object state after the change
        improvement_pct: Relative score gain required for noisy changes
        record: Normalized record (for diagnostics)

    Returns:
        True if the update should continue down the pipeline
    """
    fp_cleared = before.get("false_positive") is True and after.get("false_positive") is False
    clip_became_available = not before.get("has_clip") and bool(after.get("has_clip"))

    entered_before = _zones(before, "entered_zones")
    entered_after = _zones(after, "entered_zones")
    entered_changed = entered_before != entered_after
    if entered_changed:
        _check_entered_zones_append_only(entered_before, entered_after, record)

    sub_label_changed = extract_sub_label(before.get("sub_label")) != extract_sub_label(
        after.get("sub_label")
    )
    current_changed = set(_zones(before, "current_zones")) != set(
        _zones(after, "current_zones")
    )
    score_improved = extract_score(after) > extract_score(before) * (1 + improvement_pct)

    return (
        fp_cleared
        or clip_became_available
        or entered_changed
        or ((sub_label_changed or current_changed) and score_improved)
    )


def check_significance(
    raw_event: dict[str, Any], record: EventRecord, config: PipelineConfig
) -> StageResult:
    """Pass new/end events; pass update events only on a significant change."""
    if record.event_type != EVENT_TYPE_UPDATE:
        return record

    before = get_state(raw_event, "before")
    after = get_state(raw_event, "after")

    if is_significant_change(before, after, config.score_improvement_pct, record):
        return record

    return Drop(STAGE, f"Update for {record.object_id} has no significant change")
