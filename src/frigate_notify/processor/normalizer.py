"""
Event Normalizer - Parses a raw Frigate event into an EventRecord.
"""

from typing import Any

from ..models import Drop, EventRecord, StageResult
from ..utils.event_schema import get_state, is_valid_event

STAGE = "normalize"


def normalize_event(raw_event: Any) -> StageResult:
    """
    Normalize a raw Frigate event.

    Camera ids are lowercased with '-' replaced by '_'; labels and zones are
    lowercased. entered_zones keeps Frigate's order exactly: the first
    element is the zone the object appeared in, which the zone filter's
    directional stages rely on.

    Args:
        raw_event: Decoded Frigate message ({type, before, after})

    Returns:
        EventRecord, or a Drop if the after state is missing
    """
    if not is_valid_event(raw_event):
        return Drop(STAGE, "Missing event payload or after state")

    return EventRecord.from_states(
        event_type=str(raw_event.get("type") or ""),
        after=raw_event["after"],
        before=get_state(raw_event, "before"),
    )
