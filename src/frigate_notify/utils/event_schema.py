"""
Event Schema - Contract between Frigate and the notification pipeline.

Frigate publishes one message per tracked-object change. Each message holds
the object state before and after the change, plus an event type:

    new:    First detection of a tracked object
    update: Something about the object changed (score, zones, clip, ...)
    end:    Object is no longer tracked; the record is final

Only the fields the pipeline reads are described here. Frigate sends many
more, and all of them are ignored.
"""

from typing import Any, Literal, TypedDict

# Event type constants
EVENT_TYPE_NEW = "new"
EVENT_TYPE_UPDATE = "update"
EVENT_TYPE_END = "end"

EventType = Literal["new", "update", "end"]

EVENT_TYPES = (EVENT_TYPE_NEW, EVENT_TYPE_UPDATE, EVENT_TYPE_END)

# Notification platforms
PLATFORM_ANDROID = "android"
PLATFORM_IOS = "ios"

Platform = Literal["android", "ios"]

PLATFORMS = (PLATFORM_ANDROID, PLATFORM_IOS)


class ObjectState(TypedDict, total=False):
    """
    State of a tracked object at one instant.

    Fields:
        camera: Camera name as configured in Frigate (may contain '-')
        id: Tracked object id, stable from new to end
        label: Object label (person, car, ...)
        sub_label: None, a plain name, or a [name, score] pair
        top_score: Best score seen so far (preferred over score)
        score: Score of the current frame
        entered_zones: Zones entered, in traversal order (append-only)
        current_zones: Zones the object is in right now
        has_clip: Whether a recording clip exists yet
        false_positive: Frigate's false positive flag
    """

    camera: str
    id: str
    label: str
    sub_label: str | list[Any] | None
    top_score: float | None
    score: float | None
    entered_zones: list[str]
    current_zones: list[str]
    has_clip: bool
    false_positive: bool


class FrigateEvent(TypedDict, total=False):
    """Raw event message as published on frigate/events."""

    type: EventType
    before: ObjectState
    after: ObjectState


def get_state(event: dict, key: str) -> dict:
    """Return the before/after state of an event, or {} if it is not a mapping."""
    state = event.get(key)
    return state if isinstance(state, dict) else {}


def is_valid_event(event: Any) -> bool:
    """
    Check whether an event has the minimum structure to be processed.

    Args:
        event: Decoded event message

    Returns:
        True if the event is a mapping with a non-empty 'after' state
    """
    if not isinstance(event, dict):
        return False
    after = event.get("after")
    return isinstance(after, dict) and bool(after)


def get_event_summary(event: dict) -> str:
    """Get a short human-readable summary of a raw event for logging."""
    after = get_state(event, "after")
    event_type = event.get("type", "?")
    camera = after.get("camera", "?")
    label = after.get("label", "?")
    object_id = after.get("id", "?")
    return f"{event_type} {label} on {camera} ({object_id})"
