"""
Utility modules for constants and the Frigate event contract.
"""

from .constants import (
    DEFAULT_AUTO_SILENCE_SECS,
    DEFAULT_MIN_SCORE,
    DEFAULT_NOTIFICATION_TIMEOUT_HOURS,
    DEFAULT_SCORE_IMPROVEMENT_PCT,
    SILENCE_ACTION_NAMESPACE,
)
from .event_schema import (
    EVENT_TYPE_END,
    EVENT_TYPE_NEW,
    EVENT_TYPE_UPDATE,
    PLATFORM_ANDROID,
    PLATFORM_IOS,
    PLATFORMS,
    FrigateEvent,
    ObjectState,
    get_event_summary,
    get_state,
    is_valid_event,
)

__all__ = [
    "DEFAULT_AUTO_SILENCE_SECS",
    "DEFAULT_MIN_SCORE",
    "DEFAULT_NOTIFICATION_TIMEOUT_HOURS",
    "DEFAULT_SCORE_IMPROVEMENT_PCT",
    # Event schema
    "EVENT_TYPE_END",
    "EVENT_TYPE_NEW",
    "EVENT_TYPE_UPDATE",
    "PLATFORMS",
    "PLATFORM_ANDROID",
    "PLATFORM_IOS",
    "SILENCE_ACTION_NAMESPACE",
    "FrigateEvent",
    "ObjectState",
    "get_event_summary",
    "get_state",
    "is_valid_event",
]
