"""
Notification synthesis: display content and per-platform payloads.
"""

from .builder import (
    build_enriched_notifications,
    build_notifications,
    notify_service,
    silence_action_id,
)
from .content import EventDisplay, camera_display_name, describe_event

__all__ = [
    "EventDisplay",
    "build_enriched_notifications",
    "build_notifications",
    "camera_display_name",
    "describe_event",
    "notify_service",
    "silence_action_id",
]
