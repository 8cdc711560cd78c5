"""
Consolidated data models for the notification pipeline.
"""

from .events import (
    Drop,
    EventRecord,
    StageResult,
    extract_score,
    extract_sub_label,
    normalize_camera,
    normalize_zones,
)
from .notifications import EnrichmentResponse, NotificationPayload

__all__ = [
    # Stage outcomes
    "Drop",
    "EnrichmentResponse",
    # Event models
    "EventRecord",
    # Notification models
    "NotificationPayload",
    "StageResult",
    "extract_score",
    "extract_sub_label",
    "normalize_camera",
    "normalize_zones",
]
