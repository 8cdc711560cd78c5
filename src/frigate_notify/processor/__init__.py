"""
Event Processor Module

Handles everything between event ingestion and delivery:
- Normalization of raw Frigate events
- The staged filtering / synthesis pipeline
- Dispatching a stream of events through it
"""

from .dispatcher import DispatchStats, decode_event, dispatch_events, process_events
from .normalizer import normalize_event
from .pipeline import (
    FILTER_STAGES,
    NotificationPipeline,
    PipelineResult,
    run_pipeline,
)

__all__ = [
    "FILTER_STAGES",
    # Dispatcher
    "DispatchStats",
    # Pipeline
    "NotificationPipeline",
    "PipelineResult",
    "decode_event",
    "dispatch_events",
    # Normalizer
    "normalize_event",
    "process_events",
    "run_pipeline",
]
