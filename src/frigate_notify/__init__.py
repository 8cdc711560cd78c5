"""
Frigate Notify

Turns Frigate object-detection events into Home Assistant push
notifications. Each event runs through a fixed chain of stages; per-camera
overrides reshape every stage, and a per-camera silence window keeps
notification storms down.

Supports Terraform-like workflow:
  --validate  Check configuration validity
  --plan      Show the effective policy per camera
  --dry-run   Simulate with sample events

Package structure:
  config/         - Configuration schema, validation, override resolution
  filters/        - Significance, label, zone and quality stages
  silence/        - Silence guard, updater and table stores
  notifications/  - Per-platform payload synthesis
  processor/      - Normalizer, pipeline composition, dispatcher
  utils/          - Constants and the Frigate event contract
"""

__version__ = "1.0.0"

from .config import (
    ConfigValidationError,
    PipelineConfig,
    ValidationResult,
    build_plan,
    resolve_effective_config,
    validate_config_full,
)
from .models import Drop, EnrichmentResponse, EventRecord, NotificationPayload
from .processor import (
    NotificationPipeline,
    PipelineResult,
    dispatch_events,
    normalize_event,
    run_pipeline,
)

__all__ = [
    # Config
    "ConfigValidationError",
    "Drop",
    "EnrichmentResponse",
    # Models
    "EventRecord",
    "NotificationPayload",
    # Processor
    "NotificationPipeline",
    "PipelineConfig",
    "PipelineResult",
    "ValidationResult",
    "build_plan",
    "dispatch_events",
    "normalize_event",
    "resolve_effective_config",
    "run_pipeline",
    "validate_config_full",
]
