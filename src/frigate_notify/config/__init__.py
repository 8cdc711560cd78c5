"""
Configuration loading, validation, resolution and planning.

Provides Terraform-like workflow:
- validate_config_full: Comprehensive validation with errors/warnings
- build_plan: Show the effective policy per camera
- simulate_dry_run: Test with sample events
- load_config_with_env: Apply environment variable overrides

Per-event resolution:
- resolve_effective_config: Allow-list check + shallow override merge
"""

from .planner import (
    CameraPlan,
    ConfigPlan,
    # Exception
    ConfigValidationError,
    # Planning
    build_plan,
    # Config loading
    load_config_with_env,
    load_sample_events,
    print_plan,
    # Display
    print_validation_result,
    # Dry-run
    simulate_dry_run,
)
from .resolver import describe_overrides, resolve_effective_config
from .schemas import (
    CameraOverride,
    HomeAssistantConfig,
    PipelineConfig,
    validate_config_pydantic,
)
from .validator import (
    ValidationResult,
    validate_config_full,
)

__all__ = [
    "CameraOverride",
    "CameraPlan",
    "ConfigPlan",
    # Exception
    "ConfigValidationError",
    "HomeAssistantConfig",
    # Pydantic validation
    "PipelineConfig",
    "ValidationResult",
    # Planning
    "build_plan",
    "describe_overrides",
    # Config loading
    "load_config_with_env",
    "load_sample_events",
    "print_plan",
    # Display
    "print_validation_result",
    # Resolution
    "resolve_effective_config",
    # Dry-run
    "simulate_dry_run",
    # Validation
    "validate_config_full",
    "validate_config_pydantic",
]
