"""
Configuration Validator - Validates config syntax and semantic correctness.

Schema errors come from pydantic; this module turns them into readable
messages and adds the semantic checks a schema cannot express (unknown
platforms, overrides for cameras that are not allowed, ...).
"""

import logging
from dataclasses import dataclass, field
from typing import Any

from pydantic import ValidationError

from ..utils.event_schema import PLATFORMS
from .schemas import PipelineConfig

logger = logging.getLogger(__name__)

ZONE_PATTERN_KEYS = (
    "zones",
    "zones_exclude",
    "exclude_initial_zones",
    "require_initial_zones",
)


@dataclass
class ValidationResult:
    """Result of config validation."""

    valid: bool
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    derived: dict[str, Any] = field(default_factory=dict)
    config: PipelineConfig | None = None


def _format_pydantic_errors(exc: ValidationError) -> list[str]:
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"]) or "config"
        messages.append(f"{location}: {error['msg']}")
    return messages


def validate_config_full(config: dict) -> ValidationResult:
    """
    Comprehensive config validation with detailed error messages.

    Args:
        config: Raw configuration dictionary (e.g. from YAML)

    Returns:
        ValidationResult with errors, warnings, derived information and,
        when valid, the parsed PipelineConfig
    """
    result = ValidationResult(valid=True)

    if not isinstance(config, dict):
        result.valid = False
        result.errors.append("Configuration must be a mapping")
        return result

    try:
        parsed = PipelineConfig(**config)
    except ValidationError as e:
        result.valid = False
        result.errors.extend(_format_pydantic_errors(e))
        return result

    _validate_cameras(parsed, result)
    _validate_devices(parsed, result)
    _validate_zone_patterns(parsed, result)
    _validate_silence(parsed, result)

    result.derived["cameras"] = list(parsed.cameras)
    result.derived["overridden_cameras"] = sorted(parsed.camera_overrides)
    result.derived["platforms"] = sorted({p for _, p in parsed.notify_devices})

    if result.errors:
        result.valid = False
    else:
        result.config = parsed

    return result


def _validate_cameras(config: PipelineConfig, result: ValidationResult) -> None:
    """Validate the camera allow-list and per-camera overrides."""
    if not config.cameras:
        result.warnings.append("'cameras' is empty - every event will be dropped")

    for camera in config.camera_overrides:
        if camera not in config.cameras:
            result.warnings.append(
                f"camera_overrides.{camera}: camera is not in 'cameras' (override unused)"
            )


def _validate_devices(config: PipelineConfig, result: ValidationResult) -> None:
    """Validate notify_devices entries, including per-camera overrides."""
    device_lists = [("notify_devices", config.notify_devices)]
    for camera, override in config.camera_overrides.items():
        if override.notify_devices is not None:
            device_lists.append(
                (f"camera_overrides.{camera}.notify_devices", override.notify_devices)
            )

    for location, devices in device_lists:
        if not devices:
            result.warnings.append(f"{location} is empty - nothing will be sent")
        for i, (service, platform) in enumerate(devices):
            if not service:
                result.errors.append(f"{location}[{i}]: service name is empty")
            if platform not in PLATFORMS:
                result.warnings.append(
                    f"{location}[{i}]: unknown platform '{platform}' "
                    f"(expected one of {', '.join(PLATFORMS)}) - device will be skipped"
                )


def _validate_zone_patterns(config: PipelineConfig, result: ValidationResult) -> None:
    """Check zone globs (global and per camera) for empty patterns."""
    sources = [("", config)]
    sources.extend(
        (f"camera_overrides.{camera}.", override)
        for camera, override in config.camera_overrides.items()
    )

    for prefix, source in sources:
        for key in ZONE_PATTERN_KEYS:
            patterns = getattr(source, key) or ()
            for i, pattern in enumerate(patterns):
                if not pattern.strip():
                    result.errors.append(f"{prefix}{key}[{i}]: empty zone pattern")

    if config.zone_logic == "all" and len(config.zones) < 2:
        result.warnings.append("zone_logic 'all' has no effect with fewer than 2 zones")


def _validate_silence(config: PipelineConfig, result: ValidationResult) -> None:
    """Validate silence settings."""
    if config.silence_table and config.auto_silence_secs == 0:
        result.warnings.append(
            "auto_silence_secs is 0 - silence table is only checked, never extended"
        )
