"""
Pydantic schemas for configuration validation.

Provides type-safe, declarative validation with clear error messages.
All models are frozen: the effective configuration for an event is a new
instance, never a mutation of the loaded one.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..models.events import normalize_camera
from ..utils.constants import (
    DEFAULT_AUTO_SILENCE_SECS,
    DEFAULT_MIN_SCORE,
    DEFAULT_NOTIFICATION_TIMEOUT_HOURS,
    DEFAULT_SCORE_IMPROVEMENT_PCT,
)

ZoneMatchType = Literal["entered", "current", "either"]
ZoneLogic = Literal["any", "all"]

# Override keys that may be cleared per camera with an explicit null
NULLABLE_OVERRIDES = frozenset({"silence_table", "frigate_url"})


class StrictModel(BaseModel):
    """Base model that rejects unknown fields and cannot be mutated."""

    model_config = ConfigDict(extra="forbid", frozen=True)


class HomeAssistantConfig(StrictModel):
    """Home Assistant connection used for delivery and the silence table."""

    url: str = Field(..., min_length=1, description="Base URL, e.g. http://ha:8123")
    token: str | None = Field(default=None, description="Long-lived access token")

    @field_validator("url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")


class CameraOverride(StrictModel):
    """
    Per-camera policy override.

    Every key that is set replaces the global value for that camera
    outright. Keys left out keep the global value. Lists are replaced,
    never merged.

    Every policy and display key can be overridden. cameras,
    camera_overrides and homeassistant are global only.
    """

    labels: tuple[str, ...] | None = None
    exclude_sub_labels: tuple[tuple[str, str], ...] | None = None
    zones: tuple[str, ...] | None = None
    zones_exclude: tuple[str, ...] | None = None
    exclude_initial_zones: tuple[str, ...] | None = None
    require_initial_zones: tuple[str, ...] | None = None
    zone_match_type: ZoneMatchType | None = None
    zone_logic: ZoneLogic | None = None
    min_score: float | None = Field(default=None, ge=0.0, le=1.0)
    require_clip: bool | None = None
    require_not_false_positive: bool | None = None
    score_improvement_pct: float | None = Field(default=None, ge=0.0)
    notify_devices: tuple[tuple[str, str], ...] | None = None
    silence_table: str | None = None
    auto_silence_secs: int | None = Field(default=None, ge=0)
    notification_timeout_hours: float | None = Field(default=None, gt=0)
    base_url: str | None = None
    frigate_url: str | None = None
    generate_title: bool | None = None
    expand_cam: bool | None = None
    append_camera: bool | None = None
    debug: bool | None = None

    @field_validator("base_url")
    @classmethod
    def strip_base_url(cls, v: str | None) -> str | None:
        return v.rstrip("/") if v is not None else v

    @model_validator(mode="after")
    def reject_explicit_nulls(self):
        for name in self.model_fields_set:
            if name not in NULLABLE_OVERRIDES and getattr(self, name) is None:
                raise ValueError(f"camera override '{name}' cannot be null")
        return self

    def overridden_fields(self) -> dict:
        """Return only the keys that were explicitly set in the override."""
        return self.model_dump(exclude_unset=True)


class PipelineConfig(StrictModel):
    """Complete configuration schema."""

    cameras: tuple[str, ...] = Field(..., description="Camera allow-list")
    camera_overrides: dict[str, CameraOverride] = Field(default_factory=dict)

    # Label filtering
    labels: tuple[str, ...] = ()
    exclude_sub_labels: tuple[tuple[str, str], ...] = ()

    # Zone filtering
    zones: tuple[str, ...] = ()
    zones_exclude: tuple[str, ...] = ()
    exclude_initial_zones: tuple[str, ...] = ()
    require_initial_zones: tuple[str, ...] = ()
    zone_match_type: ZoneMatchType = "either"
    zone_logic: ZoneLogic = "any"

    # Quality filtering
    min_score: float = Field(default=DEFAULT_MIN_SCORE, ge=0.0, le=1.0)
    require_clip: bool = False
    require_not_false_positive: bool = False
    score_improvement_pct: float = Field(
        default=DEFAULT_SCORE_IMPROVEMENT_PCT, ge=0.0
    )

    # Delivery
    notify_devices: tuple[tuple[str, str], ...] = ()
    silence_table: str | None = None
    auto_silence_secs: int = Field(default=DEFAULT_AUTO_SILENCE_SECS, ge=0)
    notification_timeout_hours: float = Field(
        default=DEFAULT_NOTIFICATION_TIMEOUT_HOURS, gt=0
    )

    # Display
    base_url: str = ""
    frigate_url: str | None = None
    generate_title: bool = False
    expand_cam: bool = False
    append_camera: bool = False

    homeassistant: HomeAssistantConfig | None = None
    debug: bool = False

    @field_validator("cameras")
    @classmethod
    def normalize_cameras(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        return tuple(normalize_camera(c) for c in v)

    @field_validator("camera_overrides")
    @classmethod
    def normalize_override_keys(
        cls, v: dict[str, CameraOverride]
    ) -> dict[str, CameraOverride]:
        return {normalize_camera(camera): override for camera, override in v.items()}

    @field_validator("base_url")
    @classmethod
    def strip_base_url(cls, v: str) -> str:
        return v.rstrip("/")


def validate_config_pydantic(config: dict) -> PipelineConfig:
    """
    Validate configuration using Pydantic.

    Args:
        config: Raw configuration dictionary

    Returns:
        Validated PipelineConfig object

    Raises:
        pydantic.ValidationError: If validation fails
    """
    return PipelineConfig(**config)
