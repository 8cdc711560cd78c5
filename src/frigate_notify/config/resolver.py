"""
Configuration Resolver - Produces the effective config for one event.

Handles:
- Validating the event's camera against the allow-list
- Overlaying the camera's overrides on the global policy

The result is resolved once per event and handed explicitly to every later
stage; no stage reads the global config again.
"""

import logging

from ..models import Drop, normalize_camera
from .schemas import PipelineConfig

logger = logging.getLogger(__name__)

STAGE = "camera"


def resolve_effective_config(
    base: PipelineConfig, camera: str
) -> PipelineConfig | Drop:
    """
    Resolve the effective configuration for a camera.

    Any key present in the camera's override replaces the global value
    outright (shallow merge). E.g. camera_overrides.camera_8.zones = ["entry"]
    replaces the global zones list for camera_8 only.

    Args:
        base: Global configuration
        camera: Camera identifier from the event

    Returns:
        The effective config (a new frozen instance when overrides apply,
        otherwise base itself), or a Drop if the camera is not allowed
    """
    camera = normalize_camera(camera)

    if camera not in base.cameras:
        return Drop(
            STAGE,
            f'Camera "{camera}" not in allowed list: [{", ".join(base.cameras)}]',
        )

    override = base.camera_overrides.get(camera)
    if override is None:
        return base

    fields = override.overridden_fields()
    if not fields:
        return base

    logger.debug(f"Applied overrides for {camera}: {', '.join(sorted(fields))}")
    return base.model_copy(update=fields)


def describe_overrides(base: PipelineConfig, camera: str) -> list[str]:
    """List the keys overridden for a camera (used by the plan output)."""
    override = base.camera_overrides.get(normalize_camera(camera))
    if override is None:
        return []
    return sorted(override.overridden_fields())
