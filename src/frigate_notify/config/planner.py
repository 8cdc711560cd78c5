"""
Configuration Planner - Terraform-like validate, plan, and dry-run features.

Provides:
- validate: Check config syntax and semantic correctness
- plan: Show the effective policy for every camera after overrides
- dry-run: Simulate the pipeline with sample events
- load_config_with_env: Apply environment variable overrides
"""

import json
import logging
import os
import sys
import time
from dataclasses import dataclass
from typing import Any

from ..utils.constants import ENV_DEBUG, ENV_HA_TOKEN, ENV_HA_URL
from .resolver import describe_overrides, resolve_effective_config
from .schemas import PipelineConfig
from .validator import ValidationResult

logger = logging.getLogger(__name__)


class ConfigValidationError(Exception):
    """Raised when config validation fails."""


# ANSI color codes for terminal output
class Colors:
    GREEN = "\033[92m"
    RED = "\033[91m"
    YELLOW = "\033[93m"
    CYAN = "\033[96m"
    GRAY = "\033[90m"
    BOLD = "\033[1m"
    RESET = "\033[0m"

    @classmethod
    def disable(cls):
        """Disable colors for non-TTY output."""
        cls.GREEN = cls.RED = cls.YELLOW = ""
        cls.CYAN = cls.GRAY = cls.BOLD = cls.RESET = ""


# Disable colors if not a TTY
if not sys.stdout.isatty():
    Colors.disable()


@dataclass
class CameraPlan:
    """Effective policy for a single camera."""

    camera: str
    overridden: list[str]
    filters: list[str]
    devices: list[str]
    silence: str


@dataclass
class ConfigPlan:
    """Complete configuration plan."""

    cameras: list[CameraPlan]


def load_config_with_env(config: dict) -> dict:
    """
    Apply environment variable overrides to config.

    Args:
        config: Base configuration dictionary

    Returns:
        Configuration with environment variables applied
    """
    if ENV_HA_URL in os.environ:
        logger.info(f"Using Home Assistant URL from environment: {ENV_HA_URL}")
        config.setdefault("homeassistant", {})
        config["homeassistant"]["url"] = os.environ[ENV_HA_URL]

    # Keep tokens out of config files
    if ENV_HA_TOKEN in os.environ and config.get("homeassistant"):
        config["homeassistant"]["token"] = os.environ[ENV_HA_TOKEN]

    if os.environ.get(ENV_DEBUG, "").lower() in ("1", "true", "yes"):
        config["debug"] = True

    return config


def _describe_filters(config: PipelineConfig) -> list[str]:
    filters = []
    if config.labels:
        filters.append(f"labels: {', '.join(config.labels)}")
    for label, sub_label in config.exclude_sub_labels:
        filters.append(f"exclude: {label} ({sub_label})")
    if config.exclude_initial_zones:
        filters.append(f"not arriving from: {', '.join(config.exclude_initial_zones)}")
    if config.require_initial_zones:
        filters.append(f"arriving from: {', '.join(config.require_initial_zones)}")
    if config.zones_exclude:
        filters.append(
            f"exclude zones ({config.zone_match_type}): {', '.join(config.zones_exclude)}"
        )
    if config.zones:
        filters.append(
            f"zones ({config.zone_match_type}, {config.zone_logic}): {', '.join(config.zones)}"
        )
    filters.append(f"min_score: {config.min_score}")
    if config.require_clip:
        filters.append("require clip")
    if config.require_not_false_positive:
        filters.append("require not false positive")
    return filters


def build_plan(config: PipelineConfig) -> ConfigPlan:
    """Build the effective per-camera plan from config."""
    cameras = []

    for camera in config.cameras:
        effective = resolve_effective_config(config, camera)
        silence = (
            f"{effective.silence_table} (+{effective.auto_silence_secs}s)"
            if effective.silence_table
            else "disabled"
        )
        cameras.append(
            CameraPlan(
                camera=camera,
                overridden=describe_overrides(config, camera),
                filters=_describe_filters(effective),
                devices=[f"{s} ({p})" for s, p in effective.notify_devices],
                silence=silence,
            )
        )

    return ConfigPlan(cameras=cameras)


def print_validation_result(result: ValidationResult) -> None:
    """Print validation result in Terraform-like format."""
    print()
    print(f"{Colors.BOLD}Configuration Validation{Colors.RESET}")
    print("=" * 60)

    if result.valid:
        print(f"\n{Colors.GREEN}✓ Configuration is valid{Colors.RESET}")
    else:
        print(f"\n{Colors.RED}✗ Configuration has errors{Colors.RESET}")

    if result.errors:
        print(f"\n{Colors.RED}Errors:{Colors.RESET}")
        for error in result.errors:
            print(f"  {Colors.RED}✗{Colors.RESET} {error}")

    if result.warnings:
        print(f"\n{Colors.YELLOW}Warnings:{Colors.RESET}")
        for warning in result.warnings:
            print(f"  {Colors.YELLOW}!{Colors.RESET} {warning}")

    if result.valid and result.derived:
        print(f"\n{Colors.CYAN}Derived Configuration:{Colors.RESET}")
        cameras = result.derived.get("cameras", [])
        if cameras:
            print(f"  Cameras: {', '.join(cameras)}")
        overridden = result.derived.get("overridden_cameras", [])
        if overridden:
            print(f"  Overrides: {', '.join(overridden)}")
        platforms = result.derived.get("platforms", [])
        if platforms:
            print(f"  Platforms: {', '.join(platforms)}")

    print()


def print_plan(plan: ConfigPlan) -> None:
    """Print configuration plan in Terraform-like format."""
    print()
    print(f"{Colors.BOLD}Notification Plan{Colors.RESET}")
    print("=" * 60)

    for camera in plan.cameras:
        print(f"\n  {Colors.BOLD}{camera.camera}{Colors.RESET}")

        if camera.overridden:
            print(f"    {Colors.YELLOW}overrides:{Colors.RESET} {', '.join(camera.overridden)}")

        print(f"    {Colors.GRAY}Filters:{Colors.RESET}")
        for description in camera.filters:
            print(f"      {description}")

        print(f"    {Colors.GRAY}Devices:{Colors.RESET}")
        if camera.devices:
            for device in camera.devices:
                print(f"      {Colors.GREEN}->{Colors.RESET} {device}")
        else:
            print(f"      {Colors.YELLOW}(none){Colors.RESET}")

        print(f"    {Colors.GRAY}Silence:{Colors.RESET} {camera.silence}")

    print()


def simulate_dry_run(
    config: PipelineConfig,
    sample_events: list[dict],
    silence: dict[str, float] | None = None,
) -> list:
    """
    Simulate the pipeline with sample events.

    Uses an in-memory silence table, so auto-silence from one sample
    affects the following ones exactly as it would live. Nothing is sent.

    Returns:
        The PipelineResult for each sample
    """
    # Imported here: the processor depends on this package
    from ..processor import NotificationPipeline
    from ..silence import MemorySilenceStore

    store = MemorySilenceStore()
    if config.silence_table and silence:
        store.values[config.silence_table] = json.dumps(silence)

    pipeline = NotificationPipeline(config, store=store, clock=time.time)

    print()
    print(f"{Colors.BOLD}Dry Run Simulation{Colors.RESET}")
    print("=" * 60)
    print(
        f"\n{Colors.CYAN}Processing {len(sample_events)} sample event(s):{Colors.RESET}\n"
    )

    results = []
    for i, sample_event in enumerate(sample_events, 1):
        after = sample_event.get("after") or {}
        print(
            f"  [{i}] {sample_event.get('type', '?')}: "
            f"{after.get('label', '?')} @ {after.get('camera', '?')}"
        )

        result = pipeline.handle(sample_event)
        results.append(result)

        if result.drop is not None:
            print(f"      {Colors.YELLOW}-> Dropped {result.drop}{Colors.RESET}")
            continue

        for payload in result.notifications:
            print(
                f"      {Colors.GREEN}-> {payload.service} ({payload.platform}){Colors.RESET}"
                f" {payload.title}: {payload.message}"
            )
        if result.silence_update:
            print(
                f"         {Colors.GRAY}-> silence {result.silence_update.camera} "
                f"until {result.silence_update.until}{Colors.RESET}"
            )

    notified = sum(1 for r in results if r.notified)
    print(f"\n{Colors.CYAN}Simulation Summary:{Colors.RESET}")
    print(f"  Events processed: {len(sample_events)}")
    print(f"  Notified: {Colors.GREEN}{notified}{Colors.RESET}")
    print(f"  Dropped: {Colors.YELLOW}{len(results) - notified}{Colors.RESET}")
    print()

    return results


def load_sample_events(path: str) -> list[dict[str, Any]]:
    """
    Load sample events from a file.

    Accepts a JSON array, an object with an 'events' key, or JSON lines
    (one event per line).
    """
    with open(path, encoding="utf-8") as f:
        text = f.read()

    try:
        data = json.loads(text)
    except ValueError:
        return [json.loads(line) for line in text.splitlines() if line.strip()]

    if isinstance(data, list):
        return data
    elif isinstance(data, dict) and "events" in data:
        return data["events"]
    elif isinstance(data, dict) and "after" in data:
        return [data]
    else:
        raise ValueError(
            "Sample events file must contain an array, an object with 'events' key, "
            "or JSON lines"
        )
