"""
Zone Filter - Directional, exclusion and inclusion matching over zones.

Stages, applied in order:

  1. exclude_initial_zones: drop if the FIRST entered zone matches.
     Frigate fills entered_zones in traversal order, so the first element
     is where the object came from (e.g. ignore people leaving the house
     through "entryway").

  2. require_initial_zones: drop unless the first entered zone matches
     (e.g. only notify for objects arriving from "street").

  3. zones_exclude: drop if any evaluated zone matches.

  4. zones: require at least one match ("any") or a match for every
     pattern ("all"), per zone_logic.

Stages 3 and 4 evaluate entered zones, current zones, or their union,
per zone_match_type.

Patterns are globs: * matches any run of characters, ? exactly one.
Matching is anchored and case-insensitive.
"""

import re
from collections.abc import Iterable
from functools import lru_cache

from ..config.schemas import PipelineConfig
from ..models import Drop, EventRecord, StageResult

STAGE = "zone"


@lru_cache(maxsize=512)
def compile_glob(pattern: str) -> re.Pattern:
    """
    Compile a glob pattern to an anchored, case-insensitive regex.

    All regex metacharacters are escaped except * and ?, which become
    ".*" and "." respectively.
    """
    escaped = re.escape(pattern).replace(r"\*", ".*").replace(r"\?", ".")
    return re.compile(escaped, re.IGNORECASE | re.DOTALL)


def glob_match(pattern: str, value: str) -> bool:
    """Return True if value matches the whole glob pattern."""
    return compile_glob(pattern).fullmatch(value) is not None


def first_match(patterns: Iterable[str], value: str) -> str | None:
    """Return the first pattern that matches value, or None."""
    for pattern in patterns:
        if glob_match(pattern, value):
            return pattern
    return None


def zones_to_check(record: EventRecord, match_type: str) -> list[str]:
    """Select the zones evaluated by the exclude/include stages."""
    if match_type == "entered":
        return list(record.entered_zones)
    if match_type == "current":
        return list(record.current_zones)
    # "either": union, deduplicated, entered zones first
    return list(dict.fromkeys(record.entered_zones + record.current_zones))


def filter_zones(record: EventRecord, config: PipelineConfig) -> StageResult:
    """Apply the four zone stages; see module docstring."""
    origin = record.origin_zone

    # Stage 1: directional exclusion
    if config.exclude_initial_zones and origin is not None:
        matched = first_match(config.exclude_initial_zones, origin)
        if matched:
            return Drop(
                STAGE,
                f'Initial zone "{origin}" matched exclude_initial_zones pattern "{matched}"',
            )

    # Stage 2: directional requirement
    if config.require_initial_zones:
        if origin is None:
            return Drop(
                STAGE,
                "require_initial_zones is set but object has not entered any zones",
            )
        if first_match(config.require_initial_zones, origin) is None:
            return Drop(
                STAGE,
                f'Initial zone "{origin}" did not match any require_initial_zones: '
                f'[{", ".join(config.require_initial_zones)}]',
            )

    zones = zones_to_check(record, config.zone_match_type)

    # Stage 3: exclusion
    for zone in zones:
        matched = first_match(config.zones_exclude, zone)
        if matched:
            return Drop(STAGE, f'Zone "{zone}" matched exclude pattern "{matched}"')

    # Stage 4: inclusion
    if not config.zones:
        return record

    hits = [any(glob_match(p, zone) for zone in zones) for p in config.zones]
    include_ok = all(hits) if config.zone_logic == "all" else any(hits)

    if not include_ok:
        return Drop(
            STAGE,
            f'Zones [{", ".join(zones)}] did not match include zones '
            f'[{", ".join(config.zones)}] (logic: {config.zone_logic})',
        )

    return record
