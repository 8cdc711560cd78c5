"""
Filtering stages.

Each stage takes an EventRecord and the effective config and returns the
record to continue or a Drop to stop.
"""

from .labels import filter_labels
from .quality import filter_quality
from .significance import check_significance, is_significant_change
from .zones import compile_glob, filter_zones, glob_match, zones_to_check

__all__ = [
    "check_significance",
    "compile_glob",
    "filter_labels",
    "filter_quality",
    "filter_zones",
    "glob_match",
    "is_significant_change",
    "zones_to_check",
]
