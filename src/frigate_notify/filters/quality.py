"""
Quality Filter - Score, clip and false positive thresholds.
"""

from ..config.schemas import PipelineConfig
from ..models import Drop, EventRecord, StageResult

STAGE = "quality"


def filter_quality(record: EventRecord, config: PipelineConfig) -> StageResult:
    """Drop low-score, clip-less (when required) or false positive events."""
    if record.score < config.min_score:
        return Drop(
            STAGE, f"Score {record.score:.3f} below minimum {config.min_score}"
        )

    if config.require_clip and not record.has_clip:
        return Drop(STAGE, "Clip required but not available")

    if config.require_not_false_positive and record.false_positive:
        return Drop(STAGE, "Event flagged as false positive")

    return record
