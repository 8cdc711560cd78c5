"""
Label Filter - Label allow-list and label + sub-label exclusion.

Camera-specific label rules come in through the effective config, so this
stage never looks at camera_overrides itself.
"""

from ..config.schemas import PipelineConfig
from ..models import Drop, EventRecord, StageResult

STAGE = "label"


def filter_labels(record: EventRecord, config: PipelineConfig) -> StageResult:
    """
    Apply label filtering.

    1. If labels is non-empty, the event's label must be in it.
    2. If exclude_sub_labels is non-empty and the event has a sub-label,
       drop when any [label, sub_label] pair matches both fields.
       E.g. [["car", "Tom"]] ignores a known household car.

    All comparisons are case-insensitive.
    """
    if config.labels:
        allowed = [label.lower() for label in config.labels]
        if record.label not in allowed:
            return Drop(
                STAGE,
                f'Label "{record.label}" not in allowed list: [{", ".join(allowed)}]',
            )

    if config.exclude_sub_labels and record.sub_label:
        sub_label = record.sub_label.lower()
        for label, excluded in config.exclude_sub_labels:
            if label.lower() == record.label and excluded.lower() == sub_label:
                return Drop(
                    STAGE,
                    f'Label "{record.label}" + sub-label "{record.sub_label}" '
                    f"matched exclude_sub_labels",
                )

    return record
