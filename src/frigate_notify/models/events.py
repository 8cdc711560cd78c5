"""
Event Record - Canonical form of a Frigate detection event.

Every pipeline stage receives an EventRecord and returns either the record
(to continue) or a Drop (to stop). Records are immutable; the one field
that advances after a notification is sent, best_score_sent, is updated by
building a new record with dataclasses.replace().
"""

from dataclasses import dataclass
from typing import Any


def normalize_camera(name: str) -> str:
    """Normalize a camera identifier: lowercase, '-' becomes '_'."""
    return str(name or "").lower().replace("-", "_")


def normalize_zones(raw: Any) -> tuple[str, ...]:
    """Lowercase a zone list, keeping order. Non-string entries are skipped."""
    if not isinstance(raw, (list, tuple)):
        return ()
    return tuple(z.lower() for z in raw if isinstance(z, str))


def _as_float(value: Any) -> float:
    if isinstance(value, bool):
        return 0.0
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def extract_score(state: dict[str, Any]) -> float:
    """
    Get the detection score from an object state.

    top_score is preferred when present; score is the fallback; 0 if neither.
    Values that are not numbers count as 0.
    """
    top_score = state.get("top_score")
    if top_score is not None:
        return _as_float(top_score)
    return _as_float(state.get("score") or 0)


def extract_sub_label(raw: Any) -> str:
    """
    Get the sub-label name from Frigate's sub_label field.

    Frigate sends null, a plain string, or a [name, score] pair.
    """
    if raw is None:
        return ""
    if isinstance(raw, (list, tuple)):
        return str(raw[0]) if raw and raw[0] is not None else ""
    return str(raw)


@dataclass(frozen=True)
class EventRecord:
    """
    Normalized detection event.

    Attributes:
        camera: Normalized camera identifier
        object_id: Tracked object id, shared by new/update/end for one object
        event_type: new, update or end
        label: Lowercase object label
        sub_label: Sub-label name, empty string when absent
        score: Detection score in [0, 1]
        entered_zones: Zones entered in traversal order; first = origin zone
        current_zones: Zones the object is in right now
        has_clip: Whether a recording clip is available
        false_positive: Frigate's false positive flag
        best_score_sent: Highest score already notified for this object
    """

    camera: str
    object_id: str
    event_type: str
    label: str
    sub_label: str = ""
    score: float = 0.0
    entered_zones: tuple[str, ...] = ()
    current_zones: tuple[str, ...] = ()
    has_clip: bool = False
    false_positive: bool = False
    best_score_sent: float = 0.0

    @property
    def short_id(self) -> str:
        """
        Short id suffix used to correlate notifications with logs.

        E.g., "1771004900.390988-m5tkiw" -> "m5tkiw"
        """
        if "-" in self.object_id:
            return self.object_id.rsplit("-", 1)[-1]
        return self.object_id[-6:]

    @property
    def origin_zone(self) -> str | None:
        """First zone the object entered, or None if it has entered none."""
        return self.entered_zones[0] if self.entered_zones else None

    @classmethod
    def from_states(
        cls, event_type: str, after: dict[str, Any], before: dict[str, Any]
    ) -> "EventRecord":
        """Build a record from Frigate's before/after object states."""
        return cls(
            camera=normalize_camera(after.get("camera") or before.get("camera") or ""),
            object_id=str(after.get("id") or before.get("id") or ""),
            event_type=event_type,
            label=str(after.get("label") or "").lower(),
            sub_label=extract_sub_label(after.get("sub_label")),
            score=extract_score(after),
            entered_zones=normalize_zones(after.get("entered_zones")),
            current_zones=normalize_zones(after.get("current_zones")),
            has_clip=bool(after.get("has_clip", False)),
            false_positive=after.get("false_positive") is True,
        )

    def __repr__(self) -> str:
        """Return string representation for debugging."""
        return (
            f"EventRecord({self.event_type} {self.label} on {self.camera} "
            f"id={self.object_id} score={self.score:.2f})"
        )


@dataclass(frozen=True)
class Drop:
    """
    Outcome of a stage that rejected the event.

    A drop is not an error: it only means no notification is produced.

    Attributes:
        stage: Name of the stage that dropped the event
        reason: Human-readable explanation for diagnostics
    """

    stage: str
    reason: str

    def __str__(self) -> str:
        return f"[{self.stage}] {self.reason}"


# What every filtering stage returns
StageResult = EventRecord | Drop
