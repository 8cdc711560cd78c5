"""
Tests for the significance, label, zone and quality filter stages
"""

import unittest

from frigate_notify.config import PipelineConfig
from frigate_notify.filters import (
    check_significance,
    compile_glob,
    filter_labels,
    filter_quality,
    filter_zones,
    glob_match,
    zones_to_check,
)
from frigate_notify.models import Drop, EventRecord
from frigate_notify.processor import normalize_event


def make_state(**overrides):
    state = {
        "camera": "front_door",
        "id": "1771004900.390988-m5tkiw",
        "label": "person",
        "sub_label": None,
        "top_score": 0.8,
        "entered_zones": ["street"],
        "current_zones": ["street"],
        "has_clip": False,
        "false_positive": False,
    }
    state.update(overrides)
    return state


def make_record(**fields):
    defaults = {
        "camera": "front_door",
        "object_id": "1771004900.390988-m5tkiw",
        "event_type": "new",
        "label": "person",
        "score": 0.8,
    }
    defaults.update(fields)
    return EventRecord(**defaults)


class TestSignificance(unittest.TestCase):
    """Test update gating on material change."""

    def setUp(self):
        self.config = PipelineConfig(cameras=["front_door"])

    def check(self, before, after, event_type="update", config=None):
        raw = {"type": event_type, "before": before, "after": after}
        return check_significance(raw, normalize_event(raw), config or self.config)

    def test_identical_update_dropped(self):
        result = self.check(make_state(), make_state())

        self.assertIsInstance(result, Drop)
        self.assertEqual(result.stage, "significance")

    def test_false_positive_cleared_passes(self):
        """Test the true -> false false_positive transition passes."""
        result = self.check(make_state(false_positive=True), make_state(false_positive=False))
        self.assertIsInstance(result, EventRecord)

    def test_false_positive_set_does_not_pass(self):
        result = self.check(make_state(false_positive=False), make_state(false_positive=True))
        self.assertIsInstance(result, Drop)

    def test_clip_available_passes(self):
        result = self.check(make_state(has_clip=False), make_state(has_clip=True))
        self.assertIsInstance(result, EventRecord)

    def test_entered_zone_appended_passes(self):
        result = self.check(
            make_state(entered_zones=["street"]),
            make_state(entered_zones=["street", "porch"]),
        )
        self.assertIsInstance(result, EventRecord)

    def test_entered_zones_rewritten_warns(self):
        """Test a non-append change still passes but is logged."""
        with self.assertLogs("frigate_notify.filters.significance", level="WARNING"):
            result = self.check(
                make_state(entered_zones=["street", "porch"]),
                make_state(entered_zones=["porch"]),
            )
        self.assertIsInstance(result, EventRecord)

    def test_current_zone_change_needs_score_improvement(self):
        """Test current zone flutter alone is not significant."""
        result = self.check(
            make_state(current_zones=["street"], top_score=0.8),
            make_state(current_zones=["porch"], top_score=0.8),
        )
        self.assertIsInstance(result, Drop)

        result = self.check(
            make_state(current_zones=["street"], top_score=0.8),
            make_state(current_zones=["porch"], top_score=0.9),
        )
        self.assertIsInstance(result, EventRecord)

    def test_current_zone_order_is_not_a_change(self):
        result = self.check(
            make_state(current_zones=["street", "porch"], top_score=0.5),
            make_state(current_zones=["porch", "street"], top_score=0.9),
        )
        self.assertIsInstance(result, Drop)

    def test_sub_label_change_with_better_score(self):
        result = self.check(
            make_state(sub_label=None, top_score=0.7),
            make_state(sub_label=["Tom", 0.95], top_score=0.85),
        )
        self.assertIsInstance(result, EventRecord)

    def test_score_improvement_alone_dropped(self):
        result = self.check(make_state(top_score=0.6), make_state(top_score=0.95))
        self.assertIsInstance(result, Drop)

    def test_improvement_threshold_from_config(self):
        """Test a higher score_improvement_pct raises the bar."""
        strict = PipelineConfig(cameras=["front_door"], score_improvement_pct=0.5)
        result = self.check(
            make_state(current_zones=["street"], top_score=0.6),
            make_state(current_zones=["porch"], top_score=0.7),
            config=strict,
        )
        self.assertIsInstance(result, Drop)

    def test_new_and_end_always_pass(self):
        """Test only update events are gated."""
        for event_type in ("new", "end"):
            result = self.check(make_state(), make_state(), event_type=event_type)
            self.assertIsInstance(result, EventRecord, event_type)


class TestLabelFilter(unittest.TestCase):
    """Test the label allow-list and sub-label exclusion."""

    def test_no_labels_allows_all(self):
        config = PipelineConfig(cameras=["front_door"])
        self.assertIsInstance(filter_labels(make_record(label="raccoon"), config), EventRecord)

    def test_allow_list(self):
        config = PipelineConfig(cameras=["front_door"], labels=["Person", "car"])

        self.assertIsInstance(filter_labels(make_record(label="person"), config), EventRecord)

        result = filter_labels(make_record(label="dog"), config)
        self.assertIsInstance(result, Drop)
        self.assertEqual(result.stage, "label")

    def test_exclude_sub_label_pair(self):
        """Test a [label, sub_label] pair must match both fields."""
        config = PipelineConfig(cameras=["front_door"], exclude_sub_labels=[["car", "Tom"]])

        self.assertIsInstance(
            filter_labels(make_record(label="car", sub_label="tom"), config), Drop
        )
        self.assertIsInstance(
            filter_labels(make_record(label="car", sub_label="Jane"), config), EventRecord
        )
        self.assertIsInstance(
            filter_labels(make_record(label="person", sub_label="Tom"), config), EventRecord
        )

    def test_exclude_ignores_missing_sub_label(self):
        config = PipelineConfig(cameras=["front_door"], exclude_sub_labels=[["car", "Tom"]])
        self.assertIsInstance(filter_labels(make_record(label="car"), config), EventRecord)


class TestGlobMatching(unittest.TestCase):
    """Test zone glob patterns."""

    def test_star_and_question_mark(self):
        self.assertTrue(glob_match("front*", "front_yard"))
        self.assertTrue(glob_match("?ard", "yard"))
        self.assertFalse(glob_match("?ard", "backyard"))

    def test_anchored(self):
        self.assertFalse(glob_match("yard", "backyard"))
        self.assertFalse(glob_match("yard", "yard_2"))

    def test_case_insensitive(self):
        self.assertTrue(glob_match("Porch", "porch"))

    def test_regex_metacharacters_are_literal(self):
        self.assertTrue(glob_match("a.b", "a.b"))
        self.assertFalse(glob_match("a.b", "axb"))
        self.assertTrue(glob_match("zone(1)", "zone(1)"))

    def test_compile_is_cached(self):
        """Test repeated compilation returns the same pattern object."""
        self.assertIs(compile_glob("drive*"), compile_glob("drive*"))


class TestZoneFilter(unittest.TestCase):
    """Test the four zone stages."""

    def config(self, **kwargs):
        return PipelineConfig(cameras=["front_door"], **kwargs)

    def test_no_zone_rules_passes(self):
        self.assertIsInstance(filter_zones(make_record(), self.config()), EventRecord)

    def test_exclude_initial_zone_uses_first_entered(self):
        """Test direction: only the first entered zone counts as the origin."""
        config = self.config(exclude_initial_zones=["Porch"])

        arriving = make_record(entered_zones=("street", "porch"))
        self.assertIsInstance(filter_zones(arriving, config), EventRecord)

        leaving = make_record(entered_zones=("porch", "street"))
        result = filter_zones(leaving, config)
        self.assertIsInstance(result, Drop)
        self.assertEqual(result.stage, "zone")

    def test_exclude_initial_without_zones_passes(self):
        config = self.config(exclude_initial_zones=["porch"])
        self.assertIsInstance(filter_zones(make_record(), config), EventRecord)

    def test_require_initial_zone(self):
        config = self.config(require_initial_zones=["street"])

        self.assertIsInstance(
            filter_zones(make_record(entered_zones=("street", "porch")), config), EventRecord
        )
        self.assertIsInstance(
            filter_zones(make_record(entered_zones=("porch", "street")), config), Drop
        )

    def test_require_initial_zone_without_zones_drops(self):
        config = self.config(require_initial_zones=["street"])
        self.assertIsInstance(filter_zones(make_record(), config), Drop)

    def test_zones_exclude(self):
        config = self.config(zones_exclude=["neighbor*"])
        record = make_record(entered_zones=("street",), current_zones=("neighbor_lawn",))

        self.assertIsInstance(filter_zones(record, config), Drop)

    def test_zones_exclude_respects_match_type(self):
        config = self.config(zones_exclude=["neighbor*"], zone_match_type="entered")
        record = make_record(entered_zones=("street",), current_zones=("neighbor_lawn",))

        self.assertIsInstance(filter_zones(record, config), EventRecord)

    def test_include_any(self):
        config = self.config(zones=["porch", "driveway"])

        self.assertIsInstance(
            filter_zones(make_record(entered_zones=("street", "porch")), config), EventRecord
        )
        self.assertIsInstance(
            filter_zones(make_record(entered_zones=("street",)), config), Drop
        )

    def test_include_all(self):
        """Test every pattern must match some zone with zone_logic all."""
        config = self.config(zones=["street", "porch"], zone_logic="all")

        self.assertIsInstance(
            filter_zones(make_record(entered_zones=("street", "porch")), config), EventRecord
        )
        self.assertIsInstance(
            filter_zones(make_record(entered_zones=("street",)), config), Drop
        )

    def test_include_with_no_zones_drops(self):
        config = self.config(zones=["porch"])
        self.assertIsInstance(filter_zones(make_record(), config), Drop)

    def test_zones_to_check(self):
        record = make_record(entered_zones=("street", "porch"), current_zones=("porch", "yard"))

        self.assertEqual(zones_to_check(record, "entered"), ["street", "porch"])
        self.assertEqual(zones_to_check(record, "current"), ["porch", "yard"])
        self.assertEqual(zones_to_check(record, "either"), ["street", "porch", "yard"])


class TestQualityFilter(unittest.TestCase):
    """Test score, clip and false positive thresholds."""

    def test_min_score(self):
        config = PipelineConfig(cameras=["front_door"], min_score=0.6)

        self.assertIsInstance(filter_quality(make_record(score=0.6), config), EventRecord)

        result = filter_quality(make_record(score=0.5), config)
        self.assertIsInstance(result, Drop)
        self.assertEqual(result.stage, "quality")

    def test_require_clip(self):
        config = PipelineConfig(cameras=["front_door"], require_clip=True)

        self.assertIsInstance(filter_quality(make_record(has_clip=False), config), Drop)
        self.assertIsInstance(filter_quality(make_record(has_clip=True), config), EventRecord)

    def test_require_not_false_positive(self):
        config = PipelineConfig(cameras=["front_door"], require_not_false_positive=True)

        self.assertIsInstance(filter_quality(make_record(false_positive=True), config), Drop)
        self.assertIsInstance(filter_quality(make_record(false_positive=False), config), EventRecord)

    def test_false_positive_allowed_by_default(self):
        config = PipelineConfig(cameras=["front_door"])
        self.assertIsInstance(filter_quality(make_record(false_positive=True), config), EventRecord)


if __name__ == "__main__":
    unittest.main()
