"""
Tests for the silence table: parsing, guard, updater and stores
"""

import json
import tempfile
import unittest
from pathlib import Path
from unittest.mock import MagicMock, patch

from frigate_notify.config import PipelineConfig
from frigate_notify.models import Drop, EventRecord
from frigate_notify.silence import (
    FileSilenceStore,
    HomeAssistantSilenceStore,
    MemorySilenceStore,
    SilenceUpdate,
    check_silence,
    parse_silence_table,
    plan_silence_update,
)

NOW = 1_771_004_900.5


def make_record(camera="front_door"):
    return EventRecord(camera=camera, object_id="1771004900.390988-m5tkiw", event_type="new", label="person")


class TestParseSilenceTable(unittest.TestCase):
    """Test lenient parsing of the stored snapshot."""

    def test_empty_and_sentinels(self):
        """Test missing values and entity sentinels parse as empty."""
        for raw in (None, "", "unknown", "unavailable", "  unknown "):
            self.assertEqual(parse_silence_table(raw), {}, raw)

    def test_json_object(self):
        self.assertEqual(parse_silence_table('{"front_door": 1771005000}'), {"front_door": 1771005000})

    def test_single_quotes(self):
        """Test single-quoted JSON is accepted."""
        self.assertEqual(parse_silence_table("{'driveway': 1771005000.5}"), {"driveway": 1771005000.5})

    def test_garbage(self):
        for raw in ("not json", "[1, 2]", "42", "{broken"):
            self.assertEqual(parse_silence_table(raw), {}, raw)

    def test_non_numeric_entries_skipped(self):
        table = parse_silence_table('{"a": 100, "b": "soon", "c": true, "d": null}')
        self.assertEqual(table, {"a": 100})


class TestSilenceGuard(unittest.TestCase):
    """Test the silence guard."""

    def test_silenced_camera_dropped(self):
        result = check_silence(make_record(), {"front_door": NOW + 60}, NOW)

        self.assertIsInstance(result, Drop)
        self.assertEqual(result.stage, "silence")

    def test_expired_window_passes(self):
        result = check_silence(make_record(), {"front_door": NOW - 1}, NOW)
        self.assertIsInstance(result, EventRecord)

    def test_window_ends_exactly_now(self):
        result = check_silence(make_record(), {"front_door": NOW}, NOW)
        self.assertIsInstance(result, EventRecord)

    def test_other_camera_silenced(self):
        result = check_silence(make_record(), {"driveway": NOW + 60}, NOW)
        self.assertIsInstance(result, EventRecord)


class TestPlanSilenceUpdate(unittest.TestCase):
    """Test the silence updater."""

    def setUp(self):
        self.config = PipelineConfig(
            cameras=["front_door", "driveway"],
            silence_table="input_text.frigate_silence",
            auto_silence_secs=25,
        )

    def test_no_table_configured(self):
        config = PipelineConfig(cameras=["front_door"])
        self.assertIsNone(plan_silence_update(make_record(), config, {}, NOW))

    def test_extends_window(self):
        update = plan_silence_update(make_record(), self.config, {"driveway": 5}, NOW)

        self.assertEqual(update.entity_id, "input_text.frigate_silence")
        self.assertEqual(update.camera, "front_door")
        self.assertEqual(update.until, int(NOW) + 25)
        self.assertEqual(update.table, {"driveway": 5, "front_door": int(NOW) + 25})

    def test_longer_window_survives(self):
        """Test a longer existing window is never shortened."""
        table = {"front_door": NOW + 300}
        update = plan_silence_update(make_record(), self.config, table, NOW)

        self.assertEqual(update.until, NOW + 300)

    def test_snapshot_not_mutated(self):
        table = {"driveway": 5}
        plan_silence_update(make_record(), self.config, table, NOW)
        self.assertEqual(table, {"driveway": 5})

    def test_value_is_json(self):
        update = plan_silence_update(make_record(), self.config, {}, NOW)
        self.assertEqual(json.loads(update.value), {"front_door": int(NOW) + 25})


class TestSilenceStores(unittest.TestCase):
    """Test the silence store backends."""

    UPDATE = SilenceUpdate(
        entity_id="input_text.frigate_silence",
        camera="front_door",
        until=100,
        table={"front_door": 100},
    )

    def test_memory_store(self):
        store = MemorySilenceStore()

        self.assertIsNone(store.read("input_text.frigate_silence"))
        self.assertTrue(store.write(self.UPDATE))
        self.assertEqual(parse_silence_table(store.read("input_text.frigate_silence")), {"front_door": 100})

    def test_file_store(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            store = FileSilenceStore(temp_dir)

            self.assertIsNone(store.read("input_text.frigate_silence"))
            self.assertTrue(store.write(self.UPDATE))

            reopened = FileSilenceStore(temp_dir)
            raw = reopened.read("input_text.frigate_silence")
            self.assertEqual(parse_silence_table(raw), {"front_door": 100})

    def test_file_store_failed_write_leaves_no_temp_file(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            store = FileSilenceStore(temp_dir)

            with patch("frigate_notify.silence.store.os.replace", side_effect=OSError("disk full")):
                with self.assertLogs("frigate_notify.silence.store", level="ERROR"):
                    self.assertFalse(store.write(self.UPDATE))

            self.assertEqual(list(Path(temp_dir).iterdir()), [])

    def test_home_assistant_store(self):
        """Test reads and writes go through the input_text entity."""
        client = MagicMock()
        client.get_state.return_value = '{"front_door": 100}'
        client.call_service.return_value = True
        store = HomeAssistantSilenceStore(client)

        self.assertEqual(store.read("input_text.frigate_silence"), '{"front_door": 100}')
        client.get_state.assert_called_once_with("input_text.frigate_silence")

        self.assertTrue(store.write(self.UPDATE))
        client.call_service.assert_called_once_with(
            "input_text.set_value",
            {"entity_id": "input_text.frigate_silence", "value": '{"front_door": 100}'},
        )


if __name__ == "__main__":
    unittest.main()
