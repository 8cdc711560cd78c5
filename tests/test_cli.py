"""
Tests for the CLI entry points and the Home Assistant client
"""

import io
import json
import os
import tempfile
import unittest
from contextlib import redirect_stdout
from pathlib import Path
from unittest.mock import MagicMock, patch

import requests

from frigate_notify.cli import build_pipeline, parse_args, run
from frigate_notify.config import PipelineConfig
from frigate_notify.homeassistant import HomeAssistantClient
from frigate_notify.silence import FileSilenceStore, HomeAssistantSilenceStore

CONFIG_YAML = """
cameras: [front_door]
notify_devices:
  - [mobile_app_phone, android]
silence_table: input_text.frigate_silence
"""

EVENT = {
    "type": "new",
    "after": {"camera": "front_door", "id": "1771004900.390988-m5tkiw", "label": "person", "top_score": 0.9},
}


@patch.dict(os.environ, {}, clear=True)
class TestRun(unittest.TestCase):
    """Test the validate / plan / dry-run / events commands."""

    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.dir = Path(self.temp_dir.name)
        self.config_path = self.dir / "notify.yaml"
        self.config_path.write_text(CONFIG_YAML)
        self.events_path = self.dir / "events.json"
        self.events_path.write_text(json.dumps([EVENT]))

    def tearDown(self):
        self.temp_dir.cleanup()

    def run_cli(self, *argv):
        output = io.StringIO()
        with redirect_stdout(output):
            code = run(parse_args(["-c", str(self.config_path), *argv]))
        return code, output.getvalue()

    def test_validate(self):
        code, output = self.run_cli("--validate")

        self.assertEqual(code, 0)
        self.assertIn("Configuration is valid", output)

    def test_validate_invalid(self):
        self.config_path.write_text("cameras: [a]\nmin_score: 2\n")
        code, output = self.run_cli("--validate")

        self.assertEqual(code, 1)
        self.assertIn("min_score", output)

    def test_plan(self):
        code, output = self.run_cli("--plan")

        self.assertEqual(code, 0)
        self.assertIn("front_door", output)
        self.assertIn("mobile_app_phone (android)", output)

    def test_dry_run(self):
        code, output = self.run_cli("--dry-run", str(self.events_path))

        self.assertEqual(code, 0)
        self.assertIn("notify.mobile_app_phone", output)

    def test_events_without_homeassistant(self):
        """Test service calls are printed as JSON lines."""
        code, output = self.run_cli(
            "--events", str(self.events_path), "--state-dir", str(self.dir / "state")
        )

        self.assertEqual(code, 0)
        call = json.loads(output.strip().splitlines()[0])
        self.assertEqual(call["action"], "notify.mobile_app_phone")
        self.assertTrue((self.dir / "state" / "input_text.frigate_silence.json").exists())

    def test_nothing_to_do(self):
        code, _ = self.run_cli()
        self.assertEqual(code, 2)


class TestBuildPipeline(unittest.TestCase):
    """Test wiring to Home Assistant or local fallbacks."""

    def test_local_fallback(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            pipeline = build_pipeline(PipelineConfig(cameras=["a"]), temp_dir)
            self.assertIsInstance(pipeline.store, FileSilenceStore)

    def test_home_assistant(self):
        config = PipelineConfig(
            cameras=["a"], homeassistant={"url": "http://ha.local:8123/", "token": "t"}
        )
        pipeline = build_pipeline(config, "unused")

        self.assertIsInstance(pipeline.store, HomeAssistantSilenceStore)

    def test_verbosity_flags_exclusive(self):
        with redirect_stdout(io.StringIO()), self.assertRaises(SystemExit):
            with patch("sys.stderr", io.StringIO()):
                parse_args(["-q", "-v"])


class TestHomeAssistantClient(unittest.TestCase):
    """Test the REST client with a stubbed session."""

    def setUp(self):
        self.session = requests.Session()
        self.session.get = MagicMock()
        self.session.post = MagicMock()
        self.client = HomeAssistantClient(
            "http://ha.local:8123/", token="secret", session=self.session
        )

    def test_auth_header(self):
        self.assertEqual(self.session.headers["Authorization"], "Bearer secret")
        self.assertEqual(self.client.url, "http://ha.local:8123")

    def test_get_state(self):
        self.session.get.return_value = MagicMock(ok=True, status_code=200)
        self.session.get.return_value.json.return_value = {"state": '{"front_door": 1}'}

        self.assertEqual(self.client.get_state("input_text.silence"), '{"front_door": 1}')
        self.session.get.assert_called_once_with(
            "http://ha.local:8123/api/states/input_text.silence", timeout=10
        )

    def test_get_state_not_found(self):
        self.session.get.return_value = MagicMock(ok=False, status_code=404, text="not found")
        self.assertIsNone(self.client.get_state("input_text.missing"))

    def test_get_state_connection_error(self):
        self.session.get.side_effect = requests.ConnectionError("down")
        self.assertIsNone(self.client.get_state("input_text.silence"))

    def test_call_service(self):
        self.session.post.return_value = MagicMock(ok=True, status_code=200)

        self.assertTrue(self.client.call_service("notify.mobile_app_phone", {"message": "hi"}))
        self.session.post.assert_called_once_with(
            "http://ha.local:8123/api/services/notify/mobile_app_phone",
            json={"message": "hi"},
            timeout=10,
        )

    def test_call_service_failure(self):
        self.session.post.return_value = MagicMock(ok=False, status_code=500, text="error")
        self.assertFalse(self.client.call_service("notify.mobile_app_phone", {}))

        self.session.post.side_effect = requests.Timeout("slow")
        self.assertFalse(self.client.call_service("notify.mobile_app_phone", {}))

    def test_invalid_action(self):
        self.assertFalse(self.client.call_service("notify", {}))
        self.session.post.assert_not_called()


if __name__ == "__main__":
    unittest.main()
