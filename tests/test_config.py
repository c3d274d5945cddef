import json
import os
import tempfile
import unittest

from pitch_trace.core.config import ConfigManager
from pitch_trace.core.factory import ComponentFactory
from pitch_trace.note_types import SingleNoteTarget


class TestConfigManager(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.config_dir = self._tmp.name
        self.config_file = os.path.join(self.config_dir, "pitch_trace.json")

    def tearDown(self):
        self._tmp.cleanup()

    def write(self, content):
        with open(self.config_file, "w") as f:
            f.write(content if isinstance(content, str) else json.dumps(content))

    def test_creates_default_file(self):
        manager = ConfigManager(self.config_dir)
        self.assertTrue(os.path.exists(self.config_file))
        with open(self.config_file) as f:
            stored = json.load(f)
        self.assertEqual(sorted(stored), ["audio_input", "pitch_estimator", "reference_tone", "session"])
        self.assertEqual(manager.get_config("session")["tolerance_cents"], 25)
        self.assertEqual(manager.get_config("pitch_estimator")["clip_threshold"], 0.2)

    def test_fills_missing_keys_from_defaults(self):
        self.write({"session": {"tolerance_cents": 40}})
        manager = ConfigManager(self.config_dir)
        config = manager.get_config("session")
        self.assertEqual(config["tolerance_cents"], 40)
        self.assertEqual(config["reference_delay_ms"], 90.0)
        self.assertEqual(manager.get_config("audio_input")["sample_rate"], 44100)

    def test_malformed_file_falls_back_to_defaults(self):
        self.write("{not json")
        manager = ConfigManager(self.config_dir)
        self.assertEqual(manager.get_config("session")["tolerance_cents"], 25)

        self.write([1, 2, 3])
        manager = ConfigManager(self.config_dir)
        self.assertEqual(manager.get_config("session")["tolerance_cents"], 25)

    def test_invalid_values_are_ignored(self):
        self.write(
            {
                "session": {"tolerance_cents": "loud", "trace_length": 12.5, "theme": "dark"},
                "audio_input": {"sample_rate": 48000.0, "channels": True},
                "reference_tone": "fast",
                "display": {"fps": 60},
            }
        )
        manager = ConfigManager(self.config_dir)
        session = manager.get_config("session")
        self.assertEqual(session["tolerance_cents"], 25)
        self.assertEqual(session["trace_length"], 700)
        self.assertNotIn("theme", session)
        audio = manager.get_config("audio_input")
        self.assertEqual(audio["sample_rate"], 48000)
        self.assertIsInstance(audio["sample_rate"], int)
        self.assertEqual(audio["channels"], 1)
        self.assertEqual(manager.get_config("reference_tone")["gain"], 0.2)
        self.assertEqual(manager.get_config("display"), {})

    def test_update_persists(self):
        manager = ConfigManager(self.config_dir)
        self.assertTrue(manager.update_config("session", {"tolerance_cents": 15}))
        reloaded = ConfigManager(self.config_dir)
        self.assertEqual(reloaded.get_config("session")["tolerance_cents"], 15)

        self.assertTrue(reloaded.reset_config("session"))
        self.assertEqual(reloaded.get_config("session")["tolerance_cents"], 25)

    def test_invalid_update_is_rejected(self):
        manager = ConfigManager(self.config_dir)
        self.assertFalse(manager.update_config("session", {"tolerance_cents": 15, "theme": "dark"}))
        self.assertFalse(manager.update_config("reference_tone", {"gain": "max"}))
        self.assertEqual(manager.get_config("session")["tolerance_cents"], 25)
        self.assertEqual(manager.get_config("reference_tone")["gain"], 0.2)

    def test_unknown_sections(self):
        manager = ConfigManager(self.config_dir)
        self.assertFalse(manager.update_config("theme", {"dark": True}))
        self.assertFalse(manager.reset_config("theme"))
        self.assertEqual(manager.get_config("theme"), {})



class TestComponentFactory(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.manager = ConfigManager(self._tmp.name)
        self.factory = ComponentFactory(self.manager)

    def tearDown(self):
        self._tmp.cleanup()

    def test_session_uses_stored_configuration(self):
        self.manager.update_config("session", {"tolerance_cents": 200, "trace_length": 50})
        session = self.factory.create_session(target=SingleNoteTarget("E2"))
        # Stored tolerance is clamped like any other assignment
        self.assertEqual(session.tolerance, 80)
        self.assertEqual(session.pitch_trace.capacity, 50)
        self.assertEqual(len(session.targets), 1)

    def test_session_overrides(self):
        session = self.factory.create_session(tolerance_cents=10, note_ms=250, gap_ms=None)
        self.assertEqual(session.tolerance, 10)
        self.assertEqual(session.sequencer.note_ms, 250)
        self.assertEqual(session.sequencer.gap_ms, 150.0)

    def test_unknown_session_option(self):
        with self.assertRaises(ValueError):
            self.factory.create_session(theme="dark")

    def test_estimator_configuration(self):
        self.manager.update_config("pitch_estimator", {"silence_rms": 0.05})
        estimator = self.factory.create_estimator(max_frequency=2000.0)
        self.assertEqual(estimator.silence_rms, 0.05)
        self.assertEqual(estimator.max_frequency, 2000.0)


if __name__ == "__main__":
    unittest.main()
