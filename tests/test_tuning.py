import unittest

from pitch_trace.detection.tuning import TuningMonitor, clamp_tolerance, classify
from pitch_trace.note_types import TuningStatus


class TestClassify(unittest.TestCase):
    def test_in_tune_reports_signed_offset(self):
        result = classify(445.0, [440.0], 25)
        self.assertIs(result.status, TuningStatus.IN_TUNE)
        self.assertAlmostEqual(result.cents, 19.56, places=2)
        self.assertAlmostEqual(result.magnitude, 19.56, places=2)
        self.assertEqual(result.target, 440.0)
        self.assertEqual(result.note.name, "A4")
        self.assertEqual(result.describe(), "In tune (+19.6c)")

    def test_sharp(self):
        result = classify(460.0, [440.0], 25)
        self.assertIs(result.status, TuningStatus.SHARP)
        self.assertGreater(result.magnitude, 25)
        self.assertTrue(result.describe().startswith("Sharp by"))

    def test_flat(self):
        result = classify(420.0, [440.0], 25)
        self.assertIs(result.status, TuningStatus.FLAT)
        self.assertLess(result.cents, -25)
        self.assertGreater(result.magnitude, 25)
        self.assertTrue(result.describe().startswith("Flat by"))

    def test_flat_in_tune_keeps_sign(self):
        result = classify(435.0, [440.0], 25)
        self.assertIs(result.status, TuningStatus.IN_TUNE)
        self.assertLess(result.magnitude, 0)

    def test_uses_nearest_target(self):
        result = classify(330.0, [220.0, 329.63, 440.0], 10)
        self.assertIs(result.status, TuningStatus.IN_TUNE)
        self.assertEqual(result.target, 329.63)

    def test_no_target(self):
        self.assertIs(classify(440.0, [], 25).status, TuningStatus.NO_TARGET)
        self.assertIs(classify(None, [], 25).status, TuningStatus.NO_TARGET)

    def test_no_pitch(self):
        result = classify(None, [440.0], 25)
        self.assertIs(result.status, TuningStatus.NO_PITCH)
        self.assertIsNone(result.magnitude)

    def test_non_finite_frequency_is_no_pitch(self):
        for freq in (float("nan"), float("inf"), float("-inf")):
            result = classify(freq, [440.0], 25)
            self.assertIs(result.status, TuningStatus.NO_PITCH, freq)
            self.assertIsNone(result.cents)


class TestTolerance(unittest.TestCase):
    def test_clamped(self):
        self.assertEqual(clamp_tolerance(1), 5)
        self.assertEqual(clamp_tolerance(200), 80)
        self.assertEqual(clamp_tolerance(30.4), 30)

    def test_non_finite_falls_back_to_default(self):
        self.assertEqual(clamp_tolerance(float("nan")), 25)
        self.assertEqual(clamp_tolerance(float("inf")), 25)


class TestTuningMonitor(unittest.TestCase):
    def test_single_dropout_is_no_pitch(self):
        monitor = TuningMonitor()
        monitor.update(440.0, [440.0])
        self.assertIs(monitor.update(None, [440.0]).status, TuningStatus.NO_PITCH)

    def test_sustained_silence_is_unstable(self):
        monitor = TuningMonitor(silence_frames=8)
        statuses = [monitor.update(None, [440.0]).status for _ in range(9)]
        self.assertTrue(all(s is TuningStatus.NO_PITCH for s in statuses[:8]))
        self.assertIs(statuses[8], TuningStatus.UNSTABLE)
        self.assertEqual(monitor.update(None, [440.0]).describe(), "No stable pitch detected")

    def test_pitch_ends_silence_run(self):
        monitor = TuningMonitor(silence_frames=2)
        for _ in range(3):
            monitor.update(None, [440.0])
        self.assertTrue(monitor.is_unstable)
        self.assertIs(monitor.update(441.0, [440.0]).status, TuningStatus.IN_TUNE)
        self.assertEqual(monitor.muted_frames, 0)

    def test_tolerance_setter_clamps(self):
        monitor = TuningMonitor(tolerance_cents=2)
        self.assertEqual(monitor.tolerance, 5)
        monitor.tolerance = 500
        self.assertEqual(monitor.tolerance, 80)
        monitor.tolerance = float("nan")
        self.assertEqual(monitor.tolerance, 25)

    def test_non_finite_pitch_counts_as_silence(self):
        monitor = TuningMonitor(silence_frames=1)
        monitor.update(float("nan"), [440.0])
        self.assertIs(monitor.update(float("nan"), [440.0]).status, TuningStatus.UNSTABLE)


if __name__ == "__main__":
    unittest.main()
