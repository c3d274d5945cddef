import unittest

from pitch_trace.detection.smoothing import PitchSmoother


class TestPitchSmoother(unittest.TestCase):
    def setUp(self):
        self.smoother = PitchSmoother()

    def test_starts_unset(self):
        self.assertIsNone(self.smoother.value)

    def test_first_estimate_taken_as_is(self):
        self.assertEqual(self.smoother.update(440.0), 440.0)

    def test_exponential_blend(self):
        self.smoother.update(440.0)
        self.assertAlmostEqual(self.smoother.update(450.0), 440.0 * 0.78 + 450.0 * 0.22)

    def test_missing_estimate_resets(self):
        self.smoother.update(440.0)
        self.assertIsNone(self.smoother.update(None))
        # No residual memory after the gap
        self.assertEqual(self.smoother.update(220.0), 220.0)

    def test_reset(self):
        self.smoother.update(440.0)
        self.smoother.reset()
        self.assertIsNone(self.smoother.value)

    def test_invalid_factor(self):
        with self.assertRaises(ValueError):
            PitchSmoother(0.0)
        with self.assertRaises(ValueError):
            PitchSmoother(1.5)


if __name__ == "__main__":
    unittest.main()
