import unittest

from pitch_trace.note_types import ScaleTarget, SingleNoteTarget
from pitch_trace.note_utils import note_to_frequency
from pitch_trace.targets import (
    INTERVAL_TEMPLATES,
    SCALE_PRESETS,
    build_targets,
    nearest_target,
    scale_offsets,
)


class TestBuildTargets(unittest.TestCase):
    def test_single_note(self):
        self.assertEqual(build_targets(SingleNoteTarget("A4")), [440.0])

    def test_invalid_single_note_is_empty(self):
        self.assertEqual(build_targets(SingleNoteTarget("Bb4")), [])

    def test_out_of_range_single_note_is_empty(self):
        self.assertEqual(build_targets(SingleNoteTarget("A9999")), [])
        self.assertEqual(build_targets(SingleNoteTarget("C-9999")), [])

    def test_out_of_range_scale_is_empty(self):
        self.assertEqual(build_targets(ScaleTarget("C-9999", "major")), [])
        self.assertEqual(build_targets(ScaleTarget("A9999", "blues", octaves=2)), [])

    def test_no_spec_is_empty(self):
        self.assertEqual(build_targets(None), [])

    def test_c3_major_spans_one_octave(self):
        targets = build_targets(ScaleTarget("C3", "major"))
        self.assertEqual(len(targets), 8)
        self.assertEqual(targets, sorted(targets))
        self.assertAlmostEqual(targets[7] / targets[0], 2.0)
        self.assertAlmostEqual(targets[0], note_to_frequency("C3"))
        self.assertAlmostEqual(targets[2], note_to_frequency("E3"))

    def test_every_template_ends_at_octave(self):
        for name, offsets in INTERVAL_TEMPLATES.items():
            self.assertEqual(offsets[0], 0, name)
            self.assertEqual(offsets[-1], 12, name)
            targets = build_targets(ScaleTarget("A3", name))
            self.assertEqual(len(targets), len(offsets), name)
            self.assertAlmostEqual(targets[-1] / targets[0], 2.0)

    def test_templates_are_immutable(self):
        with self.assertRaises(TypeError):
            INTERVAL_TEMPLATES["custom"] = (0, 12)

    def test_unknown_template_is_empty(self):
        self.assertEqual(build_targets(ScaleTarget("C3", "lydian_dominant")), [])

    def test_invalid_tonic_is_empty(self):
        self.assertEqual(build_targets(ScaleTarget("Cb3", "major")), [])

    def test_two_octave_scale(self):
        offsets = scale_offsets("major", octaves=2)
        self.assertEqual(offsets, [0, 2, 4, 5, 7, 9, 11, 12, 14, 16, 17, 19, 21, 23, 24])

    def test_presets_match_named_scales(self):
        c_major = build_targets(SCALE_PRESETS["C_major"])
        self.assertEqual(len(c_major), 15)
        self.assertAlmostEqual(c_major[0], note_to_frequency("C3"))
        self.assertAlmostEqual(c_major[-1], note_to_frequency("C5"))

        e_minor = build_targets(SCALE_PRESETS["E_minor"])
        expected = ["E2", "F#2", "G2", "A2", "B2", "C3", "D3", "E3"]
        for freq, name in zip(e_minor, expected):
            self.assertAlmostEqual(freq, note_to_frequency(name))

        self.assertEqual(len(build_targets(SCALE_PRESETS["Pentatonic_C"])), 11)


class TestNearestTarget(unittest.TestCase):
    def test_empty(self):
        self.assertIsNone(nearest_target(440.0, []))

    def test_picks_closest_in_hz(self):
        self.assertEqual(nearest_target(300.0, [220.0, 330.0, 440.0]), 330.0)

    def test_tie_goes_to_first(self):
        self.assertEqual(nearest_target(300.0, [200.0, 400.0]), 200.0)
        self.assertEqual(nearest_target(300.0, [400.0, 200.0]), 400.0)


if __name__ == "__main__":
    unittest.main()
