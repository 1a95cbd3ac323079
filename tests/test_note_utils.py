import unittest

import numpy as np

from tonal_tuner.note_utils import (
    _round_half_up,
    cents_off,
    frequency_to_midi,
    get_note_name,
    is_in_tune,
    map_frequency,
    midi_to_frequency,
    midi_to_note_name,
    needle_position,
    note_name_to_midi,
    to_ascii_accidentals,
)


class TestScientificPitchNotation(unittest.TestCase):
    def test_a4(self):
        self.assertEqual(midi_to_note_name(69), "A4")
        self.assertEqual(get_note_name(440.0), "A4")

    def test_middle_c(self):
        # Middle C (C4) is MIDI 60, ~261.63 Hz
        self.assertEqual(midi_to_note_name(60), "C4")
        self.assertEqual(get_note_name(261.63), "C4")

    def test_octave_transitions(self):
        # Octave number changes between B and C
        self.assertEqual(midi_to_note_name(59), "B3")
        self.assertEqual(midi_to_note_name(60), "C4")

    def test_sharps(self):
        self.assertEqual(midi_to_note_name(61), "C♯4")
        self.assertEqual(get_note_name(311.13), "D♯4")
        self.assertEqual(to_ascii_accidentals("F♯2"), "F#2")

    def test_low_and_negative_midi(self):
        self.assertEqual(midi_to_note_name(0), "C-1")
        self.assertEqual(midi_to_note_name(-1), "B-2")
        self.assertEqual(midi_to_note_name(-12), "C-2")


class TestFrequencyMapping(unittest.TestCase):
    def test_frequency_to_midi(self):
        self.assertEqual(frequency_to_midi(440.0), 69)
        self.assertEqual(frequency_to_midi(261.63), 60)
        self.assertEqual(frequency_to_midi(82.4069), 40)

    def test_midi_to_frequency(self):
        self.assertAlmostEqual(midi_to_frequency(69), 440.0)
        self.assertAlmostEqual(midi_to_frequency(81), 880.0)
        self.assertAlmostEqual(midi_to_frequency(57), 220.0)

    def test_cents_off(self):
        self.assertEqual(cents_off(440.0, 69), 0)
        # One semitone sharp of A4
        self.assertEqual(cents_off(466.16, 69), 100)
        self.assertEqual(cents_off(220.0, 69), -1200)

    def test_map_frequency(self):
        mapping = map_frequency(445.0)
        self.assertEqual(mapping.midi, 69)
        self.assertEqual(mapping.note_name, "A4")
        self.assertEqual(mapping.cents_offset, 20)

    def test_round_trip_within_a_semitone(self):
        for frequency in np.geomspace(50.0, 1500.0, 200):
            ideal = midi_to_frequency(frequency_to_midi(frequency))
            ratio = max(ideal, frequency) / min(ideal, frequency)
            self.assertLessEqual(ratio, 2 ** (1 / 12))

    def test_small_perturbations_keep_midi(self):
        for frequency in (110.0, 196.0, 440.0, 659.25):
            midi = frequency_to_midi(frequency)
            self.assertEqual(frequency_to_midi(frequency * 1.001), midi)
            self.assertEqual(frequency_to_midi(frequency * 0.999), midi)

    def test_rounds_half_up(self):
        self.assertEqual(_round_half_up(0.5), 1)
        self.assertEqual(_round_half_up(2.5), 3)
        self.assertEqual(_round_half_up(-0.5), 0)
        self.assertEqual(_round_half_up(-1.5), -1)


class TestNoteNameParsing(unittest.TestCase):
    def test_parse(self):
        self.assertEqual(note_name_to_midi("A4"), 69)
        self.assertEqual(note_name_to_midi("F#3"), 54)
        self.assertEqual(note_name_to_midi("C♯4"), 61)
        self.assertEqual(note_name_to_midi("Bb2"), 46)
        self.assertEqual(note_name_to_midi("c-1"), 0)

    def test_invalid(self):
        for name in ("H2", "A", "", "A#", "4A"):
            with self.assertRaises(ValueError):
                note_name_to_midi(name)


class TestTunerDisplay(unittest.TestCase):
    def test_in_tune(self):
        self.assertTrue(is_in_tune(0))
        self.assertTrue(is_in_tune(-4))
        self.assertFalse(is_in_tune(5))
        self.assertFalse(is_in_tune(-12))
        self.assertTrue(is_in_tune(9, tolerance=10))

    def test_needle_is_clamped(self):
        self.assertEqual(needle_position(12), 12)
        self.assertEqual(needle_position(80), 50)
        self.assertEqual(needle_position(-120), -50)


if __name__ == "__main__":
    unittest.main()
