import unittest

from tonal_tuner.core.errors import ConfigurationError
from tonal_tuner.note_types import ReferencePitch
from tonal_tuner.reference import (
    GUITAR_STANDARD,
    ReferenceMatcher,
    nearest_reference,
    parse_reference_table,
    reference_from_note,
)


class TestReferenceMatcher(unittest.TestCase):
    def setUp(self):
        self.matcher = ReferenceMatcher(GUITAR_STANDARD)

    def test_low_e(self):
        match = self.matcher.nearest(82.0)
        self.assertEqual(match.name, "E2")
        self.assertEqual(match.index, 0)
        self.assertAlmostEqual(match.hz_offset, 82.0 - 82.4069)
        self.assertLess(match.cents_offset, 0)

    def test_each_string(self):
        for index, pitch in enumerate(GUITAR_STANDARD):
            match = self.matcher.nearest(pitch.frequency * 1.01)
            self.assertEqual(match.reference, pitch)
            self.assertEqual(match.index, index)

    def test_outside_the_table(self):
        self.assertEqual(self.matcher.nearest(55.0).name, "E2")
        self.assertEqual(self.matcher.nearest(1000.0).name, "E4")

    def test_first_entry_wins_ties(self):
        table = (ReferencePitch("low", 100.0), ReferencePitch("high", 200.0))
        self.assertEqual(nearest_reference(150.0, table).name, "low")
        reversed_table = tuple(reversed(table))
        self.assertEqual(nearest_reference(150.0, reversed_table).name, "high")

    def test_empty_table_is_rejected(self):
        with self.assertRaises(ConfigurationError):
            ReferenceMatcher(())
        with self.assertRaises(ConfigurationError):
            nearest_reference(440.0, ())

    def test_invalid_frequency(self):
        for frequency in (0.0, -82.0, float("nan"), float("inf")):
            with self.assertRaises(ValueError):
                nearest_reference(frequency, GUITAR_STANDARD)
            with self.assertRaises(ValueError):
                self.matcher.nearest(frequency)


class TestReferenceTables(unittest.TestCase):
    def test_from_note_names(self):
        table = parse_reference_table(["A4", "E2"])
        self.assertEqual([pitch.name for pitch in table], ["A4", "E2"])
        self.assertAlmostEqual(table[0].frequency, 440.0)
        self.assertAlmostEqual(table[1].frequency, 82.4069, places=3)

    def test_from_pairs(self):
        table = parse_reference_table([("D", 146.832), ["G", "196"]])
        self.assertEqual(table[0], ReferencePitch("D", 146.832))
        self.assertEqual(table[1], ReferencePitch("G", 196.0))

    def test_guitar_table_round_trips(self):
        self.assertEqual(parse_reference_table(GUITAR_STANDARD), GUITAR_STANDARD)

    def test_malformed_entries(self):
        for entry in (("x", -1.0), ("", 100.0), ("x", float("nan")), (1, 2, 3), 42, "H9"):
            with self.assertRaises(ConfigurationError):
                parse_reference_table([entry])

    def test_reference_from_note(self):
        self.assertEqual(reference_from_note(" A4 ").name, "A4")
        with self.assertRaises(ConfigurationError):
            reference_from_note("not a note")


if __name__ == "__main__":
    unittest.main()
