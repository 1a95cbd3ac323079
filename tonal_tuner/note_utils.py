"""Utility functions for working with musical notes and frequencies.

All functions here are pure: equal temperament with A4 = 440 Hz = MIDI 69.
"""

import re
from typing import List

import numpy as np

from .logger import get_logger
from .note_types import NoteMapping

# Get logger for this module
logger = get_logger(__name__)

A4_FREQUENCY = 440.0
A4_MIDI = 69

NOTE_NAMES: List[str] = [
    "C",
    "C♯",
    "D",
    "D♯",
    "E",
    "F",
    "F♯",
    "G",
    "G♯",
    "A",
    "A♯",
    "B",
]

# Semitone offset of each natural within its octave
_NATURAL_OFFSETS = {"C": 0, "D": 2, "E": 4, "F": 5, "G": 7, "A": 9, "B": 11}
_ACCIDENTALS = {"": 0, "#": 1, "♯": 1, "b": -1, "♭": -1}

# Note letter, optional accidental, octave (may be negative, e.g. 'C-1')
NOTE_PATTERN = re.compile(r"^([A-Ga-g])([#♯b♭]?)(-?[0-9]+)$")


def _round_half_up(value: float) -> int:
    # Ties go toward +inf, not to the nearest even integer
    return int(np.floor(value + 0.5))


def frequency_to_midi(frequency: float) -> int:
    """Nearest MIDI number for a positive frequency in Hz."""
    return _round_half_up(12 * np.log2(frequency / A4_FREQUENCY) + A4_MIDI)


def midi_to_frequency(midi: int) -> float:
    """Ideal equal-tempered frequency of a MIDI number."""
    return float(A4_FREQUENCY * 2.0 ** ((midi - A4_MIDI) / 12.0))


def midi_to_note_name(midi: int) -> str:
    """Convert a MIDI number to a note name using Scientific Pitch Notation.

    Note:
        - Middle C (MIDI 60) is C4
        - Octave numbers change between B and C (e.g., B3 -> C4)
    """
    name = NOTE_NAMES[(midi + 1200) % 12]
    octave = midi // 12 - 1
    return f"{name}{octave}"


def cents_off(frequency: float, midi: int) -> int:
    """Signed distance in whole cents from the ideal pitch of `midi`."""
    return _round_half_up(1200 * np.log2(frequency / midi_to_frequency(midi)))


def map_frequency(frequency: float) -> NoteMapping:
    """Map a validated frequency to its nearest note.

    Args:
        frequency: Frequency in Hz, must be positive and finite

    Returns:
        NoteMapping with MIDI number, note name and cents offset
    """
    midi = frequency_to_midi(frequency)
    return NoteMapping(
        midi=midi,
        note_name=midi_to_note_name(midi),
        cents_offset=cents_off(frequency, midi),
    )


def get_note_name(frequency: float) -> str:
    """Note name with octave for a frequency (e.g., 440.0 -> 'A4')."""
    return midi_to_note_name(frequency_to_midi(frequency))


def note_name_to_midi(note_name: str) -> int:
    """Parse a note name such as 'A4', 'F#3', 'Bb2' or 'C♯4' into a MIDI number.

    Raises:
        ValueError: If the name is not a note with an octave
    """
    match = NOTE_PATTERN.match(note_name.strip()) if note_name else None
    if match is None:
        raise ValueError(f"Invalid note name: {note_name!r}")

    letter, accidental, octave = match.groups()
    semitone = _NATURAL_OFFSETS[letter.upper()] + _ACCIDENTALS[accidental]
    return (int(octave) + 1) * 12 + semitone


def to_ascii_accidentals(note_name: str) -> str:
    """Replace the sharp sign with '#' for terminals without Unicode."""
    return note_name.replace("♯", "#")


def is_in_tune(cents_offset: float, tolerance: float = 5) -> bool:
    """True when the deviation is strictly within `tolerance` cents."""
    return abs(cents_offset) < tolerance


def needle_position(cents_offset: float, limit: float = 50) -> float:
    """Clamp a cents offset to the visible range of a tuner needle."""
    return max(-limit, min(limit, cents_offset))
