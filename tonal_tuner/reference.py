"""Reference pitch tables and nearest-reference matching."""

from typing import Iterable, Sequence, Tuple, Union

import numpy as np

from .core.errors import ConfigurationError
from .logger import get_logger
from .note_types import ReferenceMatch, ReferencePitch
from .note_utils import midi_to_frequency, note_name_to_midi

# Get logger for this module
logger = get_logger(__name__)

ReferenceTuning = Tuple[ReferencePitch, ...]

# Standard six-string guitar tuning, low to high
GUITAR_STANDARD: ReferenceTuning = (
    ReferencePitch("E2", 82.4069),
    ReferencePitch("A2", 110.0),
    ReferencePitch("D3", 146.832),
    ReferencePitch("G3", 195.998),
    ReferencePitch("B3", 246.942),
    ReferencePitch("E4", 329.628),
)


def reference_from_note(note_name: str) -> ReferencePitch:
    """Build a reference entry at the equal-tempered pitch of a note name.

    Raises:
        ConfigurationError: If the note name cannot be parsed
    """
    try:
        midi = note_name_to_midi(note_name)
    except ValueError as e:
        raise ConfigurationError(str(e)) from e
    return ReferencePitch(note_name.strip(), midi_to_frequency(midi))


def parse_reference_table(
    entries: Iterable[Union[str, Sequence, ReferencePitch]],
) -> ReferenceTuning:
    """Build an ordered reference table.

    Each entry may be a ReferencePitch, a (name, frequency) pair, or a bare
    note name such as 'A4' (placed at its equal-tempered pitch).

    Raises:
        ConfigurationError: If an entry is malformed
    """
    table = []
    for entry in entries:
        if isinstance(entry, ReferencePitch):
            pitch = entry
        elif isinstance(entry, str):
            pitch = reference_from_note(entry)
        else:
            try:
                name, frequency = entry
                pitch = ReferencePitch(str(name), float(frequency))
            except (TypeError, ValueError) as e:
                raise ConfigurationError(
                    f"Invalid reference entry {entry!r}: expected (name, frequency)"
                ) from e
        validate_reference(pitch)
        table.append(pitch)
    return tuple(table)


def validate_reference(pitch: ReferencePitch) -> None:
    """Reject entries with an empty name or a non-positive frequency."""
    if not pitch.name:
        raise ConfigurationError("Reference pitch name must not be empty")
    if not np.isfinite(pitch.frequency) or pitch.frequency <= 0:
        raise ConfigurationError(
            f"Reference pitch {pitch.name} has invalid frequency {pitch.frequency}"
        )


def nearest_reference(frequency: float, table: Sequence[ReferencePitch]) -> ReferenceMatch:
    """Return the entry whose frequency is closest to `frequency`.

    Ties go to the entry that comes first in table order.

    Raises:
        ConfigurationError: If the table is empty
        ValueError: If `frequency` is not a positive, finite number
    """
    if not table:
        raise ConfigurationError("Reference table is empty")
    if not np.isfinite(frequency) or frequency <= 0:
        raise ValueError(f"Frequency must be positive and finite, got {frequency}")

    best_index = 0
    best_diff = abs(frequency - table[0].frequency)
    for index, pitch in enumerate(table):
        diff = abs(frequency - pitch.frequency)
        if diff < best_diff:
            best_index = index
            best_diff = diff

    best = table[best_index]
    return ReferenceMatch(
        reference=best,
        index=best_index,
        hz_offset=frequency - best.frequency,
        cents_offset=float(1200 * np.log2(frequency / best.frequency)),
    )


class ReferenceMatcher:
    """
    Matches detected frequencies against a fixed, ordered reference table,
    such as the open strings of an instrument.
    """

    def __init__(self, table: Iterable = GUITAR_STANDARD):
        self._table = parse_reference_table(table)
        if not self._table:
            raise ConfigurationError("Reference table must contain at least one entry")
        logger.debug(
            f"Reference table: {', '.join(str(pitch) for pitch in self._table)}"
        )

    @property
    def table(self) -> ReferenceTuning:
        return self._table

    def nearest(self, frequency: float) -> ReferenceMatch:
        """Closest reference entry to `frequency` (first entry wins ties)."""
        return nearest_reference(frequency, self._table)
