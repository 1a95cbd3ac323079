"""Type definitions for the Tonal Tuner project."""

from typing import Optional, Union
from dataclasses import dataclass


@dataclass(frozen=True)
class NoteMapping:
    """Nearest equal-tempered note for a frequency."""

    midi: int  # MIDI number (A4 = 69)
    note_name: str  # Note name with octave (e.g., 'A4', 'C♯3')
    cents_offset: int  # Signed deviation from the ideal pitch of `midi`


@dataclass(frozen=True)
class ReferencePitch:
    """One named entry of a reference tuning table (e.g., a guitar string)."""

    name: str
    frequency: float  # Hz

    def __str__(self):
        return f"{self.name} ({self.frequency:.2f}Hz)"


@dataclass(frozen=True)
class ReferenceMatch:
    """The reference pitch nearest to a detected frequency."""

    reference: ReferencePitch
    index: int  # Position of `reference` in its table
    hz_offset: float  # Detected frequency minus reference frequency
    cents_offset: float  # Same distance in cents

    @property
    def name(self) -> str:
        return self.reference.name


@dataclass(frozen=True)
class Silence:
    """The window's energy was below the silence threshold."""

    rms: float = 0.0


@dataclass(frozen=True)
class NoPitch:
    """The window had energy but no usable periodicity."""

    rms: float = 0.0


@dataclass(frozen=True)
class Detected:
    """A pitch was found in the window."""

    frequency: float  # Hz
    midi: int
    note_name: str
    cents_offset: int
    rms: float = 0.0  # Energy of the windowed signal
    reference: Optional[ReferenceMatch] = None  # Set when reference matching is on

    @property
    def mapping(self) -> NoteMapping:
        return NoteMapping(self.midi, self.note_name, self.cents_offset)


# Per-window classification produced by the detector
DetectionResult = Union[Silence, NoPitch, Detected]
