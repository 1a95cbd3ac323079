"""Tonal Tuner - autocorrelation pitch detection and tuning."""

from .note_types import (
    DetectionResult,
    Detected,
    NoPitch,
    NoteMapping,
    ReferenceMatch,
    ReferencePitch,
    Silence,
)
from .core.config import DetectorConfig
from .core.errors import ConfigurationError
from .audio.pitch_detector import PitchDetector, classify_window
from .reference import GUITAR_STANDARD, ReferenceMatcher

__version__ = "0.1.0"

__all__ = [
    "DetectionResult",
    "Detected",
    "NoPitch",
    "NoteMapping",
    "ReferenceMatch",
    "ReferencePitch",
    "Silence",
    "DetectorConfig",
    "ConfigurationError",
    "PitchDetector",
    "classify_window",
    "GUITAR_STANDARD",
    "ReferenceMatcher",
]
