"""Pitch detection pipeline."""

from .pitch_detector import PitchDetector, classify_window

__all__ = ["PitchDetector", "classify_window"]
