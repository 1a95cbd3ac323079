"""Defines the core interfaces for the Tonal Tuner application."""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Callable

import numpy as np

from ..note_types import DetectionResult


class IAudioProvider(ABC):
    """Interface for audio capture collaborators."""

    @abstractmethod
    def start(self, callback: Callable[[np.ndarray, float], None]) -> None:
        """Start capturing, calling back with (samples, timestamp) chunks."""
        pass

    @abstractmethod
    def stop(self) -> None:
        """Stop capturing audio."""
        pass

    @property
    @abstractmethod
    def sample_rate(self) -> int:
        """The sample rate of the audio stream."""
        pass

    @property
    @abstractmethod
    def channels(self) -> int:
        """The number of channels in the audio stream."""
        pass


class IPitchDetector(ABC):
    """Interface for per-window pitch classifiers."""

    @abstractmethod
    def detect(self, samples: np.ndarray) -> DetectionResult:
        """Classify one window of samples as Silence, NoPitch or Detected."""
        pass
