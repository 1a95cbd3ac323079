"""Pitch detection for single windows of monophonic audio."""

from __future__ import annotations
import numpy as np
from typing import Optional

from ..logger import get_logger
from ..note_types import DetectionResult, Detected, NoPitch, Silence
from ..note_utils import map_frequency
from ..reference import ReferenceMatcher
from ..core.config import DetectorConfig
from ..core.interfaces import IPitchDetector
from ..detection.windowing import gate, hann_window
from ..detection.autocorrelation import autocorrelate, autocorrelate_fft, lag_bounds
from ..detection.peak_picker import estimate_frequency

logger = get_logger(__name__)


class PitchDetector(IPitchDetector):
    """Autocorrelation pitch detector.

    Each call to `detect` is independent: the detector keeps no per-window
    state, so one instance may be shared by callers with their own buffers.
    """

    def __init__(
        self,
        sample_rate: float,
        config: Optional[DetectorConfig] = None,
        match_reference: bool = False,
    ) -> None:
        """Initialize the PitchDetector.

        Args:
            sample_rate: Sample rate of the analysed stream in Hz
            config: Detection settings, or None for the defaults
            match_reference: Attach the nearest reference pitch to detections

        Raises:
            ConfigurationError: If the settings are invalid
        """
        self._config = config or DetectorConfig()
        self._config.validate(sample_rate, match_reference=match_reference)

        self._sample_rate = float(sample_rate)
        self._window_size = self._config.window_size
        self._min_lag, self._max_lag = lag_bounds(
            self._sample_rate,
            self._config.search_min_freq,
            self._config.search_max_freq,
            self._window_size,
        )
        self._autocorrelate = autocorrelate_fft if self._config.use_fft else autocorrelate
        self._matcher = (
            ReferenceMatcher(self._config.reference_tuning) if match_reference else None
        )

        # Build the window table up front
        hann_window(self._window_size)

        if self._min_lag >= self._max_lag:
            logger.warning(
                f"Empty lag range [{self._min_lag}, {self._max_lag}): "
                f"window of {self._window_size} samples is too short for "
                f"{self._config.search_min_freq}Hz at {self._sample_rate}Hz"
            )

        logger.info(
            f"Pitch detector initialized: sample_rate={self._sample_rate:.0f}, "
            f"window_size={self._window_size}, lags=[{self._min_lag}, {self._max_lag}), "
            f"fft={self._config.use_fft}"
        )

    @property
    def config(self) -> DetectorConfig:
        return self._config

    @property
    def sample_rate(self) -> float:
        return self._sample_rate

    @property
    def window_size(self) -> int:
        return self._window_size

    @property
    def lag_range(self):
        """Searched lag range as (min_lag, max_lag), max exclusive."""
        return self._min_lag, self._max_lag

    def detect(self, samples: np.ndarray) -> DetectionResult:
        """Classify one window of samples.

        Args:
            samples: 1D array of `window_size` samples in [-1, 1]; not modified

        Returns:
            Silence, NoPitch or Detected

        Raises:
            ValueError: If the window does not have `window_size` samples
        """
        samples = np.asarray(samples)
        if samples.ndim != 1 or len(samples) != self._window_size:
            raise ValueError(
                f"Expected a 1D window of {self._window_size} samples, "
                f"got shape {samples.shape}"
            )

        windowed, level = gate(samples, self._config.silence_rms_threshold)
        if windowed is None:
            return Silence(rms=level)

        if not np.isfinite(level):
            logger.debug("Non-finite samples in window")
            return NoPitch(rms=level)

        correlation = self._autocorrelate(windowed, self._min_lag, self._max_lag)
        frequency = estimate_frequency(
            correlation,
            self._sample_rate,
            self._min_lag,
            self._max_lag,
            self._config.global_freq_lower_bound,
            self._config.global_freq_upper_bound,
        )
        if frequency is None:
            logger.debug(f"No pitch (rms={level:.4f})")
            return NoPitch(rms=level)

        mapping = map_frequency(frequency)
        reference = self._matcher.nearest(frequency) if self._matcher else None

        logger.debug(
            f"Detected {mapping.note_name} {frequency:.2f}Hz "
            f"({mapping.cents_offset:+d} cents, rms={level:.4f})"
        )
        return Detected(
            frequency=frequency,
            midi=mapping.midi,
            note_name=mapping.note_name,
            cents_offset=mapping.cents_offset,
            rms=level,
            reference=reference,
        )


def classify_window(
    samples: np.ndarray,
    sample_rate: float,
    config: Optional[DetectorConfig] = None,
    match_reference: bool = False,
) -> DetectionResult:
    """Classify a single window without keeping a detector around.

    Raises:
        ConfigurationError: If the settings are invalid
    """
    config = config or DetectorConfig()
    if len(samples) != config.window_size:
        config = config.replace(window_size=len(samples))
    detector = PitchDetector(sample_rate, config, match_reference=match_reference)
    return detector.detect(samples)
