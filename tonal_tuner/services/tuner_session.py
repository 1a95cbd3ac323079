"""Tuner session that connects a capture collaborator to the pitch detector."""

from __future__ import annotations
import threading
import time
from typing import Callable, List, Optional

import numpy as np

from ..audio.pitch_detector import PitchDetector
from ..core.config import DetectorConfig
from ..core.errors import ConfigurationError
from ..core.interfaces import IAudioProvider
from ..logger import get_logger
from ..note_types import DetectionResult, Detected

logger = get_logger(__name__)


class TunerSession:
    """Owns the live state of one tuning session.

    The session keeps a rolling window of the most recent `window_size` mono
    samples and classifies it every `hop_size` new samples. Each result is
    passed to the callback as is; nothing is smoothed or held between ticks.
    """

    def __init__(
        self,
        provider: Optional[IAudioProvider] = None,
        config: Optional[DetectorConfig] = None,
        sample_rate: Optional[float] = None,
        hop_size: int = 1024,
        match_reference: bool = True,
    ) -> None:
        """Initialize the session.

        Args:
            provider: Audio source, or None to drive the session with `feed`
            config: Detection settings, or None for the defaults
            sample_rate: Stream sample rate; taken from the provider when omitted
            hop_size: New samples between two detections
            match_reference: Attach the nearest reference pitch to detections

        Raises:
            ConfigurationError: If the settings are invalid
        """
        if sample_rate is None:
            if provider is None:
                raise ConfigurationError("sample_rate is required without a provider")
            sample_rate = provider.sample_rate
        if hop_size <= 0:
            raise ConfigurationError(f"hop_size must be positive, got {hop_size}")

        self._provider = provider
        self._detector = PitchDetector(sample_rate, config, match_reference=match_reference)
        self._window_size = self._detector.window_size
        self._hop_size = hop_size

        self._buffer = np.zeros(self._window_size, dtype=np.float32)
        self._filled = 0
        self._pending = 0
        self._lock = threading.Lock()

        self._callback: Optional[Callable[[DetectionResult, float], None]] = None
        self._running = False
        self._start_time = 0.0

    @property
    def detector(self) -> PitchDetector:
        return self._detector

    def start(self, callback: Callable[[DetectionResult, float], None]) -> None:
        """Start listening; `callback` receives (result, elapsed_seconds) per tick."""
        if self._running:
            logger.warning("Tuner session already running")
            return

        self._callback = callback
        self._start_time = time.time()
        self._running = True
        if self._provider is not None:
            self._provider.start(self._on_audio)
        logger.info("Tuner session started")

    def stop(self) -> None:
        """Stop the provider and drop the rolling window."""
        if not self._running:
            return

        self._running = False
        if self._provider is not None:
            self._provider.stop()
        self.reset()
        logger.info("Tuner session stopped")

    def is_running(self) -> bool:
        return self._running

    def reset(self) -> None:
        """Forget all buffered samples."""
        with self._lock:
            self._buffer.fill(0.0)
            self._filled = 0
            self._pending = 0

    def _on_audio(self, audio_data: np.ndarray, timestamp: float) -> None:
        if self._running:
            self.feed(audio_data, timestamp)

    def feed(self, audio_data: np.ndarray, timestamp: Optional[float] = None) -> List[DetectionResult]:
        """Add captured samples and run any detections that became due.

        Args:
            audio_data: 1D mono samples or a (frames x channels) block
            timestamp: Capture time in seconds, defaults to now

        Returns:
            The results produced by this call, oldest first
        """
        if timestamp is None:
            timestamp = time.time()
        mono = self._to_mono(audio_data)

        results = []
        with self._lock:
            position = 0
            while position < len(mono):
                take = min(self._hop_size - self._pending, len(mono) - position)
                self._push(mono[position : position + take])
                position += take
                self._pending += take

                if self._pending >= self._hop_size:
                    self._pending = 0
                    if self._filled >= self._window_size:
                        results.append(self._detector.detect(self._buffer))

        for result in results:
            self._emit(result, timestamp)
        return results

    @staticmethod
    def _to_mono(audio_data: np.ndarray) -> np.ndarray:
        audio_data = np.asarray(audio_data, dtype=np.float32)
        if audio_data.ndim > 1:
            # Average channels (frames x channels)
            return audio_data.mean(axis=1)
        return audio_data

    def _push(self, samples: np.ndarray) -> None:
        count = len(samples)
        if count == 0:
            return
        if count >= self._window_size:
            self._buffer[:] = samples[-self._window_size :]
        else:
            self._buffer[:-count] = self._buffer[count:]
            self._buffer[-count:] = samples
        self._filled = min(self._window_size, self._filled + count)

    def _emit(self, result: DetectionResult, timestamp: float) -> None:
        elapsed = timestamp - self._start_time if self._running else 0.0
        if isinstance(result, Detected):
            logger.debug(
                f"[{elapsed:.2f}s] {result.note_name} ({result.frequency:.1f}Hz, "
                f"{result.cents_offset:+d} cents)"
            )
        if self._callback:
            self._callback(result, elapsed)
