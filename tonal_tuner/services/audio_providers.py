"""Audio file capture for offline analysis and tests."""

import soundfile as sf
import numpy as np
import threading
import time
from typing import Callable, Iterator, Optional

from ..core.interfaces import IAudioProvider
from ..logger import get_logger

logger = get_logger(__name__)


class WavFileAudioProvider(IAudioProvider):
    """Provides audio data by reading from a WAV file."""

    def __init__(
        self,
        file_path: str,
        chunk_size: int,
        loop: bool = False,
        gain: float = 1.0,
        realtime: bool = True,
    ):
        self._file_path = file_path
        self._chunk_size = chunk_size
        self._loop = loop
        self._gain = gain
        self._realtime = realtime
        self._on_data_callback: Optional[Callable[[np.ndarray, float], None]] = None
        self._is_running = False
        self._thread: Optional[threading.Thread] = None

        with sf.SoundFile(self._file_path) as f:
            self._sample_rate = f.samplerate
            self._channels = f.channels

    def start(self, on_data_callback: Callable[[np.ndarray, float], None]) -> None:
        if self._is_running:
            return

        self._on_data_callback = on_data_callback
        self._is_running = True
        self._thread = threading.Thread(target=self._stream_data, daemon=True)
        self._thread.start()

    def stop(self) -> None:
        self._is_running = False
        if self._thread:
            if self._thread is not threading.current_thread():
                self._thread.join()
            self._thread = None

    def wait(self, timeout: Optional[float] = None) -> None:
        """Block until the file has been streamed; when looping, until stop() or timeout."""
        if self._thread:
            self._thread.join(timeout)

    @property
    def is_running(self) -> bool:
        """Returns True if the provider is currently streaming data."""
        return self._is_running

    def chunks(self) -> Iterator[np.ndarray]:
        """Yield (frames x channels) float32 chunks of the file once, with gain applied."""
        with sf.SoundFile(self._file_path) as f:
            while True:
                data = f.read(self._chunk_size, dtype="float32", always_2d=True)
                if len(data) == 0:
                    break

                # Apply gain if specified
                if self._gain != 1.0:
                    data *= self._gain
                yield data

    def _stream_data(self) -> None:
        try:
            while self._is_running:
                for data in self.chunks():
                    if not self._is_running:
                        break

                    if self._on_data_callback:
                        self._on_data_callback(data, time.time())

                    # Simulate real-time playback speed
                    if self._realtime:
                        time.sleep(self._chunk_size / self.sample_rate)

                if not self._loop:
                    break  # Exit outer loop if not looping

        except (RuntimeError, OSError) as e:
            logger.error(f"Error streaming WAV file {self._file_path}: {e}", exc_info=True)
        finally:
            self._is_running = False  # Ensure flag is reset on exit

    @property
    def sample_rate(self) -> int:
        return self._sample_rate

    @property
    def channels(self) -> int:
        return self._channels
