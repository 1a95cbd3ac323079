"""Hann windowing and the RMS energy gate."""

from functools import lru_cache
from typing import Optional, Tuple

import numpy as np


@lru_cache(maxsize=8)
def hann_window(size: int) -> np.ndarray:
    """Hann coefficients 0.5 * (1 - cos(2*pi*i / (size - 1))) for a window length.

    The table is computed once per size and returned read-only.
    """
    if size < 3:
        raise ValueError(f"Window size must be at least 3, got {size}")
    i = np.arange(size, dtype=np.float64)
    window = 0.5 * (1.0 - np.cos(2.0 * np.pi * i / (size - 1)))
    window.flags.writeable = False
    return window


def apply_window(samples: np.ndarray) -> np.ndarray:
    """Return a windowed copy of `samples`; the input is left untouched."""
    return np.asarray(samples, dtype=np.float64) * hann_window(len(samples))


def rms(signal: np.ndarray) -> float:
    """Root mean square of a signal."""
    return float(np.sqrt(np.mean(np.square(signal))))


def gate(samples: np.ndarray, threshold: float) -> Tuple[Optional[np.ndarray], float]:
    """Window the samples and measure their energy.

    Returns:
        (windowed, rms); `windowed` is None when rms is below `threshold`
    """
    windowed = apply_window(samples)
    level = rms(windowed)
    if level < threshold:
        return None, level
    return windowed, level
