"""Autocorrelation over a bounded lag range."""

from typing import Tuple

import numpy as np


def lag_bounds(
    sample_rate: float, min_freq: float, max_freq: float, size: int
) -> Tuple[int, int]:
    """Lag search range [min_lag, max_lag) for a frequency range.

    min_lag = floor(sample_rate / max_freq); max_lag = floor(sample_rate / min_freq),
    capped at the window size.
    """
    min_lag = int(np.floor(sample_rate / max_freq))
    max_lag = int(np.floor(sample_rate / min_freq))
    return min_lag, min(max_lag, size)


def _computed_span(size: int, min_lag: int, max_lag: int) -> Tuple[int, int]:
    # One extra lag on each side feeds the parabolic refinement
    return max(min_lag - 1, 0), min(max_lag + 1, size)


def autocorrelate(signal: np.ndarray, min_lag: int, max_lag: int) -> np.ndarray:
    """Unnormalized autocorrelation r[lag] = sum(x[i] * x[i + lag]).

    Costs O(N * (max_lag - min_lag)). Only lags in [min_lag - 1, max_lag] are
    computed; every other entry of the returned length-N array is 0.
    """
    size = len(signal)
    result = np.zeros(size, dtype=np.float64)
    start, stop = _computed_span(size, min_lag, max_lag)
    for lag in range(start, stop):
        result[lag] = np.dot(signal[: size - lag], signal[lag:])
    return result


def autocorrelate_fft(signal: np.ndarray, min_lag: int, max_lag: int) -> np.ndarray:
    """Same output as `autocorrelate`, computed in O(N log N) through an FFT."""
    size = len(signal)
    # Zero-pad to at least 2N so the circular correlation does not wrap
    n_fft = 1 << int(np.ceil(np.log2(2 * size)))
    spectrum = np.fft.rfft(signal, n=n_fft)
    full = np.fft.irfft(spectrum * np.conj(spectrum), n=n_fft)[:size]

    result = np.zeros(size, dtype=np.float64)
    start, stop = _computed_span(size, min_lag, max_lag)
    result[start:stop] = full[start:stop]
    return result
