"""Autocorrelation peak selection with parabolic sub-sample refinement."""

from typing import Optional

import numpy as np

# Refined lags at or below this are treated as a division by zero
MIN_REFINED_LAG = 1e-6


def pick_peak(correlation: np.ndarray, min_lag: int, max_lag: int) -> Optional[int]:
    """Lag of the largest value in [min_lag, max_lag).

    The first lag wins ties. Returns None when the range is empty or the
    peak sits at lag 0 (no periodicity).
    """
    stop = min(max_lag, len(correlation))
    if min_lag >= stop:
        return None

    segment = correlation[min_lag:stop]
    if not np.any(segment > -np.inf):
        return None

    # NaN never wins the comparison
    peak_lag = min_lag + int(np.argmax(np.where(np.isnan(segment), -np.inf, segment)))
    if peak_lag <= 0:
        return None
    return peak_lag


def refine_peak(correlation: np.ndarray, peak_lag: int) -> float:
    """Fit a parabola through the peak and its neighbours.

    Neighbours outside the array count as 0.
    """
    size = len(correlation)
    y1 = correlation[peak_lag - 1] if peak_lag - 1 >= 0 else 0.0
    y2 = correlation[peak_lag]
    y3 = correlation[peak_lag + 1] if peak_lag + 1 < size else 0.0

    denom = y1 - 2 * y2 + y3
    shift = 0.5 * (y1 - y3) / denom if denom != 0 else 0.0
    return float(peak_lag + shift)


def estimate_frequency(
    correlation: np.ndarray,
    sample_rate: float,
    min_lag: int,
    max_lag: int,
    lower_bound: float,
    upper_bound: float,
) -> Optional[float]:
    """Frequency of the autocorrelation peak, or None when there is no usable pitch.

    Estimates that are non-finite or fall outside [lower_bound, upper_bound]
    are rejected.
    """
    peak_lag = pick_peak(correlation, min_lag, max_lag)
    if peak_lag is None:
        return None

    true_lag = refine_peak(correlation, peak_lag)
    if not np.isfinite(true_lag) or true_lag <= MIN_REFINED_LAG:
        return None

    frequency = sample_rate / true_lag
    if not np.isfinite(frequency) or frequency < lower_bound or frequency > upper_bound:
        return None
    return float(frequency)
