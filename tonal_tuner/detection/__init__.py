"""Signal-processing stages of the pitch detection pipeline."""

from .windowing import hann_window, apply_window, rms, gate
from .autocorrelation import lag_bounds, autocorrelate, autocorrelate_fft
from .peak_picker import pick_peak, refine_peak, estimate_frequency

__all__ = [
    "hann_window",
    "apply_window",
    "rms",
    "gate",
    "lag_bounds",
    "autocorrelate",
    "autocorrelate_fft",
    "pick_peak",
    "refine_peak",
    "estimate_frequency",
]
