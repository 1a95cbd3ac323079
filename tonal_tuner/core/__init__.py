"""Core components for the Tonal Tuner application."""

# Import interfaces for easier access
from .errors import ConfigurationError
from .interfaces import (
    IAudioProvider,
    IPitchDetector,
)

__all__ = ["ConfigurationError", "IAudioProvider", "IPitchDetector"]
