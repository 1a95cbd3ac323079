"""Exceptions raised by Tonal Tuner components."""


class ConfigurationError(ValueError):
    """Raised at setup time when detector or session settings are invalid."""
