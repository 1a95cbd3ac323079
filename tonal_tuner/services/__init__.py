"""Capture collaborators and the tuner session."""

from .tuner_session import TunerSession

__all__ = ["TunerSession"]
