"""Command-line interface for Tonal Tuner."""

from .main import main as tuner_cli_main

__all__ = ["tuner_cli_main"]
