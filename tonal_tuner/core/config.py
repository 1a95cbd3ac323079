"""Configuration management for Tonal Tuner components."""

from dataclasses import asdict, dataclass, field, replace
from typing import Any, Dict, Optional
import json
import os
from pathlib import Path

from ..logger import get_logger
from ..reference import GUITAR_STANDARD, ReferenceTuning, parse_reference_table
from .errors import ConfigurationError

logger = get_logger(__name__)

# Capture settings used by the live and file front ends
DEFAULT_AUDIO_INPUT: Dict[str, Any] = {
    "device_id": None,
    "sample_rate": 44100,
    "chunk_size": 1024,
    "channels": 1,
    "hop_size": 1024,
}


@dataclass(frozen=True)
class DetectorConfig:
    """Settings for the pitch detection pipeline.

    Attributes:
        window_size: Number of samples analysed per tick (N)
        silence_rms_threshold: Windowed RMS below this is classified as silence
        search_min_freq: Lowest frequency searched, sets the largest lag
        search_max_freq: Highest frequency searched, sets the smallest lag
        global_freq_lower_bound: Refined estimates below this are rejected
        global_freq_upper_bound: Refined estimates above this are rejected
        reference_tuning: Ordered (name, frequency) table for reference matching
        use_fft: Compute the autocorrelation through an FFT instead of lag by lag
        in_tune_cents: Deviation below which a reading counts as in tune
    """

    window_size: int = 8192
    silence_rms_threshold: float = 0.008
    search_min_freq: float = 70.0
    search_max_freq: float = 1000.0
    global_freq_lower_bound: float = 50.0
    global_freq_upper_bound: float = 1500.0
    reference_tuning: ReferenceTuning = field(default=GUITAR_STANDARD)
    use_fft: bool = False
    in_tune_cents: float = 5.0

    def replace(self, **changes) -> "DetectorConfig":
        """Return a copy with the given fields changed."""
        return replace(self, **changes)

    def validate(self, sample_rate: float, match_reference: bool = False) -> None:
        """Check the settings against a sample rate.

        Raises:
            ConfigurationError: If any setting is unusable
        """
        if self.window_size <= 2:
            raise ConfigurationError(
                f"window_size must be greater than 2, got {self.window_size}"
            )
        if sample_rate <= 0:
            raise ConfigurationError(f"sample_rate must be positive, got {sample_rate}")
        if self.silence_rms_threshold < 0:
            raise ConfigurationError(
                f"silence_rms_threshold must not be negative, got {self.silence_rms_threshold}"
            )
        if self.search_min_freq <= 0 or self.search_max_freq <= 0:
            raise ConfigurationError(
                "search frequencies must be positive, got "
                f"{self.search_min_freq}-{self.search_max_freq}Hz"
            )
        if self.search_min_freq >= self.search_max_freq:
            raise ConfigurationError(
                f"search_min_freq ({self.search_min_freq}Hz) must be below "
                f"search_max_freq ({self.search_max_freq}Hz)"
            )
        if self.global_freq_lower_bound >= self.global_freq_upper_bound:
            raise ConfigurationError(
                f"global_freq_lower_bound ({self.global_freq_lower_bound}Hz) must be below "
                f"global_freq_upper_bound ({self.global_freq_upper_bound}Hz)"
            )
        if self.in_tune_cents < 0:
            raise ConfigurationError(
                f"in_tune_cents must not be negative, got {self.in_tune_cents}"
            )
        # Re-parse so malformed entries are caught even if built by hand
        table = parse_reference_table(self.reference_tuning)
        if match_reference and not table:
            raise ConfigurationError(
                "reference_tuning is empty but reference matching was requested"
            )

    @classmethod
    def from_dict(cls, values: Dict[str, Any]) -> "DetectorConfig":
        """Build a config from a plain dictionary (e.g., loaded from JSON).

        Unknown keys are ignored with a warning.
        """
        known = {name for name in cls.__dataclass_fields__}
        kwargs = {}
        for key, value in values.items():
            if key not in known:
                logger.warning(f"Ignoring unknown detector setting: {key}")
                continue
            kwargs[key] = value
        if "reference_tuning" in kwargs:
            kwargs["reference_tuning"] = parse_reference_table(kwargs["reference_tuning"])
        return cls(**kwargs)

    def to_dict(self) -> Dict[str, Any]:
        """Plain dictionary form, JSON serialisable."""
        values = asdict(self)
        values["reference_tuning"] = [
            [pitch.name, pitch.frequency] for pitch in self.reference_tuning
        ]
        return values


class ConfigManager:
    """Configuration manager for Tonal Tuner components."""

    def __init__(self, config_dir: Optional[str] = None):
        """Initialize the configuration manager.

        Args:
            config_dir: Directory to store configuration files, or None to use default
        """
        if config_dir is None:
            # Use ~/.config/tonal_tuner by default
            home = os.path.expanduser("~")
            config_dir = os.path.join(home, ".config", "tonal_tuner")

        self.config_dir = Path(config_dir)
        self.config_dir.mkdir(parents=True, exist_ok=True)

        # Default configurations
        self.default_configs = {
            "pitch_detector": DetectorConfig().to_dict(),
            "audio_input": dict(DEFAULT_AUDIO_INPUT),
        }

        # Load existing configurations or create default ones
        self.configs = {}
        for config_name, default_config in self.default_configs.items():
            self.configs[config_name] = self.load_config(config_name, default_config)

    def load_config(self, name: str, default_config: Dict[str, Any]) -> Dict[str, Any]:
        """Load configuration from file or create default.

        Args:
            name: Configuration name
            default_config: Default configuration to use if file doesn't exist

        Returns:
            Configuration dictionary
        """
        config_file = self.config_dir / f"{name}.json"

        if config_file.exists():
            try:
                with open(config_file, "r") as f:
                    config = json.load(f)
                logger.info(f"Loaded configuration from {config_file}")

                # Ensure all default keys are present
                for key, value in default_config.items():
                    if key not in config:
                        config[key] = value

                return config
            except (OSError, json.JSONDecodeError) as e:
                logger.error(f"Error loading configuration from {config_file}: {e}")
                return default_config.copy()
        else:
            # Create default configuration
            config = default_config.copy()
            self.save_config(name, config)
            return config

    def save_config(self, name: str, config: Dict[str, Any]) -> bool:
        """Save configuration to file.

        Args:
            name: Configuration name
            config: Configuration dictionary

        Returns:
            True if saved successfully, False otherwise
        """
        config_file = self.config_dir / f"{name}.json"

        try:
            with open(config_file, "w") as f:
                json.dump(config, f, indent=2)
            logger.info(f"Saved configuration to {config_file}")
            return True
        except OSError as e:
            logger.error(f"Error saving configuration to {config_file}: {e}")
            return False

    def get_config(self, name: str) -> Dict[str, Any]:
        """Get configuration by name.

        Args:
            name: Configuration name

        Returns:
            Configuration dictionary
        """
        return self.configs.get(name, {}).copy()

    def get_detector_config(self) -> DetectorConfig:
        """Build a DetectorConfig from the stored 'pitch_detector' settings.

        Raises:
            ConfigurationError: If the stored reference table is malformed
        """
        return DetectorConfig.from_dict(self.get_config("pitch_detector"))

    def update_config(self, name: str, updates: Dict[str, Any]) -> bool:
        """Update configuration and save to file.

        Args:
            name: Configuration name
            updates: Dictionary of updates to apply

        Returns:
            True if updated and saved successfully, False otherwise
        """
        if name not in self.configs:
            logger.error(f"Unknown configuration: {name}")
            return False

        # Update configuration
        self.configs[name].update(updates)

        # Save to file
        return self.save_config(name, self.configs[name])

    def reset_config(self, name: str) -> bool:
        """Reset configuration to default.

        Args:
            name: Configuration name

        Returns:
            True if reset successfully, False otherwise
        """
        if name not in self.default_configs:
            logger.error(f"Unknown configuration: {name}")
            return False

        # Reset to default
        self.configs[name] = self.default_configs[name].copy()

        # Save to file
        return self.save_config(name, self.configs[name])
