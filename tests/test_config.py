import json

import pytest

from tonal_tuner.core.config import ConfigManager, DetectorConfig
from tonal_tuner.core.errors import ConfigurationError
from tonal_tuner.reference import GUITAR_STANDARD


class TestDetectorConfig:
    def test_defaults(self):
        config = DetectorConfig()
        assert config.window_size == 8192
        assert config.silence_rms_threshold == 0.008
        assert config.search_min_freq == 70.0
        assert config.search_max_freq == 1000.0
        assert config.global_freq_lower_bound == 50.0
        assert config.global_freq_upper_bound == 1500.0
        assert config.reference_tuning == GUITAR_STANDARD
        assert config.use_fft is False
        assert config.in_tune_cents == 5.0

    def test_validate_accepts_defaults(self):
        DetectorConfig().validate(44100, match_reference=True)

    def test_replace_returns_a_new_config(self):
        config = DetectorConfig()
        changed = config.replace(window_size=4096)
        assert changed.window_size == 4096
        assert config.window_size == 8192

    def test_is_immutable(self):
        with pytest.raises(AttributeError):
            DetectorConfig().window_size = 10

    def test_dict_round_trip(self):
        values = DetectorConfig(window_size=2048, use_fft=True).to_dict()
        # Must survive JSON
        restored = DetectorConfig.from_dict(json.loads(json.dumps(values)))
        assert restored == DetectorConfig(window_size=2048, use_fft=True)

    def test_from_dict_ignores_unknown_keys(self):
        config = DetectorConfig.from_dict({"window_size": 1024, "colour": "blue"})
        assert config.window_size == 1024

    def test_from_dict_rejects_bad_reference_table(self):
        with pytest.raises(ConfigurationError):
            DetectorConfig.from_dict({"reference_tuning": [["E2", "low"]]})

    def test_configuration_error_is_a_value_error(self):
        with pytest.raises(ValueError):
            DetectorConfig(window_size=1).validate(44100)


class TestConfigManager:
    def test_creates_default_files(self, tmp_path):
        ConfigManager(str(tmp_path))
        assert (tmp_path / "pitch_detector.json").exists()
        assert (tmp_path / "audio_input.json").exists()

    def test_default_detector_config(self, tmp_path):
        manager = ConfigManager(str(tmp_path))
        assert manager.get_detector_config() == DetectorConfig()

    def test_updates_persist(self, tmp_path):
        manager = ConfigManager(str(tmp_path))
        assert manager.update_config("pitch_detector", {"window_size": 4096})

        reloaded = ConfigManager(str(tmp_path))
        assert reloaded.get_detector_config().window_size == 4096
        assert reloaded.get_config("audio_input")["sample_rate"] == 44100

    def test_missing_keys_are_filled_from_defaults(self, tmp_path):
        (tmp_path / "pitch_detector.json").write_text(json.dumps({"search_min_freq": 60.0}))
        config = ConfigManager(str(tmp_path)).get_detector_config()
        assert config.search_min_freq == 60.0
        assert config.window_size == 8192

    def test_corrupt_file_falls_back_to_defaults(self, tmp_path):
        (tmp_path / "pitch_detector.json").write_text("{not json")
        manager = ConfigManager(str(tmp_path))
        assert manager.get_detector_config() == DetectorConfig()

    def test_reset(self, tmp_path):
        manager = ConfigManager(str(tmp_path))
        manager.update_config("pitch_detector", {"window_size": 512})
        assert manager.reset_config("pitch_detector")
        assert manager.get_detector_config().window_size == 8192

    def test_unknown_config_name(self, tmp_path):
        manager = ConfigManager(str(tmp_path))
        assert not manager.update_config("display", {"theme": "dark"})
        assert not manager.reset_config("display")
        assert manager.get_config("display") == {}
