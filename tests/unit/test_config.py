"""Unit tests for configuration management."""

import pytest
from pathlib import Path

from laptimer_app.config.defaults import get_default_config, PersistenceParams
from laptimer_app.config.loader import ConfigLoader
from laptimer_app.config.validation import ConfigValidator, ValidationError
from laptimer_app.errors import ConfigurationError


class TestDefaultConfig:
    """Test suite for default configuration."""

    def test_default_config_creation(self) -> None:
        """Defaults match the stored key names and the 10 ms tick."""
        config = get_default_config()
        assert config.clock.tick_interval_seconds == 0.01
        assert config.persistence.key_elapsed == "clock.elapsed"
        assert config.persistence.key_is_running == "clock.isRunning"
        assert config.persistence.key_laps == "clock.laps"
        assert config.laps.default_name_prefix == "Lap"
        assert config.logging.level == "INFO"

    def test_params_are_frozen(self) -> None:
        params = PersistenceParams()
        with pytest.raises(Exception):
            params.backend = "memory"  # type: ignore[misc]


class TestConfigLoader:
    """Test suite for configuration loader."""

    def write_config(self, tmp_path: Path, text: str) -> Path:
        path = tmp_path / "laptimer.yaml"
        path.write_text(text)
        return path

    def test_config_loader_creation(self) -> None:
        """The default path points at the bundled config file."""
        loader = ConfigLoader.create()
        assert loader.config_path.name == "laptimer.yaml"
        assert isinstance(loader.config_path, Path)

    def test_missing_file_uses_defaults(self, tmp_path: Path) -> None:
        loader = ConfigLoader.create(tmp_path / "absent.yaml")
        assert loader.load() == get_default_config()

    def test_empty_file_uses_defaults(self, tmp_path: Path) -> None:
        loader = ConfigLoader.create(self.write_config(tmp_path, ""))
        assert loader.load() == get_default_config()

    def test_file_overrides_defaults(self, tmp_path: Path) -> None:
        path = self.write_config(tmp_path, """
persistence:
  backend: memory
laps:
  default_name_prefix: Split
""")
        config = ConfigLoader.create(path).load()

        assert config.persistence.backend == "memory"
        assert config.laps.default_name_prefix == "Split"
        # Untouched values keep their defaults
        assert config.persistence.key_laps == "clock.laps"
        assert config.clock.tick_interval_seconds == 0.01

    def test_overrides_beat_file(self, tmp_path: Path) -> None:
        path = self.write_config(tmp_path, "persistence:\n  db_path: from-file.db\n")
        loader = ConfigLoader.create(path)

        config = loader.load({"persistence": {"db_path": "from-override.db"}})

        assert config.persistence.db_path == "from-override.db"

    def test_merge_config_with_overrides(self, tmp_path: Path) -> None:
        loader = ConfigLoader.create(tmp_path / "absent.yaml")

        merged = loader.merge_config({"clock": {"tick_interval_seconds": 0.05}})

        assert merged["clock"]["tick_interval_seconds"] == 0.05
        assert merged["persistence"]["backend"] == "sqlite"

    def test_unknown_fields_are_ignored(self, tmp_path: Path) -> None:
        path = self.write_config(tmp_path, "clock:\n  precision: nanoseconds\n")
        assert ConfigLoader.create(path).load().clock.tick_interval_seconds == 0.01

    def test_invalid_values_raise(self, tmp_path: Path) -> None:
        path = self.write_config(tmp_path, "clock:\n  tick_interval_seconds: 0\n")

        with pytest.raises(ConfigurationError) as exc_info:
            ConfigLoader.create(path).load()

        fields = [error.field for error in exc_info.value.errors]
        assert fields == ["clock.tick_interval_seconds"]

    def test_invalid_yaml_raises(self, tmp_path: Path) -> None:
        path = self.write_config(tmp_path, "clock: [unclosed\n")

        with pytest.raises(ConfigurationError, match="Invalid YAML"):
            ConfigLoader.create(path).load()

    def test_non_mapping_file_raises(self, tmp_path: Path) -> None:
        path = self.write_config(tmp_path, "- just\n- a list\n")

        with pytest.raises(ConfigurationError, match="must be a mapping"):
            ConfigLoader.create(path).load()

    def test_bundled_file_is_valid(self) -> None:
        """The shipped YAML file loads cleanly."""
        config = ConfigLoader.create().load()
        assert config.persistence.key_elapsed == "clock.elapsed"


class TestConfigValidator:
    """Test suite for configuration validation."""

    def test_valid_defaults(self) -> None:
        loader = ConfigLoader.create(Path("/nonexistent/laptimer.yaml"))
        assert ConfigValidator.validate_config(loader.merge_config()) == []

    @pytest.mark.parametrize("value", [0, -0.01, "fast", True])
    def test_tick_interval(self, value) -> None:
        errors = ConfigValidator.validate_clock_params({"tick_interval_seconds": value})
        assert len(errors) == 1
        assert errors[0].field == "clock.tick_interval_seconds"

    def test_unknown_backend(self) -> None:
        errors = ConfigValidator.validate_persistence_params({"backend": "redis"})
        assert errors == [ValidationError(
            field="persistence.backend",
            message="Must be one of sqlite, memory",
            value="redis"
        )]

    def test_empty_db_path(self) -> None:
        errors = ConfigValidator.validate_persistence_params({"db_path": ""})
        assert errors[0].field == "persistence.db_path"

    def test_duplicate_keys(self) -> None:
        errors = ConfigValidator.validate_persistence_params({
            "key_elapsed": "same",
            "key_is_running": "same",
            "key_laps": "clock.laps",
        })
        assert [error.message for error in errors] == ["Storage keys must be distinct"]

    def test_empty_key(self) -> None:
        errors = ConfigValidator.validate_persistence_params({"key_laps": ""})
        assert errors[0].field == "persistence.key_laps"

    def test_tick_save_interval_accepts_negative(self) -> None:
        """Negative intervals are valid and switch tick saves off."""
        assert ConfigValidator.validate_persistence_params({"tick_save_interval_seconds": -1}) == []

    def test_tick_save_interval_rejects_text(self) -> None:
        errors = ConfigValidator.validate_persistence_params({"tick_save_interval_seconds": "1s"})
        assert errors[0].field == "persistence.tick_save_interval_seconds"

    def test_name_prefix_type(self) -> None:
        errors = ConfigValidator.validate_lap_params({"default_name_prefix": 5})
        assert errors[0].field == "laps.default_name_prefix"

    def test_logging_level(self) -> None:
        assert ConfigValidator.validate_logging_params({"level": "debug"}) == []
        errors = ConfigValidator.validate_logging_params({"level": "LOUD"})
        assert errors[0].field == "logging.level"

    def test_logging_format_json_type(self) -> None:
        errors = ConfigValidator.validate_logging_params({"format_json": "yes"})
        assert errors[0].field == "logging.format_json"

    def test_section_must_be_mapping(self) -> None:
        errors = ConfigValidator.validate_config({"clock": 0.01})
        assert errors[0].field == "clock"
        assert errors[0].message == "Must be a mapping"
