"""Configuration validation utilities."""

from dataclasses import dataclass
from typing import Any

SUPPORTED_BACKENDS = ("sqlite", "memory")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class ValidationError:
    """Represents a configuration validation error."""
    field: str
    message: str
    value: Any


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class ConfigValidator:
    """Validates configuration parameters."""

    @staticmethod
    def validate_clock_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate clock parameters."""
        errors = []

        if "tick_interval_seconds" in params:
            value = params["tick_interval_seconds"]
            if not _is_number(value) or value <= 0:
                errors.append(ValidationError(
                    field="clock.tick_interval_seconds",
                    message="Must be a positive number",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_persistence_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate persistence parameters."""
        errors = []

        if "backend" in params:
            value = params["backend"]
            if value not in SUPPORTED_BACKENDS:
                errors.append(ValidationError(
                    field="persistence.backend",
                    message=f"Must be one of {', '.join(SUPPORTED_BACKENDS)}",
                    value=value
                ))

        if "db_path" in params:
            value = params["db_path"]
            if not isinstance(value, str) or not value:
                errors.append(ValidationError(
                    field="persistence.db_path",
                    message="Must be a non-empty string",
                    value=value
                ))

        keys = []
        for key_field in ("key_elapsed", "key_is_running", "key_laps"):
            if key_field not in params:
                continue
            value = params[key_field]
            if not isinstance(value, str) or not value:
                errors.append(ValidationError(
                    field=f"persistence.{key_field}",
                    message="Must be a non-empty string",
                    value=value
                ))
            else:
                keys.append(value)

        if len(keys) != len(set(keys)):
            errors.append(ValidationError(
                field="persistence",
                message="Storage keys must be distinct",
                value=keys
            ))

        if "tick_save_interval_seconds" in params:
            value = params["tick_save_interval_seconds"]
            if not _is_number(value):
                errors.append(ValidationError(
                    field="persistence.tick_save_interval_seconds",
                    message="Must be a number",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_lap_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate lap ledger parameters."""
        errors = []

        if "default_name_prefix" in params:
            value = params["default_name_prefix"]
            if not isinstance(value, str):
                errors.append(ValidationError(
                    field="laps.default_name_prefix",
                    message="Must be a string",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_logging_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate logging parameters."""
        errors = []

        if "level" in params:
            value = params["level"]
            if not isinstance(value, str) or value.upper() not in LOG_LEVELS:
                errors.append(ValidationError(
                    field="logging.level",
                    message=f"Must be one of {', '.join(LOG_LEVELS)}",
                    value=value
                ))

        if "format_json" in params:
            value = params["format_json"]
            if not isinstance(value, bool):
                errors.append(ValidationError(
                    field="logging.format_json",
                    message="Must be a boolean",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_config(config: dict[str, Any]) -> list[ValidationError]:
        """Validate complete configuration."""
        errors = []

        section_validators = {
            "clock": ConfigValidator.validate_clock_params,
            "persistence": ConfigValidator.validate_persistence_params,
            "laps": ConfigValidator.validate_lap_params,
            "logging": ConfigValidator.validate_logging_params,
        }

        for section, validate in section_validators.items():
            if section not in config:
                continue
            params = config[section]
            if not isinstance(params, dict):
                errors.append(ValidationError(
                    field=section,
                    message="Must be a mapping",
                    value=params
                ))
                continue
            errors.extend(validate(params))

        return errors
