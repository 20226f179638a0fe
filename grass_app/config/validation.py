"""Configuration validation utilities."""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class ValidationError:
    """Represents a configuration validation error."""
    field: str
    message: str
    value: Any


def _is_positive_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class ConfigValidator:
    """Validates configuration parameters."""

    @staticmethod
    def validate_calibration_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate calibration parameters."""
        errors = []

        for name in ("tick_ms", "ticks_per_message"):
            if name in params and not _is_positive_int(params[name]):
                errors.append(ValidationError(
                    field=f"calibration.{name}",
                    message="Must be a positive integer",
                    value=params[name]
                ))

        # Jump threshold must leave room below 100 for the completion gate
        if "jump_threshold_pct" in params:
            value = params["jump_threshold_pct"]
            if not _is_number(value) or value <= 0 or value >= 100:
                errors.append(ValidationError(
                    field="calibration.jump_threshold_pct",
                    message="Must be a number between 0 and 100 (exclusive)",
                    value=value
                ))

        if "rewind_fraction" in params:
            value = params["rewind_fraction"]
            if not _is_number(value) or value < 0 or value >= 1:
                errors.append(ValidationError(
                    field="calibration.rewind_fraction",
                    message="Must be a number in [0, 1)",
                    value=value
                ))

        if "settle_delay_ms" in params:
            value = params["settle_delay_ms"]
            if not isinstance(value, int) or isinstance(value, bool) or value < 0:
                errors.append(ValidationError(
                    field="calibration.settle_delay_ms",
                    message="Must be a non-negative integer",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_grass_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate grass countdown parameters."""
        errors = []

        for name in ("tick_ms", "touch_duration_s", "pointer_duration_s",
                     "movement_window_ms"):
            if name in params and not _is_positive_int(params[name]):
                errors.append(ValidationError(
                    field=f"grass.{name}",
                    message="Must be a positive integer",
                    value=params[name]
                ))

        if "movement_threshold" in params:
            value = params["movement_threshold"]
            if not isinstance(value, int) or isinstance(value, bool) or value < 0:
                errors.append(ValidationError(
                    field="grass.movement_threshold",
                    message="Must be a non-negative integer",
                    value=value
                ))

        if "image_asset" in params and not isinstance(params["image_asset"], str):
            errors.append(ValidationError(
                field="grass.image_asset",
                message="Must be a string",
                value=params["image_asset"]
            ))

        return errors

    @staticmethod
    def validate_config(config: dict[str, Any]) -> list[ValidationError]:
        """Validate complete configuration."""
        errors = []

        if "calibration" in config:
            errors.extend(ConfigValidator.validate_calibration_params(config["calibration"]))

        if "grass" in config:
            errors.extend(ConfigValidator.validate_grass_params(config["grass"]))

        return errors
