"""Configuration loader with 3-tier parameter precedence."""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

import yaml

from ..errors import ConfigurationError
from .defaults import CalibrationParams, GrassParams, SessionConfig, get_default_config
from .validation import ConfigValidator

CONFIG_FILENAME = "session.yaml"


@dataclass(frozen=True)
class ConfigLoader:
    """Manages configuration loading with 3-tier precedence."""

    config_dir: Path
    defaults: SessionConfig

    @classmethod
    def create(cls, config_dir: Optional[Path] = None) -> "ConfigLoader":
        """Create a ConfigLoader instance."""
        if config_dir is None:
            config_dir = Path(__file__).parent.parent.parent / "config"

        return cls(
            config_dir=Path(config_dir),
            defaults=get_default_config(),
        )

    def load_file_config(self) -> dict[str, Any]:
        """Load the raw YAML document, or an empty one when the file is absent."""
        config_file = self.config_dir / CONFIG_FILENAME

        if not config_file.exists():
            return {}

        with open(config_file, encoding="utf-8") as f:
            document = yaml.safe_load(f)

        return document or {}

    def load_profile_config(self, profile: str) -> dict[str, Any]:
        """Load device-profile-specific overrides from the YAML file."""
        return self.load_file_config().get("profiles", {}).get(profile, {}) or {}  # type: ignore[no-any-return]

    def merge_config(
        self,
        profile: str,
        overrides: Optional[dict[str, Any]] = None
    ) -> dict[str, Any]:
        """
        Merge configuration with 3-tier precedence.

        Priority order:
        1. Explicit overrides (highest priority)
        2. Device-profile section, layered over the file's global section
        3. Built-in defaults (lowest priority)
        """
        config = self._dataclass_to_dict(self.defaults)

        document = self.load_file_config()
        config = self._deep_merge(config, document.get("session", {}) or {})
        config = self._deep_merge(config, self.load_profile_config(profile))

        if overrides:
            config = self._deep_merge(config, overrides)

        return config

    def _dataclass_to_dict(self, obj: Any) -> dict[str, Any]:
        """Convert nested dataclasses to dictionary."""
        if hasattr(obj, '__dataclass_fields__'):
            result = {}
            for field_name in obj.__dataclass_fields__:
                value = getattr(obj, field_name)
                if hasattr(value, '__dataclass_fields__'):
                    result[field_name] = self._dataclass_to_dict(value)
                else:
                    result[field_name] = value
            return result
        return obj  # type: ignore[no-any-return]

    def _deep_merge(self, base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
        """Deep merge two dictionaries."""
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result


def build_session_config(config: dict[str, Any]) -> SessionConfig:
    """Build the frozen config tree from a merged dictionary."""
    known_calibration = CalibrationParams.__dataclass_fields__
    known_grass = GrassParams.__dataclass_fields__
    return SessionConfig(
        calibration=CalibrationParams(**{
            k: v for k, v in config.get("calibration", {}).items() if k in known_calibration
        }),
        grass=GrassParams(**{
            k: v for k, v in config.get("grass", {}).items() if k in known_grass
        }),
    )


def load_session_config(
    profile: str,
    overrides: Optional[dict[str, Any]] = None,
    config_dir: Optional[Path] = None
) -> SessionConfig:
    """
    Load, validate and freeze the configuration for one device profile.

    Args:
        profile: Device profile name ("touch" or "pointer")
        overrides: Highest-precedence overrides, shaped like the defaults
        config_dir: Directory holding session.yaml

    Returns:
        Validated SessionConfig

    Raises:
        ConfigurationError: If any merged value fails validation
    """
    loader = ConfigLoader.create(config_dir)
    merged = loader.merge_config(profile, overrides)

    errors = ConfigValidator.validate_config(merged)
    if errors:
        raise ConfigurationError(
            "; ".join(f"{err.field}: {err.message} (got: {err.value!r})" for err in errors),
            errors=errors,
        )

    return build_session_config(merged)
