"""
Session configuration: frozen defaults, YAML overrides and validation.
"""
from .defaults import CalibrationParams, GrassParams, SessionConfig, get_default_config
from .loader import ConfigLoader, load_session_config

__all__ = [
    "CalibrationParams",
    "GrassParams",
    "SessionConfig",
    "get_default_config",
    "ConfigLoader",
    "load_session_config",
]
