"""Configuration management for isomill.

This module provides configuration management using Pydantic models.
Configuration can be provided via CLI arguments or defaults.

Key classes:
- GeometryConfig: Tolerances, circle resolution and partition settings
- MillConfig: Milling tool settings
- LoggingConfig: Logging settings
- IsomillSettings: Main application settings
"""

from isomill.config.settings import (
    DEFAULT_SCALE,
    GeometryConfig,
    IsomillSettings,
    LoggingConfig,
    MillConfig,
    get_default_settings,
)

__all__ = [
    "DEFAULT_SCALE",
    "GeometryConfig",
    "IsomillSettings",
    "LoggingConfig",
    "MillConfig",
    "get_default_settings",
]
