"""Application configuration."""

from .settings import Environment, LogLevel, Settings, build_settings, settings_from_env

__all__ = [
    "Environment",
    "LogLevel",
    "Settings",
    "build_settings",
    "settings_from_env",
]
