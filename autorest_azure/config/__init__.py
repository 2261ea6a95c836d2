"""Configuration module for autorest-azure."""

from .settings import (
    ConfigurationError,
    HTTPSettings,
    LoggingSettings,
    PollingSettings,
    Settings,
    get_settings,
)


__all__ = [
    "ConfigurationError",
    "HTTPSettings",
    "LoggingSettings",
    "PollingSettings",
    "Settings",
    "get_settings",
]
