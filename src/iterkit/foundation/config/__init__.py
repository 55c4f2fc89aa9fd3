"""Configuration management using pydantic-settings."""

from .settings import IterkitSettings, LoggingSettings, clear_settings_cache, get_settings

__all__ = [
    "IterkitSettings",
    "LoggingSettings",
    "clear_settings_cache",
    "get_settings",
]
