"""Foundation layer: errors and configuration shared by every iterkit module."""

from .config import IterkitSettings, LoggingSettings, clear_settings_cache, get_settings
from .errors import ConstructionError, ErrorCode, IterError, IterException

__all__ = [
    "ConstructionError", "ErrorCode", "IterError", "IterException",
    "IterkitSettings", "LoggingSettings", "clear_settings_cache", "get_settings",
]
