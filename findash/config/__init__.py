"""Configuration package."""

from findash.config.settings import (
    AppSettings,
    EngineSettings,
    FeedSettings,
    Settings,
    StorageSettings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AppSettings",
    "EngineSettings",
    "FeedSettings",
    "Settings",
    "StorageSettings",
    "get_settings",
    "validate_all_settings",
]
