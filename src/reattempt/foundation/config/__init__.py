"""Configuration loaded from REATTEMPT_* environment variables."""

from .settings import (
    DEFAULT_SEED,
    BackoffSettings,
    LoggingSettings,
    ReattemptSettings,
    clear_settings_cache,
    get_settings,
)

__all__ = [
    "DEFAULT_SEED",
    "BackoffSettings",
    "LoggingSettings",
    "ReattemptSettings",
    "get_settings",
    "clear_settings_cache",
]
