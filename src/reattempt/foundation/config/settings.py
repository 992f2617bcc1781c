"""Environment-based configuration using pydantic-settings.

Provides type-safe, validated configuration from environment variables
with sensible defaults. Supports .env files and nested configuration.

Example:
    >>> from reattempt.foundation.config import get_settings
    >>> settings = get_settings()
    >>> settings.backoff.seed
    1618033988
    >>> settings.logging.level
    'WARNING'

    # Or with environment variables:
    # REATTEMPT_LOG_LEVEL=DEBUG
    # REATTEMPT_BACKOFF_ENTROPY=true
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, NonNegativeInt, computed_field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Literal seed every fresh backoff policy starts from unless told otherwise
DEFAULT_SEED = 1618033988


class LoggingSettings(BaseSettings):
    """Logging configuration used by ``configure_logging``."""

    model_config = SettingsConfigDict(
        env_prefix="REATTEMPT_LOG_",
        extra="ignore",
    )

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"
    format: Literal["json", "text"] = "text"

    @field_validator("level", mode="before")
    @classmethod
    def _normalize_level(cls, v: str) -> str:
        return v.upper() if isinstance(v, str) else v


class BackoffSettings(BaseSettings):
    """Jitter seeding for exponential backoff."""

    model_config = SettingsConfigDict(
        env_prefix="REATTEMPT_BACKOFF_",
        extra="ignore",
    )

    seed: NonNegativeInt = Field(default=DEFAULT_SEED, description="Seed for deterministic jitter")
    entropy: bool = Field(default=False, description="Seed each new backoff policy from OS entropy")

    @computed_field
    @property
    def deterministic(self) -> bool:
        """Whether fresh policies replay the same delay sequence."""
        return not self.entropy


class ReattemptSettings(BaseSettings):
    """Root settings for reattempt.

    Loads configuration from environment variables with REATTEMPT_ prefix.

    Example environment variables:
        REATTEMPT_LOG_LEVEL=DEBUG
        REATTEMPT_LOG_FORMAT=json
        REATTEMPT_BACKOFF_SEED=7
        REATTEMPT_BACKOFF_ENTROPY=true
    """

    model_config = SettingsConfigDict(
        env_prefix="REATTEMPT_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        extra="ignore",
        validate_default=True,
    )

    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    backoff: BackoffSettings = Field(default_factory=BackoffSettings)


@lru_cache(maxsize=1)
def get_settings() -> ReattemptSettings:
    """Get the global settings instance (cached)."""
    return ReattemptSettings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for testing).

    After calling this, the next get_settings() call will
    reload configuration from environment.
    """
    get_settings.cache_clear()
