"""Shared fixtures for reattempt tests."""

from __future__ import annotations

import logging
from collections.abc import Iterator

import pytest

from reattempt import clear_settings_cache
from reattempt.foundation.testing import ManualClock

_ENV_VARS = (
    "REATTEMPT_LOG_LEVEL",
    "REATTEMPT_LOG_FORMAT",
    "REATTEMPT_BACKOFF_SEED",
    "REATTEMPT_BACKOFF_ENTROPY",
)


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Isolate every test from REATTEMPT_* variables and cached settings."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture(autouse=True)
def clean_logger() -> Iterator[None]:
    """Restore the reattempt logger after tests that configure it."""
    logger = logging.getLogger("reattempt")
    handlers, level = list(logger.handlers), logger.level
    yield
    logger.handlers[:] = handlers
    logger.setLevel(level)


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()
