"""Host-side logging setup for reattempt.

Library modules only create loggers under the ``reattempt`` namespace and
emit DEBUG records; they never attach handlers. Applications that want to
see those records call ``configure_logging()`` once at startup:

    >>> from reattempt.runtime.observability import configure_logging
    >>> configure_logging()                      # level/format from settings
    >>> configure_logging(level="DEBUG", format="json")

Formats:
    text: ``12:30:45.123 [DEBUG] reattempt.retry attempt 1 failed: ...``
    json: one orjson-encoded object per line, for log aggregation
"""

from __future__ import annotations

import logging
import sys
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Literal

import orjson

from reattempt.foundation.config import get_settings

if TYPE_CHECKING:
    from typing import TextIO

ROOT_LOGGER = "reattempt"

# Marks handlers installed here so reconfiguring replaces them
_HANDLER_ATTR = "_reattempt_handler"


class TextFormatter(logging.Formatter):
    """Human-readable single-line records."""

    def format(self, record: logging.LogRecord) -> str:
        ts = datetime.fromtimestamp(record.created, tz=UTC).strftime("%H:%M:%S.%f")[:-3]
        line = f"{ts} [{record.levelname}] {record.name} {record.getMessage()}"
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


class JsonFormatter(logging.Formatter):
    """JSON Lines records (Elasticsearch, Loki, Datadog, etc.)."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, object] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "event": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return orjson.dumps(payload, default=repr).decode()


def configure_logging(
    level: str | None = None,
    format: Literal["json", "text"] | None = None,  # noqa: A002 - matches settings field
    *,
    output: TextIO | None = None,
) -> logging.Logger:
    """Attach a single handler to the ``reattempt`` logger.

    Arguments left as ``None`` fall back to REATTEMPT_LOG_* settings. Calling
    again replaces the previously installed handler.
    """
    settings = get_settings().logging
    level = (level or settings.level).upper()
    levels = logging.getLevelNamesMapping()
    if level not in levels:
        raise ValueError(f"Unknown log level: {level}. Use one of {sorted(levels)}")
    match format or settings.format:
        case "json": formatter: logging.Formatter = JsonFormatter()
        case "text": formatter = TextFormatter()
        case other: raise ValueError(f"Unknown log format: {other}. Use 'text' or 'json'")

    logger = logging.getLogger(ROOT_LOGGER)
    for existing in [h for h in logger.handlers if getattr(h, _HANDLER_ATTR, False)]:
        logger.removeHandler(existing)

    handler = logging.StreamHandler(output or sys.stderr)
    handler.setFormatter(formatter)
    setattr(handler, _HANDLER_ATTR, True)
    logger.addHandler(handler)
    logger.setLevel(levels[level])
    return logger


def get_logger(name: str | None = None) -> logging.Logger:
    """Logger under the ``reattempt`` namespace."""
    return logging.getLogger(f"{ROOT_LOGGER}.{name}" if name else ROOT_LOGGER)
