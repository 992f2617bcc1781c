"""Logging helpers for applications embedding reattempt."""

from .logging import JsonFormatter, TextFormatter, configure_logging, get_logger

__all__ = ["configure_logging", "get_logger", "JsonFormatter", "TextFormatter"]
