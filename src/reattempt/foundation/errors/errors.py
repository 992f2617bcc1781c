"""Exceptions raised by reattempt itself.

Task failures are never exceptions: they travel as ``Err`` values and reach
the caller unchanged. The types here cover the few places where a value has
to be turned back into a raised error, such as ``Result.unwrap()``.
"""

from __future__ import annotations

from typing import Generic, NoReturn, Self, TypeVar

E = TypeVar("E")


class ReattemptError(Exception):
    """Base class for exceptions raised by reattempt."""


class TaskFailed(ReattemptError, Generic[E]):
    """Raised when a failed outcome is unwrapped and its error is not an exception.

    Carries the original error value untouched so callers can inspect it.

    Attributes:
        error: The error value from the most recent task attempt
    """

    __slots__ = ("error",)

    def __init__(self, error: E, message: str | None = None) -> None:
        self.error = error
        super().__init__(message or f"Task failed with error: {error!r}")

    @classmethod
    def wrap(cls, error: E, context: str = "") -> Self:
        """Create from an error value with an optional context prefix."""
        return cls(error, f"{context}: {error!r}" if context else None)


def raise_error(error: object, context: str = "") -> NoReturn:
    """Raise ``error`` directly if it is an exception, else wrapped in TaskFailed."""
    if isinstance(error, BaseException):
        raise error
    raise TaskFailed.wrap(error, context)
