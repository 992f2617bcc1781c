"""Retry decorator for coroutine functions that signal failure by raising.

Each call is wrapped in ``Task.attempt`` and run under ``with_policies``.
The caller gets either the return value or the exception raised by the most
recent attempt, re-raised as-is.

Example:
    >>> @retry(max_retries(3), exponential_backoff(100, 2000), catch=(ConnectionError,))
    ... async def fetch(url: str) -> bytes:
    ...     ...
"""

from __future__ import annotations

from functools import wraps
from typing import TYPE_CHECKING, Callable, ParamSpec, TypeVar

from reattempt.runtime.task import Task

from .engine import with_policies

if TYPE_CHECKING:
    from collections.abc import Awaitable

    from reattempt.runtime.clock import Clock

    from .policy import Policy

P = ParamSpec("P")
T = TypeVar("T")


def retry(
    *policies: Policy[BaseException],
    catch: tuple[type[BaseException], ...] = (Exception,),
    clock: Clock | None = None,
) -> Callable[[Callable[P, Awaitable[T]]], Callable[P, Awaitable[T]]]:
    """Retry the decorated coroutine function under ``policies``.

    Args:
        policies: Policies consulted after each caught exception, in order
        catch: Exception types treated as retryable failures; others propagate
            immediately
        clock: Time source; defaults to the system clock
    """
    def decorator(func: Callable[P, Awaitable[T]]) -> Callable[P, Awaitable[T]]:
        @wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            task = Task.attempt(lambda: func(*args, **kwargs), catch=catch)
            return await with_policies(policies, task, clock=clock).run_or_raise()
        return wrapper
    return decorator
