"""reattempt - composable retry policies for asynchronous tasks.

Give a task and a list of policies; the task is re-attempted after each
failure until it succeeds or any one policy decides to stop. The caller then
gets the error from the last real attempt, never a synthetic one.

Quick Start:
    >>> from reattempt import Task, with_policies, max_duration, exponential_backoff
    >>>
    >>> task = Task.attempt(fetch_quote)          # exceptions become Err values
    >>> resilient = with_policies(
    ...     [max_duration(7000), exponential_backoff(500, 3000)],
    ...     task,
    ... )
    >>> outcome = await resilient.run()
    >>> outcome.unwrap()

Builder:
    >>> resilient = start_builder(task).constant_interval(250).max_retries(3).build()

Decorator (for functions that raise):
    >>> @retry(max_retries(3), constant_interval(100))
    ... async def fetch_quote() -> Quote: ...

Custom policies implement ``async decide(ctx, error) -> Decision``, returning
``STOP`` or ``Continue(next_policy)``.
"""

from __future__ import annotations

__version__ = "0.1.0"

from .foundation.config import ReattemptSettings, clear_settings_cache, get_settings
from .foundation.errors import ReattemptError, TaskFailed
from .monads import Err, Ok, Result
from .runtime import Clock, SystemClock, Task, system_clock
from .runtime.observability import configure_logging
from .runtime.retry import (
    STOP,
    ConstantInterval,
    Continue,
    Decision,
    ExponentialBackoff,
    JitterSeed,
    MaxDuration,
    MaxRetries,
    Policy,
    RetryBuilder,
    RetryContext,
    RetryIf,
    Stop,
    constant_interval,
    entropy_seed,
    exponential_backoff,
    finalize,
    max_duration,
    max_retries,
    retry,
    retry_if,
    retrying,
    start_builder,
    with_constant_interval,
    with_exponential_backoff,
    with_max_duration,
    with_max_retries,
    with_policies,
    with_policy,
)

__all__ = [
    "__version__",
    # Outcomes
    "Result", "Ok", "Err",
    # Task primitive
    "Task", "Clock", "SystemClock", "system_clock",
    # Policies
    "Policy", "Decision", "Stop", "Continue", "STOP", "RetryContext",
    "MaxRetries", "MaxDuration", "ConstantInterval", "ExponentialBackoff", "RetryIf", "JitterSeed",
    "max_retries", "max_duration", "constant_interval", "exponential_backoff", "retry_if", "entropy_seed",
    # Engine
    "with_policies", "retrying", "retry",
    # Builder
    "RetryBuilder", "start_builder", "with_policy", "with_max_retries", "with_max_duration",
    "with_constant_interval", "with_exponential_backoff", "finalize",
    # Errors
    "ReattemptError", "TaskFailed",
    # Config & logging
    "ReattemptSettings", "get_settings", "clear_settings_cache", "configure_logging",
]
