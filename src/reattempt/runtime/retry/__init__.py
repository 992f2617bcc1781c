"""Composable retry policies for asynchronous tasks.

A list of policies is consulted after every failed attempt; the task is
retried while all of them continue and given up on as soon as one stops.

Example:
    >>> from reattempt.runtime.retry import with_policies, max_duration, exponential_backoff
    >>> resilient = with_policies([max_duration(7000), exponential_backoff(500, 3000)], task)
    >>> outcome = await resilient.run()
"""

from .backoff import (
    MULTIPLIER,
    RANDOMIZATION_FACTOR,
    ExponentialBackoff,
    JitterSeed,
    entropy_seed,
    exponential_backoff,
    next_interval,
)
from .builder import (
    RetryBuilder,
    finalize,
    start_builder,
    with_constant_interval,
    with_exponential_backoff,
    with_max_duration,
    with_max_retries,
    with_policy,
)
from .decorator import retry
from .engine import retrying, round_of, with_policies
from .policy import (
    STOP,
    ConstantInterval,
    Continue,
    Decision,
    MaxDuration,
    MaxRetries,
    Policy,
    RetryContext,
    RetryIf,
    Stop,
    constant_interval,
    max_duration,
    max_retries,
    retry_if,
)

__all__ = [
    # Decision protocol
    "Policy",
    "Decision",
    "Stop",
    "Continue",
    "STOP",
    "RetryContext",
    # Built-in policies
    "MaxRetries",
    "MaxDuration",
    "ConstantInterval",
    "ExponentialBackoff",
    "RetryIf",
    "max_retries",
    "max_duration",
    "constant_interval",
    "exponential_backoff",
    "retry_if",
    # Jitter
    "JitterSeed",
    "entropy_seed",
    "next_interval",
    "RANDOMIZATION_FACTOR",
    "MULTIPLIER",
    # Engine
    "with_policies",
    "retrying",
    "round_of",
    "retry",
    # Builder
    "RetryBuilder",
    "start_builder",
    "with_policy",
    "with_max_retries",
    "with_max_duration",
    "with_constant_interval",
    "with_exponential_backoff",
    "finalize",
]
