"""Composition engine running a task under a list of retry policies.

Algorithm for one run of the composite task:
1. Read the clock once; that reading is the start time for the whole run.
2. Attempt the task. Success is returned as-is.
3. On failure, evaluate every policy in list order against the error. Each
   evaluation may suspend (e.g. sleep) and fully resolves before the next
   one starts.
4. The first ``Stop`` ends the round: later policies are not evaluated and
   the composite fails with the attempt's own error.
5. If all continue, the list is replaced pointwise by the returned policies
   and the task is attempted again.

Policies are evaluated through ``Task.sequence``, where a ``Stop`` becomes a
failure carrying the original error, so the short-circuit is the sequencing
primitive's own fail-fast behaviour.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, TypeVar

from reattempt.monads import Err, Ok, Result
from reattempt.runtime.clock import system_clock
from reattempt.runtime.task import Task

from .policy import Continue, RetryContext, Stop

if TYPE_CHECKING:
    from collections.abc import Sequence

    from reattempt.runtime.clock import Clock

    from .policy import Policy

T = TypeVar("T")
E = TypeVar("E")

logger = logging.getLogger("reattempt.retry")


def _consult(policy: Policy[E], ctx: RetryContext, error: E) -> Task[Policy[E], E]:
    """Task yielding the policy's successor, or failing with ``error`` on Stop."""
    async def run() -> Result[Policy[E], E]:
        match await policy.decide(ctx, error):
            case Continue(next=successor):
                return Ok(successor)
            case Stop():
                logger.debug("retry stopped by %r after attempt %d", policy, ctx.attempt)
                return Err(error)
            case other:
                raise TypeError(f"{policy!r}.decide() returned {other!r}; expected Stop or Continue")
    return Task(run)


def round_of(policies: Sequence[Policy[E]], ctx: RetryContext, error: E) -> Task[list[Policy[E]], E]:
    """One round: consult each policy in order, stopping at the first Stop."""
    return Task.sequence(_consult(p, ctx, error) for p in policies)


def with_policies(
    policies: Sequence[Policy[E]],
    task: Task[T, E],
    *,
    clock: Clock | None = None,
) -> Task[T, E]:
    """Retry ``task`` on failure until it succeeds or a policy stops.

    The returned task is lazy like any other: each ``run()`` is an
    independent sequence with its own start time and its own copy of the
    policy list.

    Args:
        policies: Policies consulted after every failure, in order
        task: Task to attempt
        clock: Time source; defaults to the system clock

    Returns:
        Task with the first successful value, or the error of the last attempt

    Example:
        >>> resilient = with_policies(
        ...     [max_duration(7000), exponential_backoff(500, 3000)],
        ...     Task.attempt(fetch_quote),
        ... )
        >>> outcome = await resilient.run()
    """
    initial = tuple(policies)

    async def run() -> Result[T, E]:
        clk = clock or system_clock()
        start_ms = clk.now_ms()
        current: Sequence[Policy[E]] = initial
        attempt = 1
        while True:
            outcome = await task.run()
            if outcome.is_ok():
                if attempt > 1:
                    logger.debug("task succeeded after %d retries", attempt - 1)
                return outcome
            error = outcome.unwrap_err()
            logger.debug("attempt %d failed: %r", attempt, error)
            ctx = RetryContext(start_ms=start_ms, clock=clk, attempt=attempt)
            evolved = await round_of(current, ctx, error).run()
            if evolved.is_err():
                return Err(error)
            current = evolved.unwrap()
            attempt += 1

    return Task(run)


retrying = with_policies
