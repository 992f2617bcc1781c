"""Builder for assembling a policy list at the call site.

Purely a staging structure: ``finalize`` hands the accumulated policies and
the staged task to ``with_policies`` and adds nothing of its own. Each
``with_*`` step prepends, so the most recently added policy is consulted
first.

Example:
    >>> resilient = finalize(
    ...     with_max_retries(5, with_constant_interval(200, start_builder(task)))
    ... )
    >>> # or fluently
    >>> resilient = start_builder(task).constant_interval(200).max_retries(5).build()
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Generic, TypeVar

from .backoff import exponential_backoff
from .engine import with_policies
from .policy import constant_interval, max_duration, max_retries

if TYPE_CHECKING:
    from reattempt.runtime.clock import Clock
    from reattempt.runtime.task import Task

    from .policy import Policy

T = TypeVar("T")
E = TypeVar("E")


@dataclass(frozen=True, slots=True)
class RetryBuilder(Generic[T, E]):
    """Task paired with the policies not yet applied to it."""

    task: Task[T, E]
    policies: tuple[Policy[E], ...] = ()
    clock: Clock | None = None

    def with_policy(self, policy: Policy[E]) -> RetryBuilder[T, E]:
        return replace(self, policies=(policy, *self.policies))

    def max_retries(self, n: int) -> RetryBuilder[T, E]:
        return self.with_policy(max_retries(n))

    def max_duration(self, ms: int) -> RetryBuilder[T, E]:
        return self.with_policy(max_duration(ms))

    def constant_interval(self, ms: float) -> RetryBuilder[T, E]:
        return self.with_policy(constant_interval(ms))

    def exponential_backoff(
        self, interval: float, max_interval: float, *, seed: int | None = None
    ) -> RetryBuilder[T, E]:
        return self.with_policy(exponential_backoff(interval, max_interval, seed=seed))

    def using_clock(self, clock: Clock) -> RetryBuilder[T, E]:
        """Drive the finalized task with ``clock`` instead of the system clock."""
        return replace(self, clock=clock)

    def build(self) -> Task[T, E]:
        return with_policies(self.policies, self.task, clock=self.clock)


def start_builder(task: Task[T, E]) -> RetryBuilder[T, E]:
    """Stage ``task`` with an empty policy list."""
    return RetryBuilder(task)


def with_policy(policy: Policy[E], builder: RetryBuilder[T, E]) -> RetryBuilder[T, E]:
    return builder.with_policy(policy)


def with_max_retries(n: int, builder: RetryBuilder[T, E]) -> RetryBuilder[T, E]:
    return builder.max_retries(n)


def with_max_duration(ms: int, builder: RetryBuilder[T, E]) -> RetryBuilder[T, E]:
    return builder.max_duration(ms)


def with_constant_interval(ms: float, builder: RetryBuilder[T, E]) -> RetryBuilder[T, E]:
    return builder.constant_interval(ms)


def with_exponential_backoff(
    interval: float,
    max_interval: float,
    builder: RetryBuilder[T, E],
    *,
    seed: int | None = None,
) -> RetryBuilder[T, E]:
    return builder.exponential_backoff(interval, max_interval, seed=seed)


def finalize(builder: RetryBuilder[T, E]) -> Task[T, E]:
    """Apply the accumulated policies to the staged task."""
    return builder.build()
