"""Retry policies and the decision protocol they share.

After every failed attempt the engine asks each policy what to do next. A
policy answers with a Decision: ``Stop`` ends the sequence with the failed
attempt's error, ``Continue(next)`` keeps going with ``next`` standing in for
the policy in the following round. Policies are immutable values; evolving
one means returning a new instance, never mutating ``self``.

Built-in policies:
- MaxRetries: bounds the number of retries
- MaxDuration: bounds elapsed time since the sequence started
- ConstantInterval: waits a fixed delay before each retry
- RetryIf: stops on errors a predicate rejects

Example:
    >>> from reattempt import with_policies, max_retries, constant_interval
    >>> resilient = with_policies([max_retries(3), constant_interval(250)], task)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable, Generic, Protocol, TypeAlias, TypeVar, runtime_checkable

from pydantic import BaseModel, ConfigDict, NonNegativeFloat, NonNegativeInt

if TYPE_CHECKING:
    from reattempt.runtime.clock import Clock

E = TypeVar("E")
E_contra = TypeVar("E_contra", contravariant=True)


@dataclass(frozen=True, slots=True)
class RetryContext:
    """Facts about the running sequence handed to every policy evaluation.

    Attributes:
        start_ms: Clock reading taken once when the sequence began
        clock: Time source for reading the time and sleeping
        attempt: 1-based number of the attempt that just failed
    """

    start_ms: int
    clock: Clock
    attempt: int = 1

    def elapsed_ms(self) -> int:
        """Milliseconds since the sequence started."""
        return self.clock.now_ms() - self.start_ms


@dataclass(frozen=True, slots=True)
class Stop:
    """Terminate the sequence, surfacing the original error."""

    def __repr__(self) -> str:
        return "Stop"


@dataclass(frozen=True, slots=True)
class Continue:
    """Proceed to the next attempt with ``next`` replacing the current policy."""

    next: Policy


Decision: TypeAlias = Stop | Continue

STOP = Stop()


@runtime_checkable
class Policy(Protocol[E_contra]):
    """Decision procedure consulted after each failed attempt.

    Implementations must not mutate themselves. To carry state into the next
    round return ``Continue(new_instance)``; to keep the same state return
    ``Continue(self)``.
    """

    async def decide(self, ctx: RetryContext, error: E_contra) -> Decision:
        """Decide whether the sequence should continue after ``error``."""
        ...


# ─────────────────────────────────────────────────────────────────────────────
# Built-in Policies
# ─────────────────────────────────────────────────────────────────────────────


_FROZEN = ConfigDict(frozen=True, extra="forbid", validate_default=True)


class MaxRetries(BaseModel):
    """Allow at most ``remaining`` more retries.

    Each continuing round hands back a copy with one less retry in the
    budget. Never suspends.
    """

    model_config = _FROZEN

    remaining: NonNegativeInt

    async def decide(self, ctx: RetryContext, error: object) -> Decision:
        if self.remaining <= 0:
            return STOP
        return Continue(self.model_copy(update={"remaining": self.remaining - 1}))


class MaxDuration(BaseModel):
    """Stop once ``duration_ms`` or more has elapsed since the sequence began.

    Only bounds cumulative time; never sleeps itself.
    """

    model_config = _FROZEN

    duration_ms: NonNegativeInt

    async def decide(self, ctx: RetryContext, error: object) -> Decision:
        if ctx.elapsed_ms() >= self.duration_ms:
            return STOP
        return Continue(self)


class ConstantInterval(BaseModel):
    """Wait ``delay_ms`` before every retry. Never stops on its own."""

    model_config = _FROZEN

    delay_ms: NonNegativeFloat

    async def decide(self, ctx: RetryContext, error: object) -> Decision:
        await ctx.clock.sleep(self.delay_ms)
        return Continue(self)


class RetryIf(BaseModel, Generic[E]):
    """Stop as soon as an error fails ``predicate``.

    Lets callers give up early on errors that retrying cannot fix.

    Example:
        >>> retry_if(lambda e: e.code in {"TIMEOUT", "RATE_LIMITED"})
    """

    model_config = ConfigDict(frozen=True, extra="forbid", arbitrary_types_allowed=True)

    predicate: Callable[[E], bool]

    async def decide(self, ctx: RetryContext, error: E) -> Decision:
        return Continue(self) if self.predicate(error) else STOP


# ─────────────────────────────────────────────────────────────────────────────
# Factories
# ─────────────────────────────────────────────────────────────────────────────


def max_retries(n: int) -> MaxRetries:
    """Policy allowing ``n`` retries, i.e. ``n + 1`` attempts in total."""
    return MaxRetries(remaining=n)


def max_duration(ms: int) -> MaxDuration:
    """Policy stopping once ``ms`` milliseconds have elapsed."""
    return MaxDuration(duration_ms=ms)


def constant_interval(ms: float) -> ConstantInterval:
    """Policy sleeping ``ms`` milliseconds before each retry."""
    return ConstantInterval(delay_ms=ms)


def retry_if(predicate: Callable[[E], bool]) -> RetryIf[E]:
    """Policy continuing only while ``predicate(error)`` holds."""
    return RetryIf(predicate=predicate)
