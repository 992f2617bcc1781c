"""Randomized exponential backoff.

Each round the policy sleeps for its current base interval, then grows the
base for the next round using a jittered multiplier:

    min_window = current * (1 - RANDOMIZATION_FACTOR)
    max_window = current * (1 + RANDOMIZATION_FACTOR)
    candidate  = MULTIPLIER * (min_window + r * (max_window - min_window + 1))
    next       = min(candidate, max_interval)

``r`` is drawn uniformly from the policy's own generator state. The state is
an explicit value threaded from one policy instance to the next, so two
policies built with the same seed replay the same delays and no global random
state is touched.
"""

from __future__ import annotations

import random
import secrets
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Self

from pydantic import BaseModel, ConfigDict, InstanceOf, NonNegativeFloat

from reattempt.foundation.config import get_settings

from .policy import Continue

if TYPE_CHECKING:
    from .policy import Decision, RetryContext

RANDOMIZATION_FACTOR = 0.5
MULTIPLIER = 1.5


@dataclass(frozen=True, slots=True)
class JitterSeed:
    """Immutable snapshot of a Mersenne Twister generator.

    ``draw()`` returns a value together with the advanced snapshot and leaves
    the receiver untouched, so a seed can be replayed any number of times.
    """

    state: tuple[object, ...] = field(repr=False)

    @classmethod
    def of(cls, seed: int) -> Self:
        return cls(random.Random(seed).getstate())

    def draw(self) -> tuple[float, JitterSeed]:
        """Uniform value in ``[0, 1)`` and the generator state after drawing it."""
        rng = random.Random()
        rng.setstate(self.state)  # type: ignore[arg-type]
        r = rng.random()
        return r, JitterSeed(rng.getstate())


def entropy_seed() -> int:
    """Fresh seed from the OS entropy pool, for non-reproducible jitter."""
    return secrets.randbits(64)


def next_interval(current: float, r: float) -> float:
    """Jittered successor of ``current`` for a uniform draw ``r``."""
    min_window = current - RANDOMIZATION_FACTOR * current
    max_window = current + RANDOMIZATION_FACTOR * current
    return MULTIPLIER * (min_window + r * (max_window - min_window + 1))


class ExponentialBackoff(BaseModel):
    """Sleep an exponentially growing, jittered interval before each retry.

    Never stops on its own; pair it with MaxRetries or MaxDuration.

    Attributes:
        interval: Base delay in milliseconds slept this round
        max_interval: Upper bound for every later base delay (the first
            round always sleeps the initial interval, even above the bound)
        jitter: Generator state used to compute the next base delay
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
    )

    interval: NonNegativeFloat
    max_interval: NonNegativeFloat
    jitter: InstanceOf[JitterSeed]

    def advance(self) -> ExponentialBackoff:
        """Policy state for the following round."""
        r, jitter = self.jitter.draw()
        grown = min(next_interval(self.interval, r), self.max_interval)
        return self.model_copy(update={"interval": grown, "jitter": jitter})

    async def decide(self, ctx: RetryContext, error: object) -> Decision:
        evolved = self.advance()
        # The freshly computed interval only applies from the next round on
        await ctx.clock.sleep(self.interval)
        return Continue(evolved)


def exponential_backoff(
    interval: float,
    max_interval: float,
    *,
    seed: int | None = None,
) -> ExponentialBackoff:
    """Build a fresh backoff policy.

    Args:
        interval: Initial delay in milliseconds
        max_interval: Cap on the delay in milliseconds
        seed: Jitter seed. ``None`` uses the configured seed, which is a fixed
            constant unless REATTEMPT_BACKOFF_ENTROPY is enabled.
    """
    if seed is None:
        backoff = get_settings().backoff
        seed = entropy_seed() if backoff.entropy else backoff.seed
    return ExponentialBackoff(interval=interval, max_interval=max_interval, jitter=JitterSeed.of(seed))
