"""Tests for the composition engine running tasks under retry policies."""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass, field

import pytest

from reattempt import (
    STOP,
    Continue,
    Decision,
    Err,
    Ok,
    Result,
    RetryContext,
    Task,
    constant_interval,
    exponential_backoff,
    max_duration,
    max_retries,
    retry_if,
    retrying,
    with_policies,
)
from reattempt.foundation.testing import FlakyTask, ManualClock


# ─────────────────────────────────────────────────────────────────────────────
# Recording Policies
# ─────────────────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class AlwaysStop:
    async def decide(self, ctx: RetryContext, error: object) -> Decision:
        return STOP


@dataclass(frozen=True)
class Recorder:
    """Continues unconditionally, logging each evaluation into a shared list."""

    name: str
    log: list[str] = field(default_factory=list, compare=False)

    async def decide(self, ctx: RetryContext, error: object) -> Decision:
        self.log.append(self.name)
        return Continue(self)


@dataclass(frozen=True)
class ContextRecorder:
    seen: list[RetryContext] = field(default_factory=list, compare=False)

    async def decide(self, ctx: RetryContext, error: object) -> Decision:
        self.seen.append(ctx)
        return Continue(self)


@dataclass(frozen=True)
class Undecided:
    """Answers neither Stop nor Continue."""

    async def decide(self, ctx: RetryContext, error: object) -> object:
        return None


class Enough(Exception):
    """Raised by a task to end an otherwise unbounded test sequence."""


# ═════════════════════════════════════════════════════════════════════════════
# Bounding Policies
# ═════════════════════════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_max_retries_attempts_n_plus_one_times(clock: ManualClock) -> None:
    flaky = FlakyTask()
    outcome = await with_policies([max_retries(3)], flaky.task, clock=clock).run()

    flaky.assert_attempts(4)
    assert outcome.unwrap_err() == "boom-4"


@pytest.mark.asyncio
async def test_max_retries_zero_attempts_once(clock: ManualClock) -> None:
    flaky = FlakyTask()
    outcome = await with_policies([max_retries(0)], flaky.task, clock=clock).run()

    flaky.assert_attempts(1)
    assert outcome.unwrap_err() == "boom-1"


@pytest.mark.asyncio
async def test_max_duration_stops_once_elapsed(clock: ManualClock) -> None:
    # Each attempt costs 300ms: failures at 300, 600, 900 continue, 1200 stops
    flaky = FlakyTask(clock=clock, cost_ms=300)
    outcome = await with_policies([max_duration(1000)], flaky.task, clock=clock).run()

    flaky.assert_attempts(4)
    assert outcome.unwrap_err() == "boom-4"
    assert [a.at_ms for a in flaky.attempts] == [300, 600, 900, 1200]


@pytest.mark.asyncio
async def test_max_duration_zero_stops_on_first_failure(clock: ManualClock) -> None:
    flaky = FlakyTask()
    outcome = await with_policies([max_duration(0)], flaky.task, clock=clock).run()

    flaky.assert_attempts(1)
    assert outcome.is_err()


@pytest.mark.asyncio
async def test_start_time_is_read_once_per_run(clock: ManualClock) -> None:
    clock.advance(5000)
    recorder = ContextRecorder()
    flaky = FlakyTask(failures=3, clock=clock, cost_ms=100)
    await with_policies([recorder], flaky.task, clock=clock).run()

    assert [c.start_ms for c in recorder.seen] == [5000, 5000, 5000]
    assert [c.attempt for c in recorder.seen] == [1, 2, 3]


# ═════════════════════════════════════════════════════════════════════════════
# Delay Policies
# ═════════════════════════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_constant_interval_alone_retries_indefinitely(clock: ManualClock) -> None:
    calls = 0

    async def attempt() -> Result[str, str]:
        nonlocal calls
        calls += 1
        if calls >= 50:
            raise Enough
        return Err("nope")

    with pytest.raises(Enough):
        await with_policies([constant_interval(40)], Task(attempt), clock=clock).run()

    assert calls == 50
    assert clock.sleeps == [40.0] * 49


@pytest.mark.asyncio
async def test_exponential_backoff_schedule(clock: ManualClock) -> None:
    flaky = FlakyTask()
    outcome = await with_policies(
        [max_retries(6), exponential_backoff(500, 3000)], flaky.task, clock=clock
    ).run()

    expected, policy = [], exponential_backoff(500, 3000)
    for _ in range(6):
        expected.append(policy.interval)
        policy = policy.advance()

    flaky.assert_attempts(7)
    assert outcome.unwrap_err() == "boom-7"
    assert clock.sleeps == expected
    assert clock.sleeps[0] == 500
    assert max(clock.sleeps) <= 3000


@pytest.mark.asyncio
async def test_backoff_runs_are_deterministic() -> None:
    first, second = ManualClock(), ManualClock()
    await with_policies([max_retries(8), exponential_backoff(100, 5000)], FlakyTask().task, clock=first).run()
    await with_policies([max_retries(8), exponential_backoff(100, 5000)], FlakyTask().task, clock=second).run()

    assert first.sleeps == second.sleeps
    assert len(first.sleeps) == 8


# ═════════════════════════════════════════════════════════════════════════════
# Round Semantics
# ═════════════════════════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_stop_skips_later_policies(clock: ManualClock) -> None:
    recorder = Recorder("b")
    flaky = FlakyTask()
    outcome = await with_policies([AlwaysStop(), recorder], flaky.task, clock=clock).run()

    assert recorder.log == []
    assert outcome.unwrap_err() == "boom-1"
    flaky.assert_attempts(1)


@pytest.mark.asyncio
async def test_stop_skips_later_delays(clock: ManualClock) -> None:
    await with_policies([max_retries(0), constant_interval(100)], FlakyTask().task, clock=clock).run()
    assert clock.sleeps == []


@pytest.mark.asyncio
async def test_policies_evaluated_in_list_order(clock: ManualClock) -> None:
    log: list[str] = []
    policies = [Recorder("a", log), Recorder("b", log), max_retries(2)]
    await with_policies(policies, FlakyTask().task, clock=clock).run()

    assert log == ["a", "b"] * 3


@pytest.mark.asyncio
async def test_delays_within_round_are_sequential(clock: ManualClock) -> None:
    """A bound after a delay sees the time that delay consumed."""
    flaky = FlakyTask()
    await with_policies([constant_interval(400), max_duration(1000)], flaky.task, clock=clock).run()

    # rounds after the failures at 0 and 400 continue; the one after 800 sleeps to 1200 and stops
    flaky.assert_attempts(3)
    assert clock.sleeps == [400.0, 400.0, 400.0]


@pytest.mark.asyncio
async def test_surfaces_last_attempt_error(clock: ManualClock) -> None:
    flaky = FlakyTask()
    outcome = await with_policies([max_retries(2), constant_interval(10)], flaky.task, clock=clock).run()

    assert flaky.errors == ["boom-1", "boom-2", "boom-3"]
    assert outcome.unwrap_err() == flaky.errors[-1]


@pytest.mark.asyncio
async def test_retry_if_gives_up_on_rejected_error(clock: ManualClock) -> None:
    flaky = FlakyTask()
    outcome = await with_policies(
        [retry_if(lambda e: e != "boom-2"), max_retries(10)], flaky.task, clock=clock
    ).run()

    flaky.assert_attempts(2)
    assert outcome.unwrap_err() == "boom-2"


@pytest.mark.asyncio
async def test_unknown_decision_is_rejected(clock: ManualClock) -> None:
    flaky = FlakyTask()
    with pytest.raises(TypeError, match="Undecided"):
        await with_policies([Undecided()], flaky.task, clock=clock).run()

    flaky.assert_attempts(1)


# ═════════════════════════════════════════════════════════════════════════════
# Success Path
# ═════════════════════════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_success_after_one_failure(clock: ManualClock) -> None:
    flaky = FlakyTask(failures=1, value="payload")
    outcome = await with_policies([max_retries(3), constant_interval(100)], flaky.task, clock=clock).run()

    assert outcome == Ok("payload")
    flaky.assert_attempts(2)
    assert clock.sleeps == [100.0]


@pytest.mark.asyncio
async def test_immediate_success_consults_no_policy(clock: ManualClock) -> None:
    recorder = Recorder("p")
    outcome = await with_policies([recorder], FlakyTask(failures=0).task, clock=clock).run()

    assert outcome == Ok("done")
    assert recorder.log == []


@pytest.mark.asyncio
async def test_empty_policy_list_retries_until_success(clock: ManualClock) -> None:
    flaky = FlakyTask(failures=3)
    assert await with_policies([], flaky.task, clock=clock).run() == Ok("done")
    flaky.assert_attempts(4)


# ═════════════════════════════════════════════════════════════════════════════
# Independence & Cancellation
# ═════════════════════════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_each_run_is_an_independent_sequence(clock: ManualClock) -> None:
    flaky = FlakyTask()
    composite = with_policies([max_retries(2), constant_interval(50)], flaky.task, clock=clock)

    await composite.run()
    await composite.run()

    flaky.assert_attempts(6)
    assert clock.sleeps == [50.0] * 4


@pytest.mark.asyncio
async def test_concurrent_sequences_do_not_interact() -> None:
    shared = [max_retries(4), exponential_backoff(100, 1000)]
    clock_a, clock_b = ManualClock(), ManualClock()
    flaky_a, flaky_b = FlakyTask(), FlakyTask(failures=2)

    a, b = await asyncio.gather(
        with_policies(shared, flaky_a.task, clock=clock_a).run(),
        with_policies(shared, flaky_b.task, clock=clock_b).run(),
    )

    assert a.unwrap_err() == "boom-5"
    assert b == Ok("done")
    assert len(clock_a.sleeps) == 4
    assert clock_b.sleeps == clock_a.sleeps[:2]


@pytest.mark.asyncio
async def test_task_exceptions_propagate_without_retry(clock: ManualClock) -> None:
    async def explode():
        raise RuntimeError("bug")

    with pytest.raises(RuntimeError):
        await with_policies([max_retries(5)], Task(explode), clock=clock).run()


@pytest.mark.asyncio
async def test_cancellation_reaches_pending_sleep() -> None:
    flaky = FlakyTask()
    running = asyncio.create_task(with_policies([constant_interval(10_000)], flaky.task).run())
    await asyncio.sleep(0.02)
    running.cancel()

    with pytest.raises(asyncio.CancelledError):
        await running
    flaky.assert_attempts(1)


def test_retrying_alias() -> None:
    assert retrying is with_policies


# ═════════════════════════════════════════════════════════════════════════════
# End-to-End
# ═════════════════════════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_duration_bounded_backoff_virtual_time(clock: ManualClock) -> None:
    flaky = FlakyTask()
    outcome = await with_policies(
        [max_duration(7000), exponential_backoff(500, 3000)], flaky.task, clock=clock
    ).run()

    assert outcome.is_err()
    assert clock.now_ms() >= 7000
    assert clock.now_ms() < 7000 + 3000
    assert clock.total_slept == clock.now


@pytest.mark.asyncio
async def test_duration_bounded_backoff_wall_clock() -> None:
    flaky = FlakyTask()
    started = time.monotonic()
    outcome = await with_policies([max_duration(70), exponential_backoff(5, 30)], flaky.task).run()
    elapsed = time.monotonic() - started

    assert outcome.is_err()
    assert elapsed >= 0.069
    assert elapsed < 1.0
