"""Lazy, re-runnable asynchronous computations with value-typed failures.

A Task wraps a zero-argument coroutine function returning a Result. Nothing
runs until ``run()`` is awaited, and every ``run()`` executes the computation
afresh, which is what allows the retry engine to attempt the same task again.

Example:
    >>> async def fetch() -> Result[str, str]:
    ...     return Ok("payload")
    >>>
    >>> task = Task.from_async(fetch).map(str.upper)
    >>> await task.run()
    Ok('PAYLOAD')

Cancellation:
    Every suspension is a plain ``await``, so cancelling the asyncio task that
    awaits a composite cancels whichever sleep or sub-task is pending.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Generic, NoReturn, TypeVar

from reattempt.monads import Err, Ok, Result, sequence

from .clock import Clock, system_clock

if TYPE_CHECKING:
    from collections.abc import Awaitable, Generator, Iterable

T = TypeVar("T")
E = TypeVar("E")
U = TypeVar("U")
F = TypeVar("F")
X = TypeVar("X", bound=BaseException)


class Task(Generic[T, E]):
    """Deferred async computation that succeeds with T or fails with E.

    Tasks are immutable: combinators return new tasks and never touch the
    receiver, so a task may be shared between independent retry sequences.
    """

    __slots__ = ("_thunk",)

    def __init__(self, thunk: Callable[[], Awaitable[Result[T, E]]]) -> None:
        self._thunk = thunk

    # ─────────────────────────────────────────────────────────────────
    # Construction
    # ─────────────────────────────────────────────────────────────────

    @classmethod
    def succeed(cls, value: T) -> Task[T, E]:
        """Task that immediately succeeds with ``value``."""
        async def run() -> Result[T, E]:
            return Ok(value)
        return cls(run)

    @classmethod
    def fail(cls, error: E) -> Task[T, E]:
        """Task that immediately fails with ``error``."""
        async def run() -> Result[T, E]:
            return Err(error)
        return cls(run)

    @classmethod
    def from_async(cls, fn: Callable[[], Awaitable[Result[T, E]]]) -> Task[T, E]:
        """Wrap a coroutine function that already returns a Result."""
        return cls(fn)

    @classmethod
    def attempt(
        cls,
        fn: Callable[[], Awaitable[T]],
        *,
        catch: tuple[type[X], ...] = (Exception,),  # type: ignore[assignment]
    ) -> Task[T, X]:
        """Wrap a coroutine function that raises on failure.

        Exceptions matching ``catch`` become ``Err(exc)``. Anything else,
        including ``asyncio.CancelledError``, propagates.
        """
        async def run() -> Result[T, X]:
            try:
                return Ok(await fn())
            except catch as e:
                return Err(e)
        return cls(run)  # type: ignore[arg-type]

    @staticmethod
    def now(clock: Clock | None = None) -> Task[int, NoReturn]:
        """Task reading the current time in milliseconds."""
        async def run() -> Result[int, NoReturn]:
            return Ok((clock or system_clock()).now_ms())
        return Task(run)

    @staticmethod
    def sleep(ms: float, clock: Clock | None = None) -> Task[None, NoReturn]:
        """Task suspending for ``ms`` milliseconds without blocking the loop."""
        async def run() -> Result[None, NoReturn]:
            await (clock or system_clock()).sleep(ms)
            return Ok(None)
        return Task(run)

    @staticmethod
    def sequence(tasks: Iterable[Task[T, E]]) -> Task[list[T], E]:
        """Run tasks one after another in order, collecting their values.

        Stops at the first failure and surfaces it; tasks after the failing
        one are never started.
        """
        pending = tuple(tasks)

        async def run() -> Result[list[T], E]:
            outcomes: list[Result[T, E]] = []
            for task in pending:
                outcomes.append(await task.run())
                if outcomes[-1].is_err():
                    break
            return sequence(outcomes)
        return Task(run)

    # ─────────────────────────────────────────────────────────────────
    # Combinators
    # ─────────────────────────────────────────────────────────────────

    def map(self, f: Callable[[T], U]) -> Task[U, E]:
        """Transform the success value with a pure function."""
        async def run() -> Result[U, E]:
            return (await self.run()).map(f)
        return Task(run)

    def map_err(self, f: Callable[[E], F]) -> Task[T, F]:
        """Transform the error value with a pure function."""
        async def run() -> Result[T, F]:
            return (await self.run()).map_err(f)
        return Task(run)

    def flat_map(self, f: Callable[[T], Task[U, E]]) -> Task[U, E]:
        """Sequence a dependent task after this one; skipped on failure."""
        async def run() -> Result[U, E]:
            outcome = await self.run()
            if outcome.is_err():
                return Err(outcome.unwrap_err())
            return await f(outcome.unwrap()).run()
        return Task(run)

    def recover(self, f: Callable[[E], Task[T, F]]) -> Task[T, F]:
        """Substitute a recovery task when this one fails."""
        async def run() -> Result[T, F]:
            outcome = await self.run()
            if outcome.is_ok():
                return Ok(outcome.unwrap())
            return await f(outcome.unwrap_err()).run()
        return Task(run)

    # ─────────────────────────────────────────────────────────────────
    # Execution
    # ─────────────────────────────────────────────────────────────────

    async def run(self) -> Result[T, E]:
        """Execute the computation once and return its outcome."""
        return await self._thunk()

    async def run_or_raise(self) -> T:
        """Execute and return the value, raising the error on failure.

        Exception errors are raised as-is; other error values are wrapped
        in TaskFailed.
        """
        return (await self.run()).unwrap()

    def __await__(self) -> Generator[object, None, Result[T, E]]:
        return self.run().__await__()

    def __repr__(self) -> str:
        return f"Task({getattr(self._thunk, '__qualname__', self._thunk)!r})"
