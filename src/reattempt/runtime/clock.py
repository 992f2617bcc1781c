"""Time source used by the retry engine and its policies.

Policies never call ``time`` or ``asyncio.sleep`` directly; they go through a
Clock so duration limits and delays can be driven by a virtual clock in tests.
"""

from __future__ import annotations

import asyncio
import time
from typing import Protocol, runtime_checkable


@runtime_checkable
class Clock(Protocol):
    """Monotonic millisecond clock with non-blocking sleep."""

    def now_ms(self) -> int:
        """Current time in integer milliseconds since a fixed epoch."""
        ...

    async def sleep(self, ms: float) -> None:
        """Suspend the calling coroutine for ``ms`` milliseconds."""
        ...


class SystemClock:
    """Clock backed by ``time.monotonic_ns`` and ``asyncio.sleep``."""

    __slots__ = ()

    def now_ms(self) -> int:
        return time.monotonic_ns() // 1_000_000

    async def sleep(self, ms: float) -> None:
        # Non-positive delays still yield once so cancellation is observed
        await asyncio.sleep(max(ms, 0.0) / 1000.0)

    def __repr__(self) -> str:
        return "SystemClock()"


_SYSTEM_CLOCK = SystemClock()


def system_clock() -> SystemClock:
    """Shared SystemClock instance."""
    return _SYSTEM_CLOCK
