"""Runtime - task primitive, clock, retry engine and logging setup."""

from .clock import Clock, SystemClock, system_clock
from .task import Task

__all__ = ["Clock", "SystemClock", "system_clock", "Task"]
