"""Testing utilities for code built on reattempt.

- ManualClock: Deterministic virtual clock for duration and delay assertions
- FlakyTask: Scripted task failing a set number of times, recording attempts
"""

from .clock import ManualClock
from .mock import Attempt, FlakyTask

__all__ = ["ManualClock", "FlakyTask", "Attempt"]
