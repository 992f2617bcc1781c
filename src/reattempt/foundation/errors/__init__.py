"""Error types for reattempt.

- ReattemptError: Base for everything the library raises
- TaskFailed: Carries a non-exception error value out of an unwrapped failure
"""

from .errors import ReattemptError, TaskFailed, raise_error

__all__ = ["ReattemptError", "TaskFailed", "raise_error"]
