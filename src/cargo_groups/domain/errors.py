"""Errors raised by group resolution.

Both are configuration errors: they surface synchronously to the caller,
abort the whole resolution, and are never retried.
"""

from __future__ import annotations


class PatternError(ValueError):
    """A group pattern is not a valid glob."""

    def __init__(self, pattern: str, reason: str) -> None:
        self.pattern = pattern
        self.reason = reason
        super().__init__(f"Invalid group pattern {pattern!r}: {reason}")


class GroupNotFoundError(KeyError):
    """The requested group has no entry in the group mapping."""

    def __init__(self, group: str, available: list[str] | None = None) -> None:
        self.group = group
        self.available = sorted(available or [])
        super().__init__(group)

    def __str__(self) -> str:
        return f"Group {self.group} not found"
