"""
Clock - Source of the current time for auction phase checks.

The auction never stores whether it is open; it asks a clock for "now"
on every call and compares against the deadline. Production code uses
SystemClock, tests and simulations drive a ManualClock.
"""

import time
from typing import Protocol, runtime_checkable


@runtime_checkable
class Clock(Protocol):
    """Anything that can report the current Unix time in seconds."""

    def now(self) -> int:
        ...


class SystemClock:
    """Wall-clock time."""

    def now(self) -> int:
        return int(time.time())

    def __repr__(self) -> str:
        return "SystemClock()"


class ManualClock:
    """
    A clock that only moves when told to.

    Time never goes backwards: set() and advance() reject moves into the past.
    """

    def __init__(self, start: int = 0):
        if start < 0:
            raise ValueError(f"start must be non-negative, got {start}")
        self._now = start

    def now(self) -> int:
        return self._now

    def advance(self, seconds: int) -> int:
        """Move forward by `seconds` and return the new time."""
        if seconds < 0:
            raise ValueError(f"Cannot advance by negative seconds: {seconds}")
        self._now += seconds
        return self._now

    def set(self, timestamp: int) -> None:
        """Jump to an absolute time."""
        if timestamp < self._now:
            raise ValueError(f"Cannot move clock back from {self._now} to {timestamp}")
        self._now = timestamp

    def __repr__(self) -> str:
        return f"ManualClock(now={self._now})"
