"""
Time sources for the practice engine.

Timestamps are integer epoch milliseconds, matching the ``lastSeen`` field of
persisted records.
"""

from __future__ import annotations

import time
from typing import Protocol


class Clock(Protocol):
    """Anything that can report the current time in epoch milliseconds."""

    def now(self) -> int: ...


class SystemClock:
    """Wall-clock time."""

    def now(self) -> int:
        return int(time.time() * 1000)


class ManualClock:
    """
    A clock that only moves when told to.

    Used to replay sessions deterministically and to test recency weighting.
    """

    def __init__(self, start_ms: int = 0):
        self._now = start_ms

    def now(self) -> int:
        return self._now

    def advance(self, seconds: float = 0.0, minutes: float = 0.0) -> int:
        """Move the clock forward and return the new time."""
        self._now += int((seconds + minutes * 60) * 1000)
        return self._now

    def set(self, epoch_ms: int) -> None:
        self._now = epoch_ms
