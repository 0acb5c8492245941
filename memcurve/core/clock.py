"""
Injectable time source.

Every scheduling component asks a clock for "now" instead of reading the
wall clock directly, so tests can pin time.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Protocol


class Clock(Protocol):
    """Anything that can report the current time."""

    def now(self) -> datetime: ...


class SystemClock:
    """Wall-clock time (naive, local)."""

    def now(self) -> datetime:
        return datetime.now()


class FixedClock:
    """
    Clock frozen at a given instant until moved explicitly.

    Usage:
        clock = FixedClock(datetime(2024, 1, 1, 9, 0))
        clock.advance(minutes=20)
    """

    def __init__(self, current: datetime):
        self.current = current

    def now(self) -> datetime:
        return self.current

    def set(self, current: datetime) -> None:
        self.current = current

    def advance(self, **delta: float) -> datetime:
        """Move forward by a timedelta given as keyword arguments."""
        self.current = self.current + timedelta(**delta)
        return self.current
