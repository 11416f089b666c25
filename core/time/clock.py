"""
POS Core Time — Till Clock
============================
Order, payment, ledger and activity timestamps all come from one
injected Clock. Nothing in the engines reads the wall clock itself,
so a settlement plan built under FixedClock is fully reproducible.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Protocol


class Clock(Protocol):

    def now_utc(self) -> datetime:
        ...  # pragma: no cover


class SystemClock:
    """Wall-clock time in UTC, used by the live till."""

    def now_utc(self) -> datetime:
        return datetime.now(timezone.utc)


class FixedClock:
    """
    Frozen time for tests; moves only when advanced.

        clock = FixedClock(datetime(2026, 3, 1, 8, 0, tzinfo=timezone.utc))
        clock.advance(minutes=5)
    """

    def __init__(self, fixed_dt: datetime) -> None:
        if fixed_dt.tzinfo is None:
            raise ValueError("FixedClock requires timezone-aware datetime.")
        self._now = fixed_dt.astimezone(timezone.utc)

    def now_utc(self) -> datetime:
        return self._now

    def advance(self, **delta) -> None:
        self._now = self._now + timedelta(**delta)
