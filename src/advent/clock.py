"""Clock and daily trigger abstractions.

Everything that stamps or schedules goes through a Clock so the sweep
and the response-time math can run against a frozen time in tests.
"""

from __future__ import annotations

from datetime import datetime, time, timedelta, timezone
from typing import Protocol


class Clock(Protocol):
    def now(self) -> datetime: ...


class SystemClock:
    """Wall-clock UTC time."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


def ensure_utc(dt: datetime) -> datetime:
    """Attach UTC to naive datetimes (SQLite drops tzinfo on the way back)."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


class DailyTrigger:
    """Fixed wall-clock trigger, once per day at hour:minute UTC."""

    def __init__(self, hour: int, minute: int = 0) -> None:
        if not 0 <= hour <= 23 or not 0 <= minute <= 59:
            msg = f"Invalid trigger time {hour:02d}:{minute:02d}"
            raise ValueError(msg)
        self.hour = hour
        self.minute = minute

    def next_fire(self, after: datetime) -> datetime:
        """First fire time strictly after `after`."""
        after = ensure_utc(after)
        candidate = datetime.combine(after.date(), time(self.hour, self.minute), tzinfo=timezone.utc)
        if candidate <= after:
            candidate += timedelta(days=1)
        return candidate

    def seconds_until_next(self, now: datetime) -> float:
        return (self.next_fire(now) - ensure_utc(now)).total_seconds()

    def __repr__(self) -> str:
        return f"DailyTrigger({self.hour:02d}:{self.minute:02d} UTC)"
