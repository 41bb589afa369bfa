"""
Date and time helpers shared by the ledgers.

Notes:
- All datetimes handled by services are timezone-aware UTC.
- `to_utc` assumes naive datetimes are already in UTC and only attaches
  tzinfo (SQLite hands back naive values for timezone-aware columns).
- Window checks are pure functions of stored timestamps and an explicit
  ``now``; services obtain ``now`` from an injected ``Clock``.
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone
from typing import Optional, Protocol

UTC = timezone.utc


class Clock(Protocol):
    """Source of the current instant."""

    def now(self) -> datetime:
        ...


class SystemClock:
    """Wall clock in UTC."""

    def now(self) -> datetime:
        return datetime.now(UTC)


class FixedClock:
    """Clock frozen at a given instant; advanced explicitly."""

    def __init__(self, at: datetime):
        self._at = to_utc(at)

    def now(self) -> datetime:
        return self._at

    def set(self, at: datetime) -> None:
        self._at = to_utc(at)

    def advance(self, **kwargs) -> datetime:
        self._at = self._at + timedelta(**kwargs)
        return self._at


def to_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """Convert a datetime to UTC; naive values are taken as UTC."""
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def start_of_day(d: date) -> datetime:
    """Return 00:00 UTC of the given date."""
    return datetime.combine(d, time.min).replace(tzinfo=UTC)


def is_suspension_active(
    suspended_at: Optional[datetime],
    suspended_until: Optional[datetime],
    now: datetime,
) -> bool:
    """True while ``now`` lies inside [suspended_at, suspended_until)."""
    until = to_utc(suspended_until)
    if until is None:
        return False
    since = to_utc(suspended_at)
    if since is not None and now < since:
        return False
    return now < until


def suspension_blocks_day(
    suspended_at: Optional[datetime],
    suspended_until: Optional[datetime],
    day: date,
    now: datetime,
) -> bool:
    """An active suspension freezes every day up to and including its last day."""
    if not is_suspension_active(suspended_at, suspended_until, now):
        return False
    return day <= to_utc(suspended_until).date()


def meal_edit_deadline(meal_date: date, grace_hours: int) -> datetime:
    """Meals of a day can be edited until the end of that day plus the grace window."""
    return start_of_day(meal_date) + timedelta(days=1, hours=grace_hours)


def is_meal_edit_open(meal_date: date, grace_hours: int, now: datetime) -> bool:
    return now < meal_edit_deadline(meal_date, grace_hours)
