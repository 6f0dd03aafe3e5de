"""Calendar-day helpers shared by the habit engine.

Every engine function works at day granularity. Callers may pass either a
``date`` or a ``datetime``; :func:`to_day` is the single place where a
timestamp is mapped onto a calendar day.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, tzinfo
from typing import Iterator

SUNDAY = 1
SATURDAY = 7
ALL_WEEKDAYS = frozenset(range(SUNDAY, SATURDAY + 1))
WEEKDAYS = frozenset(range(2, 7))  # Monday..Friday
WEEKEND_DAYS = frozenset({SUNDAY, SATURDAY})

DayLike = date | datetime


def to_day(value: DayLike, tz: tzinfo | None = None) -> date:
    """Return the calendar day ``value`` falls on.

    Aware datetimes are converted to ``tz`` first (the system local zone when
    ``tz`` is None); naive datetimes keep their wall-clock date.
    """

    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(tz)
        return value.date()
    if isinstance(value, date):
        return value
    raise TypeError(f"Expected date or datetime, got {type(value).__name__}")


def weekday_number(value: DayLike, tz: tzinfo | None = None) -> int:
    """Weekday in the 1=Sunday .. 7=Saturday numbering."""

    # date.isoweekday(): Monday=1 .. Sunday=7
    return to_day(value, tz).isoweekday() % 7 + 1


def validate_weekdays(days) -> frozenset[int]:
    """Coerce an iterable of weekday numbers, rejecting values outside 1..7."""

    result = frozenset(int(d) for d in days)
    invalid = sorted(result - ALL_WEEKDAYS)
    if invalid:
        raise ValueError(f"Weekday numbers must be within 1..7, got {invalid}")
    return result


def iter_days(end: date, count: int) -> Iterator[date]:
    """Yield ``count`` consecutive days ending at ``end``, oldest first."""

    for offset in range(count - 1, -1, -1):
        yield end - timedelta(days=offset)
