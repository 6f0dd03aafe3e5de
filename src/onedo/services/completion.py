"""Completion queries and toggles for a single habit."""

from __future__ import annotations

from dataclasses import replace
from datetime import date, tzinfo

from ..models.habit import HabitRecord
from .calendar import DayLike, to_day


def is_completed_on(record: HabitRecord, when: DayLike, *, tz: tzinfo | None = None) -> bool:
    """True when the habit was marked done on the calendar day of ``when``."""

    return to_day(when, tz) in record.completion_dates


def set_completed(
    record: HabitRecord, when: DayLike, completed: bool, *, tz: tzinfo | None = None
) -> HabitRecord:
    """Return a copy of ``record`` with the day of ``when`` marked done or not done."""

    day = to_day(when, tz)
    if completed:
        dates = record.completion_dates | {day}
    else:
        dates = record.completion_dates - {day}
    if dates == record.completion_dates:
        return record
    return replace(record, completion_dates=frozenset(dates))


def toggle(record: HabitRecord, when: DayLike, *, tz: tzinfo | None = None) -> HabitRecord:
    """Flip the completion state of the day of ``when``."""

    return set_completed(record, when, not is_completed_on(record, when, tz=tz), tz=tz)


def completed_days_between(record: HabitRecord, start: date, end: date) -> list[date]:
    """Completed days within ``start``..``end`` inclusive, oldest first."""

    return sorted(d for d in record.completion_dates if start <= d <= end)
