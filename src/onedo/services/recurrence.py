"""Due-date rules for habit recurrences."""

from __future__ import annotations

from datetime import tzinfo
from typing import AbstractSet

from ..models.habit import HabitRecord, Recurrence
from .calendar import WEEKDAYS, WEEKEND_DAYS, DayLike, weekday_number


def is_due(
    recurrence: Recurrence,
    reference: DayLike,
    weekly_days: AbstractSet[int] = frozenset(),
    *,
    tz: tzinfo | None = None,
) -> bool:
    """Return True when a habit with ``recurrence`` is due on ``reference``.

    ``weekly_days`` (1=Sunday .. 7=Saturday) is only consulted for weekly
    habits; an empty selection means the habit is never due.
    """

    recurrence = Recurrence(recurrence)
    if recurrence is Recurrence.DAILY:
        return True

    weekday = weekday_number(reference, tz)
    if recurrence is Recurrence.WEEKDAYS:
        return weekday in WEEKDAYS
    if recurrence is Recurrence.WEEKENDS:
        return weekday in WEEKEND_DAYS
    return weekday in weekly_days


def is_habit_due(record: HabitRecord, reference: DayLike, *, tz: tzinfo | None = None) -> bool:
    """Apply :func:`is_due` with the record's own schedule."""

    return is_due(record.recurrence, reference, record.active_weekdays, tz=tz)


def due_weekdays(recurrence: Recurrence, weekly_days: AbstractSet[int] = frozenset()) -> list[int]:
    """List the weekday numbers a recurrence is due on, ascending."""

    recurrence = Recurrence(recurrence)
    if recurrence is Recurrence.DAILY:
        return list(range(1, 8))
    if recurrence is Recurrence.WEEKDAYS:
        return sorted(WEEKDAYS)
    if recurrence is Recurrence.WEEKENDS:
        return sorted(WEEKEND_DAYS)
    return sorted(weekly_days)
