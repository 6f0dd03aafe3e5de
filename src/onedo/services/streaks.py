"""Streak calculations over a habit's completion history."""

from __future__ import annotations

from datetime import timedelta, tzinfo

from ..logging_config import get_logger
from ..models.habit import HabitRecord
from .calendar import DayLike, to_day
from .recurrence import is_habit_due

DEFAULT_MAX_LOOKBACK = 3650

logger = get_logger(__name__)


def current_streak(
    record: HabitRecord,
    today: DayLike,
    *,
    max_lookback: int = DEFAULT_MAX_LOOKBACK,
    tz: tzinfo | None = None,
) -> int:
    """Return the number of consecutive due-and-completed days ending at ``today``.

    ``today`` must itself be completed for a streak to exist; it counts even
    when it is not a due day. Walking backwards, days the habit is not due on
    are skipped without breaking the streak, and the first due day without a
    completion ends it. The walk never goes past the earliest completion or
    ``max_lookback`` days.
    """

    today = to_day(today, tz)
    completed = record.completion_dates
    if today not in completed:
        return 0

    streak = 1
    earliest = min(completed)
    cursor = today
    for _ in range(max_lookback):
        cursor -= timedelta(days=1)
        if cursor < earliest:
            break
        if not is_habit_due(record, cursor):
            continue
        if cursor not in completed:
            break
        streak += 1
    else:
        logger.debug(
            "Streak walk hit lookback limit",
            extra={"habit_id": record.id, "max_lookback": max_lookback, "streak": streak},
        )
    return streak


def longest_streak(record: HabitRecord, *, max_lookback: int = DEFAULT_MAX_LOOKBACK) -> int:
    """Return the longest run of due-and-completed days in the history.

    Uses the same skip rule as :func:`current_streak`; the scan covers at most
    ``max_lookback`` days before the latest completion.
    """

    completed = record.completion_dates
    if not completed:
        return 0

    latest = max(completed)
    cursor = max(min(completed), latest - timedelta(days=max_lookback))
    longest = 0
    run = 0
    while cursor <= latest:
        if is_habit_due(record, cursor):
            if cursor in completed:
                run += 1
                longest = max(longest, run)
            else:
                run = 0
        cursor += timedelta(days=1)
    return longest


def compute_streaks(
    record: HabitRecord,
    today: DayLike,
    *,
    max_lookback: int = DEFAULT_MAX_LOOKBACK,
    tz: tzinfo | None = None,
) -> tuple[int, int]:
    """Return (current_streak, longest_streak) for a habit."""

    current = current_streak(record, today, max_lookback=max_lookback, tz=tz)
    longest = longest_streak(record, max_lookback=max_lookback)
    return current, max(current, longest)


__all__ = ["DEFAULT_MAX_LOOKBACK", "compute_streaks", "current_streak", "longest_streak"]
