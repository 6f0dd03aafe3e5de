"""Fixed-window progress series for goal-bearing habits."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, tzinfo
from typing import Sequence

from ..models.habit import HabitRecord
from .calendar import DayLike, iter_days, to_day


@dataclass(frozen=True, slots=True)
class ProgressPoint:
    """One bar of a progress graph."""

    day: date
    value: float
    met_target: bool


def build_series(
    record: HabitRecord,
    window_days: int,
    reference: DayLike,
    *,
    tz: tzinfo | None = None,
) -> list[ProgressPoint]:
    """Return ``window_days`` points ending at ``reference``, oldest first.

    Only boolean completion is recorded per day, so a completed day is treated
    as having met the full target. Habits without a positive target yield an
    empty list.
    """

    goal = record.goal
    if not goal.has_target or window_days <= 0:
        return []

    target = goal.target_value
    points: list[ProgressPoint] = []
    for day in iter_days(to_day(reference, tz), window_days):
        value = target if day in record.completion_dates else 0.0
        points.append(ProgressPoint(day=day, value=value, met_target=value >= target))
    return points


def completion_rate(series: Sequence[ProgressPoint]) -> float:
    """Fraction of points in ``series`` that met their target."""

    if not series:
        return 0.0
    return sum(1 for point in series if point.met_target) / len(series)
