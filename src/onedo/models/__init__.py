"""Habit domain model and persistence tables."""

from .habit import (
    GoalConfig,
    GoalType,
    HabitRecord,
    IconConfig,
    Recurrence,
    ReminderConfig,
    parse_goal_value,
)
from .tables import HabitCompletionRow, HabitRow

__all__ = [
    "GoalConfig",
    "GoalType",
    "HabitCompletionRow",
    "HabitRecord",
    "HabitRow",
    "IconConfig",
    "Recurrence",
    "ReminderConfig",
    "parse_goal_value",
]
