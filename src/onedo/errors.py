"""Exception types raised by the habit engine and its collaborators."""

from __future__ import annotations


class OneDoError(Exception):
    """Base class for all OneDo errors."""


class HabitDataError(OneDoError, ValueError):
    """Persisted habit data could not be decoded."""


class HabitNotFoundError(OneDoError, LookupError):
    """No habit exists with the requested identifier."""

    def __init__(self, habit_id: str):
        super().__init__(f"Habit not found: {habit_id}")
        self.habit_id = habit_id
