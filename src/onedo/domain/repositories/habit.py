"""Habit repository protocol."""

from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ...models.habit import HabitRecord


class HabitRepository(Protocol):
    """Repository for storing habit records in the user's order."""

    def get_by_id(self, habit_id: str) -> Optional[HabitRecord]:
        """Retrieve a habit by ID."""
        ...

    def list_all(self) -> list[HabitRecord]:
        """List all habits in their persisted order."""
        ...

    def create(self, record: HabitRecord) -> HabitRecord:
        """Append a new habit to the end of the order."""
        ...

    def update(self, record: HabitRecord) -> HabitRecord:
        """Replace a stored habit, including its completion days."""
        ...

    def delete(self, habit_id: str) -> None:
        """Delete a habit and its completions."""
        ...

    def reorder(self, ordered_ids: Sequence[str]) -> None:
        """Persist a new top-level order."""
        ...

    def get_completions(self, habit_id: str, start_date: date, end_date: date) -> list[date]:
        """Completed days for a habit within a date range, oldest first."""
        ...
