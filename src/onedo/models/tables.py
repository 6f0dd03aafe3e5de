"""SQLModel tables backing the habit repository."""

from __future__ import annotations

from datetime import date, datetime, time
from typing import ClassVar, Optional

from sqlmodel import Field, SQLModel


class HabitRow(SQLModel, table=True):
    """Persisted habit definition; ``position`` is the user's manual order."""

    __tablename__: ClassVar[str] = "habit"

    id: str = Field(primary_key=True, max_length=64)
    name: str = Field(default="", nullable=False)
    recurrence: str = Field(default="daily", max_length=16, nullable=False)
    active_weekdays: str = Field(default="", max_length=16)  # comma-separated 1..7
    position: int = Field(default=0, nullable=False, index=True)
    created_at: datetime = Field(nullable=False)

    reminder_enabled: bool = Field(default=False, nullable=False)
    reminder_time: Optional[time] = Field(default=None)
    reminder_days: str = Field(default="", max_length=16)

    goal_type: str = Field(default="none", max_length=16, nullable=False)
    goal_target: Optional[float] = Field(default=None)
    goal_unit: Optional[str] = Field(default=None, max_length=32)

    icon_symbol: Optional[str] = Field(default=None, max_length=64)
    icon_color: Optional[str] = Field(default=None, max_length=16)


class HabitCompletionRow(SQLModel, table=True):
    """A calendar day on which a habit was marked done."""

    __tablename__: ClassVar[str] = "habit_completion"

    habit_id: str = Field(foreign_key="habit.id", primary_key=True, max_length=64)
    occurred_on: date = Field(primary_key=True, index=True)
