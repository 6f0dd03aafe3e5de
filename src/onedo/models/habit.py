"""Habit entity and the value objects it is built from."""

from __future__ import annotations

import math
import uuid
from dataclasses import dataclass, field, replace
from datetime import date, datetime, time, timezone
from enum import Enum
from typing import Iterable, Optional

from ..services.calendar import to_day, validate_weekdays


class Recurrence(str, Enum):
    """Which calendar days a habit is due on."""

    DAILY = "daily"
    WEEKDAYS = "weekdays"
    WEEKENDS = "weekends"
    WEEKLY = "weekly"  # due on the habit's selected active weekdays


class GoalType(str, Enum):
    NONE = "none"
    COUNT = "count"
    DURATION = "duration"


def parse_goal_value(text: str | None) -> Optional[float]:
    """Parse a user-entered goal target; unusable text yields None instead of raising."""

    if text is None:
        return None
    cleaned = str(text).strip()
    if not cleaned:
        return None
    try:
        value = float(cleaned)
    except ValueError:
        return None
    if not math.isfinite(value):
        return None
    return value


@dataclass(frozen=True, slots=True)
class ReminderConfig:
    """When an external notification should fire for a habit."""

    enabled: bool = False
    time_of_day: Optional[time] = None
    days_of_week: frozenset[int] = frozenset()

    def __post_init__(self) -> None:
        object.__setattr__(self, "days_of_week", validate_weekdays(self.days_of_week))
        if self.time_of_day is not None:
            # Reminders are minute-granular
            object.__setattr__(
                self, "time_of_day", time(self.time_of_day.hour, self.time_of_day.minute)
            )

    @property
    def is_active(self) -> bool:
        return self.enabled and self.time_of_day is not None


@dataclass(frozen=True, slots=True)
class GoalConfig:
    """Optional numeric target attached to a habit."""

    type: GoalType = GoalType.NONE
    target_value: Optional[float] = None
    unit: Optional[str] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "type", GoalType(self.type))
        if self.target_value is not None:
            object.__setattr__(self, "target_value", float(self.target_value))

    @property
    def has_target(self) -> bool:
        """True when the goal can drive a progress series."""
        return (
            self.type is not GoalType.NONE
            and self.target_value is not None
            and self.target_value > 0
        )


@dataclass(frozen=True, slots=True)
class IconConfig:
    """Presentation hints; never interpreted by the engine."""

    symbol_id: Optional[str] = None
    color_hex: Optional[str] = None


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _completion_day(value: date | datetime) -> date:
    # The calendar zone is not known here; callers convert aware stamps with to_day(value, tz)
    if isinstance(value, datetime) and value.tzinfo is not None:
        raise ValueError(f"Completion days must be dates or naive datetimes, got aware {value.isoformat()}")
    return to_day(value)


@dataclass(slots=True)
class HabitRecord:
    """A user-defined habit plus its completion history.

    ``completion_dates`` is a set of calendar days, so a day can never be
    recorded twice. Aware timestamps are rejected; convert them with
    ``to_day(value, tz)`` in the calendar zone first. ``active_weekdays``
    drives due-ness for weekly habits; ``reminder.days_of_week`` only drives
    notifications.
    """

    id: str
    name: str
    recurrence: Recurrence = Recurrence.DAILY
    active_weekdays: frozenset[int] = frozenset()
    completion_dates: frozenset[date] = frozenset()
    reminder: ReminderConfig = field(default_factory=ReminderConfig)
    goal: GoalConfig = field(default_factory=GoalConfig)
    icon: IconConfig = field(default_factory=IconConfig)
    created_at: datetime = field(default_factory=_utcnow)

    def __post_init__(self) -> None:
        self.recurrence = Recurrence(self.recurrence)
        self.active_weekdays = validate_weekdays(self.active_weekdays)
        self.completion_dates = frozenset(_completion_day(d) for d in self.completion_dates)
        if self.created_at.tzinfo is None:
            # Naive timestamps are taken as UTC so creation order stays comparable
            self.created_at = self.created_at.replace(tzinfo=timezone.utc)

    @classmethod
    def create(
        cls,
        name: str,
        recurrence: Recurrence = Recurrence.DAILY,
        *,
        active_weekdays: Optional[Iterable[int]] = None,
        reminder: Optional[ReminderConfig] = None,
        goal: Optional[GoalConfig] = None,
        icon: Optional[IconConfig] = None,
        created_at: Optional[datetime] = None,
        habit_id: Optional[str] = None,
    ) -> "HabitRecord":
        """Mint a new habit with a fresh identifier and creation timestamp.

        For weekly habits, active days and reminder days seed each other when
        only one of them is given. After creation they are edited independently.
        """

        reminder = reminder or ReminderConfig()
        active = frozenset(active_weekdays) if active_weekdays is not None else None
        recurrence = Recurrence(recurrence)

        if recurrence is Recurrence.WEEKLY:
            if active is None:
                active = reminder.days_of_week
            if reminder.enabled and not reminder.days_of_week:
                reminder = replace(reminder, days_of_week=active)

        return cls(
            id=habit_id or str(uuid.uuid4()),
            name=name,
            recurrence=recurrence,
            active_weekdays=active or frozenset(),
            reminder=reminder,
            goal=goal or GoalConfig(),
            icon=icon or IconConfig(),
            created_at=created_at or _utcnow(),
        )
