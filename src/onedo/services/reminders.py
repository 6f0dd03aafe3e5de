"""Translate a habit's reminder settings into notification trigger specs.

Delivery is someone else's job: these are the requests handed to a
notification scheduler, each with an identifier that can be cancelled on its
own.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..models.habit import HabitRecord, Recurrence
from .calendar import ALL_WEEKDAYS
from .recurrence import due_weekdays


@dataclass(frozen=True, slots=True)
class ReminderTrigger:
    """A repeating reminder at ``hour:minute``, daily when ``weekday`` is None."""

    trigger_id: str
    hour: int
    minute: int
    weekday: Optional[int] = None


def weekday_trigger_id(habit_id: str, weekday: int) -> str:
    return f"{habit_id}-{weekday}"


def cancellation_ids(habit_id: str) -> list[str]:
    """Every trigger id a habit could have been scheduled under."""

    return [habit_id] + [weekday_trigger_id(habit_id, day) for day in sorted(ALL_WEEKDAYS)]


@dataclass(frozen=True, slots=True)
class ReminderPlan:
    habit_id: str
    triggers: tuple[ReminderTrigger, ...] = ()

    @property
    def trigger_ids(self) -> list[str]:
        return [trigger.trigger_id for trigger in self.triggers]

    @classmethod
    def build(cls, record: HabitRecord) -> "ReminderPlan":
        """Build the plan for ``record``; disabled reminders produce no triggers."""

        reminder = record.reminder
        if not reminder.is_active:
            return cls(habit_id=record.id)

        hour = reminder.time_of_day.hour
        minute = reminder.time_of_day.minute
        if record.recurrence is Recurrence.DAILY:
            trigger = ReminderTrigger(trigger_id=record.id, hour=hour, minute=minute)
            return cls(habit_id=record.id, triggers=(trigger,))

        triggers = tuple(
            ReminderTrigger(
                trigger_id=weekday_trigger_id(record.id, weekday),
                hour=hour,
                minute=minute,
                weekday=weekday,
            )
            for weekday in due_weekdays(record.recurrence, reminder.days_of_week)
        )
        return cls(habit_id=record.id, triggers=triggers)
