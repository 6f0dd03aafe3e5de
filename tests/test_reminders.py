"""Tests for reminder trigger plans."""

from __future__ import annotations

from datetime import time

import pytest

from onedo.models.habit import HabitRecord, Recurrence, ReminderConfig
from onedo.services.reminders import ReminderPlan, ReminderTrigger, cancellation_ids

SEVEN_THIRTY = ReminderConfig(enabled=True, time_of_day=time(7, 30))


def test_daily_habit_gets_one_repeating_trigger(habit_factory):
    habit = habit_factory(habit_id="h1", reminder=SEVEN_THIRTY)
    plan = ReminderPlan.build(habit)
    assert plan.triggers == (ReminderTrigger("h1", 7, 30, None),)


def test_weekdays_habit_gets_trigger_per_weekday(habit_factory):
    habit = habit_factory(habit_id="h1", recurrence=Recurrence.WEEKDAYS, reminder=SEVEN_THIRTY)
    plan = ReminderPlan.build(habit)
    assert plan.trigger_ids == ["h1-2", "h1-3", "h1-4", "h1-5", "h1-6"]
    assert {t.weekday for t in plan.triggers} == {2, 3, 4, 5, 6}
    assert all((t.hour, t.minute) == (7, 30) for t in plan.triggers)


def test_weekends_habit(habit_factory):
    habit = habit_factory(habit_id="h1", recurrence=Recurrence.WEEKENDS, reminder=SEVEN_THIRTY)
    assert ReminderPlan.build(habit).trigger_ids == ["h1-1", "h1-7"]


def test_weekly_habit_uses_reminder_days(habit_factory):
    reminder = ReminderConfig(enabled=True, time_of_day=time(21, 5), days_of_week=frozenset({6, 2}))
    habit = habit_factory(
        habit_id="h1", recurrence=Recurrence.WEEKLY, active_weekdays={2, 4, 6}, reminder=reminder
    )
    plan = ReminderPlan.build(habit)
    assert plan.triggers == (
        ReminderTrigger("h1-2", 21, 5, 2),
        ReminderTrigger("h1-6", 21, 5, 6),
    )


def test_weekly_habit_without_reminder_days_has_no_triggers(habit_factory):
    habit = habit_factory(recurrence=Recurrence.WEEKLY, reminder=SEVEN_THIRTY)
    assert ReminderPlan.build(habit).triggers == ()


@pytest.mark.parametrize(
    "reminder",
    [
        ReminderConfig(),
        ReminderConfig(enabled=False, time_of_day=time(8, 0)),
        ReminderConfig(enabled=True, time_of_day=None),
    ],
)
def test_inactive_reminders_produce_no_triggers(habit_factory, reminder):
    assert ReminderPlan.build(habit_factory(reminder=reminder)).triggers == ()


def test_reminder_time_is_truncated_to_minutes():
    reminder = ReminderConfig(enabled=True, time_of_day=time(6, 15, 42))
    assert reminder.time_of_day == time(6, 15)


def test_cancellation_ids_cover_every_variant():
    ids = cancellation_ids("abc")
    assert ids[0] == "abc"
    assert set(ids[1:]) == {f"abc-{day}" for day in range(1, 8)}


def test_every_planned_trigger_is_cancellable():
    record = HabitRecord.create(
        "Water", Recurrence.WEEKLY, active_weekdays={1, 3}, reminder=SEVEN_THIRTY
    )
    plan = ReminderPlan.build(record)
    assert plan.trigger_ids
    assert set(plan.trigger_ids) <= set(cancellation_ids(record.id))
