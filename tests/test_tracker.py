"""Integration tests for the habit tracker service."""

from __future__ import annotations

from datetime import datetime, time, timezone

import pytest
from apscheduler.schedulers.background import BackgroundScheduler

from onedo.errors import HabitDataError, HabitNotFoundError
from onedo.models.habit import GoalConfig, GoalType, Recurrence, ReminderConfig
from onedo.scheduler import ReminderScheduler
from onedo.services.tracker import HabitTracker
from onedo.services.views import FilterOption, SortOption

from conftest import MONDAY, SATURDAY, SUNDAY


@pytest.fixture
def reminders():
    background = BackgroundScheduler(timezone=timezone.utc)
    background.start(paused=True)
    yield ReminderScheduler(lambda habit_id, name: None, background)
    background.shutdown(wait=False)


@pytest.fixture
def scheduled_tracker(repository, reminders):
    return HabitTracker(repository, reminders, tz=timezone.utc)


def test_add_and_toggle_persists(tracker):
    habit = tracker.add_habit("Read")
    tracker.toggle_completion(habit.id, MONDAY)
    assert tracker.get(habit.id).completion_dates == {MONDAY}

    tracker.toggle_completion(habit.id, datetime(2024, 5, 6, 21, 0, tzinfo=timezone.utc))
    assert tracker.get(habit.id).completion_dates == frozenset()


def test_streaks_and_progress(tracker):
    habit = tracker.add_habit("Push-ups", goal=GoalConfig(type=GoalType.COUNT, target_value=20))
    for day in (SATURDAY, SUNDAY, MONDAY):
        tracker.toggle_completion(habit.id, day)

    assert tracker.streak(habit.id, MONDAY) == 3
    assert tracker.streaks(habit.id, MONDAY) == (3, 3)
    series = tracker.progress(habit.id, MONDAY, 4)
    assert [p.met_target for p in series] == [False, True, True, True]


def test_day_view_filters_and_sorts(tracker):
    tracker.add_habit("Yoga", created_at=datetime(2024, 1, 2, tzinfo=timezone.utc))
    hike = tracker.add_habit("Hike", Recurrence.WEEKENDS, created_at=datetime(2024, 1, 1, tzinfo=timezone.utc))
    tracker.add_habit("Bike", created_at=datetime(2024, 1, 3, tzinfo=timezone.utc))
    tracker.toggle_completion(hike.id, SATURDAY)

    assert [h.name for h in tracker.day_view(MONDAY, sort=SortOption.NAME_ASCENDING)] == ["Bike", "Yoga"]
    assert [h.name for h in tracker.day_view(SATURDAY, FilterOption.COMPLETED)] == ["Hike"]
    assert [h.name for h in tracker.day_view(MONDAY, edit_mode=True)] == ["Hike", "Yoga", "Bike"]


def test_reorder_changes_persisted_order_only(tracker):
    for name in ("a", "b", "c"):
        tracker.add_habit(name)
    moved = tracker.reorder([2], 0)
    assert [h.name for h in moved] == ["c", "a", "b"]
    assert [h.name for h in tracker.habits()] == ["c", "a", "b"]


def test_edit_keeps_creation_time(tracker):
    habit = tracker.add_habit("Walk", created_at=datetime(2024, 1, 1, tzinfo=timezone.utc))
    habit.name = "Long walk"
    habit.created_at = datetime(2030, 1, 1, tzinfo=timezone.utc)
    saved = tracker.edit_habit(habit)
    assert saved.created_at == datetime(2024, 1, 1, tzinfo=timezone.utc)
    assert tracker.get(habit.id).name == "Long walk"


def test_unknown_habit_raises(tracker):
    with pytest.raises(HabitNotFoundError):
        tracker.toggle_completion("ghost", MONDAY)
    with pytest.raises(HabitNotFoundError):
        tracker.delete_habit("ghost")


def test_reminders_follow_mutations(scheduled_tracker, reminders):
    habit = scheduled_tracker.add_habit(
        "Vitamins",
        Recurrence.WEEKENDS,
        reminder=ReminderConfig(enabled=True, time_of_day=time(9, 0)),
    )
    assert reminders.job_ids() == [f"{habit.id}-1", f"{habit.id}-7"]

    habit.recurrence = Recurrence.DAILY
    scheduled_tracker.edit_habit(habit)
    assert reminders.job_ids() == [habit.id]

    cancelled = scheduled_tracker.delete_habit(habit.id)
    assert habit.id in cancelled
    assert f"{habit.id}-7" in cancelled
    assert reminders.job_ids() == []


def test_export_import_round_trip(tracker):
    habit = tracker.add_habit("Journal")
    tracker.toggle_completion(habit.id, MONDAY)
    payload = tracker.export_json()

    tracker.delete_habit(habit.id)
    imported = tracker.import_json(payload)

    assert [r.id for r in imported] == [habit.id]
    assert tracker.get(habit.id).completion_dates == {MONDAY}


def test_import_rejects_corrupt_data(tracker):
    tracker.add_habit("Keep me")
    with pytest.raises(HabitDataError):
        tracker.import_json("[{")
    assert [h.name for h in tracker.habits()] == ["Keep me"]
