"""Tests for the SQLModel habit repository."""

from __future__ import annotations

from datetime import date, datetime, time, timedelta, timezone

import pytest
from sqlalchemy.exc import IntegrityError

from onedo.models import HabitCompletionRow
from onedo.models.habit import GoalConfig, GoalType, IconConfig, Recurrence, ReminderConfig

from conftest import MONDAY, SUNDAY, days_before


@pytest.fixture
def stored(repository, habit_factory):
    record = habit_factory(
        name="Meditate",
        recurrence=Recurrence.WEEKLY,
        active_weekdays={2, 6},
        completed=[MONDAY, SUNDAY],
        reminder=ReminderConfig(enabled=True, time_of_day=time(6, 45), days_of_week=frozenset({2})),
        goal=GoalConfig(type=GoalType.DURATION, target_value=15, unit="min"),
        icon=IconConfig(symbol_id="leaf", color_hex="#22AA44"),
    )
    repository.create(record)
    return record


class TestHabitCrud:
    def test_create_and_get_round_trip(self, repository, stored):
        assert repository.get_by_id(stored.id) == stored

    def test_get_missing_returns_none(self, repository):
        assert repository.get_by_id("nope") is None

    def test_list_all_keeps_creation_order(self, repository, habit_factory):
        names = ["Walk", "Apple", "Zebra"]
        for name in names:
            repository.create(habit_factory(name=name))
        assert [r.name for r in repository.list_all()] == names

    def test_update_replaces_fields_and_completions(self, repository, stored):
        edited = stored
        edited.name = "Meditate longer"
        edited.completion_dates = frozenset({SUNDAY, date(2024, 5, 1)})
        repository.update(edited)

        reloaded = repository.get_by_id(stored.id)
        assert reloaded.name == "Meditate longer"
        assert reloaded.completion_dates == {SUNDAY, date(2024, 5, 1)}

    def test_update_missing_raises(self, repository, habit_factory):
        with pytest.raises(LookupError):
            repository.update(habit_factory(habit_id="ghost"))

    def test_delete_removes_habit_and_completions(self, repository, stored):
        repository.delete(stored.id)
        assert repository.get_by_id(stored.id) is None
        assert repository.get_completions(stored.id, date(2024, 1, 1), MONDAY) == []

    def test_delete_missing_is_a_no_op(self, repository):
        repository.delete("ghost")

    def test_creation_time_round_trips_as_utc(self, repository, habit_factory):
        tokyo = timezone(timedelta(hours=9))
        record = habit_factory(created_at=datetime(2024, 3, 1, 8, 15, tzinfo=tokyo))
        repository.create(record)

        reloaded = repository.get_by_id(record.id)
        assert reloaded.created_at == datetime(2024, 2, 29, 23, 15, tzinfo=timezone.utc)
        assert reloaded.created_at.tzinfo is timezone.utc

    def test_completions_require_existing_habit(self, session_factory):
        with pytest.raises(IntegrityError):
            with session_factory() as session:
                session.add(HabitCompletionRow(habit_id="ghost", occurred_on=MONDAY))


class TestReorder:
    def test_reorder_persists_new_order(self, repository, habit_factory):
        records = [habit_factory(name=n) for n in ("a", "b", "c")]
        for record in records:
            repository.create(record)
        repository.reorder([records[2].id, records[0].id, records[1].id])
        assert [r.name for r in repository.list_all()] == ["c", "a", "b"]

    def test_unlisted_habits_follow(self, repository, habit_factory):
        records = [habit_factory(name=n) for n in ("a", "b", "c")]
        for record in records:
            repository.create(record)
        repository.reorder([records[1].id])
        assert [r.name for r in repository.list_all()] == ["b", "a", "c"]

    def test_unknown_id_raises(self, repository):
        with pytest.raises(LookupError):
            repository.reorder(["ghost"])

    def test_new_habits_append_after_reorder(self, repository, habit_factory):
        first, second = habit_factory(name="a"), habit_factory(name="b")
        repository.create(first)
        repository.create(second)
        repository.reorder([second.id, first.id])
        repository.create(habit_factory(name="c"))
        assert [r.name for r in repository.list_all()] == ["b", "a", "c"]


class TestGetCompletions:
    def test_range_is_inclusive_and_ordered(self, repository, habit_factory):
        record = habit_factory(completed=days_before(MONDAY, *range(10)))
        repository.create(record)
        start, end = days_before(MONDAY, 6, 2)
        days = repository.get_completions(record.id, start, end)
        assert days == days_before(MONDAY, 6, 5, 4, 3, 2)

    def test_empty_range(self, repository, habit_factory):
        record = habit_factory()
        repository.create(record)
        assert repository.get_completions(record.id, MONDAY, MONDAY) == []
