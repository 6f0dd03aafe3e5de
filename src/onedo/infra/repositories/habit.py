"""SQLModel implementation of Habit repository."""

from __future__ import annotations

from collections import defaultdict
from datetime import date, timezone
from typing import Callable, Iterable, Optional, Sequence

from sqlalchemy import func
from sqlmodel import Session, select

from ...models.habit import (
    GoalConfig,
    HabitRecord,
    IconConfig,
    ReminderConfig,
)
from ...models.tables import HabitCompletionRow, HabitRow


def _split_days(value: str) -> frozenset[int]:
    return frozenset(int(part) for part in value.split(",") if part.strip())


def _join_days(days: Iterable[int]) -> str:
    return ",".join(str(day) for day in sorted(days))


def _to_record(row: HabitRow, days: Iterable[date]) -> HabitRecord:
    return HabitRecord(
        id=row.id,
        name=row.name,
        recurrence=row.recurrence,
        active_weekdays=_split_days(row.active_weekdays),
        completion_dates=frozenset(days),
        reminder=ReminderConfig(
            enabled=row.reminder_enabled,
            time_of_day=row.reminder_time,
            days_of_week=_split_days(row.reminder_days),
        ),
        goal=GoalConfig(type=row.goal_type, target_value=row.goal_target, unit=row.goal_unit),
        icon=IconConfig(symbol_id=row.icon_symbol, color_hex=row.icon_color),
        # SQLite drops tzinfo on write; stored values are UTC
        created_at=row.created_at.replace(tzinfo=timezone.utc),
    )


def _apply(row: HabitRow, record: HabitRecord) -> HabitRow:
    row.name = record.name
    row.recurrence = record.recurrence.value
    row.active_weekdays = _join_days(record.active_weekdays)
    row.created_at = record.created_at.astimezone(timezone.utc)
    row.reminder_enabled = record.reminder.enabled
    row.reminder_time = record.reminder.time_of_day
    row.reminder_days = _join_days(record.reminder.days_of_week)
    row.goal_type = record.goal.type.value
    row.goal_target = record.goal.target_value
    row.goal_unit = record.goal.unit
    row.icon_symbol = record.icon.symbol_id
    row.icon_color = record.icon.color_hex
    return row


class SQLModelHabitRepository:
    """SQLModel-based habit repository implementation."""

    def __init__(self, session_factory: Callable[[], Session]):
        """Initialize with a session factory."""
        self.session_factory = session_factory

    def _completion_days(self, session: Session, habit_id: str) -> list[date]:
        return list(
            session.exec(
                select(HabitCompletionRow.occurred_on).where(
                    HabitCompletionRow.habit_id == habit_id
                )
            ).all()
        )

    def get_by_id(self, habit_id: str) -> Optional[HabitRecord]:
        """Retrieve a habit by ID."""
        with self.session_factory() as session:
            row = session.get(HabitRow, habit_id)
            if row is None:
                return None
            return _to_record(row, self._completion_days(session, habit_id))

    def list_all(self) -> list[HabitRecord]:
        """List all habits in their persisted order."""
        with self.session_factory() as session:
            rows = list(
                session.exec(
                    select(HabitRow).order_by(HabitRow.position, HabitRow.created_at)  # type: ignore
                ).all()
            )
            days_by_habit: dict[str, list[date]] = defaultdict(list)
            for completion in session.exec(select(HabitCompletionRow)).all():
                days_by_habit[completion.habit_id].append(completion.occurred_on)
            return [_to_record(row, days_by_habit[row.id]) for row in rows]

    def create(self, record: HabitRecord) -> HabitRecord:
        """Append a new habit to the end of the order."""
        with self.session_factory() as session:
            last = session.exec(select(func.max(HabitRow.position))).one()
            row = _apply(HabitRow(id=record.id, position=0 if last is None else last + 1), record)
            session.add(row)
            # Flush the parent row before its completions for the foreign key
            session.flush()
            for day in record.completion_dates:
                session.add(HabitCompletionRow(habit_id=record.id, occurred_on=day))
            session.commit()
            return record

    def update(self, record: HabitRecord) -> HabitRecord:
        """Replace a stored habit, including its completion days."""
        with self.session_factory() as session:
            row = session.get(HabitRow, record.id)
            if row is None:
                raise LookupError(f"Habit not found: {record.id}")
            session.add(_apply(row, record))

            existing = {
                completion.occurred_on: completion
                for completion in session.exec(
                    select(HabitCompletionRow).where(HabitCompletionRow.habit_id == record.id)
                ).all()
            }
            for day, completion in existing.items():
                if day not in record.completion_dates:
                    session.delete(completion)
            for day in record.completion_dates - set(existing):
                session.add(HabitCompletionRow(habit_id=record.id, occurred_on=day))
            session.commit()
            return record

    def delete(self, habit_id: str) -> None:
        """Delete a habit and its completions."""
        with self.session_factory() as session:
            for completion in session.exec(
                select(HabitCompletionRow).where(HabitCompletionRow.habit_id == habit_id)
            ).all():
                session.delete(completion)
            row = session.get(HabitRow, habit_id)
            if row is not None:
                # Completions must be gone before the parent row
                session.flush()
                session.delete(row)
            session.commit()

    def reorder(self, ordered_ids: Sequence[str]) -> None:
        """Persist a new order; habits missing from ``ordered_ids`` follow in their old order."""
        with self.session_factory() as session:
            rows = list(
                session.exec(
                    select(HabitRow).order_by(HabitRow.position, HabitRow.created_at)  # type: ignore
                ).all()
            )
            by_id = {row.id: row for row in rows}
            unknown = [habit_id for habit_id in ordered_ids if habit_id not in by_id]
            if unknown:
                raise LookupError(f"Habit not found: {unknown[0]}")
            listed = set(ordered_ids)
            ordered = [by_id[habit_id] for habit_id in ordered_ids]
            ordered += [row for row in rows if row.id not in listed]
            for position, row in enumerate(ordered):
                row.position = position
                session.add(row)
            session.commit()

    def get_completions(self, habit_id: str, start_date: date, end_date: date) -> list[date]:
        """Completed days for a habit within a date range, oldest first."""
        with self.session_factory() as session:
            statement = (
                select(HabitCompletionRow.occurred_on)
                .where(HabitCompletionRow.habit_id == habit_id)
                .where(HabitCompletionRow.occurred_on >= start_date)
                .where(HabitCompletionRow.occurred_on <= end_date)
                .order_by(HabitCompletionRow.occurred_on)  # type: ignore
            )
            return list(session.exec(statement).all())
