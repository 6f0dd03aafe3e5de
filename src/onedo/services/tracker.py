"""Habit tracker service: persists engine results and keeps reminders in step."""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime, tzinfo
from typing import TYPE_CHECKING, Iterable, Optional

from ..domain.repositories.habit import HabitRepository
from ..errors import HabitNotFoundError
from ..logging_config import get_logger
from ..models.habit import GoalConfig, HabitRecord, IconConfig, Recurrence, ReminderConfig
from .calendar import DayLike, to_day
from .completion import is_completed_on, toggle
from .progress import ProgressPoint, build_series
from .reminders import cancellation_ids
from .serialization import dumps_habits, loads_habits
from .streaks import DEFAULT_MAX_LOOKBACK, compute_streaks, current_streak
from .views import FilterOption, SortOption, derive_view, move_habits

if TYPE_CHECKING:  # pragma: no cover
    from ..scheduler import ReminderScheduler

logger = get_logger(__name__)


class HabitTracker:
    """Application-facing operations over a habit repository.

    Every mutation is written through the repository and then re-synced with
    the reminder scheduler, when one is attached.
    """

    def __init__(
        self,
        repository: HabitRepository,
        scheduler: Optional["ReminderScheduler"] = None,
        *,
        max_lookback: int = DEFAULT_MAX_LOOKBACK,
        progress_window: int = 7,
        tz: tzinfo | None = None,
    ):
        self.repository = repository
        self.scheduler = scheduler
        self.max_lookback = max_lookback
        self.progress_window = progress_window
        self.tz = tz

    def habits(self) -> list[HabitRecord]:
        return self.repository.list_all()

    def get(self, habit_id: str) -> HabitRecord:
        record = self.repository.get_by_id(habit_id)
        if record is None:
            raise HabitNotFoundError(habit_id)
        return record

    def _reschedule(self, record: HabitRecord) -> None:
        if self.scheduler is not None:
            self.scheduler.schedule(record)

    def add_habit(
        self,
        name: str,
        recurrence: Recurrence = Recurrence.DAILY,
        *,
        active_weekdays: Optional[Iterable[int]] = None,
        reminder: Optional[ReminderConfig] = None,
        goal: Optional[GoalConfig] = None,
        icon: Optional[IconConfig] = None,
        created_at: Optional[datetime] = None,
    ) -> HabitRecord:
        """Create and persist a new habit."""

        record = HabitRecord.create(
            name,
            recurrence,
            active_weekdays=active_weekdays,
            reminder=reminder,
            goal=goal,
            icon=icon,
            created_at=created_at,
        )
        self.repository.create(record)
        self._reschedule(record)
        logger.info(
            "Habit added",
            extra={"habit_id": record.id, "recurrence": record.recurrence.value},
        )
        return record

    def edit_habit(self, record: HabitRecord) -> HabitRecord:
        """Save an edited habit; its identifier and creation time cannot change."""

        existing = self.get(record.id)
        record = replace(record, created_at=existing.created_at)
        self.repository.update(record)
        self._reschedule(record)
        logger.info("Habit updated", extra={"habit_id": record.id})
        return record

    def delete_habit(self, habit_id: str) -> list[str]:
        """Delete a habit; returns the reminder ids whose cancellation was requested."""

        self.get(habit_id)
        self.repository.delete(habit_id)
        if self.scheduler is not None:
            self.scheduler.cancel(habit_id)
        logger.info("Habit deleted", extra={"habit_id": habit_id})
        return cancellation_ids(habit_id)

    def toggle_completion(self, habit_id: str, when: DayLike) -> HabitRecord:
        """Flip completion for the day of ``when`` and persist it."""

        record = toggle(self.get(habit_id), when, tz=self.tz)
        self.repository.update(record)
        self._reschedule(record)
        logger.info(
            "Habit completion toggled",
            extra={
                "habit_id": habit_id,
                "day": to_day(when, self.tz).isoformat(),
                "completed": is_completed_on(record, when, tz=self.tz),
            },
        )
        return record

    def reorder(self, sources: Iterable[int], destination: int) -> list[HabitRecord]:
        """Move habits in the persisted order, independent of any display sort."""

        moved = move_habits(self.habits(), sources, destination)
        self.repository.reorder([record.id for record in moved])
        return moved

    def day_view(
        self,
        reference: DayLike,
        filter: FilterOption = FilterOption.ALL,
        sort: SortOption = SortOption.CREATION_DATE_ASCENDING,
        edit_mode: bool = False,
    ) -> list[HabitRecord]:
        return derive_view(self.habits(), reference, filter, sort, edit_mode, tz=self.tz)

    def streak(self, habit_id: str, today: DayLike) -> int:
        return current_streak(self.get(habit_id), today, max_lookback=self.max_lookback, tz=self.tz)

    def streaks(self, habit_id: str, today: DayLike) -> tuple[int, int]:
        """Return (current, longest) streaks for a habit."""
        return compute_streaks(self.get(habit_id), today, max_lookback=self.max_lookback, tz=self.tz)

    def progress(
        self, habit_id: str, reference: DayLike, window_days: Optional[int] = None
    ) -> list[ProgressPoint]:
        if window_days is None:
            window_days = self.progress_window
        return build_series(self.get(habit_id), window_days, reference, tz=self.tz)

    def sync_reminders(self) -> None:
        if self.scheduler is not None:
            self.scheduler.sync(self.habits())

    def export_json(self) -> str:
        return dumps_habits(self.habits())

    def import_json(self, text: str) -> list[HabitRecord]:
        """Add habits from a JSON export, updating any whose id already exists.

        Raises :class:`HabitDataError` before touching storage if the data is
        malformed.
        """

        records = loads_habits(text, tz=self.tz)
        for record in records:
            if self.repository.get_by_id(record.id) is None:
                self.repository.create(record)
            else:
                self.repository.update(record)
        self.sync_reminders()
        logger.info("Habits imported", extra={"count": len(records)})
        return records
