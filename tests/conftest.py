"""Pytest configuration and shared fixtures for OneDo tests.

Provides fixed reference dates, a habit record factory, and database fixtures
for exercising the repository and tracker without touching a real data dir.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

import pytest

from onedo.config import TestConfig
from onedo.infra.database import create_db_engine, create_session_factory, init_database
from onedo.infra.repositories.habit import SQLModelHabitRepository
from onedo.models.habit import (
    GoalConfig,
    HabitRecord,
    IconConfig,
    Recurrence,
    ReminderConfig,
)
from onedo.services.tracker import HabitTracker

# 2024-05-06 is a Monday
MONDAY = date(2024, 5, 6)
SATURDAY = date(2024, 5, 4)
SUNDAY = date(2024, 5, 5)

CREATED_BASE = datetime(2024, 1, 1, 9, 0, tzinfo=timezone.utc)


def days_before(day: date, *offsets: int) -> list[date]:
    """Return ``day - n`` for each offset."""
    return [day - timedelta(days=n) for n in offsets]


# =============================================================================
# Record Fixtures
# =============================================================================


@pytest.fixture
def habit_factory():
    """Factory for building habit records with increasing creation times.

    Returns:
        Callable: Function that creates HabitRecord instances
    """
    counter = {"n": 0}

    def _create_habit(
        name: str = "Test Habit",
        recurrence: Recurrence = Recurrence.DAILY,
        completed: list[date] | None = None,
        active_weekdays: set[int] | None = None,
        reminder: ReminderConfig | None = None,
        goal: GoalConfig | None = None,
        icon: IconConfig | None = None,
        habit_id: str | None = None,
        created_at: datetime | None = None,
    ) -> HabitRecord:
        """Create a habit record with sensible defaults.

        Args:
            name: Habit name
            recurrence: Schedule the habit is due on
            completed: Calendar days already marked done
            active_weekdays: Weekdays for weekly habits (1=Sun..7=Sat)
        """
        counter["n"] += 1
        return HabitRecord(
            id=habit_id or f"habit-{counter['n']}",
            name=name,
            recurrence=recurrence,
            active_weekdays=frozenset(active_weekdays or ()),
            completion_dates=frozenset(completed or ()),
            reminder=reminder or ReminderConfig(),
            goal=goal or GoalConfig(),
            icon=icon or IconConfig(),
            created_at=created_at or CREATED_BASE + timedelta(minutes=counter["n"]),
        )

    return _create_habit


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture
def app_config(tmp_path, monkeypatch) -> TestConfig:
    """Test configuration rooted in a per-test data directory."""
    monkeypatch.setenv("ONEDO_DATA_DIR", str(tmp_path))
    monkeypatch.delenv("ONEDO_DATABASE_URL", raising=False)
    return TestConfig()


@pytest.fixture(scope="function")
def db_engine(app_config):
    """Create an isolated SQLite database file for each test.

    Yields:
        Engine: SQLModel engine connected to test database
    """
    engine = create_db_engine(app_config)
    init_database(engine)

    yield engine

    engine.dispose()


@pytest.fixture(scope="function")
def session_factory(db_engine):
    """Session factory matching what repositories expect."""
    return create_session_factory(db_engine)


@pytest.fixture
def repository(session_factory) -> SQLModelHabitRepository:
    return SQLModelHabitRepository(session_factory)


@pytest.fixture
def tracker(repository) -> HabitTracker:
    """Tracker without a reminder scheduler, using UTC as its calendar."""
    return HabitTracker(repository, tz=timezone.utc)
