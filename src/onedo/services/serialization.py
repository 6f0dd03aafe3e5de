"""Plain-dict and JSON encoding of habit records.

The native document shape is::

    {
        "schema_version": 1,
        "id": "...", "name": "...", "recurrence": "weekly",
        "active_weekdays": [2, 4], "completion_dates": ["2024-05-01"],
        "reminder": {"enabled": true, "time_of_day": "07:30", "days_of_week": [2, 4]},
        "goal": {"type": "count", "target_value": 10.0, "unit": "reps"},
        "icon": {"symbol_id": "drop.fill", "color_hex": "#3366FF"},
        "created_at": "2024-05-01T08:00:00+00:00"
    }

Documents written by the earlier mobile app (camelCase keys, Japanese
schedule names, dates as seconds since 2001-01-01 UTC) are read as well.
"""

from __future__ import annotations

import json
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from typing import Any, Iterable, Mapping

from ..errors import HabitDataError
from ..logging_config import get_logger
from ..models.habit import (
    GoalConfig,
    GoalType,
    HabitRecord,
    IconConfig,
    Recurrence,
    ReminderConfig,
)
from .calendar import to_day

SCHEMA_VERSION = 1

# Reference date of the legacy app's numeric timestamps
LEGACY_EPOCH = datetime(2001, 1, 1, tzinfo=timezone.utc)

_LEGACY_SCHEDULES = {
    "毎日": Recurrence.DAILY,
    "平日": Recurrence.WEEKDAYS,
    "週末": Recurrence.WEEKENDS,
    "毎週": Recurrence.WEEKLY,
}

logger = get_logger(__name__)


def habit_to_dict(record: HabitRecord) -> dict[str, Any]:
    """Encode ``record`` as a JSON-compatible dict."""

    reminder = record.reminder
    time_of_day = reminder.time_of_day.strftime("%H:%M") if reminder.time_of_day else None
    return {
        "schema_version": SCHEMA_VERSION,
        "id": record.id,
        "name": record.name,
        "recurrence": record.recurrence.value,
        "active_weekdays": sorted(record.active_weekdays),
        "completion_dates": [d.isoformat() for d in sorted(record.completion_dates)],
        "reminder": {
            "enabled": reminder.enabled,
            "time_of_day": time_of_day,
            "days_of_week": sorted(reminder.days_of_week),
        },
        "goal": {
            "type": record.goal.type.value,
            "target_value": record.goal.target_value,
            "unit": record.goal.unit,
        },
        "icon": {
            "symbol_id": record.icon.symbol_id,
            "color_hex": record.icon.color_hex,
        },
        "created_at": record.created_at.isoformat(),
    }


def _parse_time(value: Any) -> time | None:
    if value is None:
        return None
    parsed = time.fromisoformat(str(value))
    return time(parsed.hour, parsed.minute)


def _section(data: Mapping[str, Any], key: str) -> Mapping[str, Any]:
    value = data.get(key) or {}
    if not isinstance(value, Mapping):
        raise HabitDataError(f"Habit field {key!r} must be an object, got {type(value).__name__}")
    return value


def _native_from_dict(data: Mapping[str, Any]) -> HabitRecord:
    reminder = _section(data, "reminder")
    goal = _section(data, "goal")
    icon = _section(data, "icon")
    return HabitRecord(
        id=str(data["id"]),
        name=str(data["name"]),
        recurrence=Recurrence(data.get("recurrence", Recurrence.DAILY.value)),
        active_weekdays=frozenset(data.get("active_weekdays") or ()),
        completion_dates=frozenset(
            date.fromisoformat(str(value)) for value in data.get("completion_dates") or ()
        ),
        reminder=ReminderConfig(
            enabled=bool(reminder.get("enabled", False)),
            time_of_day=_parse_time(reminder.get("time_of_day")),
            days_of_week=frozenset(reminder.get("days_of_week") or ()),
        ),
        goal=GoalConfig(
            type=GoalType(goal.get("type", GoalType.NONE.value)),
            target_value=goal.get("target_value"),
            unit=goal.get("unit"),
        ),
        icon=IconConfig(symbol_id=icon.get("symbol_id"), color_hex=icon.get("color_hex")),
        created_at=datetime.fromisoformat(str(data["created_at"])),
    )


def _legacy_timestamp(value: Any) -> datetime:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return LEGACY_EPOCH + timedelta(seconds=float(value))
    return datetime.fromisoformat(str(value).replace("Z", "+00:00"))


def _legacy_recurrence(value: Any) -> Recurrence:
    if value in _LEGACY_SCHEDULES:
        return _LEGACY_SCHEDULES[value]
    return Recurrence(value)


def _legacy_goal_type(value: Any, target: Any) -> GoalType:
    if value is None:
        return GoalType.NONE
    try:
        return GoalType(str(value).lower())
    except ValueError:
        # Localized labels from the old app; any non-empty goal with a target counts
        return GoalType.COUNT if target is not None else GoalType.NONE


def _legacy_from_dict(data: Mapping[str, Any], tz: tzinfo | None) -> HabitRecord:
    recurrence = _legacy_recurrence(data.get("repeatSchedule", Recurrence.DAILY.value))
    reminder_days = frozenset(data.get("reminderDaysOfWeek") or ())
    reminder_time = data.get("reminderTime")
    time_of_day = None
    if reminder_time is not None:
        local = _legacy_timestamp(reminder_time).astimezone(tz)
        time_of_day = time(local.hour, local.minute)
    target = data.get("targetValue")
    return HabitRecord(
        id=str(data["id"]),
        name=str(data["name"]),
        recurrence=recurrence,
        # the old app used the reminder days as the weekly schedule
        active_weekdays=reminder_days if recurrence is Recurrence.WEEKLY else frozenset(),
        completion_dates=frozenset(
            to_day(_legacy_timestamp(value), tz) for value in data.get("completionDates") or ()
        ),
        reminder=ReminderConfig(
            enabled=bool(data.get("reminderEnabled", False)),
            time_of_day=time_of_day,
            days_of_week=reminder_days,
        ),
        goal=GoalConfig(
            type=_legacy_goal_type(data.get("goalType"), target),
            target_value=target,
            unit=data.get("unit"),
        ),
        icon=IconConfig(symbol_id=data.get("iconName"), color_hex=data.get("customColorHex")),
        created_at=LEGACY_EPOCH,
    )


def habit_from_dict(data: Mapping[str, Any], *, tz: tzinfo | None = None) -> HabitRecord:
    """Decode a habit document, raising :class:`HabitDataError` when it is malformed."""

    if not isinstance(data, Mapping):
        raise HabitDataError(f"Habit document must be an object, got {type(data).__name__}")
    try:
        if "repeatSchedule" in data or "completionDates" in data:
            return _legacy_from_dict(data, tz)
        version = data.get("schema_version", SCHEMA_VERSION)
        if version != SCHEMA_VERSION:
            raise HabitDataError(f"Unsupported habit schema version: {version}")
        return _native_from_dict(data)
    except HabitDataError:
        raise
    except (KeyError, TypeError, ValueError, OverflowError) as exc:
        raise HabitDataError(f"Malformed habit document: {exc}") from exc


def dumps_habits(records: Iterable[HabitRecord], *, indent: int | None = 2) -> str:
    """Encode an ordered habit collection as a JSON array."""

    return json.dumps(
        [habit_to_dict(record) for record in records], ensure_ascii=False, indent=indent
    )


def loads_habits(text: str | bytes, *, tz: tzinfo | None = None) -> list[HabitRecord]:
    """Decode a JSON array of habit documents, preserving order."""

    try:
        payload = json.loads(text)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise HabitDataError(f"Habit data is not valid JSON: {exc}") from exc
    if not isinstance(payload, list):
        raise HabitDataError("Habit data must be a JSON array")
    return [habit_from_dict(item, tz=tz) for item in payload]


def load_habits_or_empty(text: str | bytes | None, *, tz: tzinfo | None = None) -> list[HabitRecord]:
    """Decode stored habits, discarding corrupt data in favour of an empty list."""

    if not text:
        return []
    try:
        return loads_habits(text, tz=tz)
    except HabitDataError as exc:
        logger.warning("Discarding unreadable habit data: %s", exc)
        return []
