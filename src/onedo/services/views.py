"""Day-view derivation: due filtering, completion filtering, sorting, reordering."""

from __future__ import annotations

from datetime import tzinfo
from enum import Enum
from typing import Iterable, Sequence, TypeVar

from ..models.habit import HabitRecord
from .calendar import DayLike, to_day
from .completion import is_completed_on
from .recurrence import is_habit_due

T = TypeVar("T")


class FilterOption(str, Enum):
    ALL = "all"
    COMPLETED = "completed"
    INCOMPLETE = "incomplete"


class SortOption(str, Enum):
    NAME_ASCENDING = "name_ascending"
    NAME_DESCENDING = "name_descending"
    CREATION_DATE_ASCENDING = "creation_date_ascending"
    CREATION_DATE_DESCENDING = "creation_date_descending"


def _sort_key(sort: SortOption):
    if sort in (SortOption.NAME_ASCENDING, SortOption.NAME_DESCENDING):
        return lambda record: record.name
    return lambda record: record.created_at


def derive_view_indices(
    records: Sequence[HabitRecord],
    reference: DayLike,
    filter: FilterOption = FilterOption.ALL,
    sort: SortOption = SortOption.CREATION_DATE_ASCENDING,
    edit_mode: bool = False,
    *,
    tz: tzinfo | None = None,
) -> list[int]:
    """Return indices into ``records`` for the visible rows, in display order.

    In edit mode every record is shown so it can be reordered; otherwise only
    records due on ``reference`` survive, narrowed by ``filter``. Sorting is
    stable in both directions.
    """

    filter = FilterOption(filter)
    sort = SortOption(sort)
    day = to_day(reference, tz)

    indices = list(range(len(records)))
    if not edit_mode:
        visible = []
        for index in indices:
            record = records[index]
            if not is_habit_due(record, day):
                continue
            done = is_completed_on(record, day)
            if filter is FilterOption.COMPLETED and not done:
                continue
            if filter is FilterOption.INCOMPLETE and done:
                continue
            visible.append(index)
        indices = visible

    key = _sort_key(sort)
    descending = sort in (SortOption.NAME_DESCENDING, SortOption.CREATION_DATE_DESCENDING)
    # sorted(reverse=True) keeps equal keys in their original order
    return sorted(indices, key=lambda i: key(records[i]), reverse=descending)


def derive_view(
    records: Sequence[HabitRecord],
    reference: DayLike,
    filter: FilterOption = FilterOption.ALL,
    sort: SortOption = SortOption.CREATION_DATE_ASCENDING,
    edit_mode: bool = False,
    *,
    tz: tzinfo | None = None,
) -> list[HabitRecord]:
    """Return the visible records for ``reference`` in display order."""

    indices = derive_view_indices(records, reference, filter, sort, edit_mode, tz=tz)
    return [records[i] for i in indices]


def move_habits(items: Sequence[T], sources: Iterable[int], destination: int) -> list[T]:
    """Move the items at ``sources`` so they land before offset ``destination``.

    ``destination`` is an insertion offset into the original sequence, so
    moving index 0 to the end of a three-item list uses ``destination=3``.
    """

    source_set = set(sources)
    for index in source_set:
        if not 0 <= index < len(items):
            raise IndexError(f"Source offset out of range: {index}")
    if not 0 <= destination <= len(items):
        raise IndexError(f"Destination offset out of range: {destination}")

    moving = [items[i] for i in sorted(source_set)]
    before = [items[i] for i in range(destination) if i not in source_set]
    after = [items[i] for i in range(destination, len(items)) if i not in source_set]
    return before + moving + after
