"""OneDo habit tracking engine."""

from __future__ import annotations

from .config import BaseConfig, DevConfig
from .models.habit import HabitRecord, Recurrence

__all__ = ["BaseConfig", "DevConfig", "HabitRecord", "Recurrence"]
