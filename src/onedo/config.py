"""Application configuration objects and helpers."""

from __future__ import annotations

import os
from datetime import tzinfo
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool = False) -> bool:
    """Interpret environment variable values as booleans."""

    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    """Read a positive integer from the environment, falling back on bad input."""

    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        parsed = int(value.strip())
    except ValueError:
        return default
    return parsed if parsed > 0 else default


class BaseConfig:
    """Base configuration shared across environments."""

    APP_NAME = "OneDo"
    DB_FILENAME = "onedo.db"
    DEFAULT_STREAK_LOOKBACK_DAYS = 3650
    DEFAULT_PROGRESS_WINDOW_DAYS = 7

    def __init__(self) -> None:
        self.DATA_DIR = self._resolve_data_dir()
        self.DEV_MODE = _env_bool("ONEDO_DEV_MODE", default=True)
        self.DATABASE_URL = os.getenv("ONEDO_DATABASE_URL", self._build_sqlite_url())
        self.TIMEZONE = os.getenv("ONEDO_TIMEZONE") or None
        self.STREAK_LOOKBACK_DAYS = _env_int(
            "ONEDO_STREAK_LOOKBACK_DAYS", self.DEFAULT_STREAK_LOOKBACK_DAYS
        )
        self.PROGRESS_WINDOW_DAYS = _env_int(
            "ONEDO_PROGRESS_WINDOW_DAYS", self.DEFAULT_PROGRESS_WINDOW_DAYS
        )

    def _resolve_data_dir(self) -> Path:
        """Return the directory where the database and logs live."""

        data_root = os.getenv("ONEDO_DATA_DIR", "instance")
        path = Path(data_root).expanduser().resolve()
        path.mkdir(parents=True, exist_ok=True)
        return path

    def _build_sqlite_url(self) -> str:
        """Construct the default SQLite URL inside the data directory."""

        return f"sqlite:///{self.DATA_DIR / self.DB_FILENAME}"

    def timezone(self) -> tzinfo | None:
        """Return the configured calendar zone, or None for the system local zone."""

        if not self.TIMEZONE:
            return None
        return ZoneInfo(self.TIMEZONE)

    def sqlalchemy_engine_options(self) -> dict[str, Any]:
        """Expose engine kwargs for SQLModel to consume."""

        if self.DATABASE_URL.startswith("sqlite"):
            return {"connect_args": {"check_same_thread": False}}
        return {}


class DevConfig(BaseConfig):
    """Development configuration using local SQLite."""

    DEBUG = True
    TESTING = False


class TestConfig(BaseConfig):
    """Configuration for the test suite; callers point DATA_DIR at a temp dir."""

    __test__ = False  # keep pytest from collecting this class

    DEBUG = True
    TESTING = True
