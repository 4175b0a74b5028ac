# src/daylist/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- Nothing required at import time; every value has a default.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "DAYLIST"

load_dotenv(override=False)


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Local data paths ----
    data_dir: Path
    tasks_db_path: Path

    # ---- Store ----
    store_timeout_seconds: float  # <= 0 disables the timeout

    # ---- Day view ----
    default_filter_field: str
    confirm_delete: bool

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "daylist").strip() or "daylist"
        log_level = _env(_k("LOG_LEVEL"), "WARNING")

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/daylist"))
        tasks_db_path = _env_path(_k("TASKS_DB_PATH"), data_dir / "daylist.sqlite3")

        store_timeout_seconds = _env_float(_k("STORE_TIMEOUT_SECONDS"), 10.0)

        default_filter_field = _env(_k("DEFAULT_FILTER_FIELD"), "due_date").strip().lower()
        if default_filter_field not in ("due_date", "created_at"):
            default_filter_field = "due_date"
        confirm_delete = _env_bool(_k("CONFIRM_DELETE"), True)

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            tasks_db_path=tasks_db_path,
            store_timeout_seconds=store_timeout_seconds,
            default_filter_field=default_filter_field,
            confirm_delete=confirm_delete,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
