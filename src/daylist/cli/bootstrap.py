# src/daylist/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires the SQLite store and the confirmation prompt into a TaskViewEngine.
"""

from __future__ import annotations

import logging

from ..config import Settings, get_settings
from ..connectors.console_connector import AlwaysConfirm, ConsoleConfirmer
from ..core.engine import TaskViewEngine
from ..core.ports import DeletionConfirmer
from ..tasks.task_models import DateFilterField
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings: Settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.tasks_db_path.parent.mkdir(parents=True, exist_ok=True)


def create_engine(
    *,
    settings: Settings | None = None,
    confirmer: DeletionConfirmer | None = None,
) -> TaskViewEngine:
    """
    Build a TaskViewEngine from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    The engine starts empty; call reload() to load the collections.
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    if confirmer is None:
        confirmer = ConsoleConfirmer() if settings.confirm_delete else AlwaysConfirm()

    store = TaskStore(settings.tasks_db_path, timeout_seconds=settings.store_timeout_seconds)
    engine = TaskViewEngine(
        store,
        store,
        confirmer,
        date_filter_field=DateFilterField.parse(settings.default_filter_field),
    )
    logger.debug("Engine created db=%s", store.db_path)
    return engine
