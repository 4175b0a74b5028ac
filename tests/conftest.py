# tests/conftest.py

from __future__ import annotations

from collections.abc import Callable
from datetime import date, datetime
from pathlib import Path
from types import SimpleNamespace

import pytest

from daylist.core.engine import TaskViewEngine
from daylist.tasks.task_models import Category, DateFilterField, Task

from .fakes import FakeConfirmer, FakeTaskRepo

DAY = date(2024, 3, 10)
NOW = datetime(2024, 3, 10, 9, 30)

TaskFactory = Callable[..., Task]


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with create_engine().

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the environment.
    """
    return SimpleNamespace(
        app_name="daylist-test",
        log_level="DEBUG",
        data_dir=tmp_path / "data",
        tasks_db_path=tmp_path / "data" / "daylist.sqlite3",
        store_timeout_seconds=5.0,
        default_filter_field="due_date",
        confirm_delete=True,
    )


@pytest.fixture()
def make_task() -> TaskFactory:
    counter = {"n": 0}

    def _make(
        task_id: str | None = None,
        *,
        priority: str = "normal",
        created_at: datetime = NOW,
        due_date: datetime | None = None,
        category: str | None = None,
        completed: bool = False,
        title: str | None = None,
    ) -> Task:
        counter["n"] += 1
        tid = task_id or f"t{counter['n']}"
        return Task(
            id=tid,
            title=title or f"task {tid}",
            created_at=created_at,
            priority=priority,
            due_date=due_date,
            category=category,
            completed=completed,
        )

    return _make


@pytest.fixture()
def categories() -> list[Category]:
    return [
        Category(id="work", name="Work", color="#ff0000", icon="briefcase"),
        Category(id="home", name="Home", color="#00ff00", icon="home"),
    ]


@pytest.fixture()
def repo(make_task: TaskFactory, categories: list[Category]) -> FakeTaskRepo:
    return FakeTaskRepo(
        tasks=[
            make_task("a", priority="high", due_date=datetime(2024, 3, 10, 18, 0), category="work"),
            make_task("b", priority="crucial", due_date=datetime(2024, 3, 10, 8, 0), category="home"),
            make_task("c", priority="normal", due_date=datetime(2024, 3, 11, 12, 0)),
            make_task("d", priority="optional"),
        ],
        categories=categories,
    )


@pytest.fixture()
def confirmer() -> FakeConfirmer:
    return FakeConfirmer(answer=True)


@pytest.fixture()
def engine(repo: FakeTaskRepo, confirmer: FakeConfirmer) -> TaskViewEngine:
    """Engine on the fake store; selected day 2024-03-10, filtering by due date."""
    return TaskViewEngine(
        repo,
        repo,
        confirmer,
        today=DAY,
        date_filter_field=DateFilterField.DUE_DATE,
        clock=lambda: NOW,
    )
