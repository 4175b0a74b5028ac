# tests/test_task_store.py

from __future__ import annotations

import sqlite3
import time
from datetime import datetime
from pathlib import Path

import pytest

from daylist.core.engine import TaskViewEngine
from daylist.errors import LoadFailure, SaveFailure
from daylist.tasks.coordinator import Outcome
from daylist.tasks.task_models import Category, Task, TaskDraft
from daylist.tasks.task_store import TaskStore

from .fakes import FakeConfirmer


def test_empty_store_loads_nothing(tmp_path: Path) -> None:
    store = TaskStore(tmp_path / "tasks.sqlite3")
    assert store.read_tasks() == []
    assert store.read_categories() == []
    assert store.count_tasks() == 0


def test_write_replaces_full_collection_in_order(tmp_path: Path, make_task) -> None:
    store = TaskStore(tmp_path / "tasks.sqlite3")
    first = [
        make_task("x", priority="low", due_date=datetime(2024, 3, 12, 7, 45), category="work"),
        make_task("y", completed=True),
    ]
    store.write_tasks(first)

    loaded = store.read_tasks()
    assert loaded == first

    store.write_tasks([first[1]])
    assert [t.id for t in store.read_tasks()] == ["y"]


def test_write_rejects_duplicate_ids(tmp_path: Path, make_task) -> None:
    store = TaskStore(tmp_path / "tasks.sqlite3")
    store.write_tasks([make_task("keep")])

    with pytest.raises(ValueError):
        store.write_tasks([make_task("dup"), make_task("dup")])

    assert [t.id for t in store.read_tasks()] == ["keep"]


def test_categories_are_stored_with_metadata(tmp_path: Path) -> None:
    store = TaskStore(tmp_path / "tasks.sqlite3")
    cats = [Category(id="w", name="Work", color="#f00", icon="briefcase"), Category(id="h", name="Home")]

    store.write_categories(cats)

    assert store.read_categories() == cats


def test_schema_migration_adds_missing_columns(tmp_path: Path) -> None:
    db = tmp_path / "old.sqlite3"
    conn = sqlite3.connect(db)
    conn.execute("CREATE TABLE tasks (id TEXT PRIMARY KEY, title TEXT NOT NULL, created_at REAL NOT NULL)")
    conn.execute("INSERT INTO tasks(id, title, created_at) VALUES ('old', 'legacy', ?)", (datetime(2024, 3, 1).timestamp(),))
    conn.commit()
    conn.close()

    store = TaskStore(db)
    (task,) = store.read_tasks()

    assert task == Task(id="old", title="legacy", created_at=datetime(2024, 3, 1))


@pytest.mark.asyncio
async def test_async_ports_round_trip(tmp_path: Path, make_task) -> None:
    store = TaskStore(tmp_path / "tasks.sqlite3", timeout_seconds=5.0)
    tasks = [make_task("a"), make_task("b", priority="crucial")]

    await store.save_tasks(tasks)
    await store.save_categories([Category(id="c", name="C")])

    assert await store.load_tasks() == tasks
    assert [c.id for c in await store.load_categories()] == ["c"]


@pytest.mark.asyncio
async def test_engine_survives_restart(tmp_path: Path) -> None:
    db = tmp_path / "tasks.sqlite3"
    store = TaskStore(db)
    engine = TaskViewEngine(store, store, FakeConfirmer())
    await engine.reload()
    added = await engine.add_task(TaskDraft(title="Water plants", priority="high"))
    await engine.toggle_task_completion(added.task.id)

    reopened = TaskStore(db)
    fresh = TaskViewEngine(reopened, reopened, FakeConfirmer())
    await fresh.reload()

    (task,) = fresh.coordinator.tasks
    assert task.id == added.task.id
    assert task.completed is True
    assert task.created_at == added.task.created_at


class SlowTaskStore(TaskStore):
    """TaskStore whose next N reads/writes block the worker thread for `delay` seconds."""

    def __init__(self, *args, delay: float, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.delay = delay
        self.slow_reads = 0
        self.slow_writes = 0

    def read_tasks(self) -> list[Task]:
        if self.slow_reads:
            self.slow_reads -= 1
            time.sleep(self.delay)
        return super().read_tasks()

    def write_tasks(self, tasks: list[Task]) -> None:
        if self.slow_writes:
            self.slow_writes -= 1
            time.sleep(self.delay)
        super().write_tasks(tasks)


@pytest.mark.asyncio
async def test_timed_out_save_never_overwrites_a_later_one(tmp_path: Path, make_task) -> None:
    store = SlowTaskStore(tmp_path / "tasks.sqlite3", timeout_seconds=0.2, delay=0.6)
    store.write_tasks([make_task("a"), make_task("b")])
    engine = TaskViewEngine(store, store, FakeConfirmer())
    await engine.reload()

    store.slow_writes = 1
    first = await engine.toggle_task_completion("a")
    second = await engine.toggle_task_completion("b")

    assert first.outcome == Outcome.FAILED
    assert isinstance(first.failure, SaveFailure)
    assert isinstance(first.failure.cause, TimeoutError)
    assert second.outcome == Outcome.PERSISTED

    persisted = {t.id: t.completed for t in store.read_tasks()}
    in_memory = {t.id: t.completed for t in engine.coordinator.tasks}
    assert persisted == in_memory == {"a": True, "b": True}


@pytest.mark.asyncio
async def test_load_timeout_keeps_last_known_good(tmp_path: Path, make_task) -> None:
    store = SlowTaskStore(tmp_path / "tasks.sqlite3", timeout_seconds=0.1, delay=0.4)
    store.write_tasks([make_task("a")])
    engine = TaskViewEngine(store, store, FakeConfirmer())
    await engine.reload()

    store.write_tasks([])
    store.slow_reads = 1
    result = await engine.reload()

    assert result.outcome == Outcome.FAILED
    assert isinstance(result.failure, LoadFailure)
    assert result.failure.operation == "load_tasks"
    assert isinstance(result.failure.cause, TimeoutError)
    assert [t.id for t in engine.coordinator.tasks] == ["a"]
