# src/daylist/tasks/task_store.py

from __future__ import annotations

import asyncio
import contextlib
import logging
import sqlite3
from collections.abc import Callable
from datetime import datetime
from pathlib import Path
from typing import TypeVar

from .dates import to_local
from .task_models import Category, Priority, Task

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _ts_to_float(ts: datetime | None) -> float | None:
    if ts is None:
        return None
    return ts.timestamp()


def _float_to_ts(raw: float | None) -> datetime | None:
    if raw is None:
        return None
    return datetime.fromtimestamp(float(raw))


class TaskStore:
    """
    SQLite store for the task and category collections.

    The engine always works on full collections: load returns every row,
    save replaces every row inside one transaction.

    The schema is intentionally simple and migration-safe:
    - create table if missing
    - use PRAGMA table_info to detect missing columns
    - add columns with ALTER TABLE only when needed

    Thread-safety:
    - each call opens its own SQLite connection, so the async wrappers can
      run the blocking work in a worker thread
    """

    def __init__(self, db_path: str | Path = "daylist.sqlite3", *, timeout_seconds: float | None = None) -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._timeout = timeout_seconds if timeout_seconds and timeout_seconds > 0 else None
        self._ensure_schema()
        try:
            total = self.count_tasks()
        except sqlite3.Error:
            total = -1
        logger.info("TaskStore ready db=%s total=%s", self._db_path, total)

    @property
    def db_path(self) -> Path:
        return self._db_path

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        conn.row_factory = sqlite3.Row
        self._configure_conn(conn)
        return conn

    @staticmethod
    def _configure_conn(conn: sqlite3.Connection) -> None:
        with contextlib.suppress(sqlite3.Error):
            conn.execute("PRAGMA journal_mode=WAL")

    def _ensure_schema(self) -> None:
        conn = self._get_conn()
        try:
            cur = conn.cursor()

            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS tasks (
                    id TEXT PRIMARY KEY,
                    position INTEGER NOT NULL DEFAULT 0,
                    title TEXT NOT NULL,
                    description TEXT,
                    created_at REAL NOT NULL,
                    due_at REAL,
                    priority TEXT NOT NULL DEFAULT 'normal',
                    category TEXT,
                    completed INTEGER NOT NULL DEFAULT 0
                )
                """
            )
            cur.execute(
                """
                CREATE TABLE IF NOT EXISTS categories (
                    id TEXT PRIMARY KEY,
                    position INTEGER NOT NULL DEFAULT 0,
                    name TEXT NOT NULL,
                    color TEXT,
                    icon TEXT
                )
                """
            )

            # Migrations (safe): add missing columns.
            def add_cols(table: str, wanted: list[tuple[str, str]]) -> None:
                cur.execute(f"PRAGMA table_info({table})")
                cols = {row["name"] for row in cur.fetchall()}
                for name, decl in wanted:
                    if name in cols:
                        continue
                    cur.execute(f"ALTER TABLE {table} ADD COLUMN {name} {decl}")
                    logger.info("TaskStore migration: added column %s.%s", table, name)

            add_cols(
                "tasks",
                [
                    ("position", "INTEGER NOT NULL DEFAULT 0"),
                    ("description", "TEXT"),
                    ("due_at", "REAL"),
                    ("priority", "TEXT NOT NULL DEFAULT 'normal'"),
                    ("category", "TEXT"),
                    ("completed", "INTEGER NOT NULL DEFAULT 0"),
                ],
            )
            add_cols(
                "categories",
                [
                    ("position", "INTEGER NOT NULL DEFAULT 0"),
                    ("color", "TEXT"),
                    ("icon", "TEXT"),
                ],
            )

            conn.commit()
        finally:
            conn.close()

    @staticmethod
    def _row_to_task(row: sqlite3.Row) -> Task:
        return Task(
            id=str(row["id"]),
            title=str(row["title"] or ""),
            created_at=_float_to_ts(row["created_at"]) or datetime.fromtimestamp(0),
            priority=str(row["priority"] or Priority.NORMAL),
            description=row["description"],
            due_date=_float_to_ts(row["due_at"]),
            category=row["category"],
            completed=bool(row["completed"]),
        )

    @staticmethod
    def _row_to_category(row: sqlite3.Row) -> Category:
        return Category(
            id=str(row["id"]),
            name=str(row["name"] or ""),
            color=row["color"],
            icon=row["icon"],
        )

    async def _run(self, fn: Callable[[], T]) -> T:
        """
        Run a blocking store call off the event loop, optionally bounded by a timeout.

        A worker thread cannot be cancelled, so on timeout we still wait for it
        to finish before raising: a late write must not land after the next one.
        """
        worker = asyncio.ensure_future(asyncio.to_thread(fn))
        if self._timeout is None:
            return await worker
        try:
            return await asyncio.wait_for(asyncio.shield(worker), timeout=self._timeout)
        except TimeoutError:
            logger.warning("Store call %s exceeded %.1fs; waiting for it to settle", fn, self._timeout)
            with contextlib.suppress(Exception):
                await worker
            raise

    # ---- sync API ----

    def count_tasks(self) -> int:
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute("SELECT COUNT(*) FROM tasks")
            (n,) = cur.fetchone()
            return int(n)
        finally:
            conn.close()

    def read_tasks(self) -> list[Task]:
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute("SELECT * FROM tasks ORDER BY position ASC, created_at ASC")
            return [self._row_to_task(r) for r in cur.fetchall()]
        finally:
            conn.close()

    def write_tasks(self, tasks: list[Task]) -> None:
        ids = [t.id for t in tasks]
        if len(set(ids)) != len(ids):
            raise ValueError("task ids must be unique")

        rows = [
            (
                t.id,
                pos,
                t.title,
                t.description,
                _ts_to_float(to_local(t.created_at)),
                _ts_to_float(to_local(t.due_date)) if t.due_date is not None else None,
                str(t.priority or Priority.NORMAL),
                t.category,
                1 if t.completed else 0,
            )
            for pos, t in enumerate(tasks)
        ]

        conn = self._get_conn()
        try:
            with conn:
                conn.execute("DELETE FROM tasks")
                conn.executemany(
                    """
                    INSERT INTO tasks(
                        id, position, title, description,
                        created_at, due_at, priority, category, completed
                    )
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    rows,
                )
            logger.debug("Tasks saved count=%s", len(rows))
        finally:
            conn.close()

    def read_categories(self) -> list[Category]:
        conn = self._get_conn()
        try:
            cur = conn.cursor()
            cur.execute("SELECT * FROM categories ORDER BY position ASC")
            return [self._row_to_category(r) for r in cur.fetchall()]
        finally:
            conn.close()

    def write_categories(self, categories: list[Category]) -> None:
        rows = [(c.id, pos, c.name, c.color, c.icon) for pos, c in enumerate(categories)]
        conn = self._get_conn()
        try:
            with conn:
                conn.execute("DELETE FROM categories")
                conn.executemany(
                    "INSERT INTO categories(id, position, name, color, icon) VALUES (?, ?, ?, ?, ?)",
                    rows,
                )
            logger.debug("Categories saved count=%s", len(rows))
        finally:
            conn.close()

    # ---- async ports (TaskRepo / CategoryRepo) ----

    async def load_tasks(self) -> list[Task]:
        return await self._run(self.read_tasks)

    async def save_tasks(self, tasks: list[Task]) -> None:
        snapshot = list(tasks)
        await self._run(lambda: self.write_tasks(snapshot))

    async def load_categories(self) -> list[Category]:
        return await self._run(self.read_categories)

    async def save_categories(self, categories: list[Category]) -> None:
        snapshot = list(categories)
        await self._run(lambda: self.write_categories(snapshot))
