# src/daylist/tasks/coordinator.py

from __future__ import annotations

"""
Mutation coordinator.

Sole writer of the full task collection. Every operation:
- applies the change in memory,
- writes the whole collection through to the store,
- notifies the change listener so the day view is re-derived.

Writes are optimistic: when the save fails the in-memory change stays applied
and the failure is returned to the caller (no rollback, no automatic retry).
All operations, reload included, are serialized through one asyncio.Lock.
"""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, replace
from datetime import datetime
from enum import StrEnum

from ..core.ports import CategoryRepo, TaskRepo
from ..errors import LoadFailure, SaveFailure, StoreFailure
from .task_models import Category, Task, TaskDraft

logger = logging.getLogger(__name__)


class Outcome(StrEnum):
    PERSISTED = "persisted"
    LOADED = "loaded"
    NOOP = "noop"
    CANCELLED = "cancelled"
    FAILED = "failed"


@dataclass(slots=True, frozen=True)
class OperationResult:
    operation: str
    outcome: Outcome
    task: Task | None = None
    failure: StoreFailure | None = None

    @property
    def ok(self) -> bool:
        return self.outcome != Outcome.FAILED


class MutationCoordinator:
    def __init__(
        self,
        task_repo: TaskRepo,
        category_repo: CategoryRepo | None = None,
        *,
        on_change: Callable[[], None] | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._task_repo = task_repo
        self._category_repo = category_repo
        self._on_change = on_change
        self._clock = clock
        self._lock = asyncio.Lock()

        self._tasks: list[Task] = []
        self._categories: list[Category] = []
        self.tasks_loaded = False
        self.categories_loaded = False

    # ---- read-only views ----

    @property
    def tasks(self) -> list[Task]:
        """Snapshot of the full collection; callers must not mutate it."""
        return list(self._tasks)

    @property
    def categories(self) -> list[Category]:
        return list(self._categories)

    def find(self, task_id: str) -> Task | None:
        for t in self._tasks:
            if t.id == task_id:
                return t
        return None

    def set_listener(self, on_change: Callable[[], None] | None) -> None:
        self._on_change = on_change

    # ---- helpers ----

    def _notify(self) -> None:
        if self._on_change is not None:
            self._on_change()

    async def _persist(self, operation: str, task: Task | None) -> OperationResult:
        try:
            await self._task_repo.save_tasks(list(self._tasks))
        except Exception as e:
            logger.exception("%s: save_tasks failed (in-memory change kept)", operation)
            return OperationResult(operation, Outcome.FAILED, task=task, failure=SaveFailure(operation, e))
        return OperationResult(operation, Outcome.PERSISTED, task=task)

    # ---- operations ----

    async def add(self, draft: TaskDraft) -> OperationResult:
        task = draft.to_task(now=self._clock())
        async with self._lock:
            self._tasks.append(task)
            self._notify()
            result = await self._persist("add", task)
        logger.info("Task added id=%s outcome=%s", task.id, result.outcome.value)
        return result

    async def toggle_completion(self, task_id: str) -> OperationResult:
        async with self._lock:
            for idx, t in enumerate(self._tasks):
                if t.id == task_id:
                    updated = replace(t, completed=not t.completed)
                    self._tasks[idx] = updated
                    break
            else:
                logger.debug("toggle_completion: no task id=%s", task_id)
                return OperationResult("toggle_completion", Outcome.NOOP)

            self._notify()
            result = await self._persist("toggle_completion", updated)
        logger.info(
            "Task %s completed=%s outcome=%s", task_id, updated.completed, result.outcome.value
        )
        return result

    async def delete(self, task_id: str) -> OperationResult:
        """Remove a task. The caller must have obtained a positive confirmation first."""
        async with self._lock:
            removed = self.find(task_id)
            if removed is None:
                logger.debug("delete: no task id=%s", task_id)
                return OperationResult("delete", Outcome.NOOP)

            self._tasks = [t for t in self._tasks if t.id != task_id]
            self._notify()
            result = await self._persist("delete", removed)
        logger.info("Task deleted id=%s outcome=%s", task_id, result.outcome.value)
        return result

    async def add_category(self, category: Category) -> OperationResult:
        """Add or rename a category and write the category collection through."""
        if self._category_repo is None:
            raise RuntimeError("no category store configured")
        if not category.id.strip() or not category.name.strip():
            raise ValueError("category id and name are required")

        async with self._lock:
            self._categories = [c for c in self._categories if c.id != category.id]
            self._categories.append(category)
            self.categories_loaded = True
            self._notify()
            try:
                await self._category_repo.save_categories(list(self._categories))
            except Exception as e:
                logger.exception("add_category: save_categories failed (in-memory change kept)")
                return OperationResult(
                    "add_category", Outcome.FAILED, failure=SaveFailure("add_category", e)
                )
        logger.info("Category saved id=%s", category.id)
        return OperationResult("add_category", Outcome.PERSISTED)

    async def retry_save(self) -> OperationResult:
        """Write the current collection again, e.g. after a SaveFailure."""
        async with self._lock:
            return await self._persist("retry_save", None)

    async def reload(self) -> OperationResult:
        """
        Replace in-memory tasks and categories with what the store holds.

        On failure the last known-good collection (possibly empty) is kept.
        """
        async with self._lock:
            try:
                tasks = await self._task_repo.load_tasks()
            except Exception as e:
                logger.exception("reload: load_tasks failed; keeping %d in-memory tasks", len(self._tasks))
                self._notify()
                return OperationResult("reload", Outcome.FAILED, failure=LoadFailure("load_tasks", e))

            categories: list[Category] | None = None
            failure: LoadFailure | None = None
            if self._category_repo is not None:
                try:
                    categories = await self._category_repo.load_categories()
                except Exception as e:
                    logger.exception("reload: load_categories failed; keeping previous categories")
                    failure = LoadFailure("load_categories", e)

            self._tasks = list(tasks)
            self.tasks_loaded = True
            if categories is not None:
                self._categories = list(categories)
                self.categories_loaded = True
            self._notify()

        logger.info(
            "Reloaded tasks=%d categories=%d", len(self._tasks), len(self._categories)
        )
        if failure is not None:
            return OperationResult("reload", Outcome.FAILED, failure=failure)
        return OperationResult("reload", Outcome.LOADED)
