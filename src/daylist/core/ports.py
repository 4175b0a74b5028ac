# src/daylist/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The engine depends on Protocols instead of concrete implementations.
This keeps the store and the confirmation prompt swappable and makes testing easier.
Store methods raise on failure; the coordinator turns that into LoadFailure/SaveFailure.
"""

from typing import Protocol

from ..tasks.task_models import Category, Task


class TaskRepo(Protocol):
    """Loads/saves the full (unfiltered) task collection."""

    async def load_tasks(self) -> list[Task]: ...
    async def save_tasks(self, tasks: list[Task]) -> None: ...


class CategoryRepo(Protocol):
    async def load_categories(self) -> list[Category]: ...
    async def save_categories(self, categories: list[Category]) -> None: ...


class DeletionConfirmer(Protocol):
    """
    User-decision port: asked once before a task is removed.

    The console asks on the terminal; tests answer with a fixed value.
    """

    async def confirm_deletion(self, task: Task) -> bool: ...
