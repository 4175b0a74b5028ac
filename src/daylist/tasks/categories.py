# src/daylist/tasks/categories.py

from __future__ import annotations

import logging
from collections.abc import Iterable

from .task_models import Category

logger = logging.getLogger(__name__)


class CategoryResolver:
    """
    Read-only lookup over the most recently loaded categories.

    Tasks and categories are loaded independently, so a task may point at a
    category that no longer exists; such ids simply resolve to None.
    """

    def __init__(self) -> None:
        self._by_id: dict[str, Category] = {}
        self._loaded = False

    @property
    def loaded(self) -> bool:
        return self._loaded

    def load(self, categories: Iterable[Category]) -> None:
        by_id: dict[str, Category] = {}
        for cat in categories:
            if cat.id in by_id:
                logger.warning("Duplicate category id=%s; keeping the first one", cat.id)
                continue
            by_id[cat.id] = cat
        self._by_id = by_id
        self._loaded = True

    def all(self) -> list[Category]:
        return list(self._by_id.values())

    def resolve(self, category_id: str | None) -> Category | None:
        if not category_id:
            return None
        return self._by_id.get(category_id)

    def name_for(self, category_id: str | None) -> str | None:
        cat = self.resolve(category_id)
        return cat.name if cat else None
