# src/daylist/core/engine.py

"""
Task view engine.

The facade a front-end talks to. It owns:
- the ViewState (selected day, date field, category filter, derived list),
- the MutationCoordinator (full task collection + store write-through),
- the CategoryResolver,
- the cached date range for the date slider.

Derivation is synchronous and runs after every selection change and after
every change the coordinator reports.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import date, datetime

from ..tasks.categories import CategoryResolver
from ..tasks.coordinator import MutationCoordinator, OperationResult, Outcome
from ..tasks.dates import VisibleDates, month_label
from ..tasks.task_models import Category, DateFilterField, Task, TaskDraft
from ..tasks.task_view import derive
from .ports import CategoryRepo, DeletionConfirmer, TaskRepo
from .state import ViewState

logger = logging.getLogger(__name__)


class TaskViewEngine:
    def __init__(
        self,
        task_repo: TaskRepo,
        category_repo: CategoryRepo | None,
        confirmer: DeletionConfirmer,
        *,
        today: date | None = None,
        date_filter_field: DateFilterField = DateFilterField.DUE_DATE,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._clock = clock
        self._confirmer = confirmer
        self._dates = VisibleDates()
        self.resolver = CategoryResolver()
        self.coordinator = MutationCoordinator(
            task_repo, category_repo, on_change=self._on_collection_change, clock=clock
        )
        self.state = ViewState(
            selected_date=today or clock().date(),
            date_filter_field=DateFilterField(date_filter_field),
        )
        self.recompute()

    # ---- derivation ----

    def _on_collection_change(self) -> None:
        if self.coordinator.categories_loaded:
            self.resolver.load(self.coordinator.categories)
        self.recompute()

    def recompute(self) -> list[Task]:
        s = self.state
        s.filtered_tasks = derive(
            self.coordinator.tasks,
            s.selected_date,
            s.date_filter_field,
            s.active_category_id,
        )
        return s.filtered_tasks

    # ---- queries ----

    def get_visible_dates(self, reference: date | datetime | None = None) -> list[date]:
        return self._dates.get(reference or self._clock())

    def get_filtered_tasks(self) -> list[Task]:
        return list(self.state.filtered_tasks)

    def resolve_category(self, category_id: str | None) -> Category | None:
        return self.resolver.resolve(category_id)

    @property
    def active_category_name(self) -> str | None:
        return self.resolver.name_for(self.state.active_category_id)

    @property
    def month_label(self) -> str:
        return month_label(self.state.selected_date)

    # ---- selection ----

    def set_selected_date(self, day: date | datetime) -> list[Task]:
        if isinstance(day, datetime):
            day = day.date()
        self.state.selected_date = day
        return self.recompute()

    def set_date_filter_field(self, field: DateFilterField | str) -> list[Task]:
        if isinstance(field, DateFilterField):
            self.state.date_filter_field = field
        else:
            self.state.date_filter_field = DateFilterField.parse(field)
        return self.recompute()

    def set_active_category(self, category_id: str | None) -> list[Task]:
        self.state.active_category_id = category_id or None
        return self.recompute()

    # ---- mutations ----

    async def add_task(self, draft: TaskDraft) -> OperationResult:
        return await self.coordinator.add(draft)

    async def toggle_task_completion(self, task_id: str) -> OperationResult:
        return await self.coordinator.toggle_completion(task_id)

    async def delete_task(self, task_id: str) -> OperationResult:
        task = self.coordinator.find(task_id)
        if task is None:
            return OperationResult("delete", Outcome.NOOP)

        if not await self._confirmer.confirm_deletion(task):
            logger.debug("Deletion of task %s declined", task_id)
            return OperationResult("delete", Outcome.CANCELLED, task=task)

        return await self.coordinator.delete(task_id)

    async def add_category(self, category: Category) -> OperationResult:
        return await self.coordinator.add_category(category)

    async def retry_save(self) -> OperationResult:
        return await self.coordinator.retry_save()

    async def reload(self) -> OperationResult:
        return await self.coordinator.reload()
