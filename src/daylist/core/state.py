# src/daylist/core/state.py

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date

from ..tasks.task_models import DateFilterField, Task


@dataclass
class ViewState:
    """
    Per-session selection for the day view.

    filtered_tasks is derived: it is replaced after every change to the
    selection or to the task collection and never edited in place.
    """

    selected_date: date
    date_filter_field: DateFilterField = DateFilterField.DUE_DATE
    active_category_id: str | None = None
    filtered_tasks: list[Task] = field(default_factory=list)
