# src/daylist/tasks/task_view.py

"""
Filter/sort pipeline for the day view.

derive() is a pure function of its inputs: the caller re-runs it whenever the
task collection, the selected day, the date field or the category filter
changes, and replaces the previous result wholesale.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date, datetime

from .dates import day_bounds, start_of_day
from .task_models import DateFilterField, Task, priority_rank


def comparison_timestamp(task: Task, field: DateFilterField) -> datetime:
    """
    Timestamp used to place a task on a day.

    Filtering by due date falls back to created_at for tasks without one,
    so undated tasks stay visible on the day they were created.
    """
    if field == DateFilterField.DUE_DATE and task.due_date is not None:
        return task.due_date
    return task.created_at


def derive(
    tasks: Iterable[Task],
    selected_date: date,
    date_filter_field: DateFilterField,
    active_category_id: str | None = None,
) -> list[Task]:
    field = DateFilterField(date_filter_field)
    start, end = day_bounds(selected_date)

    out: list[Task] = []
    for task in tasks:
        ts = start_of_day(comparison_timestamp(task, field))
        if not (start <= ts <= end):
            continue
        if active_category_id is not None and task.category != active_category_id:
            continue
        out.append(task)

    # sorted() is stable: equal ranks keep collection order.
    return sorted(out, key=lambda t: priority_rank(t.priority))
