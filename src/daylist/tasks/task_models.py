# src/daylist/tasks/task_models.py

from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum


class Priority(StrEnum):
    """
    Ordered task priority, most urgent first.

    Stored tasks may carry other strings (the creation form also offers "low");
    those are kept verbatim and sort as NORMAL.
    """

    CRUCIAL = "crucial"
    HIGH = "high"
    NORMAL = "normal"
    OPTIONAL = "optional"


PRIORITY_RANK: dict[str, int] = {
    Priority.CRUCIAL: 0,
    Priority.HIGH: 1,
    Priority.NORMAL: 2,
    Priority.OPTIONAL: 3,
}

# Values offered when creating a task from the console.
CREATION_PRIORITIES: tuple[str, ...] = ("crucial", "high", "normal", "low", "optional")


def priority_rank(priority: str | None) -> int:
    if not priority:
        return PRIORITY_RANK[Priority.NORMAL]
    return PRIORITY_RANK.get(priority, PRIORITY_RANK[Priority.NORMAL])


class DateFilterField(StrEnum):
    """Which task timestamp is compared against the selected day."""

    CREATED_AT = "created_at"
    DUE_DATE = "due_date"

    @classmethod
    def parse(cls, raw: str | None) -> DateFilterField:
        s = (raw or "").strip().lower().replace("-", "_")
        aliases = {
            "created": cls.CREATED_AT,
            "created_at": cls.CREATED_AT,
            "createdat": cls.CREATED_AT,
            "due": cls.DUE_DATE,
            "due_date": cls.DUE_DATE,
            "duedate": cls.DUE_DATE,
        }
        try:
            return aliases[s]
        except KeyError:
            raise ValueError(f"unknown date filter field: {raw!r}") from None


def new_task_id() -> str:
    return uuid.uuid4().hex


@dataclass(slots=True)
class Task:
    id: str
    title: str
    created_at: datetime
    priority: str = Priority.NORMAL
    description: str | None = None
    due_date: datetime | None = None
    category: str | None = None
    completed: bool = False


@dataclass(slots=True, frozen=True)
class Category:
    id: str
    name: str
    color: str | None = None
    icon: str | None = None


@dataclass(slots=True, frozen=True)
class TaskDraft:
    """What the caller supplies for a new task; id/created_at/completed are assigned on add."""

    title: str
    description: str | None = None
    due_date: datetime | None = None
    priority: str = Priority.NORMAL
    category: str | None = None

    def to_task(self, *, now: datetime) -> Task:
        title = (self.title or "").strip()
        if not title:
            raise ValueError("title is required")
        description = (self.description or "").strip() or None
        return Task(
            id=new_task_id(),
            title=title,
            created_at=now,
            priority=(self.priority or Priority.NORMAL).strip().lower(),
            description=description,
            due_date=self.due_date,
            category=self.category or None,
            completed=False,
        )
