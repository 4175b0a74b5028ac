# src/daylist/cli/commands.py

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Callable
from datetime import date, datetime, timedelta
from typing import cast

from ..core.engine import TaskViewEngine
from ..errors import SaveFailure
from ..tasks.coordinator import OperationResult, Outcome
from ..tasks.task_models import CREATION_PRIORITIES, Category, Task, TaskDraft

CommandEmitter = Callable[[str], None]
CommandReply = str | Awaitable[str]
CommandHandler2 = Callable[[TaskViewEngine, list[str]], CommandReply]
CommandHandler3 = Callable[[TaskViewEngine, list[str], CommandEmitter | None], CommandReply]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by the console (/help, /day, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    async def handle(
        self,
        engine: TaskViewEngine,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 3

        if nparams >= 3:
            reply = cast(CommandHandler3, handler)(engine, args, emit)
        else:
            reply = cast(CommandHandler2, handler)(engine, args)

        if inspect.isawaitable(reply):
            return await reply
        return reply

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- formatting ----


def format_task(engine: TaskViewEngine, index: int, task: Task) -> str:
    mark = "x" if task.completed else " "
    parts = [f"{index:>2}. [{mark}] {task.title}", f"({task.priority})"]
    if task.category:
        cat = engine.resolve_category(task.category)
        parts.append(f"#{cat.name}" if cat else f"#{task.category}?")
    if task.due_date is not None:
        parts.append(f"due {task.due_date:%Y-%m-%d %H:%M}")
    return " ".join(parts)


def format_day(engine: TaskViewEngine) -> str:
    s = engine.state
    by = "due date" if s.date_filter_field == "due_date" else "creation date"
    header = f"{s.selected_date:%A %Y-%m-%d} ({engine.month_label}), by {by}"
    if s.active_category_id:
        header += f", category: {engine.active_category_name or s.active_category_id}"

    tasks = engine.get_filtered_tasks()
    if not tasks:
        return f"{header}\n  No tasks for this day."
    lines = [header]
    lines.extend("  " + format_task(engine, i, t) for i, t in enumerate(tasks, start=1))
    return "\n".join(lines)


def describe_result(result: OperationResult, *, what: str) -> str:
    if result.outcome == Outcome.FAILED:
        msg = f"{what}: {result.failure}"
        if isinstance(result.failure, SaveFailure):
            msg += " (change kept in memory; use /retry to save again)"
        return msg
    if result.outcome == Outcome.NOOP:
        return f"{what}: no such task."
    if result.outcome == Outcome.CANCELLED:
        return f"{what}: cancelled."
    return f"{what}: ok."


def _find_task(engine: TaskViewEngine, ref: str) -> Task | None:
    """Resolve a list number (from the current day view) or a task id."""
    if ref.isdigit():
        tasks = engine.get_filtered_tasks()
        idx = int(ref) - 1
        if 0 <= idx < len(tasks):
            return tasks[idx]
    return engine.coordinator.find(ref)


def parse_day(raw: str, *, today: date, current: date) -> date:
    s = raw.strip().lower()
    if s == "today":
        return today
    if s == "tomorrow":
        return today + timedelta(days=1)
    if s and s[0] in "+-" and s[1:].isdigit():
        return current + timedelta(days=int(s))
    return date.fromisoformat(s)


# ---- handlers ----


def cmd_help(engine: TaskViewEngine, args: list[str]) -> str:
    return registry.build_help()


def cmd_list(engine: TaskViewEngine, args: list[str]) -> str:
    return format_day(engine)


def cmd_dates(engine: TaskViewEngine, args: list[str]) -> str:
    dates = engine.get_visible_dates()
    selected = engine.state.selected_date
    cells = [f"[{d.day}]" if d == selected else str(d.day) for d in dates]
    first, last = dates[0], dates[-1]
    return f"{first:%Y-%m-%d} .. {last:%Y-%m-%d}\n  " + " ".join(cells)


def cmd_day(engine: TaskViewEngine, args: list[str]) -> str:
    """
    /day            -> show the selected day
    /day today      -> jump to today
    /day +1 | -1    -> move relative to the selected day
    /day 2024-03-10 -> jump to a date
    """
    if args:
        try:
            day = parse_day(args[0], today=date.today(), current=engine.state.selected_date)
        except (ValueError, OverflowError):
            return "Usage: /day today | tomorrow | +N | -N | YYYY-MM-DD"
        engine.set_selected_date(day)
        if day not in engine.get_visible_dates():
            logger.debug("Selected day %s is outside the date slider range", day)
    return format_day(engine)


def cmd_by(engine: TaskViewEngine, args: list[str]) -> str:
    if not args:
        return f"Filtering by {engine.state.date_filter_field}. Use /by due or /by created."
    try:
        engine.set_date_filter_field(args[0])
    except ValueError:
        return "Usage: /by due | /by created"
    return format_day(engine)


def cmd_cat(engine: TaskViewEngine, args: list[str]) -> str:
    if not args:
        current = engine.state.active_category_id
        return f"Category filter: {current or 'off'}. Use /cat <id> or /cat off."
    arg = args[0]
    if arg.lower() in ("off", "none", "all"):
        engine.set_active_category(None)
    else:
        engine.set_active_category(arg)
    return format_day(engine)


def cmd_cats(engine: TaskViewEngine, args: list[str]) -> str:
    cats = engine.resolver.all()
    if not cats:
        return "No categories. Use /newcat <id> <name> to add one."
    lines = ["Categories:"]
    for c in cats:
        extra = " ".join(x for x in (c.icon, c.color) if x)
        lines.append(f"  {c.id}: {c.name}" + (f" ({extra})" if extra else ""))
    return "\n".join(lines)


async def cmd_newcat(engine: TaskViewEngine, args: list[str]) -> str:
    if len(args) < 2:
        return "Usage: /newcat <id> <name...>"
    cat = Category(id=args[0], name=" ".join(args[1:]))
    try:
        result = await engine.add_category(cat)
    except (RuntimeError, ValueError) as e:
        return f"Add category: {e}"
    return describe_result(result, what=f"Add category {cat.id}")


async def cmd_add(engine: TaskViewEngine, args: list[str]) -> str:
    """
    /add Buy milk !high #groceries @2024-03-10 -- two litres, oat

    !priority and #category are optional; the due date defaults to the
    selected day (@none for no due date). Words after "--" become the description.
    """
    description: str | None = None
    if "--" in args:
        cut = args.index("--")
        description = " ".join(args[cut + 1 :]) or None
        args = args[:cut]

    title_parts: list[str] = []
    priority = "normal"
    category: str | None = None
    now = datetime.now()
    due: datetime | None = datetime.combine(engine.state.selected_date, now.time())

    for a in args:
        if a.startswith("!") and len(a) > 1:
            priority = a[1:].lower()
        elif a.startswith("#") and len(a) > 1:
            category = a[1:]
        elif a.startswith("@") and len(a) > 1:
            raw = a[1:].lower()
            if raw == "none":
                due = None
            else:
                try:
                    due = datetime.combine(date.fromisoformat(raw), now.time())
                except ValueError:
                    return "Due date must look like @YYYY-MM-DD (or @none)."
        else:
            title_parts.append(a)

    if priority not in CREATION_PRIORITIES:
        return f"Unknown priority: {priority}. Use one of: {', '.join(CREATION_PRIORITIES)}."

    draft = TaskDraft(
        title=" ".join(title_parts),
        description=description,
        due_date=due,
        priority=priority,
        category=category,
    )
    try:
        result = await engine.add_task(draft)
    except ValueError as e:
        return f"Add: {e}. Usage: /add <title> [!priority] [#category] [@YYYY-MM-DD] [-- description]"

    msg = describe_result(result, what="Add")
    if category and engine.resolve_category(category) is None:
        msg += f" (category '{category}' is unknown)"
    return msg


def cmd_show(engine: TaskViewEngine, args: list[str]) -> str:
    if not args:
        return "Usage: /show <number|id>"
    task = _find_task(engine, args[0])
    if task is None:
        return f"No task {args[0]}."

    category = "-"
    if task.category:
        cat = engine.resolve_category(task.category)
        category = cat.name if cat else f"{task.category} (unknown)"
    due = f"{task.due_date:%Y-%m-%d %H:%M}" if task.due_date is not None else "-"
    return (
        f"{task.title}\n"
        f"  id: {task.id}\n"
        f"  priority: {task.priority}\n"
        f"  category: {category}\n"
        f"  due: {due}\n"
        f"  created: {task.created_at:%Y-%m-%d %H:%M}\n"
        f"  done: {'yes' if task.completed else 'no'}\n"
        f"  description: {task.description or '-'}"
    )


async def cmd_done(engine: TaskViewEngine, args: list[str]) -> str:
    if not args:
        return "Usage: /done <number|id>"
    task = _find_task(engine, args[0])
    if task is None:
        return f"No task {args[0]}."
    result = await engine.toggle_task_completion(task.id)
    if result.task is not None and result.outcome == Outcome.PERSISTED:
        state = "done" if result.task.completed else "not done"
        return f"'{result.task.title}' marked {state}."
    return describe_result(result, what="Toggle")


async def cmd_del(engine: TaskViewEngine, args: list[str]) -> str:
    if not args:
        return "Usage: /del <number|id>"
    task = _find_task(engine, args[0])
    if task is None:
        return f"No task {args[0]}."
    result = await engine.delete_task(task.id)
    return describe_result(result, what=f"Delete '{task.title}'")


async def cmd_reload(
    engine: TaskViewEngine,
    args: list[str],
    emit: CommandEmitter | None = None,
) -> str:
    if emit:
        emit("Reloading tasks and categories...")
    result = await engine.reload()
    if not result.ok:
        return describe_result(result, what="Reload")
    return format_day(engine)


async def cmd_retry(engine: TaskViewEngine, args: list[str]) -> str:
    result = await engine.retry_save()
    return describe_result(result, what="Save")


def cmd_status(engine: TaskViewEngine, args: list[str]) -> str:
    s = engine.state
    total = len(engine.coordinator.tasks)
    done = sum(1 for t in engine.coordinator.tasks if t.completed)
    return (
        "Status:\n"
        f"  Tasks: {total} ({done} done)\n"
        f"  Categories: {len(engine.resolver.all())}\n"
        f"  Selected day: {s.selected_date:%Y-%m-%d}\n"
        f"  Date field: {s.date_filter_field}\n"
        f"  Category filter: {s.active_category_id or 'off'}"
    )


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("list", cmd_list, help_text="Show tasks for the selected day.", aliases=["ls"])
registry.register("dates", cmd_dates, help_text="Show the browsable days.")
registry.register("day", cmd_day, help_text="Select a day: /day today | +N | -N | YYYY-MM-DD.")
registry.register("by", cmd_by, help_text="Filter days by due date or creation date: /by due | created.")
registry.register("cat", cmd_cat, help_text="Filter by category: /cat <id> | /cat off.")
registry.register("cats", cmd_cats, help_text="List categories.")
registry.register("newcat", cmd_newcat, help_text="Add a category: /newcat <id> <name>.")
registry.register(
    "add", cmd_add, help_text="Add a task: /add <title> [!priority] [#category] [@YYYY-MM-DD] [-- description]."
)
registry.register("show", cmd_show, help_text="Show task details: /show <number|id>.")
registry.register("done", cmd_done, help_text="Toggle completion: /done <number|id>.", aliases=["x"])
registry.register("del", cmd_del, help_text="Delete a task: /del <number|id>.", aliases=["rm"])
registry.register("reload", cmd_reload, help_text="Reload tasks and categories from the store.")
registry.register("retry", cmd_retry, help_text="Save the task list again after a failed save.")
registry.register("status", cmd_status, help_text="Show counts and the current selection.")
