# tests/test_engine.py

from __future__ import annotations

from datetime import date, datetime

import pytest

from daylist.core.engine import TaskViewEngine
from daylist.tasks.coordinator import Outcome
from daylist.tasks.task_models import DateFilterField, TaskDraft

from .fakes import FakeConfirmer, FakeTaskRepo


def _ids(engine: TaskViewEngine) -> list[str]:
    return [t.id for t in engine.get_filtered_tasks()]


@pytest.mark.asyncio
async def test_view_is_empty_until_reload(engine: TaskViewEngine) -> None:
    assert engine.get_filtered_tasks() == []
    assert engine.resolve_category("work") is None

    await engine.reload()

    # a (high, due today), b (crucial, due today), d (no due date, created today)
    assert _ids(engine) == ["b", "a", "d"]
    assert engine.resolve_category("work").name == "Work"


@pytest.mark.asyncio
async def test_selection_changes_recompute(engine: TaskViewEngine) -> None:
    await engine.reload()

    engine.set_selected_date(date(2024, 3, 11))
    assert _ids(engine) == ["c"]

    engine.set_date_filter_field(DateFilterField.CREATED_AT)
    assert _ids(engine) == []

    engine.set_selected_date(datetime(2024, 3, 10, 15, 0))
    assert _ids(engine) == ["b", "a", "c", "d"]

    engine.set_active_category("work")
    assert _ids(engine) == ["a"]
    assert engine.active_category_name == "Work"

    engine.set_active_category(None)
    assert engine.active_category_name is None
    assert len(_ids(engine)) == 4


@pytest.mark.asyncio
async def test_filter_field_accepts_names(engine: TaskViewEngine) -> None:
    engine.set_date_filter_field("created")
    assert engine.state.date_filter_field == DateFilterField.CREATED_AT
    with pytest.raises(ValueError):
        engine.set_date_filter_field("updated")


@pytest.mark.asyncio
async def test_stale_category_filter_resolves_to_nothing(engine: TaskViewEngine) -> None:
    await engine.reload()
    engine.set_active_category("gone")

    assert engine.get_filtered_tasks() == []
    assert engine.active_category_name is None


@pytest.mark.asyncio
async def test_add_shows_up_on_selected_day(engine: TaskViewEngine) -> None:
    await engine.reload()

    result = await engine.add_task(
        TaskDraft(title="Pay rent", priority="crucial", due_date=datetime(2024, 3, 10, 12, 0))
    )

    assert result.outcome == Outcome.PERSISTED
    assert _ids(engine)[:2] == ["b", result.task.id]


@pytest.mark.asyncio
async def test_toggle_updates_view(engine: TaskViewEngine) -> None:
    await engine.reload()

    await engine.toggle_task_completion("a")

    shown = {t.id: t for t in engine.get_filtered_tasks()}
    assert shown["a"].completed is True


@pytest.mark.asyncio
async def test_toggle_save_failure_still_updates_view(engine: TaskViewEngine, repo: FakeTaskRepo) -> None:
    await engine.reload()
    repo.fail_save = True

    result = await engine.toggle_task_completion("b")

    assert result.outcome == Outcome.FAILED
    assert {t.id: t for t in engine.get_filtered_tasks()}["b"].completed is True


@pytest.mark.asyncio
async def test_delete_after_confirmation(engine: TaskViewEngine, repo: FakeTaskRepo, confirmer: FakeConfirmer) -> None:
    await engine.reload()

    result = await engine.delete_task("a")

    assert confirmer.asked == ["a"]
    assert result.outcome == Outcome.PERSISTED
    assert "a" not in _ids(engine)
    assert "a" not in [t.id for t in repo.persisted]


@pytest.mark.asyncio
async def test_declined_delete_leaves_everything_alone(repo: FakeTaskRepo) -> None:
    confirmer = FakeConfirmer(answer=False)
    engine = TaskViewEngine(repo, repo, confirmer, today=date(2024, 3, 10))
    await engine.reload()
    saves_before = repo.save_calls

    result = await engine.delete_task("a")

    assert confirmer.asked == ["a"]
    assert result.outcome == Outcome.CANCELLED
    assert engine.coordinator.find("a") is not None
    assert repo.save_calls == saves_before


@pytest.mark.asyncio
async def test_delete_unknown_does_not_ask(engine: TaskViewEngine, confirmer: FakeConfirmer) -> None:
    await engine.reload()

    result = await engine.delete_task("nope")

    assert result.outcome == Outcome.NOOP
    assert confirmer.asked == []


@pytest.mark.asyncio
async def test_visible_dates_and_month_label(engine: TaskViewEngine) -> None:
    dates = engine.get_visible_dates()
    assert dates[0] == date(2024, 3, 1)
    assert len(dates) == 31 + 15
    assert engine.month_label == "March 2024"
    assert engine.get_visible_dates(date(2024, 12, 24))[-1] == date(2025, 1, 15)
