# tests/test_task_filters.py

from __future__ import annotations

import asyncio

import pytest

from checklist_app.tasks.task_filters import (
    all_selected,
    bulk_delete,
    filter_tasks,
    set_select_all,
    toggle_selection,
)
from checklist_app.tasks.task_models import ALL_CATEGORY, Task

from .fakes import FakeDocumentStore


def _tasks() -> list[Task]:
    return [
        Task(id="a", name="A", category="Personal"),
        Task(id="b", name="B", category="Work"),
        Task(id="c", name="C", category="Work"),
    ]


def test_filter_by_category_keeps_order() -> None:
    result = filter_tasks(_tasks(), "Work")
    assert [t.name for t in result] == ["B", "C"]


def test_filter_all_returns_everything() -> None:
    tasks = _tasks()
    assert filter_tasks(tasks, ALL_CATEGORY) == tasks
    assert filter_tasks(tasks, "Shopping") == []


def test_toggle_selection_is_symmetric() -> None:
    selected = toggle_selection(frozenset(), "a")
    assert selected == {"a"}
    assert toggle_selection(selected, "a") == frozenset()


def test_select_all_touches_only_visible() -> None:
    visible = filter_tasks(_tasks(), "Work")
    selected = frozenset({"a"})

    selected = set_select_all(selected, visible, True)
    assert selected == {"a", "b", "c"}

    selected = set_select_all(selected, visible, False)
    assert selected == {"a"}


def test_all_selected() -> None:
    visible = filter_tasks(_tasks(), "Work")
    assert not all_selected(frozenset(), [])
    assert not all_selected(frozenset({"b"}), visible)
    assert all_selected(frozenset({"b", "c"}), visible)


@pytest.mark.asyncio
async def test_bulk_delete_empty_is_noop() -> None:
    store = FakeDocumentStore()
    assert await bulk_delete(store, "tasks", []) == []
    assert store.calls == []


@pytest.mark.asyncio
async def test_bulk_delete_issues_deletes_concurrently() -> None:
    store = FakeDocumentStore([{"id": i, "name": i, "category": "Work"} for i in ("x", "y", "z")])
    store.delete_gate = asyncio.Event()

    job = asyncio.create_task(bulk_delete(store, "tasks", ["x", "y", "z"]))
    for _ in range(3):
        await asyncio.sleep(0)

    # All three are in flight before any finishes.
    assert store.deletes_started == 3
    assert store.deletes_finished == 0
    assert not job.done()

    store.delete_gate.set()
    results = await job

    assert [r.doc_id for r in results] == ["x", "y", "z"]
    assert all(r.ok for r in results)
    assert store.docs == {}


@pytest.mark.asyncio
async def test_bulk_delete_reports_partial_failure() -> None:
    store = FakeDocumentStore([{"id": i, "name": i, "category": "Work"} for i in ("x", "y")])
    store.fail_ids = {"y"}

    results = await bulk_delete(store, "tasks", ["x", "y"])

    assert [r.ok for r in results] == [True, False]
    assert "x" not in store.docs
    assert "y" in store.docs
