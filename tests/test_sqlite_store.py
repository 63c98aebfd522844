# tests/test_sqlite_store.py

from __future__ import annotations

import threading
from pathlib import Path

import pytest

from checklist_app.errors import StoreError
from checklist_app.storage.sqlite_store import SQLiteDocumentStore


@pytest.mark.asyncio
async def test_add_update_delete_with_snapshots(tmp_path: Path) -> None:
    store = SQLiteDocumentStore(tmp_path / "checklist.sqlite3")
    snapshots: list[list[dict]] = []

    unsubscribe = await store.subscribe("tasks", snapshots.append)
    assert snapshots == [[]]

    first = await store.add("tasks", {"name": "First", "reminders": ["2099-01-01T09:00"]})
    second = await store.add("tasks", {"name": "Second"})
    assert first != second

    assert [d["name"] for d in snapshots[-1]] == ["First", "Second"]
    assert snapshots[-1][0]["id"] == first
    assert snapshots[-1][0]["reminders"] == ["2099-01-01T09:00"]

    await store.update("tasks", first, {"done": True})
    assert snapshots[-1][0]["done"] is True
    assert snapshots[-1][0]["name"] == "First"

    await store.delete("tasks", second)
    assert [d["id"] for d in snapshots[-1]] == [first]

    unsubscribe()
    count = len(snapshots)
    await store.add("tasks", {"name": "Third"})
    assert len(snapshots) == count


@pytest.mark.asyncio
async def test_collections_are_isolated_and_persistent(tmp_path: Path) -> None:
    db = tmp_path / "checklist.sqlite3"
    store = SQLiteDocumentStore(db)
    await store.add("tasks", {"name": "Task"})
    await store.add("other", {"name": "Other"})

    reopened = SQLiteDocumentStore(db)
    assert [d["name"] for d in reopened.list_documents("tasks")] == ["Task"]
    assert [d["name"] for d in reopened.list_documents("other")] == ["Other"]


@pytest.mark.asyncio
async def test_missing_document_raises(tmp_path: Path) -> None:
    store = SQLiteDocumentStore(tmp_path / "checklist.sqlite3")
    with pytest.raises(StoreError):
        await store.update("tasks", "nope", {"done": True})
    with pytest.raises(StoreError):
        await store.delete("tasks", "nope")


@pytest.mark.asyncio
async def test_listener_failure_does_not_break_writes(tmp_path: Path) -> None:
    store = SQLiteDocumentStore(tmp_path / "checklist.sqlite3")
    seen: list[int] = []

    def bad_listener(docs: list[dict]) -> None:
        if docs:
            raise RuntimeError("boom")

    await store.subscribe("tasks", bad_listener)
    await store.subscribe("tasks", lambda docs: seen.append(len(docs)))

    await store.add("tasks", {"name": "Still saved"})
    assert seen == [0, 1]


@pytest.mark.asyncio
async def test_sqlite_work_runs_off_the_event_loop_thread(tmp_path: Path, monkeypatch) -> None:
    store = SQLiteDocumentStore(tmp_path / "checklist.sqlite3")
    loop_thread = threading.get_ident()
    threads: list[int] = []
    real_get_conn = store._get_conn

    def tracking_get_conn():
        threads.append(threading.get_ident())
        return real_get_conn()

    monkeypatch.setattr(store, "_get_conn", tracking_get_conn)
    listener_threads: list[int] = []
    await store.subscribe("tasks", lambda docs: listener_threads.append(threading.get_ident()))

    doc_id = await store.add("tasks", {"name": "Off loop"})
    await store.update("tasks", doc_id, {"done": True})
    await store.delete("tasks", doc_id)

    assert threads
    assert loop_thread not in threads
    assert set(listener_threads) == {loop_thread}
