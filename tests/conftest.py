# tests/conftest.py

from __future__ import annotations

from datetime import datetime

import pytest

from checklist_app.core.checklist import ChecklistApp

from .fakes import FakeDocumentStore, FakeNotifier, ScriptedConfirm


@pytest.fixture()
def now() -> datetime:
    """Fixed test clock (local, naive)."""
    return datetime(2030, 6, 15, 12, 0, 0)


@pytest.fixture()
def store() -> FakeDocumentStore:
    return FakeDocumentStore(
        [
            {"id": "a", "name": "A", "category": "Personal", "done": False},
            {"id": "b", "name": "B", "category": "Work", "done": False},
            {"id": "c", "name": "C", "category": "Work", "done": False},
        ]
    )


@pytest.fixture()
def notifier() -> FakeNotifier:
    return FakeNotifier()


@pytest.fixture()
def confirm() -> ScriptedConfirm:
    return ScriptedConfirm(answer=True)


@pytest.fixture()
def app(store: FakeDocumentStore, notifier: FakeNotifier, confirm: ScriptedConfirm) -> ChecklistApp:
    """
    ChecklistApp wired with in-memory fakes.

    Not started: tests call `await app.start(with_poller=False)` themselves so
    the background poller never runs against the wall clock.
    """
    return ChecklistApp(store, notifier, confirm=confirm, categories=["Personal", "Work", "Shopping"])
