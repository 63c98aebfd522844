# tests/test_task_models.py

from __future__ import annotations

from datetime import datetime

import pytest

from checklist_app.tasks.task_models import (
    DeadlineStatus,
    Task,
    deadline_status,
    normalize_reminder,
    parse_reminder,
)


def test_document_conversion_uses_store_keys() -> None:
    task = Task.from_document(
        {
            "id": "t1",
            "name": "Plan trip",
            "category": "Personal",
            "reminders": ["2099-01-01T09:00"],
            "firedReminders": ["2099-01-01T09:00"],
            "reminderNotified": True,
        }
    )
    assert task.id == "t1"
    assert task.description == ""
    assert task.deadline is None
    assert task.reminder_notified
    assert task.unfired_reminders() == []

    doc = task.to_document()
    assert "id" not in doc
    assert doc["firedReminders"] == ["2099-01-01T09:00"]


def test_reminder_parsing() -> None:
    assert parse_reminder("2099-01-01T09:30") == datetime(2099, 1, 1, 9, 30)
    assert normalize_reminder("2099-01-01 09:30") == "2099-01-01T09:30"
    assert normalize_reminder("2099-01-01T09:30:15") == "2099-01-01T09:30:15"
    with pytest.raises(ValueError):
        parse_reminder("2099-13-01T09:30")


def test_deadline_status(now) -> None:
    def status(deadline):
        return deadline_status(Task(name="x", category="Work", deadline=deadline), now)

    assert status(None) == DeadlineStatus.NONE
    assert status("2030-06-14") == DeadlineStatus.OVERDUE
    assert status("2030-06-15") == DeadlineStatus.DUE_TODAY
    assert status("2030-06-16") == DeadlineStatus.UPCOMING
    assert status("someday") == DeadlineStatus.NONE
