# src/checklist_app/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time
from enum import StrEnum
from typing import Any

ALL_CATEGORY = "All"

DEADLINE_FORMAT = "%Y-%m-%d"
REMINDER_FORMATS = ("%Y-%m-%dT%H:%M", "%Y-%m-%dT%H:%M:%S")

Document = dict[str, Any]


class DeadlineStatus(StrEnum):
    NONE = "none"
    UPCOMING = "upcoming"
    DUE_TODAY = "due_today"
    OVERDUE = "overdue"


@dataclass(slots=True)
class Task:
    name: str
    category: str
    description: str = ""
    done: bool = False
    deadline: str | None = None
    reminders: list[str] = field(default_factory=list)
    fired_reminders: list[str] = field(default_factory=list)
    notified: bool = False
    reminder_notified: bool = False

    # Assigned by the store on creation.
    id: str | None = None

    @classmethod
    def from_document(cls, doc: Document) -> Task:
        """Build a Task from a store document (keys as written by to_document, plus "id")."""
        raw_id = doc.get("id")
        return cls(
            id=str(raw_id) if raw_id else None,
            name=str(doc.get("name") or ""),
            description=str(doc.get("description") or ""),
            done=bool(doc.get("done", False)),
            category=str(doc.get("category") or ""),
            deadline=doc.get("deadline") or None,
            reminders=[str(r) for r in (doc.get("reminders") or [])],
            fired_reminders=[str(r) for r in (doc.get("firedReminders") or [])],
            notified=bool(doc.get("notified", False)),
            reminder_notified=bool(doc.get("reminderNotified", False)),
        )

    def to_document(self) -> Document:
        return {
            "name": self.name,
            "description": self.description,
            "done": self.done,
            "category": self.category,
            "deadline": self.deadline,
            "reminders": list(self.reminders),
            "firedReminders": list(self.fired_reminders),
            "notified": self.notified,
            "reminderNotified": self.reminder_notified,
        }

    def unfired_reminders(self) -> list[str]:
        fired = set(self.fired_reminders)
        return [r for r in self.reminders if r not in fired]


def parse_deadline(raw: str) -> date:
    """Parse a YYYY-MM-DD deadline; raises ValueError when malformed."""
    return datetime.strptime(raw.strip(), DEADLINE_FORMAT).date()


def parse_reminder(raw: str) -> datetime:
    """Parse a reminder timestamp (YYYY-MM-DDTHH:MM, seconds optional)."""
    text = raw.strip().replace(" ", "T", 1)
    for fmt in REMINDER_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    raise ValueError(f"Malformed reminder timestamp: {raw!r}")


def normalize_reminder(raw: str) -> str:
    value = parse_reminder(raw)
    if value.second:
        return value.strftime(REMINDER_FORMATS[1])
    return value.strftime(REMINDER_FORMATS[0])


def deadline_end(deadline: str) -> datetime:
    """The last moment of the deadline day; the deadline has passed after it."""
    return datetime.combine(parse_deadline(deadline), time(23, 59, 59))


def deadline_status(task: Task, now: datetime) -> DeadlineStatus:
    if not task.deadline:
        return DeadlineStatus.NONE
    try:
        day = parse_deadline(task.deadline)
    except ValueError:
        return DeadlineStatus.NONE

    today = now.date()
    if day < today:
        return DeadlineStatus.OVERDUE
    if day == today:
        return DeadlineStatus.DUE_TODAY
    return DeadlineStatus.UPCOMING
