# src/checklist_app/tasks/task_form.py

"""
Task form controller (the create/edit "modal").

Stages user input, validates it, and commits a create or an update to the
store. Nothing touches the task list until submit() succeeds; the list itself
only changes when the store broadcasts the next snapshot.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime

from ..core.ports import DocumentStore
from ..core.results import WriteResult, capture_write
from ..errors import ValidationError
from .task_models import (
    ALL_CATEGORY,
    Task,
    normalize_reminder,
    parse_deadline,
    parse_reminder,
)

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class TaskDraft:
    category: str
    name: str = ""
    description: str = ""
    deadline: str = ""
    reminders: list[str] = field(default_factory=list)

    # Set only when editing an existing task.
    task_id: str | None = None


class TaskForm:
    def __init__(self, *, collection: str = "tasks", require_reminders: bool = False) -> None:
        self.collection = collection
        self.require_reminders = require_reminders
        self.draft: TaskDraft | None = None
        self._editing: Task | None = None

    @property
    def is_open(self) -> bool:
        return self.draft is not None

    @property
    def is_edit(self) -> bool:
        return self._editing is not None

    def open_for_create(self, category: str) -> TaskDraft:
        if not category or category == ALL_CATEGORY:
            raise ValidationError("Please select a category before adding a task.")
        self._editing = None
        self.draft = TaskDraft(category=category)
        return self.draft

    def open_for_edit(self, task: Task) -> TaskDraft:
        if not task.id:
            raise ValidationError("Only saved tasks can be edited.")
        self._editing = task
        self.draft = TaskDraft(
            category=task.category,
            name=task.name,
            description=task.description,
            deadline=task.deadline or "",
            # Copy: edits must not leak into the live task before submit.
            reminders=list(task.reminders),
            task_id=task.id,
        )
        return self.draft

    def close(self) -> None:
        self.draft = None
        self._editing = None

    def _require_open(self) -> TaskDraft:
        if self.draft is None:
            raise ValidationError("No task form is open.")
        return self.draft

    def set_name(self, value: str) -> None:
        self._require_open().name = value

    def set_description(self, value: str) -> None:
        self._require_open().description = value

    def set_deadline(self, value: str) -> None:
        self._require_open().deadline = value

    def add_reminder(self, raw: str) -> str:
        draft = self._require_open()
        try:
            value = normalize_reminder(raw)
        except ValueError:
            raise ValidationError(f"Invalid reminder date/time: {raw!r}") from None
        if value in draft.reminders:
            raise ValidationError(f"Reminder {value} is already set.")
        draft.reminders.append(value)
        return value

    def remove_reminder(self, raw: str) -> None:
        draft = self._require_open()
        try:
            value = normalize_reminder(raw)
        except ValueError:
            value = raw.strip()
        if value not in draft.reminders:
            raise ValidationError(f"Reminder {raw!r} is not set.")
        draft.reminders.remove(value)

    def validate(self, now: datetime | None = None) -> TaskDraft:
        """Check the staged fields in a fixed order; the first violation is raised."""
        draft = self._require_open()
        now = now or datetime.now()

        if not draft.name.strip():
            raise ValidationError("Task name is required.")
        if not draft.deadline.strip():
            raise ValidationError("Deadline is required.")
        if self.require_reminders and not draft.reminders:
            raise ValidationError("At least one reminder is required.")

        try:
            deadline = parse_deadline(draft.deadline)
        except ValueError:
            raise ValidationError(f"Invalid deadline: {draft.deadline!r}") from None
        if deadline < now.date():
            raise ValidationError("Deadline cannot be in the past.")

        malformed: list[str] = []
        for raw in draft.reminders:
            try:
                when = parse_reminder(raw)
            except ValueError:
                malformed.append(raw)
                continue
            if when < now:
                raise ValidationError(f"Reminder {raw} is in the past.")
        if malformed:
            raise ValidationError(f"Invalid reminder date/time: {malformed[0]!r}")

        return draft

    async def submit(self, store: DocumentStore, now: datetime | None = None) -> WriteResult:
        """
        Validate and commit. Closes the form on success.

        ValidationError propagates (nothing is written); store failures come
        back as a failed WriteResult and leave the form open.
        """
        draft = self.validate(now)
        name = draft.name.strip()
        description = draft.description.strip()
        deadline = draft.deadline.strip()
        reminders = [normalize_reminder(r) for r in draft.reminders]

        if self._editing is not None:
            current = self._editing
            # validate() rejects past reminders, so none of these has fired yet.
            fields = {
                "name": name,
                "description": description,
                "deadline": deadline,
                "reminders": reminders,
                "firedReminders": [],
            }
            added = [r for r in reminders if r not in current.reminders]
            if added:
                # New reminders re-open the task for the poller.
                fields.update(done=False, notified=False, reminderNotified=False)
            result = await capture_write(
                "update",
                current.id,
                store.update(self.collection, current.id or "", fields),
            )
        else:
            task = Task(
                name=name,
                description=description,
                category=draft.category,
                deadline=deadline,
                reminders=reminders,
            )
            result = await capture_write("add", None, store.add(self.collection, task.to_document()))

        if result.ok:
            logger.info("Task %s saved id=%s", "updated" if self.is_edit else "created", result.doc_id)
            self.close()
        return result
