# src/checklist_app/core/checklist.py

"""
Checklist application service.

Owns the ChecklistState, keeps it in sync with the store subscription, and
exposes the user actions the front-end calls. The task list only changes
through store snapshots (apply_snapshot) and the poller's local replacements
(replace_task); user actions go to the store and wait for the broadcast.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Sequence
from dataclasses import replace
from datetime import datetime

from ..errors import ValidationError
from ..tasks.task_filters import (
    all_selected,
    bulk_delete,
    filter_tasks,
    set_select_all,
    toggle_selection,
)
from ..tasks.task_form import TaskForm
from ..tasks.task_models import ALL_CATEGORY, Task
from ..tasks.task_poller import run_reminder_poller
from .ports import Confirm, Document, DocumentStore, Notifier, Unsubscribe
from .results import WriteResult, capture_write
from .state import ChecklistState, apply_snapshot, replace_task

logger = logging.getLogger(__name__)


async def _ask(confirm: Confirm, prompt: str) -> bool:
    answer = confirm(prompt)
    if inspect.isawaitable(answer):
        answer = await answer
    return bool(answer)


class ChecklistApp:
    def __init__(
        self,
        store: DocumentStore,
        notifier: Notifier,
        *,
        confirm: Confirm,
        collection: str = "tasks",
        categories: Sequence[str] = ("Personal", "Work", "Shopping"),
        require_reminders: bool = False,
        poll_interval_seconds: float = 30.0,
        reminder_window_seconds: float | None = None,
        notification_icon: str | None = None,
    ) -> None:
        self.store = store
        self.notifier = notifier
        self.confirm = confirm
        self.collection = collection
        self.categories = [c for c in categories if c != ALL_CATEGORY]
        self.poll_interval_seconds = poll_interval_seconds
        self.reminder_window_seconds = reminder_window_seconds
        self.notification_icon = notification_icon

        self.state = ChecklistState()
        self.form = TaskForm(collection=collection, require_reminders=require_reminders)
        self.snapshots_received = 0

        self._unsubscribe: Unsubscribe | None = None
        self._poller: asyncio.Task[None] | None = None

    # ---- lifecycle ----

    def on_snapshot(self, documents: list[Document]) -> None:
        self.snapshots_received += 1
        self.state = apply_snapshot(self.state, documents)

    def apply_local(self, task: Task) -> None:
        self.state = replace_task(self.state, task)

    async def start(self, *, with_poller: bool = True) -> None:
        await self.notifier.request_permission()
        self._unsubscribe = await self.store.subscribe(self.collection, self.on_snapshot)
        logger.info("Subscribed to %s (%d tasks)", self.collection, len(self.state.tasks))

        if with_poller:
            self._poller = asyncio.create_task(
                run_reminder_poller(
                    get_tasks=lambda: self.state.tasks,
                    apply_local=self.apply_local,
                    store=self.store,
                    notifier=self.notifier,
                    collection=self.collection,
                    interval_seconds=self.poll_interval_seconds,
                    reminder_window_seconds=self.reminder_window_seconds,
                    icon=self.notification_icon,
                )
            )

    async def stop(self) -> None:
        if self._poller is not None:
            self._poller.cancel()
            try:
                await self._poller
            except asyncio.CancelledError:
                pass
            self._poller = None

        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    # ---- views ----

    def visible_tasks(self) -> list[Task]:
        return filter_tasks(self.state.tasks, self.state.category)

    def switch_category(self, category: str) -> None:
        if category != ALL_CATEGORY and category not in self.categories:
            raise ValidationError(f"Unknown category: {category!r}")
        self.state = replace(self.state, category=category, selected=frozenset())

    def _get_task(self, task_id: str) -> Task:
        task = self.state.find(task_id)
        if task is None:
            raise ValidationError(f"No such task: {task_id}")
        return task

    # ---- form ----

    def open_create(self) -> None:
        self.form.open_for_create(self.state.category)

    def open_edit(self, task_id: str) -> None:
        self.form.open_for_edit(self._get_task(task_id))

    async def submit_form(self, now: datetime | None = None) -> WriteResult:
        return await self.form.submit(self.store, now)

    def close_form(self) -> None:
        self.form.close()

    # ---- single-task actions ----

    async def toggle_done(self, task_id: str) -> WriteResult:
        task = self._get_task(task_id)
        return await capture_write(
            "update",
            task_id,
            self.store.update(self.collection, task_id, {"done": not task.done}),
        )

    async def delete_task(self, task_id: str) -> WriteResult | None:
        """Returns None when the user declined."""
        task = self._get_task(task_id)
        if not await _ask(self.confirm, f'Delete "{task.name}"? This cannot be undone.'):
            return None
        return await capture_write("delete", task_id, self.store.delete(self.collection, task_id))

    # ---- selection ----

    def toggle_select(self, task_id: str) -> None:
        self._get_task(task_id)
        self.state = replace(self.state, selected=toggle_selection(self.state.selected, task_id))

    def select_all(self, flag: bool) -> None:
        selected = set_select_all(self.state.selected, self.visible_tasks(), flag)
        self.state = replace(self.state, selected=selected)

    def all_selected(self) -> bool:
        return all_selected(self.state.selected, self.visible_tasks())

    async def bulk_delete(self) -> list[WriteResult] | None:
        """
        Delete every selected task.

        Returns [] for an empty selection, None when the user declined.
        The selection is cleared only after every delete has completed.
        """
        ids = sorted(self.state.selected)
        if not ids:
            return []
        if not await _ask(self.confirm, f"Delete {len(ids)} selected task(s)? This cannot be undone."):
            return None

        results = await bulk_delete(self.store, self.collection, ids)
        self.state = replace(self.state, selected=frozenset())
        return results
