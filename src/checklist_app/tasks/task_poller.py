# src/checklist_app/tasks/task_poller.py

from __future__ import annotations

"""
Reminder / due-task poller.

A small polling loop that, every interval:
- scans the current in-memory task list,
- marks overdue tasks done and fires a due notification,
- fires at most one pending reminder per task (earliest in list order wins),
- applies the change locally and writes it back to the store.

Store write failures are logged, not retried: local state may diverge until
the next snapshot replaces it.
"""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, replace
from datetime import datetime, timedelta
from enum import Enum
from typing import Any

from ..core.ports import DocumentStore, Notifier
from ..core.results import WriteResult, capture_write
from .task_models import Task, deadline_end, parse_reminder

logger = logging.getLogger(__name__)


class UpdateKind(str, Enum):
    DUE = "due"
    REMINDER = "reminder"


@dataclass(slots=True, frozen=True)
class TaskUpdate:
    """
    What one tick decided for one task.

    task is the updated local copy; fields is the partial store update.
    """

    kind: UpdateKind
    task: Task
    fields: dict[str, Any]
    title: str
    body: str


def _reminder_due(when: datetime, now: datetime, window: timedelta | None) -> bool:
    if when > now:
        return False
    if window is None:
        return True
    return now - when <= window


def reconcile_task(
    task: Task,
    now: datetime,
    *,
    reminder_window: timedelta | None = None,
) -> TaskUpdate | None:
    """
    Decide what (if anything) should happen to a task at `now`.

    - deadline passed and not done -> done + notified
    - otherwise the first unfired reminder that is due fires; when it was the
      last one, the task becomes done + notified
    """
    if task.done:
        return None

    if task.deadline:
        try:
            overdue = now > deadline_end(task.deadline)
        except ValueError:
            logger.warning("Task %s has malformed deadline %r", task.id, task.deadline)
            overdue = False

        if overdue:
            if task.notified:
                updated = replace(task, done=True)
                return TaskUpdate(UpdateKind.DUE, updated, {"done": True}, "", "")
            updated = replace(task, done=True, notified=True)
            return TaskUpdate(
                kind=UpdateKind.DUE,
                task=updated,
                fields={"done": True, "notified": True},
                title="Task due",
                body=f'"{task.name}" reached its deadline ({task.deadline}).',
            )

    fired = list(task.fired_reminders)
    for raw in task.reminders:
        if raw in fired:
            continue
        try:
            when = parse_reminder(raw)
        except ValueError:
            logger.warning("Task %s has malformed reminder %r", task.id, raw)
            continue
        if not _reminder_due(when, now, reminder_window):
            continue

        fired.append(raw)
        fields: dict[str, Any] = {"firedReminders": fired}
        updated = replace(task, fired_reminders=fired)
        if all(r in fired for r in task.reminders):
            updated = replace(updated, done=True, notified=True, reminder_notified=True)
            fields.update(done=True, notified=True, reminderNotified=True)

        return TaskUpdate(
            kind=UpdateKind.REMINDER,
            task=updated,
            fields=fields,
            title="Reminder",
            body=f'"{task.name}" reminder for {raw}.',
        )

    return None


async def notify_if_permitted(notifier: Notifier, *, title: str, body: str, icon: str | None) -> bool:
    """Fire a notification only when permission is granted right now."""
    if notifier.permission() != "granted":
        logger.debug("Notification skipped (permission=%s): %s", notifier.permission(), title)
        return False
    try:
        await notifier.notify(title=title, body=body, icon=icon)
    except Exception:
        logger.exception("Notification failed: %s", title)
        return False
    return True


async def run_poll_tick(
    *,
    get_tasks: Callable[[], tuple[Task, ...] | list[Task]],
    apply_local: Callable[[Task], None],
    store: DocumentStore,
    notifier: Notifier,
    collection: str = "tasks",
    now: datetime | None = None,
    reminder_window: timedelta | None = None,
    icon: str | None = None,
) -> list[WriteResult]:
    """
    One reconciliation pass over the current task list.

    get_tasks returns the live list; apply_local replaces a task in local state.
    Returns the WriteResult of every store write issued.
    """
    now = now or datetime.now()
    results: list[WriteResult] = []

    for task in list(get_tasks()):
        if not task.id:
            continue

        update = reconcile_task(task, now, reminder_window=reminder_window)
        if update is None:
            continue

        apply_local(update.task)
        logger.info("Task %s -> %s %s", task.id, update.kind.value, update.fields)

        if update.title:
            await notify_if_permitted(notifier, title=update.title, body=update.body, icon=icon)

        results.append(
            await capture_write("update", task.id, store.update(collection, task.id, update.fields))
        )

    return results


async def run_reminder_poller(
    *,
    get_tasks: Callable[[], tuple[Task, ...] | list[Task]],
    apply_local: Callable[[Task], None],
    store: DocumentStore,
    notifier: Notifier,
    collection: str = "tasks",
    interval_seconds: float = 30.0,
    reminder_window_seconds: float | None = None,
    icon: str | None = None,
) -> None:
    """
    Run run_poll_tick every interval_seconds, forever.

    To stop the poller, cancel the coroutine/task.
    """
    sleep_s = max(0.5, float(interval_seconds))
    window = None if reminder_window_seconds is None else timedelta(seconds=reminder_window_seconds)

    while True:
        try:
            await run_poll_tick(
                get_tasks=get_tasks,
                apply_local=apply_local,
                store=store,
                notifier=notifier,
                collection=collection,
                reminder_window=window,
                icon=icon,
            )
        except asyncio.CancelledError:
            raise
        except Exception:
            logger.exception("Reminder poll tick failed")

        await asyncio.sleep(sleep_s)
