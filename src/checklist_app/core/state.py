# src/checklist_app/core/state.py

from __future__ import annotations

import logging
from dataclasses import dataclass, replace

from ..tasks.task_models import ALL_CATEGORY, Document, Task

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class ChecklistState:
    """
    In-memory mirror of the store's task collection plus view state.

    Never mutated in place: every change produces a new instance.
    """

    tasks: tuple[Task, ...] = ()
    category: str = ALL_CATEGORY
    selected: frozenset[str] = frozenset()

    def find(self, task_id: str) -> Task | None:
        for task in self.tasks:
            if task.id == task_id:
                return task
        return None


def apply_snapshot(state: ChecklistState, documents: list[Document]) -> ChecklistState:
    """
    The reducer for store snapshots.

    The task list is replaced wholesale (no local diffing) and the selection is
    cleared. Documents without an id are skipped.
    """
    tasks: list[Task] = []
    for doc in documents:
        if not doc.get("id"):
            logger.warning("Snapshot document without id skipped: %r", doc)
            continue
        tasks.append(Task.from_document(doc))

    logger.debug("Snapshot applied: %d tasks", len(tasks))
    return replace(state, tasks=tuple(tasks), selected=frozenset())


def replace_task(state: ChecklistState, task: Task) -> ChecklistState:
    """Swap in a locally modified task (same id), keeping order."""
    tasks = tuple(task if t.id == task.id else t for t in state.tasks)
    return replace(state, tasks=tasks)
