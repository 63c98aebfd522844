# src/checklist_app/tasks/task_filters.py

"""
View filtering and bulk selection.

Selection is a frozenset of task ids; every helper returns a new set.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable, Sequence

from ..core.ports import DocumentStore
from ..core.results import WriteResult, capture_write
from .task_models import ALL_CATEGORY, Task

logger = logging.getLogger(__name__)


def filter_tasks(tasks: Iterable[Task], category: str) -> list[Task]:
    if category == ALL_CATEGORY:
        return list(tasks)
    return [t for t in tasks if t.category == category]


def _ids(tasks: Iterable[Task]) -> set[str]:
    return {t.id for t in tasks if t.id}


def toggle_selection(selected: frozenset[str], task_id: str) -> frozenset[str]:
    if task_id in selected:
        return selected - {task_id}
    return selected | {task_id}


def set_select_all(selected: frozenset[str], visible: Sequence[Task], flag: bool) -> frozenset[str]:
    """Add (flag=True) or remove (flag=False) every visible id; others are untouched."""
    ids = _ids(visible)
    if flag:
        return selected | ids
    return selected - ids


def all_selected(selected: frozenset[str], visible: Sequence[Task]) -> bool:
    ids = _ids(visible)
    return bool(ids) and ids <= selected


async def bulk_delete(
    store: DocumentStore,
    collection: str,
    selected: Iterable[str],
) -> list[WriteResult]:
    """
    Delete every selected document concurrently and wait for all of them.

    Not atomic: a failure leaves the rest of the batch deleted. Returns one
    WriteResult per id, in the order given.
    """
    ids = list(selected)
    if not ids:
        return []

    results = await asyncio.gather(
        *(capture_write("delete", doc_id, store.delete(collection, doc_id)) for doc_id in ids)
    )
    failed = sum(1 for r in results if not r.ok)
    logger.info("Bulk delete finished: %d deleted, %d failed", len(ids) - failed, failed)
    return list(results)
