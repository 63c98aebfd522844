# src/checklist_app/core/results.py

from __future__ import annotations

import logging
from collections.abc import Awaitable
from dataclasses import dataclass
from typing import Any

from ..errors import StoreError

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class WriteResult:
    """Outcome of a single store write."""

    ok: bool
    op: str
    doc_id: str | None = None
    error: str | None = None

    @classmethod
    def success(cls, op: str, doc_id: str | None) -> WriteResult:
        return cls(ok=True, op=op, doc_id=doc_id)

    @classmethod
    def failure(cls, op: str, doc_id: str | None, error: str) -> WriteResult:
        return cls(ok=False, op=op, doc_id=doc_id, error=error)


async def capture_write(op: str, doc_id: str | None, pending: Awaitable[Any]) -> WriteResult:
    """
    Await a store call and turn its outcome into a WriteResult.

    For "add" the awaited value is the new document id.
    Only StoreError is captured; anything else is a bug and propagates.
    """
    try:
        value = await pending
    except StoreError as e:
        logger.error("Store %s failed doc_id=%s: %s", op, doc_id, e)
        return WriteResult.failure(op, doc_id, str(e))

    if op == "add" and value is not None:
        doc_id = str(value)
    return WriteResult.success(op, doc_id)
