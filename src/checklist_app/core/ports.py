# src/checklist_app/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The core depends on Protocols instead of concrete implementations.
This keeps the document store and the notification backend swappable and
makes testing easier.
"""

from collections.abc import Callable
from typing import Any, Protocol

Document = dict[str, Any]
# A stored record; "id" is always present on documents delivered in a snapshot.

SnapshotListener = Callable[[list[Document]], None]
Unsubscribe = Callable[[], None]


class DocumentStore(Protocol):
    """
    Document collection client.

    Every mutation eventually triggers a full, ordered snapshot delivery to the
    collection's listeners. Failures are raised as StoreError.
    """

    async def add(self, collection: str, data: Document) -> str: ...

    async def update(self, collection: str, doc_id: str, fields: Document) -> None: ...

    async def delete(self, collection: str, doc_id: str) -> None: ...

    async def subscribe(self, collection: str, listener: SnapshotListener) -> Unsubscribe: ...

    async def close(self) -> None: ...


class Notifier(Protocol):
    """
    Platform notification facility.

    permission() is one of "granted", "denied", "default" and is queried at
    notification time, never cached by callers.
    """

    async def request_permission(self) -> str: ...

    def permission(self) -> str: ...

    async def notify(self, *, title: str, body: str, icon: str | None = None) -> None: ...


Confirm = Callable[[str], Any]
# async (prompt) -> bool; declining a destructive action must have no side effects.
