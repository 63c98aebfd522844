# tests/fakes.py

from __future__ import annotations

import asyncio
import itertools
from dataclasses import dataclass, field
from typing import Any

from checklist_app.errors import StoreError


class FakeDocumentStore:
    """
    In-memory DocumentStore used by unit tests.

    - Records every call for assertions
    - Broadcasts a full snapshot to listeners after each mutation
    - fail_ids: document ids whose update/delete raise StoreError
    - delete_gate: when set, deletes wait on it (to observe concurrency)
    """

    def __init__(self, docs: list[dict[str, Any]] | None = None) -> None:
        self._ids = itertools.count(1)
        self.docs: dict[str, dict[str, Any]] = {}
        for d in docs or []:
            doc = dict(d)
            doc.setdefault("id", f"doc{next(self._ids)}")
            self.docs[doc["id"]] = doc
        self.listeners: dict[str, list] = {}
        self.calls: list[tuple[str, Any]] = []
        self.fail_ids: set[str] = set()
        self.fail_add = False
        self.delete_gate: asyncio.Event | None = None
        self.deletes_started = 0
        self.deletes_finished = 0

    def snapshot(self) -> list[dict[str, Any]]:
        return [dict(d) for d in self.docs.values()]

    def _broadcast(self, collection: str) -> None:
        for listener in list(self.listeners.get(collection, [])):
            listener(self.snapshot())

    async def add(self, collection: str, data: dict[str, Any]) -> str:
        self.calls.append(("add", dict(data)))
        if self.fail_add:
            raise StoreError("add failed")
        doc_id = f"doc{next(self._ids)}"
        self.docs[doc_id] = {**data, "id": doc_id}
        self._broadcast(collection)
        return doc_id

    async def update(self, collection: str, doc_id: str, fields: dict[str, Any]) -> None:
        self.calls.append(("update", (doc_id, dict(fields))))
        if doc_id in self.fail_ids or doc_id not in self.docs:
            raise StoreError(f"update failed: {doc_id}")
        self.docs[doc_id].update(fields)
        self._broadcast(collection)

    async def delete(self, collection: str, doc_id: str) -> None:
        self.calls.append(("delete", doc_id))
        self.deletes_started += 1
        if self.delete_gate is not None:
            await self.delete_gate.wait()
        if doc_id in self.fail_ids or doc_id not in self.docs:
            raise StoreError(f"delete failed: {doc_id}")
        del self.docs[doc_id]
        self.deletes_finished += 1
        self._broadcast(collection)

    async def subscribe(self, collection: str, listener):
        self.listeners.setdefault(collection, []).append(listener)
        listener(self.snapshot())

        def unsubscribe() -> None:
            self.listeners[collection].remove(listener)

        return unsubscribe

    async def close(self) -> None:
        self.listeners.clear()

    def calls_of(self, op: str) -> list[Any]:
        return [args for name, args in self.calls if name == op]


@dataclass(slots=True)
class SentNotification:
    title: str
    body: str
    icon: str | None


@dataclass(slots=True)
class FakeNotifier:
    """Notifier that records what it was asked to show."""

    granted: bool = True
    sent: list[SentNotification] = field(default_factory=list)
    requested: int = 0

    async def request_permission(self) -> str:
        self.requested += 1
        return self.permission()

    def permission(self) -> str:
        return "granted" if self.granted else "denied"

    async def notify(self, *, title: str, body: str, icon: str | None = None) -> None:
        self.sent.append(SentNotification(title=title, body=body, icon=icon))


class ScriptedConfirm:
    """Async confirm callable returning a fixed answer and recording prompts."""

    def __init__(self, answer: bool = True) -> None:
        self.answer = answer
        self.prompts: list[str] = []

    async def __call__(self, prompt: str) -> bool:
        self.prompts.append(prompt)
        return self.answer
