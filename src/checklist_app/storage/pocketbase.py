# src/checklist_app/storage/pocketbase.py

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections import defaultdict
from typing import Any, Dict, List, Optional

import requests

from ..core.ports import Document, SnapshotListener, Unsubscribe
from ..errors import StoreError

logger = logging.getLogger(__name__)

# Fields PocketBase adds to every record; not part of the task document.
_SYSTEM_FIELDS = {"collectionId", "collectionName", "created", "updated", "expand", "owner"}


class PocketBaseDocumentStore:
    """
    Remote document store on top of the PocketBase REST API.

    HTTP calls are blocking (requests) and run in a worker thread; listeners
    are always called on the event loop. PocketBase has no snapshot push over
    plain REST, so subscriptions are kept current by re-listing after each
    mutation made through this client and every refresh_seconds.
    """

    def __init__(
        self,
        base_url: str,
        *,
        refresh_seconds: float = 10.0,
        session: Optional[requests.Session] = None,
        timeout: float = 10.0,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout
        self.refresh_seconds = refresh_seconds
        self.token: Optional[str] = ""
        self.user_id: Optional[str] = ""
        self._listeners: Dict[str, List[SnapshotListener]] = defaultdict(list)
        self._last_snapshot: Dict[str, List[Document]] = {}
        self._refreshers: Dict[str, asyncio.Task[None]] = {}

    # ---------- auth ----------
    def login(self, identity: str, password: str) -> bool:
        url = f"{self.base_url}/api/collections/users/auth-with-password"
        try:
            r = self.session.post(url, json={"identity": identity, "password": password}, timeout=self.timeout)
        except requests.RequestException as e:
            raise StoreError(f"Login failed: {e}") from e
        if not r.ok:
            raise StoreError(f"Login failed: {r.status_code} {r.text}")
        data = r.json()
        self.token = data.get("token")
        self.user_id = data.get("record", {}).get("id")
        if not self.token or not self.user_id:
            raise StoreError("Missing token or user id in login response")
        self.session.headers.update({"Authorization": f"Bearer {self.token}"})
        logger.info("PocketBase login ok user=%s", self.user_id)
        return True

    # ---------- blocking REST helpers ----------
    def _records_url(self, collection: str, doc_id: str | None = None) -> str:
        url = f"{self.base_url}/api/collections/{collection}/records"
        return f"{url}/{doc_id}" if doc_id else url

    def _request(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        try:
            r = self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            raise StoreError(f"{method} {url} failed: {e}") from e
        if not r.ok:
            raise StoreError(f"{method} {url} failed: {r.status_code} {r.text}")
        return r

    @staticmethod
    def _to_document(record: Dict[str, Any]) -> Document:
        return {k: v for k, v in record.items() if k not in _SYSTEM_FIELDS}

    def list_documents(self, collection: str) -> List[Document]:
        params: Dict[str, Any] = {"sort": "created", "perPage": 500, "page": 1}
        if self.user_id:
            params["filter"] = f'owner = "{self.user_id}"'

        out: List[Document] = []
        while True:
            data = self._request("GET", self._records_url(collection), params=params).json()
            out.extend(self._to_document(item) for item in data.get("items", []))
            if params["page"] >= int(data.get("totalPages") or 1):
                return out
            params["page"] += 1

    def _create(self, collection: str, data: Document) -> str:
        payload = {k: v for k, v in data.items() if k != "id"}
        if self.user_id:
            payload["owner"] = self.user_id
        record = self._request("POST", self._records_url(collection), json=payload).json()
        doc_id = record.get("id")
        if not doc_id:
            raise StoreError("Create returned no record id")
        return str(doc_id)

    def _patch(self, collection: str, doc_id: str, fields: Document) -> None:
        self._request("PATCH", self._records_url(collection, doc_id), json=fields)

    def _remove(self, collection: str, doc_id: str) -> None:
        self._request("DELETE", self._records_url(collection, doc_id))

    # ---------- snapshots ----------
    async def refresh(self, collection: str, *, force: bool = False) -> None:
        """Re-list the collection and notify listeners when it changed (or when forced)."""
        snapshot = await asyncio.to_thread(self.list_documents, collection)
        if not force and snapshot == self._last_snapshot.get(collection):
            return
        self._last_snapshot[collection] = snapshot
        for listener in list(self._listeners.get(collection, ())):
            try:
                listener([dict(d) for d in snapshot])
            except Exception:
                logger.exception("Snapshot listener failed collection=%s", collection)

    async def _refresh_after_write(self, collection: str) -> None:
        if not self._listeners.get(collection):
            return
        try:
            await self.refresh(collection)
        except StoreError:
            logger.warning("Snapshot refresh after write failed collection=%s", collection, exc_info=True)

    async def _refresh_loop(self, collection: str) -> None:
        sleep_s = max(1.0, float(self.refresh_seconds))
        while True:
            await asyncio.sleep(sleep_s)
            try:
                await self.refresh(collection)
            except StoreError:
                logger.warning("Periodic snapshot refresh failed collection=%s", collection, exc_info=True)

    # ---------- public API (DocumentStore) ----------
    async def add(self, collection: str, data: Document) -> str:
        doc_id = await asyncio.to_thread(self._create, collection, data)
        logger.debug("Record created collection=%s id=%s", collection, doc_id)
        await self._refresh_after_write(collection)
        return doc_id

    async def update(self, collection: str, doc_id: str, fields: Document) -> None:
        await asyncio.to_thread(self._patch, collection, doc_id, fields)
        logger.debug("Record patched collection=%s id=%s fields=%s", collection, doc_id, sorted(fields))
        await self._refresh_after_write(collection)

    async def delete(self, collection: str, doc_id: str) -> None:
        await asyncio.to_thread(self._remove, collection, doc_id)
        logger.debug("Record deleted collection=%s id=%s", collection, doc_id)
        await self._refresh_after_write(collection)

    async def subscribe(self, collection: str, listener: SnapshotListener) -> Unsubscribe:
        self._listeners[collection].append(listener)
        snapshot = await asyncio.to_thread(self.list_documents, collection)
        self._last_snapshot[collection] = snapshot
        listener([dict(d) for d in snapshot])

        if self.refresh_seconds > 0 and collection not in self._refreshers:
            self._refreshers[collection] = asyncio.create_task(self._refresh_loop(collection))

        def unsubscribe() -> None:
            with contextlib.suppress(ValueError):
                self._listeners[collection].remove(listener)
            if not self._listeners[collection]:
                task = self._refreshers.pop(collection, None)
                if task is not None:
                    task.cancel()

        return unsubscribe

    async def close(self) -> None:
        for task in self._refreshers.values():
            task.cancel()
        for task in self._refreshers.values():
            with contextlib.suppress(asyncio.CancelledError):
                await task
        self._refreshers.clear()
        self._listeners.clear()
        self.session.close()
