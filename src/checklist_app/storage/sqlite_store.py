# src/checklist_app/storage/sqlite_store.py

from __future__ import annotations

import asyncio
import contextlib
import json
import logging
import sqlite3
import time
import uuid
from collections import defaultdict
from pathlib import Path
from typing import Any

from ..core.ports import Document, SnapshotListener, Unsubscribe
from ..errors import StoreError

logger = logging.getLogger(__name__)


class SQLiteDocumentStore:
    """
    Local document store backed by SQLite.

    Each document is a JSON object stored in one row, grouped by collection.
    Live subscriptions are in-process: after every mutation the full ordered
    snapshot (oldest first) is pushed to the collection's listeners.

    Each method opens its own SQLite connection.
    """

    def __init__(self, db_path: str | Path = "checklist.sqlite3") -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._listeners: dict[str, list[SnapshotListener]] = defaultdict(list)
        self._ensure_schema()
        logger.info("SQLiteDocumentStore ready db=%s", self._db_path)

    # ---- low-level helpers ----

    def _get_conn(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), timeout=30.0)
        conn.row_factory = sqlite3.Row
        with contextlib.suppress(sqlite3.Error):
            conn.execute("PRAGMA journal_mode=WAL")
        return conn

    def _ensure_schema(self) -> None:
        conn = self._get_conn()
        try:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS documents (
                    id TEXT PRIMARY KEY,
                    collection TEXT NOT NULL,
                    created_at REAL NOT NULL,
                    updated_at REAL NOT NULL,
                    data TEXT NOT NULL DEFAULT '{}'
                )
                """
            )
            conn.execute(
                "CREATE INDEX IF NOT EXISTS idx_documents_collection "
                "ON documents(collection, created_at)"
            )
            conn.commit()
        finally:
            conn.close()

    @staticmethod
    def _encode(data: Document) -> str:
        body = {k: v for k, v in data.items() if k != "id"}
        try:
            return json.dumps(body, ensure_ascii=False)
        except (TypeError, ValueError) as e:
            raise StoreError(f"Document is not JSON-serializable: {e}") from e

    @staticmethod
    def _decode(row: sqlite3.Row) -> Document:
        try:
            val = json.loads(row["data"] or "{}")
        except ValueError:
            logger.warning("Corrupt document data id=%s", row["id"])
            val = {}
        doc: Document = val if isinstance(val, dict) else {}
        doc["id"] = row["id"]
        return doc

    def _execute(self, sql: str, params: tuple[Any, ...]) -> int:
        conn = self._get_conn()
        try:
            cur = conn.execute(sql, params)
            conn.commit()
            return cur.rowcount
        except sqlite3.Error as e:
            raise StoreError(str(e)) from e
        finally:
            conn.close()

    def list_documents(self, collection: str) -> list[Document]:
        conn = self._get_conn()
        try:
            cur = conn.execute(
                """
                SELECT id, data
                FROM documents
                WHERE collection = ?
                ORDER BY created_at ASC, rowid ASC
                """,
                (collection,),
            )
            return [self._decode(r) for r in cur.fetchall()]
        except sqlite3.Error as e:
            raise StoreError(str(e)) from e
        finally:
            conn.close()

    def _insert(self, collection: str, data: Document) -> str:
        doc_id = uuid.uuid4().hex
        now = time.time()
        self._execute(
            "INSERT INTO documents(id, collection, created_at, updated_at, data) VALUES (?, ?, ?, ?, ?)",
            (doc_id, collection, now, now, self._encode(data)),
        )
        return doc_id

    def _merge(self, collection: str, doc_id: str, fields: Document) -> None:
        conn = self._get_conn()
        try:
            row = conn.execute(
                "SELECT id, data FROM documents WHERE collection = ? AND id = ?",
                (collection, doc_id),
            ).fetchone()
            if row is None:
                raise StoreError(f"No document {doc_id!r} in {collection!r}")
            doc = self._decode(row)
            doc.update(fields)
            conn.execute(
                "UPDATE documents SET data = ?, updated_at = ? WHERE id = ?",
                (self._encode(doc), time.time(), doc_id),
            )
            conn.commit()
        except sqlite3.Error as e:
            raise StoreError(str(e)) from e
        finally:
            conn.close()

    def _remove(self, collection: str, doc_id: str) -> None:
        n = self._execute(
            "DELETE FROM documents WHERE collection = ? AND id = ?",
            (collection, doc_id),
        )
        if n != 1:
            raise StoreError(f"No document {doc_id!r} in {collection!r}")

    async def _broadcast(self, collection: str) -> None:
        listeners = list(self._listeners.get(collection, ()))
        if not listeners:
            return
        snapshot = await asyncio.to_thread(self.list_documents, collection)
        for listener in listeners:
            try:
                listener([dict(d) for d in snapshot])
            except Exception:
                logger.exception("Snapshot listener failed collection=%s", collection)

    # ---- public API (DocumentStore) ----
    # SQLite work runs in a worker thread; listeners are called on the event loop.

    async def add(self, collection: str, data: Document) -> str:
        doc_id = await asyncio.to_thread(self._insert, collection, data)
        logger.debug("Document added collection=%s id=%s", collection, doc_id)
        await self._broadcast(collection)
        return doc_id

    async def update(self, collection: str, doc_id: str, fields: Document) -> None:
        await asyncio.to_thread(self._merge, collection, doc_id, fields)
        logger.debug("Document updated collection=%s id=%s fields=%s", collection, doc_id, sorted(fields))
        await self._broadcast(collection)

    async def delete(self, collection: str, doc_id: str) -> None:
        await asyncio.to_thread(self._remove, collection, doc_id)
        logger.debug("Document deleted collection=%s id=%s", collection, doc_id)
        await self._broadcast(collection)

    async def subscribe(self, collection: str, listener: SnapshotListener) -> Unsubscribe:
        self._listeners[collection].append(listener)
        listener(await asyncio.to_thread(self.list_documents, collection))

        def unsubscribe() -> None:
            with contextlib.suppress(ValueError):
                self._listeners[collection].remove(listener)

        return unsubscribe

    async def close(self) -> None:
        """No persistent connections; just drop listeners."""
        self._listeners.clear()
