# src/checklist_app/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- picks the document store and notifier backends,
- wires them into a ChecklistApp.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..connectors.console_connector import confirm_console
from ..core.checklist import ChecklistApp
from ..core.ports import Confirm, DocumentStore, Notifier
from ..notifications.console_notifier import ConsoleNotifier
from ..storage.pocketbase import PocketBaseDocumentStore
from ..storage.sqlite_store import SQLiteDocumentStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.db_path.parent.mkdir(parents=True, exist_ok=True)


def create_store(settings) -> DocumentStore:
    """StoreError propagates when a remote login fails."""
    backend = settings.store_backend
    if backend == "pocketbase":
        store = PocketBaseDocumentStore(
            settings.pocketbase_url,
            refresh_seconds=settings.pocketbase_refresh_seconds,
        )
        if settings.pocketbase_identity:
            store.login(settings.pocketbase_identity, settings.pocketbase_password)
        else:
            logger.warning("No CHECKLIST_POCKETBASE_IDENTITY set; using the collection anonymously")
        return store

    if backend != "sqlite":
        logger.warning("Unknown store backend %r; falling back to sqlite", backend)
    return SQLiteDocumentStore(settings.db_path)


def create_notifier(settings) -> Notifier:
    if settings.notifier == "matrix":
        from ..notifications.matrix_notifier import MatrixNotifier

        return MatrixNotifier(settings)

    if settings.notifier != "console":
        logger.warning("Unknown notifier %r; using console", settings.notifier)
    return ConsoleNotifier(enabled=settings.notifications_enabled)


def create_app(*, settings=None, confirm: Confirm = confirm_console) -> ChecklistApp:
    """
    Build a ChecklistApp from the provided settings.

    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    return ChecklistApp(
        create_store(settings),
        create_notifier(settings),
        confirm=confirm,
        collection=settings.collection,
        categories=settings.categories,
        require_reminders=settings.require_reminders,
        poll_interval_seconds=settings.poll_interval_seconds,
        reminder_window_seconds=settings.reminder_window_seconds,
        notification_icon=settings.notification_icon,
    )
