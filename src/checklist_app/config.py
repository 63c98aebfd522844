# src/checklist_app/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- No secrets required at import time (PocketBase/Matrix credentials are only
  needed when those backends are selected).
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

ENV_PREFIX = "CHECKLIST"

DEFAULT_CATEGORIES = ["Personal", "Work", "Shopping"]


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _load_dotenv_if_available() -> None:
    """Load .env locally if python-dotenv is installed. Safe no-op otherwise."""
    try:
        from dotenv import load_dotenv  # type: ignore
    except Exception:
        return
    load_dotenv(override=False)


_load_dotenv_if_available()


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_optional_float(name: str) -> Optional[float]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return None
    try:
        return float(raw)
    except ValueError:
        return None


def _env_list(name: str, default: List[str]) -> List[str]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return list(default)
    return [p.strip() for p in raw.split(",") if p.strip()]


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Document store ----
    store_backend: str  # sqlite | pocketbase
    collection: str
    data_dir: Path
    db_path: Path

    pocketbase_url: str
    pocketbase_identity: str
    pocketbase_password: str
    pocketbase_refresh_seconds: float

    # ---- Tasks ----
    categories: List[str]
    require_reminders: bool

    # ---- Reminder poller ----
    poll_interval_seconds: float
    reminder_window_seconds: Optional[float]

    # ---- Notifications ----
    notifier: str  # console | matrix
    notifications_enabled: bool
    notification_icon: str

    matrix_homeserver: str
    matrix_user_id: str
    matrix_password: str
    matrix_room_id: str
    matrix_store_path: Path

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "checklist") or "checklist"
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        store_backend = _env(_k("STORE_BACKEND"), "sqlite").strip().lower() or "sqlite"
        collection = _env(_k("COLLECTION"), "tasks").strip() or "tasks"
        data_dir = _env_path(_k("DATA_DIR"), Path(".local/checklist"))
        db_path = _env_path(_k("DB_PATH"), data_dir / "checklist.sqlite3")

        pocketbase_url = _env(_k("POCKETBASE_URL"), "http://127.0.0.1:8090").strip()
        pocketbase_identity = _env(_k("POCKETBASE_IDENTITY"), "").strip()
        pocketbase_password = _env(_k("POCKETBASE_PASSWORD"), "").strip()
        pocketbase_refresh_seconds = _env_float(_k("POCKETBASE_REFRESH_SECONDS"), 10.0)

        categories = _env_list(_k("CATEGORIES"), DEFAULT_CATEGORIES)
        require_reminders = _env_bool(_k("REQUIRE_REMINDERS"), False)

        poll_interval_seconds = _env_float(_k("POLL_INTERVAL_SECONDS"), 30.0)
        reminder_window_seconds = _env_optional_float(_k("REMINDER_WINDOW_SECONDS"))

        notifier = _env(_k("NOTIFIER"), "console").strip().lower() or "console"
        notifications_enabled = _env_bool(_k("NOTIFICATIONS_ENABLED"), True)
        notification_icon = _env(_k("NOTIFICATION_ICON"), "assets/icon.png")

        matrix_homeserver = _env(_k("MATRIX_HOMESERVER"), "").strip()
        matrix_user_id = _env(_k("MATRIX_USER_ID"), "").strip()
        matrix_password = _env(_k("MATRIX_PASSWORD"), "").strip()
        matrix_room_id = _env(_k("MATRIX_ROOM_ID"), "").strip()
        matrix_store_path = _env_path(_k("MATRIX_STORE_PATH"), data_dir / "matrix_store")

        return Settings(
            app_name=app_name,
            log_level=log_level,
            store_backend=store_backend,
            collection=collection,
            data_dir=data_dir,
            db_path=db_path,
            pocketbase_url=pocketbase_url,
            pocketbase_identity=pocketbase_identity,
            pocketbase_password=pocketbase_password,
            pocketbase_refresh_seconds=pocketbase_refresh_seconds,
            categories=categories,
            require_reminders=require_reminders,
            poll_interval_seconds=poll_interval_seconds,
            reminder_window_seconds=reminder_window_seconds,
            notifier=notifier,
            notifications_enabled=notifications_enabled,
            notification_icon=notification_icon,
            matrix_homeserver=matrix_homeserver,
            matrix_user_id=matrix_user_id,
            matrix_password=matrix_password,
            matrix_room_id=matrix_room_id,
            matrix_store_path=matrix_store_path,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
