# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
Do NOT commit real secrets; keep them in .env (local, gitignored).
"""

ENV_VARS = {
    # App / logging
    "CHECKLIST_APP_NAME": "App display name (default: checklist).",
    "CHECKLIST_LOG_LEVEL": "Console logging level (default: INFO).",
    "CHECKLIST_DATA_DIR": "Local data directory for logs and SQLite (default: .local/checklist).",
    # Document store
    "CHECKLIST_STORE_BACKEND": "sqlite (default) or pocketbase.",
    "CHECKLIST_COLLECTION": "Collection holding tasks (default: tasks).",
    "CHECKLIST_DB_PATH": "SQLite path (default: <data_dir>/checklist.sqlite3).",
    "CHECKLIST_POCKETBASE_URL": "PocketBase base URL (default: http://127.0.0.1:8090).",
    "CHECKLIST_POCKETBASE_IDENTITY": "PocketBase user email/username (optional).",
    "CHECKLIST_POCKETBASE_PASSWORD": "PocketBase user password.",
    "CHECKLIST_POCKETBASE_REFRESH_SECONDS": "Snapshot re-list interval; 0 disables (default: 10).",
    # Tasks
    "CHECKLIST_CATEGORIES": "Comma separated categories (default: Personal,Work,Shopping).",
    "CHECKLIST_REQUIRE_REMINDERS": "Reject tasks without reminders (true/false, default false).",
    # Poller
    "CHECKLIST_POLL_INTERVAL_SECONDS": "Reminder poll interval (default: 30).",
    "CHECKLIST_REMINDER_WINDOW_SECONDS": "Only fire reminders this recent; empty = no limit.",
    # Notifications
    "CHECKLIST_NOTIFIER": "console (default) or matrix.",
    "CHECKLIST_NOTIFICATIONS_ENABLED": "Grant console notification permission (default: true).",
    "CHECKLIST_NOTIFICATION_ICON": "Icon reference passed with notifications.",
    "CHECKLIST_MATRIX_HOMESERVER": "Matrix homeserver URL.",
    "CHECKLIST_MATRIX_USER_ID": "Matrix user ID used to send notifications.",
    "CHECKLIST_MATRIX_PASSWORD": "Password for first login (session stored locally).",
    "CHECKLIST_MATRIX_ROOM_ID": "Room that receives notifications.",
    "CHECKLIST_MATRIX_STORE_PATH": "Matrix session dir (default: <data_dir>/matrix_store).",
}
