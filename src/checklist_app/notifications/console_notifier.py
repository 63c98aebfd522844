# src/checklist_app/notifications/console_notifier.py

from __future__ import annotations

import logging
import sys
from datetime import datetime
from typing import TextIO

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


class ConsoleNotifier:
    """Prints notifications to the terminal. Permission is a config switch."""

    def __init__(self, *, enabled: bool = True, stream: TextIO | None = None) -> None:
        self.enabled = enabled
        self.stream = stream or sys.stdout
        self._permission = "default"

    async def request_permission(self) -> str:
        self._permission = "granted" if self.enabled else "denied"
        logger.info("Console notifications permission=%s", self._permission)
        return self._permission

    def permission(self) -> str:
        return self._permission

    async def notify(self, *, title: str, body: str, icon: str | None = None) -> None:
        print(f"\n[{_ts_local()}] [NOTIFY] {title}: {body}", file=self.stream, flush=True)
