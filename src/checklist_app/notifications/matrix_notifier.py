# src/checklist_app/notifications/matrix_notifier.py

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Any

from nio import RoomSendError

from .matrix_client import create_matrix_client

logger = logging.getLogger(__name__)

ClientFactory = Callable[[Any], Awaitable[Any]]


class MatrixNotifier:
    """
    Sends notifications as m.notice messages to one Matrix room.

    Permission is "granted" once a client is logged in and a room is configured,
    "denied" when setup failed, "default" before request_permission().
    """

    def __init__(self, settings, *, client_factory: ClientFactory = create_matrix_client) -> None:
        self.settings = settings
        self.room_id = (getattr(settings, "matrix_room_id", "") or "").strip()
        self._client_factory = client_factory
        self._client: Any = None
        self._permission = "default"

    async def request_permission(self) -> str:
        if not self.room_id:
            logger.error("Matrix notifications need CHECKLIST_MATRIX_ROOM_ID")
            self._permission = "denied"
            return self._permission

        self._client = await self._client_factory(self.settings)
        self._permission = "granted" if self._client is not None else "denied"
        logger.info("Matrix notifications permission=%s room=%s", self._permission, self.room_id)
        return self._permission

    def permission(self) -> str:
        return self._permission

    async def notify(self, *, title: str, body: str, icon: str | None = None) -> None:
        if self._client is None:
            return
        resp = await self._client.room_send(
            room_id=self.room_id,
            message_type="m.room.message",
            content={"msgtype": "m.notice", "body": f"{title}: {body}"},
        )
        if isinstance(resp, RoomSendError):
            logger.warning("Matrix notification failed room=%s: %s", self.room_id, resp.message)

    async def close(self) -> None:
        if self._client is not None:
            await self._client.close()
            self._client = None
