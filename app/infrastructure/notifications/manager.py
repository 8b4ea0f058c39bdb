"""Connection management helpers for notification websockets."""

from __future__ import annotations

import asyncio
import copy
import logging
from typing import Any, Dict, Set
from uuid import uuid4

from anyio import from_thread
from fastapi import WebSocket

from app.domain.entities import NEW_NOTIFICATION_EVENT

from .directory import ConnectedPeerDirectory, peer_directory

logger = logging.getLogger(__name__)


class NotificationConnectionManager:
    """Own the live websocket channels and push payloads through them.

    Each accepted socket gets an opaque handle. The handle is tied to a user
    only once the client announces itself with ``join``; closing the socket
    removes that association from the directory.
    """

    def __init__(self, directory: ConnectedPeerDirectory) -> None:
        self._directory = directory
        self._connections: Dict[str, WebSocket] = {}
        self._pending: Set[asyncio.Task] = set()

    async def connect(self, websocket: WebSocket) -> str:
        """Accept ``websocket`` and return the handle allocated for it."""

        await websocket.accept()
        handle = uuid4().hex
        self._connections[handle] = websocket
        return handle

    def join(self, handle: str, user_id: int) -> None:
        """Announce that ``handle`` belongs to ``user_id``."""

        if handle not in self._connections:
            return
        self._directory.register(user_id, handle)
        logger.debug("User %s joined notification channel %s", user_id, handle)

    def disconnect(self, handle: str) -> int | None:
        """Drop ``handle`` and return the user it served, if any."""

        self._connections.pop(handle, None)
        user_id = self._directory.unregister(handle)
        if user_id is not None:
            logger.debug("User %s left notification channel %s", user_id, handle)
        return user_id

    def is_open(self, handle: str) -> bool:
        return handle in self._connections

    def push(self, handle: str, event_name: str, payload: Any) -> bool:
        """Schedule ``payload`` for delivery on ``handle`` without waiting.

        Returns ``False`` when nothing could be scheduled. Errors never
        propagate: a failed push is equivalent to the recipient being offline.
        """

        if handle not in self._connections:
            return False

        message = {"type": event_name, "data": copy.deepcopy(payload)}
        try:
            self._schedule_send(handle, message)
        except Exception as exc:
            logger.warning("Could not schedule push on channel %s: %s", handle, exc)
            return False
        return True

    async def send(self, handle: str, message: dict[str, Any]) -> bool:
        """Write ``message`` to the socket behind ``handle``."""

        websocket = self._connections.get(handle)
        if websocket is None:
            return False
        try:
            await websocket.send_json(message)
        except Exception as exc:  # pragma: no cover - transport already gone
            logger.debug("Dropping notification channel %s after send error: %s", handle, exc)
            self.disconnect(handle)
            return False
        return True

    def _schedule_send(self, handle: str, message: dict[str, Any]) -> None:
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            # Sync route handlers run in anyio worker threads; hop onto the
            # loop only long enough to start the task.
            from_thread.run_sync(self._spawn_send, handle, message)
        else:
            self._spawn_send(handle, message)

    def _spawn_send(self, handle: str, message: dict[str, Any]) -> None:
        task = asyncio.get_running_loop().create_task(self.send(handle, message))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)


notification_manager = NotificationConnectionManager(peer_directory)


__all__ = [
    "NEW_NOTIFICATION_EVENT",
    "NotificationConnectionManager",
    "notification_manager",
]
