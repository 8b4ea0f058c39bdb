"""Client-side view of a user's notifications kept current over a websocket."""

from __future__ import annotations

import json
import logging
from typing import Any, AsyncIterator, Callable, Protocol

import anyio
import websockets

from app.domain.entities import JOIN_EVENT, NEW_NOTIFICATION_EVENT

from .api import NotificationApiClient

logger = logging.getLogger(__name__)

PassiveNotifier = Callable[[str, str], None]


class _Connection(Protocol):
    async def send(self, message: str) -> None: ...

    def __aiter__(self) -> AsyncIterator[str | bytes]: ...


class NotificationSubscriber:
    """Keep an unread counter and a newest-first list in sync with the server.

    The list is seeded once over REST and then grown by pushed payloads.
    Mutations call the backend first and only then update local state; when
    the call fails the error propagates and local state is left untouched
    until the next fetch.
    """

    def __init__(
        self,
        api: NotificationApiClient,
        *,
        user_id: int,
        ws_url: str,
        page_size: int = 20,
        passive_notifier: PassiveNotifier | None = None,
    ) -> None:
        self._api = api
        self.user_id = user_id
        self._ws_url = ws_url
        self._page_size = page_size
        self._passive_notifier = passive_notifier
        self._stopping = False
        self.notifications: list[dict[str, Any]] = []
        self.unread_count = 0
        self.loading = False
        self.joined = False

    def seed(self) -> None:
        self.fetch(page=1)

    def fetch(self, page: int = 1) -> None:
        """Load ``page``; page one replaces the list, later pages append."""

        self.loading = True
        try:
            payload = self._api.list(page=page, limit=self._page_size, unread_only=False)
        finally:
            self.loading = False

        if not payload.get("success"):
            return
        items = list(payload.get("notifications") or [])
        if page == 1:
            self.notifications = items
        else:
            self.notifications.extend(items)
        self.unread_count = int(payload.get("unreadCount") or 0)

    def join_message(self) -> dict[str, Any]:
        return {"type": JOIN_EVENT, "user_id": self.user_id}

    def handle_raw(self, raw: str | bytes) -> dict[str, Any] | None:
        try:
            message = json.loads(raw)
        except ValueError:
            logger.debug("Ignoring malformed notification frame: %r", raw)
            return None
        if not isinstance(message, dict):
            return None
        return self.handle_message(message)

    def handle_message(self, message: dict[str, Any]) -> dict[str, Any] | None:
        """Merge a server message; return the notification it carried, if any."""

        message_type = message.get("type")
        if message_type == "joined":
            self.joined = True
            return None
        if message_type == "error":
            logger.warning("Notification channel rejected request: %s", message.get("detail"))
            return None
        if message_type != NEW_NOTIFICATION_EVENT:
            return None

        notification = message.get("data")
        if not isinstance(notification, dict):
            return None
        self.notifications.insert(0, notification)
        self.unread_count += 1
        self._notify_passively(notification)
        return notification

    def mark_as_read(self, notification_id: int) -> None:
        self._api.mark_as_read(notification_id)
        item = self._find(notification_id)
        if item is not None and not item.get("read"):
            item["read"] = True
            self.unread_count = max(0, self.unread_count - 1)

    def mark_all_as_read(self) -> None:
        self._api.mark_all_as_read()
        for item in self.notifications:
            item["read"] = True
        self.unread_count = 0

    def delete(self, notification_id: int) -> None:
        self._api.delete(notification_id)
        item = self._find(notification_id)
        if item is None:
            return
        self.notifications = [n for n in self.notifications if n.get("id") != notification_id]
        if not item.get("read"):
            self.unread_count = max(0, self.unread_count - 1)

    def stop(self) -> None:
        """Leave :meth:`run` once the current connection closes."""

        self._stopping = True

    async def run(
        self,
        connect: Callable[[str], AsyncIterator[_Connection]] = websockets.connect,
    ) -> None:
        """Seed state, then listen for pushes until :meth:`stop` is called.

        ``websockets.connect`` used as an async iterator reconnects with
        backoff whenever the transport drops. The server forgets the channel
        on every drop, so ``join`` is sent again on each new connection.
        """

        await anyio.to_thread.run_sync(self.seed)
        async for connection in connect(self._ws_url):
            self.joined = False
            try:
                await connection.send(json.dumps(self.join_message()))
                async for raw in connection:
                    self.handle_raw(raw)
            except websockets.ConnectionClosed:
                logger.info("Notification channel dropped; waiting for reconnect")
                if self._stopping:
                    break
                continue
            if self._stopping:
                break

    def _find(self, notification_id: int) -> dict[str, Any] | None:
        for item in self.notifications:
            if item.get("id") == notification_id:
                return item
        return None

    def _notify_passively(self, notification: dict[str, Any]) -> None:
        if self._passive_notifier is None:
            return
        try:
            self._passive_notifier(
                str(notification.get("title") or ""), str(notification.get("message") or "")
            )
        except Exception as exc:
            logger.debug("Passive notification failed: %s", exc)


__all__ = ["NotificationSubscriber", "PassiveNotifier"]
