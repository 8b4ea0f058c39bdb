"""Fan-out of domain events into stored notifications and live pushes."""

from __future__ import annotations

import logging
from typing import Iterable, Protocol, Sequence

from sqlalchemy.orm import Session

from app.domain.entities import Notification, NotificationEvent
from app.domain.exceptions import NotificationValidationError
from app.infrastructure.notifications import (
    NEW_NOTIFICATION_EVENT,
    ConnectedPeerDirectory,
    notification_manager,
    peer_directory,
    serialize_notification,
)
from app.infrastructure.repositories import NotificationRepository

logger = logging.getLogger(__name__)


class NotificationStore(Protocol):
    def create(self, notification: Notification) -> Notification: ...

    def create_many(self, notifications: Sequence[Notification]) -> list[Notification]: ...


class DeliveryChannel(Protocol):
    def push(self, handle: str, event_name: str, payload: object) -> bool: ...


class NotificationDispatcher:
    """Persist notifications first, then push them to connected recipients.

    Store failures propagate to the caller because the notification would
    otherwise be lost. Delivery is best effort: an offline recipient or a
    failed push is logged and the stored record is picked up on the next
    fetch.
    """

    def __init__(
        self,
        store: NotificationStore,
        directory: ConnectedPeerDirectory,
        channel: DeliveryChannel,
    ) -> None:
        self._store = store
        self._directory = directory
        self._channel = channel

    def dispatch(self, event: NotificationEvent) -> Notification:
        """Store and deliver a single-recipient ``event``."""

        if not event.recipient_id:
            raise NotificationValidationError("Notification recipient is required", "recipient")

        saved = self._store.create(event.build_for(event.recipient_id))
        self.deliver(saved)
        return saved

    def broadcast(
        self, event: NotificationEvent, recipient_ids: Iterable[int]
    ) -> list[Notification]:
        """Store one notification per recipient and push to those online."""

        recipients = list(dict.fromkeys(user_id for user_id in recipient_ids if user_id))
        if not recipients:
            return []

        saved = self._store.create_many([event.build_for(user_id) for user_id in recipients])

        delivered = 0
        for notification in saved:
            if self.deliver(notification):
                delivered += 1
        logger.info(
            "Broadcast %s stored for %d recipients, pushed live to %d",
            event.type.value,
            len(saved),
            delivered,
        )
        return saved

    def deliver(self, notification: Notification) -> bool:
        """Push ``notification`` to its recipient if they are connected."""

        handle = self._directory.lookup(notification.recipient_id)
        if handle is None:
            logger.debug(
                "Recipient %s offline; notification %s kept for next fetch",
                notification.recipient_id,
                notification.id,
            )
            return False

        try:
            return self._channel.push(
                handle, NEW_NOTIFICATION_EVENT, serialize_notification(notification)
            )
        except Exception as exc:
            logger.warning(
                "Push of notification %s to user %s failed: %s",
                notification.id,
                notification.recipient_id,
                exc,
            )
            return False


def build_notification_dispatcher(
    session: Session,
    *,
    directory: ConnectedPeerDirectory | None = None,
    channel: DeliveryChannel | None = None,
) -> NotificationDispatcher:
    """Return a dispatcher bound to ``session`` and the process-wide channel."""

    return NotificationDispatcher(
        NotificationRepository(session),
        directory if directory is not None else peer_directory,
        channel if channel is not None else notification_manager,
    )


__all__ = [
    "DeliveryChannel",
    "NotificationDispatcher",
    "NotificationStore",
    "build_notification_dispatcher",
]
