"""Use cases behind the notification inbox endpoints."""

from __future__ import annotations

from sqlalchemy.orm import Session

from app.config import get_settings
from app.domain.entities import Notification, NotificationPage
from app.domain.exceptions import NotificationNotFoundError
from app.infrastructure.repositories import NotificationRepository


def list_notifications(
    session: Session,
    user_id: int,
    *,
    page: int = 1,
    page_size: int | None = None,
    unread_only: bool = False,
) -> NotificationPage:
    """Return ``user_id``'s notifications, newest first."""

    settings = get_settings()
    size = page_size or settings.notifications_page_size
    size = min(max(size, 1), settings.notifications_max_page_size)
    return NotificationRepository(session).list_for_user(
        user_id, page=max(page, 1), page_size=size, unread_only=unread_only
    )


def mark_notification_read(session: Session, notification_id: int, user_id: int) -> Notification:
    notification = NotificationRepository(session).mark_read(notification_id, user_id)
    if notification is None:
        raise NotificationNotFoundError(notification_id)
    return notification


def mark_all_notifications_read(session: Session, user_id: int) -> int:
    return NotificationRepository(session).mark_all_read(user_id)


def acknowledge_notifications(session: Session, notification_ids: list[int], user_id: int) -> int:
    """Mark the notifications a websocket client acknowledged as read."""

    return NotificationRepository(session).mark_read_many(notification_ids, user_id=user_id)


def delete_notification(session: Session, notification_id: int, user_id: int) -> None:
    if not NotificationRepository(session).delete(notification_id, user_id):
        raise NotificationNotFoundError(notification_id)


__all__ = [
    "acknowledge_notifications",
    "delete_notification",
    "list_notifications",
    "mark_all_notifications_read",
    "mark_notification_read",
]
