"""Persistence helpers for notification entities."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Query, Session

from app.domain.entities import (
    Notification,
    NotificationData,
    NotificationPage,
    NotificationType,
    SenderSummary,
)
from app.domain.exceptions import NotificationDurabilityError
from app.infrastructure.models import NotificationModel
from app.utils import from_storage_datetime, now_for_storage, to_storage_datetime

logger = logging.getLogger(__name__)


class NotificationRepository:
    """Durable store for :class:`Notification` records.

    Every mutation is scoped to the owning recipient: callers pass the id of
    the authenticated user and rows belonging to anyone else are invisible.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def create(self, notification: Notification) -> Notification:
        notification.validate()
        model = NotificationModel()
        self._apply_entity_to_model(model, notification)
        self.session.add(model)
        self._commit("create")
        self.session.refresh(model)
        return self._to_entity(model)

    def create_many(self, notifications: Sequence[Notification]) -> list[Notification]:
        """Persist ``notifications`` in a single transaction.

        Every record is validated before anything is written, so a malformed
        entry rejects the whole batch.
        """

        for notification in notifications:
            notification.validate()
        if not notifications:
            return []

        models = []
        for notification in notifications:
            model = NotificationModel()
            self._apply_entity_to_model(model, notification)
            models.append(model)
        self.session.add_all(models)
        self._commit("create_many")
        for model in models:
            self.session.refresh(model)
        return [self._to_entity(model) for model in models]

    def get_for_user(self, notification_id: int, user_id: int) -> Notification | None:
        model = self._owned_query(notification_id, user_id).first()
        return self._to_entity(model) if model else None

    def list_for_user(
        self,
        user_id: int,
        *,
        page: int = 1,
        page_size: int = 20,
        unread_only: bool = False,
    ) -> NotificationPage:
        page = max(page, 1)
        query = self.session.query(NotificationModel).filter(
            NotificationModel.recipient_id == user_id
        )
        if unread_only:
            query = query.filter(NotificationModel.read.is_(False))

        try:
            total = query.order_by(None).count()
            models = (
                query.order_by(
                    NotificationModel.created_at.desc(), NotificationModel.id.desc()
                )
                .offset((page - 1) * page_size)
                .limit(page_size)
                .all()
            )
            items = [self._to_entity(model) for model in models]
            unread_count = self.count_unread(user_id)
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.error("Notification store list failed: %s", exc)
            raise NotificationDurabilityError(
                "Could not read notifications", operation="list"
            ) from exc
        return NotificationPage(
            items=items,
            total=total,
            unread_count=unread_count,
            page=page,
            page_size=page_size,
        )

    def count_unread(self, user_id: int) -> int:
        return (
            self.session.query(func.count(NotificationModel.id))
            .filter(NotificationModel.recipient_id == user_id)
            .filter(NotificationModel.read.is_(False))
            .scalar()
            or 0
        )

    def mark_read(self, notification_id: int, user_id: int) -> Notification | None:
        """Mark one notification as read; ``None`` when it is not ``user_id``'s.

        Notifications that are already read are returned untouched so the
        original ``read_at`` survives repeated calls.
        """

        model = self._owned_query(notification_id, user_id).first()
        if model is None:
            return None
        if not model.read:
            model.read = True
            model.read_at = now_for_storage()
            self.session.add(model)
            self._commit("mark_read")
            self.session.refresh(model)
        return self._to_entity(model)

    def mark_read_many(self, notification_ids: Iterable[int], *, user_id: int) -> int:
        ids = [notification_id for notification_id in notification_ids if notification_id is not None]
        if not ids:
            return 0
        query = self.session.query(NotificationModel).filter(
            NotificationModel.id.in_(ids),
            NotificationModel.recipient_id == user_id,
        )
        return self._mark_query_read(query, "mark_read_many")

    def mark_all_read(self, user_id: int) -> int:
        query = self.session.query(NotificationModel).filter(
            NotificationModel.recipient_id == user_id
        )
        return self._mark_query_read(query, "mark_all_read")

    def delete(self, notification_id: int, user_id: int) -> bool:
        model = self._owned_query(notification_id, user_id).first()
        if model is None:
            return False
        self.session.delete(model)
        self._commit("delete")
        return True

    def _owned_query(self, notification_id: int, user_id: int) -> Query:
        return self.session.query(NotificationModel).filter(
            NotificationModel.id == notification_id,
            NotificationModel.recipient_id == user_id,
        )

    def _mark_query_read(self, query: Query, operation: str) -> int:
        now = now_for_storage()
        updated = query.filter(NotificationModel.read.is_(False)).update(
            {
                NotificationModel.read: True,
                NotificationModel.read_at: now,
                NotificationModel.updated_at: now,
            },
            synchronize_session=False,
        )
        self._commit(operation)
        return updated

    def _commit(self, operation: str) -> None:
        try:
            self.session.commit()
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.error("Notification store %s failed: %s", operation, exc)
            raise NotificationDurabilityError(
                "Could not persist notification changes", operation=operation
            ) from exc

    @staticmethod
    def _apply_entity_to_model(model: NotificationModel, notification: Notification) -> None:
        now = now_for_storage()
        model.recipient_id = notification.recipient_id
        model.sender_id = notification.sender_id
        model.type = NotificationType.parse(notification.type).value
        model.title = notification.title.strip()
        model.message = notification.message.strip()
        model.job_id = notification.data.job_id
        model.application_id = notification.data.application_id
        model.project_id = notification.data.project_id
        model.profile_id = notification.data.profile_id
        model.action_url = notification.action_url
        model.read = False
        model.read_at = None
        model.created_at = to_storage_datetime(notification.created_at) or now
        model.updated_at = now

    @staticmethod
    def _to_entity(model: NotificationModel) -> Notification:
        sender = None
        if model.sender is not None:
            sender = SenderSummary(
                id=model.sender.id,
                name=model.sender.name,
                profile_picture=model.sender.profile_picture,
            )
        return Notification(
            id=model.id,
            recipient_id=model.recipient_id,
            sender_id=model.sender_id,
            type=NotificationType(model.type),
            title=model.title,
            message=model.message,
            data=NotificationData(
                job_id=model.job_id,
                application_id=model.application_id,
                project_id=model.project_id,
                profile_id=model.profile_id,
            ),
            action_url=model.action_url,
            read=bool(model.read),
            read_at=from_storage_datetime(model.read_at),
            created_at=from_storage_datetime(model.created_at),
            updated_at=from_storage_datetime(model.updated_at),
            sender=sender,
        )


__all__ = ["NotificationRepository"]
