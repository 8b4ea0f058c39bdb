"""Domain entities representing user notifications."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from datetime import datetime
from enum import Enum
from app.domain.exceptions import NotificationValidationError

JOIN_EVENT = "join"
NEW_NOTIFICATION_EVENT = "newNotification"


class NotificationType(str, Enum):
    """Kinds of events a notification can describe."""

    JOB_APPLICATION = "job_application"
    JOB_POSTED = "job_posted"
    APPLICATION_STATUS_UPDATE = "application_status_update"
    PROFILE_FOLLOW = "profile_follow"
    PROJECT_LIKE = "project_like"
    PROJECT_COMMENT = "project_comment"
    INTERVIEW_SCHEDULED = "interview_scheduled"
    MESSAGE_RECEIVED = "message_received"

    @classmethod
    def parse(cls, value: "NotificationType | str | None") -> "NotificationType":
        """Return the enum member for ``value`` or raise a validation error."""

        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError as exc:
            raise NotificationValidationError(
                f"Unknown notification type: {value!r}", field="type"
            ) from exc


@dataclass(frozen=True)
class NotificationData:
    """Reference to the resource a notification is about.

    At most one reference is populated, depending on the notification type.
    """

    job_id: int | None = None
    application_id: int | None = None
    project_id: int | None = None
    profile_id: int | None = None

    def __post_init__(self) -> None:
        populated = [item.name for item in fields(self) if getattr(self, item.name) is not None]
        if len(populated) > 1:
            raise NotificationValidationError(
                "Notification data may reference a single resource, got "
                + ", ".join(populated),
                field="data",
            )

    def to_dict(self) -> dict[str, int]:
        """Return only the populated reference."""

        return {
            item.name: getattr(self, item.name)
            for item in fields(self)
            if getattr(self, item.name) is not None
        }


@dataclass(frozen=True)
class SenderSummary:
    """Minimal information about who originated a notification."""

    id: int
    name: str
    profile_picture: str | None = None


@dataclass
class Notification:
    """Information message delivered to a specific user."""

    id: int | None
    recipient_id: int
    sender_id: int
    type: NotificationType
    title: str
    message: str
    data: NotificationData = field(default_factory=NotificationData)
    action_url: str | None = None
    read: bool = False
    read_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    sender: SenderSummary | None = None

    def validate(self) -> None:
        """Raise :class:`NotificationValidationError` when required fields are missing."""

        if not self.recipient_id:
            raise NotificationValidationError("Notification recipient is required", "recipient")
        if not self.sender_id:
            raise NotificationValidationError("Notification sender is required", "sender")
        if self.type is None:
            raise NotificationValidationError("Notification type is required", "type")
        self.type = NotificationType.parse(self.type)
        if not (self.title or "").strip():
            raise NotificationValidationError("Notification title is required", "title")
        if not (self.message or "").strip():
            raise NotificationValidationError("Notification message is required", "message")
        if self.action_url is not None and not self.action_url.startswith("/"):
            raise NotificationValidationError(
                "Notification action URL must be a relative path", "actionUrl"
            )


@dataclass
class NotificationEvent:
    """Description of a domain event handed to the dispatcher.

    ``recipient_id`` is only used for single-recipient events; broadcasts pass
    their recipient set separately.
    """

    sender_id: int
    type: NotificationType
    title: str
    message: str
    data: NotificationData = field(default_factory=NotificationData)
    action_url: str | None = None
    recipient_id: int | None = None

    def build_for(self, recipient_id: int) -> Notification:
        """Return an unsaved :class:`Notification` addressed to ``recipient_id``."""

        return Notification(
            id=None,
            recipient_id=recipient_id,
            sender_id=self.sender_id,
            type=self.type,
            title=self.title,
            message=self.message,
            data=self.data,
            action_url=self.action_url,
        )


@dataclass
class NotificationPage:
    """One page of a user's notifications plus the counters the UI needs."""

    items: list[Notification]
    total: int
    unread_count: int
    page: int
    page_size: int

    @property
    def pages(self) -> int:
        if self.page_size <= 0:
            return 0
        return -(-self.total // self.page_size)


__all__ = [
    "JOIN_EVENT",
    "NEW_NOTIFICATION_EVENT",
    "Notification",
    "NotificationData",
    "NotificationEvent",
    "NotificationPage",
    "NotificationType",
    "SenderSummary",
]
