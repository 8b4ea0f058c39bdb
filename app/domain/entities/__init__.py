"""Domain entities exposed by the application."""

from .notification import (
    JOIN_EVENT,
    NEW_NOTIFICATION_EVENT,
    Notification,
    NotificationData,
    NotificationEvent,
    NotificationPage,
    NotificationType,
    SenderSummary,
)
from .user import ROLE_ADMIN, ROLE_RECRUITER, ROLE_STUDENT, User

__all__ = [
    "JOIN_EVENT",
    "NEW_NOTIFICATION_EVENT",
    "Notification",
    "NotificationData",
    "NotificationEvent",
    "NotificationPage",
    "NotificationType",
    "SenderSummary",
    "User",
    "ROLE_ADMIN",
    "ROLE_RECRUITER",
    "ROLE_STUDENT",
]
