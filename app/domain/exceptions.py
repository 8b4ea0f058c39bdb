"""Errors raised by the notification subsystem."""

from __future__ import annotations


class NotificationError(Exception):
    """Base class for notification failures."""


class NotificationValidationError(NotificationError, ValueError):
    """The notification is malformed and was rejected before any write."""

    def __init__(self, detail: str, field: str | None = None) -> None:
        super().__init__(detail)
        self.detail = detail
        self.field = field


class NotificationDurabilityError(NotificationError):
    """The notification store could not persist a write."""

    def __init__(self, detail: str, operation: str | None = None) -> None:
        super().__init__(detail)
        self.detail = detail
        self.operation = operation


class NotificationNotFoundError(NotificationError, LookupError):
    """The notification does not exist or belongs to another user.

    Both cases are reported the same way so non-owners cannot probe ids.
    """

    def __init__(self, notification_id: int | None = None) -> None:
        detail = "Notification not found"
        super().__init__(detail)
        self.detail = detail
        self.notification_id = notification_id


class NotificationClientError(NotificationError):
    """A REST call issued by the client-side subscriber failed."""

    def __init__(self, detail: str, status_code: int | None = None) -> None:
        super().__init__(detail)
        self.detail = detail
        self.status_code = status_code


__all__ = [
    "NotificationError",
    "NotificationValidationError",
    "NotificationDurabilityError",
    "NotificationNotFoundError",
    "NotificationClientError",
]
