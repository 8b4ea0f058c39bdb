from .notification import (
    NotificationAckRequest,
    NotificationActionResponse,
    NotificationListResponse,
    NotificationRead,
    NotificationSenderRead,
    PaginationRead,
)

__all__ = [
    "NotificationAckRequest",
    "NotificationActionResponse",
    "NotificationListResponse",
    "NotificationRead",
    "NotificationSenderRead",
    "PaginationRead",
]
