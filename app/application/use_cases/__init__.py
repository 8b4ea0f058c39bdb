"""Aggregate application use cases."""

from .notifications import (
    build_notification_dispatcher,
    list_notifications,
    notification_guard,
)

__all__ = [
    "build_notification_dispatcher",
    "list_notifications",
    "notification_guard",
]
