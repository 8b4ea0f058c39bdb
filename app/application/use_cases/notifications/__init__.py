"""Public helpers for emitting and reading notifications."""

from .dispatcher import NotificationDispatcher, build_notification_dispatcher
from .events import (
    notification_guard,
    notify_application_status_update,
    notify_job_application,
    notify_job_posted,
    notify_profile_follow,
)
from .inbox import (
    acknowledge_notifications,
    delete_notification,
    list_notifications,
    mark_all_notifications_read,
    mark_notification_read,
)

__all__ = [
    "NotificationDispatcher",
    "build_notification_dispatcher",
    "notification_guard",
    "notify_application_status_update",
    "notify_job_application",
    "notify_job_posted",
    "notify_profile_follow",
    "acknowledge_notifications",
    "delete_notification",
    "list_notifications",
    "mark_all_notifications_read",
    "mark_notification_read",
]
