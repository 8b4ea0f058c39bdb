"""Client-side notification subscriber."""

from .api import NotificationApiClient
from .subscriber import NotificationSubscriber, PassiveNotifier

__all__ = ["NotificationApiClient", "NotificationSubscriber", "PassiveNotifier"]
