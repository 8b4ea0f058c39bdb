"""Realtime notification helpers for the infrastructure layer."""

from .directory import ConnectedPeerDirectory, peer_directory
from .manager import (
    NEW_NOTIFICATION_EVENT,
    NotificationConnectionManager,
    notification_manager,
)
from .publisher import serialize_notification, serialize_sender

__all__ = [
    "ConnectedPeerDirectory",
    "peer_directory",
    "NEW_NOTIFICATION_EVENT",
    "NotificationConnectionManager",
    "notification_manager",
    "serialize_notification",
    "serialize_sender",
]
