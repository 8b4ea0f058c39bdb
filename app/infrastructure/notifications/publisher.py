"""Serialization of notifications for realtime and REST clients."""

from __future__ import annotations

from typing import Any

from app.domain.entities import Notification, SenderSummary

_DATA_KEYS = {
    "job_id": "jobId",
    "application_id": "applicationId",
    "project_id": "projectId",
    "profile_id": "profileId",
}


def serialize_sender(sender: SenderSummary | None, sender_id: int) -> dict[str, Any]:
    if sender is None:
        return {"id": sender_id, "name": None, "profilePicture": None}
    return {
        "id": sender.id,
        "name": sender.name,
        "profilePicture": sender.profile_picture,
    }


def serialize_notification(notification: Notification) -> dict[str, Any]:
    """Return the JSON payload clients receive for ``notification``.

    The same shape is pushed over the websocket and returned by the list
    endpoint, so clients can merge both sources into one list.
    """

    return {
        "id": notification.id,
        "type": notification.type.value,
        "title": notification.title,
        "message": notification.message,
        "sender": serialize_sender(notification.sender, notification.sender_id),
        "data": {_DATA_KEYS[key]: value for key, value in notification.data.to_dict().items()},
        "actionUrl": notification.action_url,
        "createdAt": notification.created_at.isoformat()
        if notification.created_at
        else None,
        "read": notification.read,
    }


__all__ = ["serialize_notification", "serialize_sender"]
