"""Pydantic models describing notification payloads."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class NotificationAckRequest(BaseModel):
    """Websocket payload used to acknowledge a batch of notifications."""

    ids: list[int] = Field(..., min_length=1, description="Notification identifiers")

    def unique_ids(self) -> list[int]:
        """Return the list of identifiers without duplicates preserving order."""

        unique: list[int] = []
        seen: set[int] = set()
        for notification_id in self.ids:
            if notification_id in seen:
                continue
            seen.add(notification_id)
            unique.append(notification_id)
        return unique


class NotificationSenderRead(_CamelModel):
    id: int
    name: str | None = None
    profile_picture: str | None = None


class NotificationRead(_CamelModel):
    """Representation of a notification delivered to the client."""

    id: int
    type: str
    title: str
    message: str
    sender: NotificationSenderRead
    data: dict[str, int] = Field(default_factory=dict)
    action_url: str | None = None
    read: bool = False
    created_at: datetime


class PaginationRead(BaseModel):
    page: int
    limit: int
    total: int
    pages: int


class NotificationListResponse(_CamelModel):
    success: bool = True
    notifications: list[NotificationRead]
    pagination: PaginationRead
    unread_count: int


class NotificationActionResponse(BaseModel):
    success: bool = True
    message: str


__all__ = [
    "NotificationAckRequest",
    "NotificationActionResponse",
    "NotificationListResponse",
    "NotificationRead",
    "NotificationSenderRead",
    "PaginationRead",
]
