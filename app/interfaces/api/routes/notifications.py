"""Endpoints and websocket handler for realtime notifications."""

from __future__ import annotations

import logging

import anyio
from fastapi import (
    APIRouter,
    Depends,
    HTTPException,
    Query,
    WebSocket,
    WebSocketDisconnect,
    status,
)
from pydantic import ValidationError
from sqlalchemy.orm import Session

from app.application.use_cases.notifications import (
    acknowledge_notifications,
    delete_notification as delete_notification_uc,
    list_notifications as list_notifications_uc,
    mark_all_notifications_read,
    mark_notification_read,
)
from app.domain.entities import JOIN_EVENT, User
from app.domain.exceptions import NotificationDurabilityError, NotificationNotFoundError
from app.infrastructure.database import SessionLocal, get_db
from app.infrastructure.notifications import (
    NotificationConnectionManager,
    serialize_notification,
)
from app.interfaces.api.dependencies import (
    get_connection_manager,
    get_current_active_user,
    resolve_current_user,
)
from app.interfaces.api.schemas import (
    NotificationAckRequest,
    NotificationActionResponse,
    NotificationListResponse,
    PaginationRead,
)

router = APIRouter(prefix="/notifications", tags=["notifications"])
logger = logging.getLogger(__name__)


def _not_found(exc: NotificationNotFoundError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=exc.detail)


def _server_error(exc: NotificationDurabilityError) -> HTTPException:
    logger.error("Notification store failure during %s: %s", exc.operation, exc.detail)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Server error"
    )


@router.get("/", response_model=NotificationListResponse)
def list_notifications(
    page: int = Query(1, ge=1),
    limit: int | None = Query(None, ge=1),
    unread_only: bool = Query(False, alias="unreadOnly"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> NotificationListResponse:
    """Return the authenticated user's notifications, newest first."""

    try:
        result = list_notifications_uc(
            db, current_user.id, page=page, page_size=limit, unread_only=unread_only
        )
    except NotificationDurabilityError as exc:
        raise _server_error(exc) from exc
    return NotificationListResponse(
        notifications=[serialize_notification(item) for item in result.items],
        pagination=PaginationRead(
            page=result.page,
            limit=result.page_size,
            total=result.total,
            pages=result.pages,
        ),
        unread_count=result.unread_count,
    )


@router.put("/read-all", response_model=NotificationActionResponse)
def mark_all_as_read(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> NotificationActionResponse:
    try:
        mark_all_notifications_read(db, current_user.id)
    except NotificationDurabilityError as exc:
        raise _server_error(exc) from exc
    return NotificationActionResponse(message="All notifications marked as read")


@router.put("/{notification_id}/read", response_model=NotificationActionResponse)
def mark_as_read(
    notification_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> NotificationActionResponse:
    try:
        mark_notification_read(db, notification_id, current_user.id)
    except NotificationNotFoundError as exc:
        raise _not_found(exc) from exc
    except NotificationDurabilityError as exc:
        raise _server_error(exc) from exc
    return NotificationActionResponse(message="Notification marked as read")


@router.delete("/{notification_id}", response_model=NotificationActionResponse)
def delete_notification(
    notification_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_active_user),
) -> NotificationActionResponse:
    try:
        delete_notification_uc(db, notification_id, current_user.id)
    except NotificationNotFoundError as exc:
        raise _not_found(exc) from exc
    except NotificationDurabilityError as exc:
        raise _server_error(exc) from exc
    return NotificationActionResponse(message="Notification deleted")


def _authenticate_socket(token: str) -> User:
    session = SessionLocal()
    try:
        user = resolve_current_user(token, session)
    finally:
        session.close()
    if not user.is_active:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Usuario inactivo")
    return user


def _acknowledge(ids: list[int], user_id: int) -> int:
    with SessionLocal() as session:
        return acknowledge_notifications(session, ids, user_id)


def _parse_user_id(value: object) -> int | None:
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


@router.websocket("/ws")
async def notifications_websocket(
    websocket: WebSocket,
    manager: NotificationConnectionManager = Depends(get_connection_manager),
) -> None:
    """Websocket endpoint that streams notifications to the authenticated user.

    Pushes only start after the client sends ``{"type": "join", "user_id": ...}``;
    clients must send it again after every reconnect.
    """

    token = websocket.query_params.get("token")
    if not token:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    try:
        user = await anyio.to_thread.run_sync(_authenticate_socket, token)
    except HTTPException:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    handle = await manager.connect(websocket)
    try:
        while True:
            try:
                message = await websocket.receive_json()
            except (ValueError, KeyError):
                continue

            if not isinstance(message, dict):
                continue

            message_type = message.get("type")
            if message_type == JOIN_EVENT:
                requested = _parse_user_id(message.get("user_id", message.get("userId")))
                if requested != user.id:
                    await websocket.send_json(
                        {"type": "error", "detail": "Cannot join another user's channel"}
                    )
                    continue
                manager.join(handle, user.id)
                await websocket.send_json({"type": "joined", "user_id": user.id})
                continue

            if message_type == "ping":
                await websocket.send_json({"type": "pong"})
                continue

            if message_type == "ack":
                try:
                    ack = NotificationAckRequest.model_validate(message)
                except ValidationError:
                    continue
                try:
                    count = await anyio.to_thread.run_sync(
                        _acknowledge, ack.unique_ids(), user.id
                    )
                except NotificationDurabilityError as exc:
                    logger.error("Could not acknowledge notifications: %s", exc.detail)
                    continue
                await websocket.send_json({"type": "acked", "count": count})
                continue
    except WebSocketDisconnect:
        pass
    finally:
        manager.disconnect(handle)
