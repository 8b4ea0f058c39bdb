"""End-to-end tests for the realtime notification channel."""

from __future__ import annotations

import time

import anyio
import pytest
from starlette.websockets import WebSocketDisconnect

from app.application.use_cases.notifications import notify_profile_follow
from app.domain.entities import NEW_NOTIFICATION_EVENT
from app.infrastructure.database import SessionLocal
from app.infrastructure.notifications import notification_manager, peer_directory


def _follow(follower, followed):
    with SessionLocal() as db:
        return notify_profile_follow(
            db,
            follower_id=follower.id,
            followed_id=followed.id,
            follower_name=follower.name,
        )


def _join(websocket, user):
    websocket.send_json({"type": "join", "user_id": user.id})
    assert websocket.receive_json() == {"type": "joined", "user_id": user.id}


def test_socket_without_token_is_closed(client):
    with pytest.raises(WebSocketDisconnect) as excinfo:
        with client.websocket_connect("/notifications/ws"):
            pass

    assert excinfo.value.code == 1008


def test_socket_with_invalid_token_is_closed(client):
    with pytest.raises(WebSocketDisconnect) as excinfo:
        with client.websocket_connect("/notifications/ws?token=garbage"):
            pass

    assert excinfo.value.code == 1008


def test_cannot_join_another_users_channel(client, make_user, token_for):
    sam, rita = make_user("Sam"), make_user("Rita")

    with client.websocket_connect(f"/notifications/ws?token={token_for(sam)}") as websocket:
        websocket.send_json({"type": "join", "user_id": rita.id})
        reply = websocket.receive_json()

        assert reply["type"] == "error"
        assert peer_directory.lookup(rita.id) is None
        assert peer_directory.lookup(sam.id) is None


def test_ping_pong(client, make_user, token_for):
    sam = make_user("Sam")

    with client.websocket_connect(f"/notifications/ws?token={token_for(sam)}") as websocket:
        websocket.send_json({"type": "ping"})

        assert websocket.receive_json() == {"type": "pong"}


def test_joined_user_receives_pushed_notification(client, make_user, token_for):
    sam, rita = make_user("Sam"), make_user("Rita", role="recruiter")

    with client.websocket_connect(f"/notifications/ws?token={token_for(sam)}") as websocket:
        _join(websocket, sam)
        saved = client.portal.call(_follow, rita, sam)

        message = websocket.receive_json()

    assert message["type"] == NEW_NOTIFICATION_EVENT
    assert message["data"]["id"] == saved.id
    assert message["data"]["type"] == "profile_follow"
    assert message["data"]["sender"]["name"] == "Rita"
    assert message["data"]["actionUrl"] == f"/profile/{rita.id}"


def test_push_from_worker_thread_reaches_socket(client, make_user, token_for):
    sam, rita = make_user("Sam"), make_user("Rita", role="recruiter")

    with client.websocket_connect(f"/notifications/ws?token={token_for(sam)}") as websocket:
        _join(websocket, sam)
        saved = client.portal.call(anyio.to_thread.run_sync, _follow, rita, sam)

        message = websocket.receive_json()

    assert message["data"]["id"] == saved.id


def test_worker_thread_action_does_not_wait_for_slow_delivery(
    client, make_user, token_for, monkeypatch
):
    sam, rita = make_user("Sam"), make_user("Rita", role="recruiter")
    deliver = notification_manager.send

    async def _slow_send(handle, message):
        await anyio.sleep(1.0)
        return await deliver(handle, message)

    monkeypatch.setattr(notification_manager, "send", _slow_send)

    with client.websocket_connect(f"/notifications/ws?token={token_for(sam)}") as websocket:
        _join(websocket, sam)
        started = time.monotonic()
        saved = client.portal.call(anyio.to_thread.run_sync, _follow, rita, sam)
        elapsed = time.monotonic() - started

        message = websocket.receive_json()

    assert elapsed < 0.5
    assert message["data"]["id"] == saved.id


def test_unjoined_socket_gets_nothing_but_record_is_stored(
    client, make_user, token_for, auth_headers
):
    sam, rita = make_user("Sam"), make_user("Rita", role="recruiter")

    with client.websocket_connect(f"/notifications/ws?token={token_for(sam)}") as websocket:
        saved = client.portal.call(_follow, rita, sam)
        websocket.send_json({"type": "ping"})

        assert websocket.receive_json() == {"type": "pong"}

    listing = client.get("/notifications/", headers=auth_headers(sam)).json()
    assert [item["id"] for item in listing["notifications"]] == [saved.id]
    assert listing["unreadCount"] == 1


def test_ack_marks_notifications_read(client, make_user, token_for, auth_headers):
    sam, rita = make_user("Sam"), make_user("Rita", role="recruiter")
    first = _follow(rita, sam)
    _follow(rita, sam)

    with client.websocket_connect(f"/notifications/ws?token={token_for(sam)}") as websocket:
        websocket.send_json({"type": "ack", "ids": [first.id, first.id]})

        assert websocket.receive_json() == {"type": "acked", "count": 1}

    listing = client.get("/notifications/", headers=auth_headers(sam)).json()
    assert listing["unreadCount"] == 1


def test_closing_socket_removes_directory_entry(client, make_user, token_for):
    sam = make_user("Sam")

    with client.websocket_connect(f"/notifications/ws?token={token_for(sam)}") as websocket:
        _join(websocket, sam)
        assert peer_directory.lookup(sam.id) is not None

    assert peer_directory.lookup(sam.id) is None


def test_reconnect_replaces_previous_channel(client, make_user, token_for):
    sam, rita = make_user("Sam"), make_user("Rita", role="recruiter")
    url = f"/notifications/ws?token={token_for(sam)}"

    with client.websocket_connect(url) as old_socket:
        _join(old_socket, sam)
        old_handle = peer_directory.lookup(sam.id)
        with client.websocket_connect(url) as new_socket:
            _join(new_socket, sam)
            new_handle = peer_directory.lookup(sam.id)
            assert new_handle != old_handle

            client.portal.call(_follow, rita, sam)
            message = new_socket.receive_json()
            assert message["type"] == NEW_NOTIFICATION_EVENT

        assert peer_directory.lookup(sam.id) is None
        old_socket.send_json({"type": "ping"})
        assert old_socket.receive_json() == {"type": "pong"}
