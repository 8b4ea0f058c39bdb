"""Tests for the notification inbox REST endpoints."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.exc import OperationalError

from app.domain.entities import Notification, NotificationData, NotificationType
from app.infrastructure.database import SessionLocal
from app.infrastructure.repositories import NotificationRepository


def _store(recipient_id: int, sender_id: int, *, created_at=None, job_id: int = 7) -> Notification:
    with SessionLocal() as db:
        return NotificationRepository(db).create(
            Notification(
                id=None,
                recipient_id=recipient_id,
                sender_id=sender_id,
                type=NotificationType.JOB_POSTED,
                title="New Job Posted",
                message="New Backend Intern position at Acme",
                data=NotificationData(job_id=job_id),
                action_url=f"/jobs/{job_id}",
                created_at=created_at,
            )
        )


@pytest.fixture()
def people(make_user):
    return make_user("Sam"), make_user("Rita", role="recruiter", profile_picture="/rita.png")


def test_list_requires_authentication(client):
    response = client.get("/notifications/")

    assert response.status_code == 401


def test_list_returns_camel_case_payload(client, people, auth_headers):
    student, recruiter = people
    saved = _store(student.id, recruiter.id, job_id=42)

    response = client.get("/notifications/", headers=auth_headers(student))

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["unreadCount"] == 1
    assert body["pagination"] == {"page": 1, "limit": 20, "total": 1, "pages": 1}
    item = body["notifications"][0]
    assert item["id"] == saved.id
    assert item["type"] == "job_posted"
    assert item["actionUrl"] == "/jobs/42"
    assert item["data"] == {"jobId": 42}
    assert item["read"] is False
    assert item["createdAt"]
    assert item["sender"] == {"id": recruiter.id, "name": "Rita", "profilePicture": "/rita.png"}


def test_list_pages_newest_first(client, people, auth_headers):
    student, recruiter = people
    base = datetime(2024, 1, 1, tzinfo=timezone.utc)
    saved = [_store(student.id, recruiter.id, created_at=base + timedelta(days=i)) for i in range(3)]

    response = client.get(
        "/notifications/", params={"page": 2, "limit": 2}, headers=auth_headers(student)
    )

    body = response.json()
    assert [item["id"] for item in body["notifications"]] == [saved[0].id]
    assert body["pagination"] == {"page": 2, "limit": 2, "total": 3, "pages": 2}


def test_list_clamps_oversized_pages(client, people, auth_headers):
    student, _ = people

    response = client.get("/notifications/", params={"limit": 5000}, headers=auth_headers(student))

    assert response.json()["pagination"]["limit"] == 100


def test_unread_only_filter(client, people, auth_headers):
    student, recruiter = people
    read = _store(student.id, recruiter.id)
    unread = _store(student.id, recruiter.id)
    client.put(f"/notifications/{read.id}/read", headers=auth_headers(student))

    response = client.get(
        "/notifications/", params={"unreadOnly": "true"}, headers=auth_headers(student)
    )

    body = response.json()
    assert [item["id"] for item in body["notifications"]] == [unread.id]
    assert body["unreadCount"] == 1


def test_mark_as_read_is_idempotent(client, people, auth_headers):
    student, recruiter = people
    saved = _store(student.id, recruiter.id)

    first = client.put(f"/notifications/{saved.id}/read", headers=auth_headers(student))
    second = client.put(f"/notifications/{saved.id}/read", headers=auth_headers(student))

    assert first.status_code == second.status_code == 200
    assert first.json() == {"success": True, "message": "Notification marked as read"}
    listing = client.get("/notifications/", headers=auth_headers(student)).json()
    assert listing["unreadCount"] == 0
    assert listing["notifications"][0]["read"] is True


def test_other_users_notifications_are_not_found(client, people, make_user, auth_headers):
    student, recruiter = people
    intruder = make_user("Mallory")
    saved = _store(student.id, recruiter.id)

    read = client.put(f"/notifications/{saved.id}/read", headers=auth_headers(intruder))
    delete = client.delete(f"/notifications/{saved.id}", headers=auth_headers(intruder))
    missing = client.put("/notifications/999999/read", headers=auth_headers(student))

    assert read.status_code == delete.status_code == missing.status_code == 404
    assert read.json()["detail"] == "Notification not found"
    listing = client.get("/notifications/", headers=auth_headers(student)).json()
    assert listing["unreadCount"] == 1


def test_mark_all_as_read(client, people, make_user, auth_headers):
    student, recruiter = people
    other = make_user("Sue")
    for _ in range(3):
        _store(student.id, recruiter.id)
    _store(other.id, recruiter.id)

    response = client.put("/notifications/read-all", headers=auth_headers(student))

    assert response.json() == {"success": True, "message": "All notifications marked as read"}
    assert client.get("/notifications/", headers=auth_headers(student)).json()["unreadCount"] == 0
    assert client.get("/notifications/", headers=auth_headers(other)).json()["unreadCount"] == 1


def test_delete_notification(client, people, auth_headers):
    student, recruiter = people
    saved = _store(student.id, recruiter.id)

    response = client.delete(f"/notifications/{saved.id}", headers=auth_headers(student))
    again = client.delete(f"/notifications/{saved.id}", headers=auth_headers(student))

    assert response.json() == {"success": True, "message": "Notification deleted"}
    assert again.status_code == 404
    listing = client.get("/notifications/", headers=auth_headers(student)).json()
    assert listing["notifications"] == []
    assert listing["unreadCount"] == 0


def test_inactive_user_is_rejected(client, make_user, auth_headers):
    dormant = make_user("Dora", is_active=False)

    response = client.get("/notifications/", headers=auth_headers(dormant))

    assert response.status_code == 400
    assert response.json()["detail"] == "Usuario inactivo"


def test_list_store_failure_returns_json_server_error(client, people, auth_headers, monkeypatch):
    student, recruiter = people
    _store(student.id, recruiter.id)

    def _failing_count(self, user_id):
        raise OperationalError("SELECT", {}, Exception("database is locked"))

    monkeypatch.setattr(NotificationRepository, "count_unread", _failing_count)

    response = client.get("/notifications/", headers=auth_headers(student))

    assert response.status_code == 500
    assert response.headers["content-type"].startswith("application/json")
    assert response.json() == {"detail": "Server error"}
