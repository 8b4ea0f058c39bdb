"""Shared fixtures: a throwaway SQLite database and helpers to create users."""

from __future__ import annotations

import os
import sys
import tempfile
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

TEST_DB_PATH = Path(tempfile.gettempdir()) / "elevatr_notifications_test.db"
os.environ["DATABASE_URL"] = f"sqlite:///{TEST_DB_PATH}"
os.environ["SECRET_KEY"] = "test-secret"
os.environ["ACCESS_TOKEN_EXPIRE_MINUTES"] = "30"
os.environ["APP_TIMEZONE"] = "UTC"

from app.config import reset_settings_cache  # noqa: E402

reset_settings_cache()

from app.domain.entities import User  # noqa: E402
from app.infrastructure.database import (  # noqa: E402
    Base,
    SessionLocal,
    engine,
    initialize_database,
)
from app.infrastructure.notifications import peer_directory  # noqa: E402
from app.infrastructure.repositories import UserRepository  # noqa: E402
from app.infrastructure.security import create_access_token  # noqa: E402


@pytest.fixture(autouse=True)
def reset_database():
    """Ensure the test database and the peer directory start empty."""

    Base.metadata.drop_all(bind=engine)
    initialize_database()
    peer_directory.clear()
    yield
    peer_directory.clear()
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture()
def session():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def make_user():
    """Return a factory inserting users with the given role."""

    counter = {"value": 0}

    def _make_user(
        name: str = "User",
        *,
        role: str = "student",
        is_active: bool = True,
        profile_picture: str | None = None,
    ) -> User:
        counter["value"] += 1
        with SessionLocal() as db:
            return UserRepository(db).create(
                User(
                    id=None,
                    name=name,
                    email=f"user{counter['value']}@example.com",
                    role=role,
                    profile_picture=profile_picture,
                    is_active=is_active,
                    created_at=None,
                )
            )

    return _make_user


def _token_for(user: User) -> str:
    return create_access_token({"sub": str(user.id)})


@pytest.fixture()
def token_for():
    return _token_for


@pytest.fixture()
def auth_headers():
    def _auth_headers(user: User) -> dict[str, str]:
        return {"Authorization": f"Bearer {_token_for(user)}"}

    return _auth_headers


@pytest.fixture()
def client():
    """Return a test client bound to a clean application instance."""

    from fastapi.testclient import TestClient

    from main import create_app

    with TestClient(create_app()) as test_client:
        yield test_client
