"""Domain entity representing a user."""

from dataclasses import dataclass
from datetime import datetime

ROLE_STUDENT = "student"
ROLE_RECRUITER = "recruiter"
ROLE_ADMIN = "admin"


@dataclass
class User:
    """Core attributes describing an application user."""

    id: int | None
    name: str
    email: str
    role: str
    profile_picture: str | None
    is_active: bool
    created_at: datetime | None
