"""Create a platform user and print a bearer token for local testing."""

from __future__ import annotations

import argparse

from sqlalchemy.exc import SQLAlchemyError

from app.domain.entities import ROLE_ADMIN, ROLE_RECRUITER, ROLE_STUDENT, User
from app.infrastructure.database import SessionLocal, initialize_database
from app.infrastructure.repositories import UserRepository
from app.infrastructure.security import create_access_token


def parse_args() -> argparse.Namespace:
    """Parse command line arguments for user creation."""

    parser = argparse.ArgumentParser(
        description="Create a user for the Elevatr notifications service.",
    )
    parser.add_argument("--name", default="Student", help="Display name (default: Student)")
    parser.add_argument(
        "--email",
        default="student@example.com",
        help="Email address (default: student@example.com)",
    )
    parser.add_argument(
        "--role",
        choices=[ROLE_STUDENT, ROLE_RECRUITER, ROLE_ADMIN],
        default=ROLE_STUDENT,
        help="Role of the user (default: student)",
    )
    parser.add_argument("--profile-picture", default=None, help="Profile picture URL")
    return parser.parse_args()


def main() -> None:
    """Create a user using the provided command line arguments."""

    args = parse_args()
    initialize_database()

    session = SessionLocal()
    try:
        repository = UserRepository(session)
        if repository.get_by_email(args.email):
            raise SystemExit(f"A user with email {args.email} already exists.")
        user = repository.create(
            User(
                id=None,
                name=args.name,
                email=args.email,
                role=args.role,
                profile_picture=args.profile_picture,
                is_active=True,
                created_at=None,
            )
        )
    except SQLAlchemyError as exc:
        session.rollback()
        raise SystemExit(f"Could not store the user: {exc}") from exc
    else:
        token = create_access_token({"sub": str(user.id)})
        print(
            "User created:\n"
            f"  ID: {user.id}\n"
            f"  Name: {user.name}\n"
            f"  Role: {user.role}\n"
            f"  Token: {token}"
        )
    finally:
        session.close()


if __name__ == "__main__":
    main()
