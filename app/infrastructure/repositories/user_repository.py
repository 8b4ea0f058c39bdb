"""Persistence layer for user data."""

from __future__ import annotations

from sqlalchemy.orm import Session

from app.domain.entities import User
from app.infrastructure.models import UserModel


class UserRepository:
    """Read access to the users the notification path depends on."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, user_id: int) -> User | None:
        model = self.session.get(UserModel, user_id)
        return self._to_entity(model) if model else None

    def get_by_email(self, email: str) -> User | None:
        model = self.session.query(UserModel).filter(UserModel.email == email).first()
        return self._to_entity(model) if model else None

    def create(self, user: User) -> User:
        model = UserModel(
            name=user.name,
            email=user.email,
            role=user.role,
            profile_picture=user.profile_picture,
            is_active=user.is_active,
        )
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    def list_ids_by_role(self, role: str, *, active_only: bool = True) -> list[int]:
        query = (
            self.session.query(UserModel.id)
            .filter(UserModel.role == role)
            .order_by(UserModel.id)
        )
        if active_only:
            query = query.filter(UserModel.is_active.is_(True))
        return [user_id for (user_id,) in query.all()]

    @staticmethod
    def _to_entity(model: UserModel) -> User:
        return User(
            id=model.id,
            name=model.name,
            email=model.email,
            role=model.role,
            profile_picture=model.profile_picture,
            is_active=model.is_active,
            created_at=model.created_at,
        )


__all__ = ["UserRepository"]
