"""SQLAlchemy model for persisted notifications."""

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.sql import expression
from sqlalchemy.orm import relationship

from app.infrastructure.database import Base
from app.utils import now_for_storage


class NotificationModel(Base):
    """Database representation for user notifications."""

    __tablename__ = "notification"
    __table_args__ = (
        Index("ix_notification_recipient_created", "recipient_id", "created_at"),
        Index("ix_notification_recipient_read", "recipient_id", "read"),
    )

    id = Column(Integer, primary_key=True, index=True)
    recipient_id = Column(Integer, ForeignKey("user.id"), nullable=False)
    sender_id = Column(Integer, ForeignKey("user.id"), nullable=False)
    type = Column(String(40), nullable=False)
    title = Column(String(120), nullable=False)
    message = Column(Text, nullable=False)
    job_id = Column(Integer, nullable=True)
    application_id = Column(Integer, nullable=True)
    project_id = Column(Integer, nullable=True)
    profile_id = Column(Integer, nullable=True)
    action_url = Column(String(255), nullable=True)
    read = Column(
        Boolean,
        nullable=False,
        default=False,
        server_default=expression.false(),
    )
    read_at = Column(DateTime(), nullable=True)
    created_at = Column(DateTime(), nullable=False, default=now_for_storage)
    updated_at = Column(
        DateTime(),
        nullable=False,
        default=now_for_storage,
        onupdate=now_for_storage,
    )

    sender = relationship("UserModel", foreign_keys=[sender_id], lazy="joined")


__all__ = ["NotificationModel"]
