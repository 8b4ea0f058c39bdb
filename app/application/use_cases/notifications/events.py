"""Helpers that turn job board actions into notifications."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.orm import Session

from app.domain.entities import (
    ROLE_STUDENT,
    Notification,
    NotificationData,
    NotificationEvent,
    NotificationType,
)
from app.infrastructure.repositories import UserRepository

from .dispatcher import NotificationDispatcher, build_notification_dispatcher

logger = logging.getLogger(__name__)


@contextmanager
def notification_guard(action: str) -> Iterator[None]:
    """Log and discard notification errors so ``action`` itself still succeeds.

    Usage::

        with notification_guard("job application"):
            notify_job_application(session, ...)
    """

    try:
        yield
    except Exception:
        logger.exception("Error sending %s notification", action)


def _dispatcher_for(
    session: Session, dispatcher: NotificationDispatcher | None
) -> NotificationDispatcher:
    return dispatcher if dispatcher is not None else build_notification_dispatcher(session)


def notify_job_application(
    session: Session,
    *,
    job_id: int,
    application_id: int,
    applicant_id: int,
    recruiter_id: int,
    job_title: str,
    applicant_name: str,
    dispatcher: NotificationDispatcher | None = None,
) -> Notification:
    """Tell the recruiter who posted ``job_id`` about a new application."""

    event = NotificationEvent(
        recipient_id=recruiter_id,
        sender_id=applicant_id,
        type=NotificationType.JOB_APPLICATION,
        title="New Job Application",
        message=f"{applicant_name} applied for {job_title}",
        data=NotificationData(application_id=application_id),
        action_url=f"/jobs/{job_id}/applicants",
    )
    return _dispatcher_for(session, dispatcher).dispatch(event)


def notify_job_posted(
    session: Session,
    *,
    job_id: int,
    recruiter_id: int,
    job_title: str,
    company_name: str,
    dispatcher: NotificationDispatcher | None = None,
) -> list[Notification]:
    """Announce a new job to every active student."""

    students = UserRepository(session).list_ids_by_role(ROLE_STUDENT)
    event = NotificationEvent(
        sender_id=recruiter_id,
        type=NotificationType.JOB_POSTED,
        title="New Job Posted",
        message=f"New {job_title} position at {company_name}",
        data=NotificationData(job_id=job_id),
        action_url=f"/jobs/{job_id}",
    )
    return _dispatcher_for(session, dispatcher).broadcast(event, students)


def notify_profile_follow(
    session: Session,
    *,
    follower_id: int,
    followed_id: int,
    follower_name: str,
    dispatcher: NotificationDispatcher | None = None,
) -> Notification:
    """Tell ``followed_id`` that ``follower_id`` started following them."""

    event = NotificationEvent(
        recipient_id=followed_id,
        sender_id=follower_id,
        type=NotificationType.PROFILE_FOLLOW,
        title="New Follower",
        message=f"{follower_name} started following you",
        data=NotificationData(profile_id=follower_id),
        action_url=f"/profile/{follower_id}",
    )
    return _dispatcher_for(session, dispatcher).dispatch(event)


def notify_application_status_update(
    session: Session,
    *,
    application_id: int,
    job_title: str,
    student_id: int,
    recruiter_id: int,
    status: str,
    dispatcher: NotificationDispatcher | None = None,
) -> Notification:
    """Tell a student that the recruiter moved their application to ``status``."""

    event = NotificationEvent(
        recipient_id=student_id,
        sender_id=recruiter_id,
        type=NotificationType.APPLICATION_STATUS_UPDATE,
        title="Application Status Updated",
        message=f"Your application for {job_title} is now {status}",
        data=NotificationData(application_id=application_id),
        action_url="/applications",
    )
    return _dispatcher_for(session, dispatcher).dispatch(event)


__all__ = [
    "notification_guard",
    "notify_application_status_update",
    "notify_job_application",
    "notify_job_posted",
    "notify_profile_follow",
]
