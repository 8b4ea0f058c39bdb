"""Timestamps in the configured application timezone."""

from __future__ import annotations

import logging
from datetime import datetime, timezone, tzinfo
from functools import lru_cache

from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from app.config import get_settings

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_app_timezone() -> tzinfo:
    """Return the zone named by ``APP_TIMEZONE``, or UTC when it is unknown."""

    name = (get_settings().app_timezone or "").strip()
    if not name or name.upper() == "UTC":
        return timezone.utc
    try:
        return ZoneInfo(name)
    except ZoneInfoNotFoundError:
        logger.warning("Unknown APP_TIMEZONE %r; using UTC", name)
        return timezone.utc


def now_in_app_timezone() -> datetime:
    return datetime.now(tz=get_app_timezone())


def now_for_storage() -> datetime:
    """Column default: the current app-local time without ``tzinfo``."""

    return to_storage_datetime(now_in_app_timezone())


def to_storage_datetime(value: datetime | None) -> datetime | None:
    """Convert ``value`` to the naive app-local form kept in the database.

    SQLite drops offsets from ``DATETIME`` columns, so every timestamp is
    written naive and re-attached to the app timezone on read. Naive inputs
    are assumed to already be app-local.
    """

    if value is None:
        return None
    if value.tzinfo is not None:
        value = value.astimezone(get_app_timezone())
    return value.replace(tzinfo=None)


def from_storage_datetime(value: datetime | None) -> datetime | None:
    """Attach the app timezone to a value read back from the database."""

    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=get_app_timezone())
    return value.astimezone(get_app_timezone())
