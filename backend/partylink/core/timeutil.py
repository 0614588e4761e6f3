from __future__ import annotations

from datetime import datetime, timezone
from zoneinfo import ZoneInfo

from partylink.core.config import settings


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime | None) -> datetime | None:
    """Attach UTC to values read back from backends that drop tzinfo (SQLite)."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def to_storage(value: datetime) -> datetime:
    """Naive form input is wall-clock time in DEFAULT_TIMEZONE; always store UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=ZoneInfo(settings.DEFAULT_TIMEZONE))
    return value.astimezone(timezone.utc)


def isoformat(value: datetime | None) -> str | None:
    v = as_utc(value)
    return v.isoformat() if v else None
