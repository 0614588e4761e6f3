from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.orm import Session

from partylink.core.errors import NotFoundError, ValidationError
from partylink.core.timeutil import to_storage
from partylink.models import Event, User

log = logging.getLogger("partylink.events")


def _clean_title(title: str | None) -> str:
    v = (title or "").strip()
    if not v:
        raise ValidationError("Please enter a party name.")
    return v


def _clean_location(location_name: str | None) -> str | None:
    v = (location_name or "").strip()
    return v or None


def list_events_for_host(db: Session, *, host: User) -> list[Event]:
    return list(
        db.scalars(
            select(Event)
            .where(Event.host_user_id == host.id)
            .order_by(Event.created_at.desc(), Event.id.desc())
        ).all()
    )


def get_event_for_host(db: Session, *, event_id: int, host: User) -> Event:
    event = db.get(Event, event_id)
    # чужие события не отличаем от несуществующих
    if event is None or event.host_user_id != host.id:
        raise NotFoundError("Event not found.")
    return event


def create_event(
    db: Session,
    *,
    host: User,
    title: str | None,
    starts_at: datetime | None,
    location_name: str | None = None,
) -> Event:
    title = _clean_title(title)
    if starts_at is None:
        raise ValidationError("Please select date & time.")

    event = Event(
        host_user_id=host.id,
        title=title,
        starts_at=to_storage(starts_at),
        location_name=_clean_location(location_name),
    )
    db.add(event)
    db.commit()
    db.refresh(event)
    log.info("event created id=%s host_user_id=%s", event.id, host.id)
    return event


def update_event(
    db: Session,
    *,
    event: Event,
    fields: dict,
) -> Event:
    """Apply a partial update; only keys present in `fields` are touched."""
    if "title" in fields:
        event.title = _clean_title(fields["title"])
    if "starts_at" in fields:
        if fields["starts_at"] is None:
            raise ValidationError("Please select date & time.")
        event.starts_at = to_storage(fields["starts_at"])
    if "location_name" in fields:
        event.location_name = _clean_location(fields["location_name"])

    db.commit()
    db.refresh(event)
    return event


def delete_event(db: Session, *, event: Event) -> None:
    event_id = event.id
    db.delete(event)
    db.commit()
    log.info("event deleted id=%s", event_id)
