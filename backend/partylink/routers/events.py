from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from partylink.auth.deps import get_current_user
from partylink.auth.guards import require_event_owner
from partylink.core.db import get_db
from partylink.core.timeutil import isoformat
from partylink.models import Event, User
from partylink.services.events import create_event, delete_event, list_events_for_host, update_event

router = APIRouter(prefix="/host/events", tags=["events"])

NO_EVENTS_MESSAGE = "There are no events created"


# ---------- Schemas ----------

class EventCreateIn(BaseModel):
    # presence is checked in the service so the message matches the form
    title: str | None = Field(default=None, max_length=200)
    starts_at: datetime | None = None
    location_name: str | None = Field(default=None, max_length=200)


class EventUpdateIn(BaseModel):
    title: str | None = Field(default=None, max_length=200)
    starts_at: datetime | None = None
    location_name: str | None = Field(default=None, max_length=200)


def event_out(e: Event) -> dict:
    return {
        "id": e.id,
        "title": e.title,
        "starts_at": isoformat(e.starts_at),
        "location_name": e.location_name,
        "created_at": isoformat(e.created_at),
    }


# ---------- Routes ----------

@router.get("")
def list_events(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    events = list_events_for_host(db, host=user)
    return {
        "events": [event_out(e) for e in events],
        "empty_message": None if events else NO_EVENTS_MESSAGE,
    }


@router.post("", status_code=status.HTTP_201_CREATED)
def create(
    payload: EventCreateIn,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    event = create_event(
        db,
        host=user,
        title=payload.title,
        starts_at=payload.starts_at,
        location_name=payload.location_name,
    )
    return event_out(event)


@router.get("/{event_id}")
def get_event(event: Event = Depends(require_event_owner)):
    return event_out(event)


@router.patch("/{event_id}")
def patch_event(
    payload: EventUpdateIn,
    db: Session = Depends(get_db),
    event: Event = Depends(require_event_owner),
):
    event = update_event(db, event=event, fields=payload.model_dump(exclude_unset=True))
    return event_out(event)


@router.delete("/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_event(
    db: Session = Depends(get_db),
    event: Event = Depends(require_event_owner),
):
    delete_event(db, event=event)
    return
