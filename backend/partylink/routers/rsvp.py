from __future__ import annotations

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from partylink.core.db import get_db
from partylink.core.timeutil import isoformat
from partylink.models.enums import GUEST_RSVP_CHOICES
from partylink.services.rsvp import RsvpView, get_rsvp_view, submit_rsvp

# Public: no session. The invite token in the path is the only credential.
router = APIRouter(prefix="/rsvp", tags=["rsvp"])


class RsvpSubmitIn(BaseModel):
    status: str = Field(..., description="yes|no|maybe")


def _view_out(view: RsvpView, message: str | None = None) -> dict:
    return {
        "invite_token": view.invite_token,
        "event": {
            "title": view.event_title,
            "starts_at": isoformat(view.starts_at),
            "location_name": view.location_name,
        },
        "child_name": view.child_name,
        "parent_name": view.parent_name,
        "current_status": view.current_status,
        "choices": [c.value for c in GUEST_RSVP_CHOICES],
        "message": message,
    }


@router.get("/{invite_token}")
def rsvp_view(invite_token: str, db: Session = Depends(get_db)):
    return _view_out(get_rsvp_view(db, invite_token=invite_token))


@router.post("/{invite_token}")
def rsvp_submit(invite_token: str, payload: RsvpSubmitIn, db: Session = Depends(get_db)):
    view = submit_rsvp(db, invite_token=invite_token, status=payload.status)
    return _view_out(view, "Saved. Thank you!")
