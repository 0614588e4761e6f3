from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from partylink.auth.deps import get_current_user
from partylink.auth.guards import require_event_owner
from partylink.core.db import get_db
from partylink.models import Event, InviteMethod, User
from partylink.services import guests as guests_svc
from partylink.services.invite_status import guest_count_label, whatsapp_action_label
from partylink.services.phone import phone_digits
from partylink.services.whatsapp import whatsapp_link

router = APIRouter(prefix="/host/events/{event_id}/guests", tags=["guests"])

NO_GUESTS_MESSAGE = "No guests yet."


# ---------- Schemas ----------

class GuestCreateIn(BaseModel):
    child_name: str | None = Field(default=None, max_length=128)
    parent_name: str | None = Field(default=None, max_length=128)
    phone: str | None = Field(default=None, max_length=32)
    invite_method: str = "whatsapp"  # "whatsapp" | "manual"


class GuestUpdateIn(BaseModel):
    child_name: str | None = Field(default=None, max_length=128)
    parent_name: str | None = Field(default=None, max_length=128)
    phone: str | None = Field(default=None, max_length=32)


class PreviousGuestIn(BaseModel):
    participant_id: int | None = Field(default=None, gt=0)
    child_name: str | None = Field(default=None, max_length=128)
    parent_name: str | None = Field(default=None, max_length=128)
    phone_e164: str | None = Field(default=None, max_length=32)
    invite_method: str | None = None  # default manual


class PreviousGuestsAddIn(BaseModel):
    guests: list[PreviousGuestIn] = Field(default_factory=list)


class AttendanceIn(BaseModel):
    status: str = Field(..., description="pending|yes|no|maybe")


# ---------- Helpers ----------

def _row_out(row: guests_svc.GuestRow, event: Event) -> dict:
    can_send = row.invite_method == InviteMethod.WHATSAPP.value and bool(row.phone_e164)
    return {
        "invite_token": row.invite_token,
        "participant_id": row.participant_id,
        "child_name": row.child_name,
        "parent_name": row.parent_name,
        "phone_e164": row.phone_e164,
        "phone_display": phone_digits(row.phone_e164) if row.phone_e164 else "",
        "rsvp_status": row.rsvp_status,
        "invite_method": row.invite_method,
        "invite_status": row.invite_status,
        "display_status": row.display_status,
        # manual rows get a status dropdown instead of a WhatsApp button
        "whatsapp_action": whatsapp_action_label(row.invite_status) if can_send else None,
        "whatsapp_url": (
            whatsapp_link(
                invite_token=row.invite_token,
                parent_name=row.parent_name,
                phone_e164=row.phone_e164,
                event_title=event.title,
            )
            if can_send
            else None
        ),
    }


def _guest_list_out(db: Session, event: Event, message: str | None = None) -> dict:
    rows = guests_svc.load_guest_list(db, event=event)
    return {
        "event_id": event.id,
        "event_title": event.title,
        "guest_count": len(rows),
        "guest_count_label": guest_count_label(len(rows)),
        "empty_message": None if rows else NO_GUESTS_MESSAGE,
        "guests": [_row_out(r, event) for r in rows],
        "message": message,
    }


# ---------- Routes ----------

@router.get("")
def guest_list(
    db: Session = Depends(get_db),
    event: Event = Depends(require_event_owner),
):
    return _guest_list_out(db, event)


@router.post("", status_code=status.HTTP_201_CREATED)
def add_guest(
    payload: GuestCreateIn,
    db: Session = Depends(get_db),
    event: Event = Depends(require_event_owner),
):
    guests_svc.create_invite_with_participant(
        db,
        event=event,
        child_name=payload.child_name,
        parent_name=payload.parent_name,
        phone=payload.phone,
        invite_method=payload.invite_method,
    )
    return _guest_list_out(db, event, "Guest added.")


@router.get("/previous")
def previous_guests(
    include_invited: bool = Query(default=False),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
    event: Event = Depends(require_event_owner),
):
    guests = guests_svc.get_previous_guests_for_host(
        db,
        host=user,
        exclude_event_id=None if include_invited else event.id,
    )
    return {
        "guests": [
            {
                "participant_id": g.participant_id,
                "child_name": g.child_name,
                "parent_name": g.parent_name,
                "phone_e164": g.phone_e164,
                "phone_display": phone_digits(g.phone_e164) if g.phone_e164 else "",
            }
            for g in guests
        ],
        "empty_message": None if guests else "No previous guests found.",
    }


@router.post("/previous")
def add_previous_guests(
    payload: PreviousGuestsAddIn,
    db: Session = Depends(get_db),
    event: Event = Depends(require_event_owner),
):
    added = guests_svc.add_invites_for_previous_guests(
        db,
        event=event,
        guests=[g.model_dump() for g in payload.guests],
    )
    out = _guest_list_out(db, event, "Previous guests added.")
    out["added"] = added
    return out


@router.patch("/{invite_token}")
def edit_guest(
    invite_token: str,
    payload: GuestUpdateIn,
    db: Session = Depends(get_db),
    event: Event = Depends(require_event_owner),
):
    invite = guests_svc.get_invite_for_event(db, event=event, invite_token=invite_token)
    guests_svc.update_event_invite_details(
        db,
        invite=invite,
        fields=payload.model_dump(exclude_unset=True),
    )
    return _guest_list_out(db, event, "Guest updated.")


@router.delete("/{invite_token}")
def delete_guest(
    invite_token: str,
    db: Session = Depends(get_db),
    event: Event = Depends(require_event_owner),
):
    invite = guests_svc.get_invite_for_event(db, event=event, invite_token=invite_token)
    guests_svc.delete_event_invite(db, invite=invite)
    return _guest_list_out(db, event, "Guest deleted.")


@router.put("/{invite_token}/attendance")
def set_attendance(
    invite_token: str,
    payload: AttendanceIn,
    db: Session = Depends(get_db),
    event: Event = Depends(require_event_owner),
):
    invite = guests_svc.get_invite_for_event(db, event=event, invite_token=invite_token)
    guests_svc.set_attendance_status(db, invite=invite, status=payload.status)
    return _guest_list_out(db, event)


@router.post("/{invite_token}/whatsapp")
def open_whatsapp(
    invite_token: str,
    db: Session = Depends(get_db),
    event: Event = Depends(require_event_owner),
):
    """Compose link for the host to open; the first open marks the invite as sent."""
    invite = guests_svc.get_invite_for_event(db, event=event, invite_token=invite_token)
    marked = guests_svc.mark_whatsapp_sent(db, invite=invite)
    return {
        "whatsapp_url": whatsapp_link(
            invite_token=invite.invite_token,
            parent_name=invite.parent_name,
            phone_e164=invite.phone_e164,
            event_title=event.title,
        ),
        "marked_sent": marked,
        "invite_status": invite.invite_status,
    }
