from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass
from typing import Iterable

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from partylink.core.errors import NotFoundError, PartylinkError, ValidationError
from partylink.models import (
    Attendance,
    Event,
    EventInvite,
    InviteMethod,
    InviteStatus,
    Participant,
    RsvpStatus,
    User,
)
from partylink.services.invite_status import derive_invite_status, normalize_rsvp_status
from partylink.services.phone import clean_optional_phone

log = logging.getLogger("partylink.guests")


@dataclass(frozen=True)
class GuestRow:
    invite_token: str
    participant_id: int
    child_name: str
    parent_name: str | None
    phone_e164: str | None
    rsvp_status: str
    invite_method: str
    invite_status: str

    @property
    def display_status(self) -> str:
        return derive_invite_status(self.rsvp_status, self.invite_method, self.invite_status)


@dataclass(frozen=True)
class PreviousGuest:
    participant_id: int
    child_name: str
    parent_name: str | None
    phone_e164: str | None


def new_invite_token() -> str:
    return secrets.token_urlsafe(24)


def _commit(db: Session) -> None:
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise


def _clean_child_name(value: str | None) -> str:
    v = (value or "").strip()
    if not v:
        raise ValidationError("Child name is required.")
    return v


def _clean_optional(value: str | None) -> str | None:
    v = (value or "").strip()
    return v or None


def _clean_method(value: str | None, default: InviteMethod) -> str:
    if value is None:
        return default.value
    try:
        return InviteMethod(value.strip().lower()).value
    except ValueError:
        raise ValidationError("Unknown invite method.")


def _add_invite(
    db: Session,
    *,
    event: Event,
    participant: Participant,
    parent_name: str | None,
    phone_e164: str | None,
    invite_method: str,
) -> EventInvite:
    invite = EventInvite(
        invite_token=new_invite_token(),
        event_id=event.id,
        participant_id=participant.id,
        parent_name=parent_name,
        phone_e164=phone_e164,
        invite_method=invite_method,
        invite_status=InviteStatus.NOT_SENT.value,
    )
    db.add(invite)
    db.add(Attendance(event_id=event.id, participant_id=participant.id, status=RsvpStatus.PENDING.value))
    return invite


# ---------- Reads ----------

def load_guest_list(db: Session, *, event: Event) -> list[GuestRow]:
    rows = db.execute(
        select(EventInvite, Participant.full_name, Attendance.status)
        .join(Participant, Participant.id == EventInvite.participant_id)
        .outerjoin(
            Attendance,
            (Attendance.event_id == EventInvite.event_id)
            & (Attendance.participant_id == EventInvite.participant_id),
        )
        .where(EventInvite.event_id == event.id)
        .order_by(EventInvite.created_at.asc(), EventInvite.id.asc())
    ).all()

    return [
        GuestRow(
            invite_token=inv.invite_token,
            participant_id=inv.participant_id,
            child_name=full_name or "",
            parent_name=inv.parent_name,
            phone_e164=inv.phone_e164,
            rsvp_status=normalize_rsvp_status(status),
            invite_method=inv.invite_method or InviteMethod.WHATSAPP.value,
            invite_status=inv.invite_status or InviteStatus.NOT_SENT.value,
        )
        for inv, full_name, status in rows
    ]


def get_invite_for_event(db: Session, *, event: Event, invite_token: str) -> EventInvite:
    invite = db.execute(
        select(EventInvite).where(
            EventInvite.invite_token == invite_token,
            EventInvite.event_id == event.id,
        )
    ).scalar_one_or_none()
    if invite is None:
        raise NotFoundError("Guest not found.")
    return invite


def get_previous_guests_for_host(
    db: Session,
    *,
    host: User,
    exclude_event_id: int | None = None,
) -> list[PreviousGuest]:
    """Distinct guests from all of the host's events, most recently invited first."""
    q = (
        select(
            EventInvite.participant_id,
            Participant.full_name,
            EventInvite.parent_name,
            EventInvite.phone_e164,
        )
        .join(Participant, Participant.id == EventInvite.participant_id)
        .join(Event, Event.id == EventInvite.event_id)
        .where(
            Event.host_user_id == host.id,
            Participant.host_user_id == host.id,
        )
        .order_by(EventInvite.created_at.desc(), EventInvite.id.desc())
    )
    if exclude_event_id is not None:
        already = select(EventInvite.participant_id).where(EventInvite.event_id == exclude_event_id)
        q = q.where(EventInvite.participant_id.not_in(already))

    # уникализируем, сохраняя порядок
    seen = dict.fromkeys(tuple(r) for r in db.execute(q).all())
    return [
        PreviousGuest(participant_id=pid, child_name=name, parent_name=parent, phone_e164=phone)
        for pid, name, parent, phone in seen
    ]


# ---------- Writes ----------

def create_invite_with_participant(
    db: Session,
    *,
    event: Event,
    child_name: str | None,
    parent_name: str | None = None,
    phone: str | None = None,
    invite_method: str | None = None,
) -> EventInvite:
    """Participant + invite + pending attendance, in one transaction."""
    participant = Participant(host_user_id=event.host_user_id, full_name=_clean_child_name(child_name))
    method = _clean_method(invite_method, InviteMethod.WHATSAPP)

    db.add(participant)
    db.flush()  # чтобы participant.id появился

    invite = _add_invite(
        db,
        event=event,
        participant=participant,
        parent_name=_clean_optional(parent_name),
        phone_e164=clean_optional_phone(phone),
        invite_method=method,
    )
    _commit(db)
    db.refresh(invite)
    log.info("guest added event_id=%s participant_id=%s method=%s", event.id, participant.id, method)
    return invite


def add_invites_for_previous_guests(db: Session, *, event: Event, guests: Iterable[dict]) -> int:
    """Invite guests picked from the host's history.

    Each item may carry `participant_id` (reuse a roster entry) or just the
    name fields (create a new participant). Guests already on the event are
    skipped. Returns the number of invites created.
    """
    guests = list(guests)
    if not guests:
        raise ValidationError("Please select at least one guest.")

    already = set(
        db.scalars(select(EventInvite.participant_id).where(EventInvite.event_id == event.id)).all()
    )

    added = 0
    try:
        for g in guests:
            participant = None
            pid = g.get("participant_id")
            if pid is not None:
                participant = db.get(Participant, pid)
                if participant is None or participant.host_user_id != event.host_user_id:
                    raise NotFoundError("Guest not found.")
            else:
                participant = Participant(host_user_id=event.host_user_id, full_name=_clean_child_name(g.get("child_name")))
                db.add(participant)
                db.flush()

            if participant.id in already:
                continue

            _add_invite(
                db,
                event=event,
                participant=participant,
                parent_name=_clean_optional(g.get("parent_name")),
                phone_e164=clean_optional_phone(g.get("phone_e164")),
                invite_method=_clean_method(g.get("invite_method"), InviteMethod.MANUAL),
            )
            already.add(participant.id)
            added += 1

    except PartylinkError:
        # participants flushed for earlier items must not survive a bad batch
        db.rollback()
        raise

    _commit(db)
    log.info("previous guests added event_id=%s count=%s", event.id, added)
    return added


def update_event_invite_details(
    db: Session,
    *,
    invite: EventInvite,
    fields: dict,
) -> EventInvite:
    """Partial update: only keys present in `fields` are touched."""
    if "child_name" in fields:
        invite.participant.full_name = _clean_child_name(fields["child_name"])
    if "parent_name" in fields:
        invite.parent_name = _clean_optional(fields["parent_name"])
    if "phone" in fields:
        invite.phone_e164 = clean_optional_phone(fields["phone"])
    _commit(db)
    db.refresh(invite)
    return invite


def delete_event_invite(db: Session, *, invite: EventInvite) -> None:
    # participant stays on the host roster for "previous guests"
    att = db.get(Attendance, (invite.event_id, invite.participant_id))
    if att is not None:
        db.delete(att)
    db.delete(invite)
    _commit(db)


def set_attendance_status(db: Session, *, invite: EventInvite, status: str) -> Attendance:
    """Host-side RSVP edit. Any of the four statuses, any time."""
    try:
        value = RsvpStatus((status or "").strip().lower()).value
    except ValueError:
        raise ValidationError("Unknown RSVP status.")

    att = db.get(Attendance, (invite.event_id, invite.participant_id))
    if att is None:
        att = Attendance(event_id=invite.event_id, participant_id=invite.participant_id)
        db.add(att)
    att.status = value
    _commit(db)
    return att


def mark_whatsapp_sent(db: Session, *, invite: EventInvite) -> bool:
    """Record that the host opened the compose link. Only the first open writes."""
    if invite.invite_method != InviteMethod.WHATSAPP.value:
        raise ValidationError("This guest is invited manually.")
    if not invite.phone_e164:
        raise ValidationError("Add a phone number to send via WhatsApp.")
    if invite.invite_status != InviteStatus.NOT_SENT.value:
        return False
    invite.invite_status = InviteStatus.WHATSAPP_SENT.value
    _commit(db)
    return True
