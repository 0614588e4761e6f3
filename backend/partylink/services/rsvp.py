from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from partylink.core.errors import NotFoundError, ValidationError
from partylink.models import Attendance, Event, EventInvite, Participant
from partylink.models.enums import GUEST_RSVP_CHOICES
from partylink.services.invite_status import normalize_rsvp_status

log = logging.getLogger("partylink.rsvp")

INVALID_LINK = "Invalid or expired invite link."


@dataclass(frozen=True)
class RsvpView:
    invite_token: str
    event_title: str
    starts_at: datetime | None
    location_name: str | None
    child_name: str
    parent_name: str | None
    current_status: str


def _find_invite(db: Session, invite_token: str) -> EventInvite:
    token = (invite_token or "").strip()
    if not token:
        raise NotFoundError(INVALID_LINK)
    try:
        invite = db.execute(
            select(EventInvite).where(EventInvite.invite_token == token)
        ).scalar_one_or_none()
    except SQLAlchemyError:
        # the guest only ever sees the generic message
        log.exception("rsvp lookup failed")
        raise NotFoundError(INVALID_LINK)
    if invite is None:
        raise NotFoundError(INVALID_LINK)
    return invite


def get_rsvp_view(db: Session, *, invite_token: str) -> RsvpView:
    invite = _find_invite(db, invite_token)
    try:
        row = db.execute(
            select(Event.title, Event.starts_at, Event.location_name, Participant.full_name, Attendance.status)
            .select_from(EventInvite)
            .join(Event, Event.id == EventInvite.event_id)
            .outerjoin(Participant, Participant.id == EventInvite.participant_id)
            .outerjoin(
                Attendance,
                (Attendance.event_id == EventInvite.event_id)
                & (Attendance.participant_id == EventInvite.participant_id),
            )
            .where(EventInvite.id == invite.id)
        ).one_or_none()
    except SQLAlchemyError:
        log.exception("rsvp context lookup failed invite_id=%s", invite.id)
        raise NotFoundError(INVALID_LINK)
    if row is None:
        raise NotFoundError(INVALID_LINK)

    title, starts_at, location_name, full_name, status = row
    return RsvpView(
        invite_token=invite.invite_token,
        event_title=title,
        starts_at=starts_at,
        location_name=location_name,
        child_name=full_name or "Guest",
        parent_name=invite.parent_name,
        current_status=normalize_rsvp_status(status),
    )


def submit_rsvp(db: Session, *, invite_token: str, status: str) -> RsvpView:
    """Guest answer. The token alone decides which attendance row is written."""
    value = (status or "").strip().lower()
    if value not in {c.value for c in GUEST_RSVP_CHOICES}:
        raise ValidationError("Please choose yes, no or maybe.")

    invite = _find_invite(db, invite_token)

    att = db.get(Attendance, (invite.event_id, invite.participant_id))
    if att is None:
        att = Attendance(event_id=invite.event_id, participant_id=invite.participant_id)
        db.add(att)
    att.status = value
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        raise

    log.info("rsvp submitted invite_id=%s status=%s", invite.id, value)
    return get_rsvp_view(db, invite_token=invite.invite_token)
