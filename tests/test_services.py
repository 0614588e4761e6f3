from datetime import datetime, timezone

import pytest

from partylink.core.errors import NotFoundError, ValidationError
from partylink.models import Attendance, Event, EventInvite, Participant, User
from partylink.services import events as events_svc
from partylink.services import guests as guests_svc
from partylink.services import rsvp as rsvp_svc


@pytest.fixture
def host(db):
    user = User(email="host@example.com")
    db.add(user)
    db.commit()
    return user


@pytest.fixture
def event(db, host):
    return events_svc.create_event(
        db, host=host, title="Party", starts_at=datetime(2026, 11, 7, 7, 0, tzinfo=timezone.utc)
    )


def test_event_lookup_is_owner_scoped(db, host, event):
    stranger = User(email="x@example.com")
    db.add(stranger)
    db.commit()
    assert events_svc.get_event_for_host(db, event_id=event.id, host=host).id == event.id
    with pytest.raises(NotFoundError):
        events_svc.get_event_for_host(db, event_id=event.id, host=stranger)


def test_delete_event_removes_invites_and_attendance(db, event):
    guests_svc.create_invite_with_participant(db, event=event, child_name="Mia")
    events_svc.delete_event(db, event=event)
    assert db.query(Event).count() == 0
    assert db.query(EventInvite).count() == 0
    assert db.query(Attendance).count() == 0


def test_missing_attendance_row_reads_as_pending(db, event):
    invite = guests_svc.create_invite_with_participant(db, event=event, child_name="Mia", invite_method="manual")
    db.delete(db.get(Attendance, (invite.event_id, invite.participant_id)))
    db.commit()

    rows = guests_svc.load_guest_list(db, event=event)
    assert rows[0].rsvp_status == "pending"
    assert rows[0].display_status == "Pending"
    assert rsvp_svc.get_rsvp_view(db, invite_token=invite.invite_token).current_status == "pending"


def test_unknown_stored_status_displays_as_pending(db, event):
    invite = guests_svc.create_invite_with_participant(db, event=event, child_name="Mia")
    att = db.get(Attendance, (invite.event_id, invite.participant_id))
    att.status = "attending"
    db.commit()
    assert guests_svc.load_guest_list(db, event=event)[0].display_status == "Not sent"


def test_submit_rsvp_recreates_missing_attendance(db, event):
    invite = guests_svc.create_invite_with_participant(db, event=event, child_name="Mia")
    db.delete(db.get(Attendance, (invite.event_id, invite.participant_id)))
    db.commit()

    view = rsvp_svc.submit_rsvp(db, invite_token=invite.invite_token, status="yes")
    assert view.current_status == "yes"


def test_bulk_add_creates_participants_for_new_names(db, event):
    added = guests_svc.add_invites_for_previous_guests(
        db, event=event, guests=[{"child_name": "Leo", "phone_e164": "91234567"}, {"child_name": "Ava"}]
    )
    assert added == 2
    rows = guests_svc.load_guest_list(db, event=event)
    assert [r.child_name for r in rows] == ["Leo", "Ava"]
    assert rows[0].phone_e164 == "+6591234567"
    assert all(r.invite_method == "manual" for r in rows)


def test_bulk_add_without_name_is_rejected(db, event):
    with pytest.raises(ValidationError):
        guests_svc.add_invites_for_previous_guests(db, event=event, guests=[{"parent_name": "Anna"}])


def test_bulk_add_is_all_or_nothing(db, event):
    with pytest.raises(NotFoundError):
        guests_svc.add_invites_for_previous_guests(
            db, event=event, guests=[{"child_name": "Leo"}, {"participant_id": 999}]
        )
    db.commit()
    assert db.query(Participant).count() == 0
    assert db.query(EventInvite).count() == 0
    assert db.query(Attendance).count() == 0


def test_mark_sent_requires_phone(db, event):
    invite = guests_svc.create_invite_with_participant(db, event=event, child_name="Mia")
    with pytest.raises(ValidationError):
        guests_svc.mark_whatsapp_sent(db, invite=invite)
    assert invite.invite_status == "not_sent"


def test_invite_tokens_are_unique(db, event):
    a = guests_svc.create_invite_with_participant(db, event=event, child_name="A")
    b = guests_svc.create_invite_with_participant(db, event=event, child_name="B")
    assert a.invite_token != b.invite_token
