import pytest

from partylink.services.invite_status import (
    derive_invite_status,
    guest_count_label,
    normalize_rsvp_status,
    whatsapp_action_label,
)


@pytest.mark.parametrize("method", ["whatsapp", "manual", None])
def test_final_rsvp_overrides_delivery(method):
    assert derive_invite_status("YES", method, "whatsapp_sent") == "Yes"
    assert derive_invite_status("no", method, "not_sent") == "No"
    assert derive_invite_status("Maybe", method, "acknowledged") == "Maybe"


def test_whatsapp_delivery_labels():
    assert derive_invite_status("pending", "whatsapp", "not_sent") == "Not sent"
    assert derive_invite_status("pending", "whatsapp", "whatsapp_sent") == "WhatsApp sent"
    assert derive_invite_status("pending", "whatsapp", "acknowledged") == "Invite acknowledged"
    assert derive_invite_status("pending", "whatsapp", "something-else") == "Not sent"


def test_manual_without_answer_is_pending():
    assert derive_invite_status("pending", "manual", "not_sent") == "Pending"
    assert derive_invite_status(None, "manual", None) == "Pending"


def test_derivation_is_idempotent():
    args = ("pending", "whatsapp", "whatsapp_sent")
    assert derive_invite_status(*args) == derive_invite_status(*args)


def test_normalize_rsvp_status_defaults_to_pending():
    assert normalize_rsvp_status("YES") == "yes"
    assert normalize_rsvp_status("declined") == "pending"
    assert normalize_rsvp_status(None) == "pending"


def test_guest_count_label():
    assert guest_count_label(0) == "0 Guests in List"
    assert guest_count_label(1) == "1 Guest in List"
    assert guest_count_label(5) == "5 Guests in List"


def test_whatsapp_action_label():
    assert whatsapp_action_label("not_sent") == "Send"
    assert whatsapp_action_label("whatsapp_sent") == "Resend"
    assert whatsapp_action_label("acknowledged") == "Resend"
