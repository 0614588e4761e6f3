from __future__ import annotations

from partylink.models.enums import InviteMethod, InviteStatus, RsvpStatus

_FINAL_RSVP = {RsvpStatus.YES.value, RsvpStatus.NO.value, RsvpStatus.MAYBE.value}
_RSVP_VALUES = {s.value for s in RsvpStatus}


def normalize_rsvp_status(value: str | None) -> str:
    v = (value or "").strip().lower()
    return v if v in _RSVP_VALUES else RsvpStatus.PENDING.value


def derive_invite_status(rsvp_status: str | None, invite_method: str | None, invite_status: str | None) -> str:
    """Label shown in the guest list's RSVP column.

    A final answer from the guest wins over anything about delivery.
    """
    rsvp = (rsvp_status or "").lower()
    if rsvp in _FINAL_RSVP:
        return rsvp.capitalize()

    if invite_method == InviteMethod.WHATSAPP.value:
        if invite_status == InviteStatus.WHATSAPP_SENT.value:
            return "WhatsApp sent"
        if invite_status == InviteStatus.ACKNOWLEDGED.value:
            return "Invite acknowledged"
        return "Not sent"

    return "Pending"


def guest_count_label(count: int) -> str:
    if count == 1:
        return "1 Guest in List"
    return f"{count} Guests in List"


def whatsapp_action_label(invite_status: str | None) -> str:
    if invite_status == InviteStatus.NOT_SENT.value or not invite_status:
        return "Send"
    return "Resend"
