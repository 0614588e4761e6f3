from __future__ import annotations

from urllib.parse import quote

from partylink.core.config import settings
from partylink.services.phone import whatsapp_digits


def rsvp_url(invite_token: str, base_url: str | None = None) -> str:
    base = (base_url or settings.PUBLIC_BASE_URL).rstrip("/")
    return f"{base}/rsvp/{invite_token}"


def invite_message(*, invite_token: str, parent_name: str | None, event_title: str | None,
                   base_url: str | None = None) -> str:
    greeting = f"Hi {parent_name}" if parent_name else "Hi"
    return f"{greeting}! Please RSVP here: {rsvp_url(invite_token, base_url)}\nEvent: {event_title or ''}"


def whatsapp_link(*, invite_token: str, parent_name: str | None, phone_e164: str | None,
                  event_title: str | None, base_url: str | None = None) -> str:
    """wa.me compose URL; opens the contact picker when there is no phone."""
    text = quote(
        invite_message(
            invite_token=invite_token,
            parent_name=parent_name,
            event_title=event_title,
            base_url=base_url,
        ),
        safe="",
    )
    digits = whatsapp_digits(phone_e164)
    if not digits:
        return f"https://wa.me/?text={text}"
    return f"https://wa.me/{digits}?text={text}"
