from __future__ import annotations

import re

_NON_DIGITS = re.compile(r"\D")


def normalize_sg_phone(value: str) -> str:
    """Best-effort Singapore number to E.164-ish form.

    Not a parser: unrecognised input is returned unchanged, and no mobile
    prefix validation is done.
    """
    value = value or ""
    digits = _NON_DIGITS.sub("", value)
    if not digits:
        return ""
    if digits.startswith("65") and len(digits) == 10:
        return f"+{digits}"
    if len(digits) == 8:
        return f"+65{digits}"
    if value.startswith("+") and len(digits) >= 8:
        return f"+{digits}"
    return value


def clean_optional_phone(value: str | None) -> str | None:
    v = (value or "").strip()
    if not v:
        return None
    return normalize_sg_phone(v) or None


def phone_digits(e164: str | None) -> str:
    """Digits for display: local 8 digits for +65 numbers, full run otherwise."""
    digits = _NON_DIGITS.sub("", e164 or "")
    if digits.startswith("65") and len(digits) == 10:
        return digits[2:]
    return digits


def whatsapp_digits(e164: str | None) -> str:
    return _NON_DIGITS.sub("", e164 or "")
