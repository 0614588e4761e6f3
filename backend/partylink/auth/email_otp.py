from __future__ import annotations

import hashlib
import hmac
import secrets
from datetime import timedelta

from sqlalchemy import select
from sqlalchemy.orm import Session

from partylink.core.config import settings
from partylink.core.timeutil import as_utc, utcnow
from partylink.models import LoginCode, User

DEFAULT_NEXT_PATH = "/host/events"


class LoginCodeError(Exception):
    pass


def _hmac_sha256_hex(value: str) -> str:
    return hmac.new(settings.JWT_SECRET.encode("utf-8"), value.encode("utf-8"), hashlib.sha256).hexdigest()


def normalize_email(value: str | None) -> str:
    v = (value or "").strip().lower()
    local, _, domain = v.partition("@")
    if not local or "." not in domain:
        raise LoginCodeError("Please enter a valid email.")
    return v


def safe_next_path(value: str | None) -> str:
    """Only same-site absolute paths; anything else falls back to the events list."""
    v = (value or "").strip()
    if not v.startswith("/") or v.startswith("//") or "\\" in v:
        return DEFAULT_NEXT_PATH
    return v


def issue_login_code(db: Session, *, email: str, next_path: str | None) -> tuple[LoginCode, str, str]:
    """Create a sign-in request. Returns (row, 6-digit code, magic-link token)."""
    email = normalize_email(email)
    code = f"{secrets.randbelow(10**6):06d}"
    link_token = secrets.token_urlsafe(32)

    row = LoginCode(
        email=email,
        code_hash=_hmac_sha256_hex(code),
        link_token_hash=_hmac_sha256_hex(link_token),
        next_path=safe_next_path(next_path),
        attempts=0,
        expires_at=utcnow() + timedelta(seconds=settings.LOGIN_CODE_TTL_SECONDS),
    )
    db.add(row)
    db.commit()
    db.refresh(row)
    return row, code, link_token


def verify_login_code(db: Session, *, email: str, code: str) -> LoginCode:
    email = normalize_email(email)
    code = "".join((code or "").split())
    if not code:
        raise LoginCodeError("Please enter the code from your email.")

    row = db.execute(
        select(LoginCode)
        .where(LoginCode.email == email, LoginCode.consumed_at.is_(None))
        .order_by(LoginCode.created_at.desc(), LoginCode.id.desc())
        .limit(1)
    ).scalar_one_or_none()

    if row is None or as_utc(row.expires_at) < utcnow():
        raise LoginCodeError("Code expired or not found. Please request a new one.")
    if row.attempts >= settings.LOGIN_CODE_MAX_ATTEMPTS:
        raise LoginCodeError("Too many attempts. Please request a new code.")

    if not hmac.compare_digest(row.code_hash, _hmac_sha256_hex(code)):
        row.attempts += 1
        db.commit()
        raise LoginCodeError("Invalid code.")

    row.consumed_at = utcnow()
    db.commit()
    return row


def exchange_link_token(db: Session, *, link_token: str) -> LoginCode:
    row = db.execute(
        select(LoginCode).where(LoginCode.link_token_hash == _hmac_sha256_hex(link_token or ""))
    ).scalar_one_or_none()

    if row is None or row.consumed_at is not None:
        raise LoginCodeError("Sign-in link is invalid or already used.")
    if as_utc(row.expires_at) < utcnow():
        raise LoginCodeError("Sign-in link has expired.")

    row.consumed_at = utcnow()
    db.commit()
    return row


def get_or_create_user(db: Session, *, email: str) -> User:
    email = normalize_email(email)
    user = db.execute(select(User).where(User.email == email)).scalar_one_or_none()
    if user is None:
        user = User(email=email)
        db.add(user)
        db.commit()
        db.refresh(user)
    return user
