from __future__ import annotations

import logging
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from fastapi.responses import RedirectResponse
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from partylink.auth.email_otp import (
    DEFAULT_NEXT_PATH,
    LoginCodeError,
    exchange_link_token,
    get_or_create_user,
    issue_login_code,
    safe_next_path,
    verify_login_code,
)
from partylink.auth.jwt_tokens import ACCESS_TOKEN_COOKIE, create_access_token, get_jwt_config
from partylink.core.config import settings
from partylink.core.db import get_db
from partylink.models import User
from partylink.services import mailer

log = logging.getLogger("partylink.auth")

router = APIRouter(tags=["auth"])


class OtpRequestIn(BaseModel):
    email: str = Field(..., min_length=3, max_length=320)
    next: str | None = None


class OtpVerifyIn(BaseModel):
    email: str = Field(..., min_length=3, max_length=320)
    code: str = Field(..., min_length=1, max_length=32)


def _set_session_cookie(response: Response, user: User) -> None:
    token = create_access_token(get_jwt_config(), user.id, user.email)
    response.set_cookie(
        key=ACCESS_TOKEN_COOKIE,
        value=token,
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite="lax",
        domain=settings.COOKIE_DOMAIN,
        path="/",
        max_age=settings.ACCESS_TOKEN_TTL_SECONDS,
    )


def _login_redirect(next_path: str, error: str, message: str) -> RedirectResponse:
    query = urlencode({"next": next_path, "error": error, "message": message})
    return RedirectResponse(f"/login?{query}", status_code=status.HTTP_307_TEMPORARY_REDIRECT)


@router.get("/login")
def login_screen(
    next: str | None = Query(default=None),
    error: str | None = Query(default=None),
    message: str | None = Query(default=None),
):
    return {"next": safe_next_path(next), "error": error, "message": message}


@router.post("/auth/otp", status_code=status.HTTP_204_NO_CONTENT)
def request_code(payload: OtpRequestIn, db: Session = Depends(get_db)):
    try:
        row, code, link_token = issue_login_code(db, email=payload.email, next_path=payload.next)
    except LoginCodeError as e:
        raise HTTPException(status_code=422, detail=str(e))

    link = settings.PUBLIC_BASE_URL.rstrip("/") + "/auth/callback?" + urlencode(
        {"code": link_token, "next": row.next_path}
    )
    if not mailer.send_login_email(to=row.email, code=code, link=link):
        raise HTTPException(status_code=503, detail="Could not send the code. Please try again.")
    return


@router.post("/auth/verify")
def verify_code(payload: OtpVerifyIn, response: Response, db: Session = Depends(get_db)):
    try:
        row = verify_login_code(db, email=payload.email, code=payload.code)
    except LoginCodeError as e:
        raise HTTPException(status_code=401, detail=str(e))

    user = get_or_create_user(db, email=row.email)
    _set_session_cookie(response, user)
    return {"ok": True, "next": row.next_path}


@router.get("/auth/callback")
def auth_callback(
    code: str | None = Query(default=None),
    next: str | None = Query(default=None),
    db: Session = Depends(get_db),
):
    next_path = safe_next_path(next or DEFAULT_NEXT_PATH)
    response = RedirectResponse(next_path, status_code=status.HTTP_307_TEMPORARY_REDIRECT)

    if not code:
        return response

    try:
        row = exchange_link_token(db, link_token=code)
        user = get_or_create_user(db, email=row.email)
    except LoginCodeError as e:
        return _login_redirect(next_path, "auth_failed", str(e))
    except Exception as e:
        log.exception("auth callback crashed")
        return _login_redirect(next_path, "callback_crash", str(e) or "unknown")

    _set_session_cookie(response, user)
    return response


@router.post("/auth/logout", status_code=status.HTTP_204_NO_CONTENT)
def logout(response: Response):
    response.delete_cookie(key=ACCESS_TOKEN_COOKIE, domain=settings.COOKIE_DOMAIN, path="/")
    return
