from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from partylink.core.db import Base
from partylink.core.timeutil import utcnow


class LoginCode(Base):
    """One email sign-in request: a 6-digit code plus a magic-link token."""

    __tablename__ = "login_codes"

    id: Mapped[int] = mapped_column(primary_key=True)
    email: Mapped[str] = mapped_column(String(320), index=True)

    # sha256 hex, never the raw values
    code_hash: Mapped[str] = mapped_column(String(64), nullable=False)
    link_token_hash: Mapped[str] = mapped_column(String(64), unique=True, index=True)

    next_path: Mapped[str] = mapped_column(String(512), nullable=False, default="/host/events")
    attempts: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    consumed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
