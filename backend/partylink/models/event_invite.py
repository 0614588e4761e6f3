from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from partylink.core.db import Base
from partylink.core.timeutil import utcnow


class EventInvite(Base):
    __tablename__ = "event_invites"
    __table_args__ = (
        UniqueConstraint("event_id", "participant_id", name="uq_event_invites_event_participant"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)

    # public RSVP key; the only credential a guest has
    invite_token: Mapped[str] = mapped_column(String(64), unique=True, index=True)

    event_id: Mapped[int] = mapped_column(ForeignKey("events.id", ondelete="CASCADE"), index=True)
    participant_id: Mapped[int] = mapped_column(ForeignKey("participants.id", ondelete="CASCADE"), index=True)

    parent_name: Mapped[str | None] = mapped_column(String(128), nullable=True)
    phone_e164: Mapped[str | None] = mapped_column(String(32), nullable=True)

    # храним строкой, в коде валидируем enum-ом (InviteMethod / InviteStatus)
    invite_method: Mapped[str] = mapped_column(String(16), nullable=False, default="whatsapp")
    invite_status: Mapped[str] = mapped_column(String(16), nullable=False, default="not_sent")

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)

    event = relationship("Event", back_populates="invites")
    participant = relationship("Participant")
