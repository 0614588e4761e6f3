from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy import func, select
from sqlalchemy.orm import Session

from partylink.auth.deps import get_current_user
from partylink.core.db import get_db
from partylink.core.timeutil import isoformat
from partylink.models import Event, Participant, User

router = APIRouter(tags=["me"])


@router.get("/me")
def me(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    events_count = db.scalar(select(func.count(Event.id)).where(Event.host_user_id == user.id))
    roster_count = db.scalar(select(func.count(Participant.id)).where(Participant.host_user_id == user.id))
    return {
        "id": user.id,
        "email": user.email,
        "created_at": isoformat(user.created_at),
        "events_count": events_count or 0,
        "roster_count": roster_count or 0,
    }
