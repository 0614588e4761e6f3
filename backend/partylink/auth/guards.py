from __future__ import annotations

from fastapi import Depends
from sqlalchemy.orm import Session

from partylink.auth.deps import get_current_user
from partylink.core.db import get_db
from partylink.models import Event, User
from partylink.services.events import get_event_for_host


def require_event_owner(
    event_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
) -> Event:
    """Path dependency for /host/events/{event_id}/...; 404 unless the host owns it."""
    return get_event_for_host(db, event_id=event_id, host=user)
