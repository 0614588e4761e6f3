import logging

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from partylink.core.config import settings
from partylink.core.db import get_db
from partylink.core.errors import PartylinkError, partylink_error_handler
from partylink.core.middleware import canonical_host_redirect, host_session_guard
from partylink.routers import auth, events, guests, me, rsvp

logging.basicConfig(level=settings.LOG_LEVEL.upper())
log = logging.getLogger("partylink")

app = FastAPI(title="Partylink API")

# last added runs first: www redirect, then the /host guard
app.middleware("http")(host_session_guard)
app.middleware("http")(canonical_host_redirect)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_exception_handler(PartylinkError, partylink_error_handler)

app.include_router(auth.router)
app.include_router(me.router)
app.include_router(events.router)
app.include_router(guests.router)
app.include_router(rsvp.router)


@app.get("/health")
def health(db: Session = Depends(get_db)):
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        log.warning("health check: database unreachable: %s", e)
        return {"status": "error", "database": "unreachable"}
    return {"status": "ok", "database": "ok"}
