# backend/partylink/core/db.py
from __future__ import annotations

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, sessionmaker

from partylink.core.config import settings


class Base(DeclarativeBase):
    pass


def engine_kwargs(url: str) -> dict:
    """create_engine options per backend. SQLite is used for local runs and tests."""
    if url.startswith("sqlite"):
        # TestClient и uvicorn дергают сессию из другого потока
        return {"connect_args": {"check_same_thread": False}}
    return {"pool_pre_ping": True}


def enable_sqlite_foreign_keys(engine: Engine) -> None:
    """SQLite ignores ON DELETE CASCADE unless the pragma is on for each connection."""
    if engine.dialect.name != "sqlite":
        return

    @event.listens_for(engine, "connect")
    def _fk_pragma(dbapi_conn, _record):
        cur = dbapi_conn.cursor()
        cur.execute("PRAGMA foreign_keys=ON")
        cur.close()


engine = create_engine(settings.database_url, **engine_kwargs(settings.database_url))
enable_sqlite_foreign_keys(engine)
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)


def get_db():
    """FastAPI dependency: one Session per request, closed afterwards."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


# модели должны быть импортированы, чтобы relationship() резолвились
import partylink.models  # noqa: F401
