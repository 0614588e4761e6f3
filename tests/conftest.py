import os

# settings are read at import time
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ["COOKIE_SECURE"] = "false"
os.environ["PUBLIC_BASE_URL"] = "https://partylink.co"
os.environ["CANONICAL_HOST"] = "partylink.co"
os.environ["SMTP_HOST"] = ""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from partylink.auth.jwt_tokens import ACCESS_TOKEN_COOKIE, create_access_token, get_jwt_config
from partylink.core.db import Base, get_db
from partylink.main import app
from partylink.models import User


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, autocommit=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def make_client(session_factory):
    def _get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = _get_db
    clients = []

    def _make() -> TestClient:
        c = TestClient(app)
        clients.append(c)
        return c

    yield _make

    for c in clients:
        c.close()
    app.dependency_overrides.clear()


@pytest.fixture
def client(make_client):
    return make_client()


@pytest.fixture
def create_host(db):
    def _create(email: str = "host@example.com") -> User:
        user = User(email=email)
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _create


@pytest.fixture
def login(create_host):
    """Sign a client in as a (new) host by planting a session cookie."""

    def _login(client: TestClient, email: str = "host@example.com") -> User:
        user = create_host(email)
        token = create_access_token(get_jwt_config(), user.id, user.email)
        client.cookies.set(ACCESS_TOKEN_COOKIE, token)
        return user

    return _login


@pytest.fixture
def host_client(client, login):
    login(client)
    return client


@pytest.fixture
def event_id(host_client):
    r = host_client.post(
        "/host/events",
        json={"title": "Tom's 7th Birthday", "starts_at": "2026-11-07T15:00", "location_name": "Playground"},
    )
    assert r.status_code == 201, r.text
    return r.json()["id"]
