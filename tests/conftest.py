import itertools
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from knowledge_hub import articles
from knowledge_hub.config import get_settings
from knowledge_hub.database import Base, get_db
from knowledge_hub.main import app
from knowledge_hub.sessions import SessionStore

SQLALCHEMY_DATABASE_URL = "sqlite://"
engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(autouse=True)
def reset_state():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    app.state.sessions = SessionStore(get_settings().session_ttl_seconds)
    yield


@pytest.fixture
def db():
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def clock(monkeypatch):
    """Make article timestamps advance one second per call."""
    start = datetime(2026, 1, 1, tzinfo=timezone.utc)
    ticks = itertools.count()
    monkeypatch.setattr(articles, "utcnow", lambda: start + timedelta(seconds=next(ticks)))
    return start


@pytest.fixture
def client():
    return TestClient(app)


def register(client, username="alice", email=None, password="secret123", full_name="Alice Liddell", role="employee"):
    return client.post(
        "/api/auth/register",
        json={
            "username": username,
            "email": email or f"{username}@x.com",
            "password": password,
            "full_name": full_name,
            "role": role,
        },
    )


def login(client, username="alice", password="secret123"):
    return client.post("/api/auth/login", json={"username": username, "password": password})


@pytest.fixture
def auth_client(client):
    assert register(client).status_code == 201
    assert login(client).status_code == 200
    return client
