"""
Pytest configuration and fixtures for the election backend.

- Fresh SQLite file database per test (same engine factory as production)
- App built with test settings, no demo seeding
- Client factory: each TestClient is one browser with its own session cookie
"""

from typing import Callable, Optional

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session

from class_election.config import Settings
from class_election.database import build_engine, init_db
from class_election.main import create_app
from class_election.storage import DatabaseStorage


@pytest.fixture
def engine(tmp_path):
    db_engine = build_engine(f"sqlite:///{tmp_path / 'election.sqlite'}")
    init_db(db_engine)
    yield db_engine
    db_engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as db:
        yield db


@pytest.fixture
def storage(session) -> DatabaseStorage:
    return DatabaseStorage(session)


@pytest.fixture
def app_settings() -> Settings:
    return Settings(
        APP_ENV="test",
        SESSION_SECRET="test-secret",
        SEED_CANDIDATES=False,
        DEV_LOGIN=True,
        ENFORCE_PHASE_GATES=True,
        ADMIN_NAME_MATCH="johnny",
        ADMIN_USER_IDS="",
    )


@pytest.fixture
def app(app_settings, engine):
    return create_app(app_settings, engine=engine)


def login(client: TestClient, sub: str, first_name: Optional[str] = None, email: Optional[str] = None) -> dict:
    response = client.post(
        "/api/login",
        json={"sub": sub, "firstName": first_name, "email": email},
    )
    assert response.status_code == 200, response.text
    return response.json()


@pytest.fixture
def make_client(app) -> Callable[..., TestClient]:
    """
    make_client() -> anonymous client
    make_client("student-1", first_name="Ana") -> signed-in client
    """
    clients = []

    def _make(sub: Optional[str] = None, first_name: Optional[str] = None, email: Optional[str] = None) -> TestClient:
        client = TestClient(app)
        clients.append(client)
        if sub:
            login(client, sub, first_name=first_name, email=email)
        return client

    yield _make

    for client in clients:
        client.close()


@pytest.fixture
def anon(make_client) -> TestClient:
    return make_client()


@pytest.fixture
def student(make_client) -> TestClient:
    return make_client("student-1", first_name="Maria", email="maria@school.test")


@pytest.fixture
def admin(make_client) -> TestClient:
    return make_client("teacher-1", first_name="Johnny", email="prof@school.test")


def candidate_payload(**overrides) -> dict:
    payload = {
        "name": "Ana Oliveira",
        "nickname": "Aninha",
        "gender": "female",
        "bio": "Study groups every week.",
        "platform": "Nobody gets left behind.",
    }
    payload.update(overrides)
    return payload
