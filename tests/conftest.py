"""Pytest configuration and fixtures."""

import os

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from taskboard.database import Base, get_db
from taskboard.main import app
from taskboard.schemas.auth import IdentityClaim
from taskboard.services.realtime import RealtimeConnection


class AuthHeaders(dict):
    """Dict subclass that also stores the registered user's id, email and token."""

    def __init__(self, *args, user_id: str | None = None, email: str | None = None,
                 token: str | None = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.user_id = user_id
        self.email = email
        self.token = token


class RecordingConnection(RealtimeConnection):
    """Realtime connection that keeps every envelope it is handed."""

    def __init__(self, identity: IdentityClaim | None = None, subscribed_event_types=None):
        super().__init__(
            identity
            or IdentityClaim(
                user_id="observer", email="observer@example.com", display_name="Observer", role="user"
            ),
            subscribed_event_types,
        )
        self.received: list[dict] = []

    def deliver(self, envelope: dict) -> None:
        self.received.append(envelope)

    def events(self) -> list[str]:
        return [envelope["event"] for envelope in self.received]


# Use test database - PostgreSQL when TEST_DATABASE_URL is set, SQLite otherwise
SQLALCHEMY_DATABASE_URL = os.getenv("TEST_DATABASE_URL", "sqlite:///./test.db")

connect_args = {"check_same_thread": False} if "sqlite" in SQLALCHEMY_DATABASE_URL else {}
engine = create_engine(SQLALCHEMY_DATABASE_URL, connect_args=connect_args)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="session", autouse=True)
def setup_test_database():
    """Create test database schema once at the start of the test session."""
    from taskboard import models  # noqa: F401

    Base.metadata.create_all(bind=engine)
    yield
    # Don't drop database - just leave it for next run (each test cleans up after itself)


@pytest.fixture(scope="function", autouse=True)
def db():
    """Create a fresh database session for each test with cleanup."""
    session = TestingSessionLocal()

    yield session

    # Clean up all data after test
    session.rollback()
    for table in reversed(Base.metadata.sorted_tables):
        session.execute(table.delete())
    session.commit()
    session.close()


@pytest.fixture(scope="function")
def client(db):
    """Create a test client with database override."""

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def registry():
    """The application's realtime connection registry."""
    return app.state.registry


@pytest.fixture
def recorder(registry):
    """A recording connection registered for the duration of a test."""
    connection = RecordingConnection()
    registry.register(connection)
    yield connection
    registry.unregister(connection.connection_id)


def register(client, name: str, email: str, password: str = "testpass123") -> AuthHeaders:
    """Register a user through the API and return auth headers for it."""
    response = client.post(
        "/api/auth/register",
        json={"name": name, "email": email, "password": password},
    )
    assert response.status_code == 201, response.text
    data = response.json()
    token = data["token"]
    return AuthHeaders(
        {"Authorization": f"Bearer {token}"},
        user_id=data["user"]["user_id"],
        email=email,
        token=token,
    )


@pytest.fixture
def auth_headers(client):
    """Create a user and return auth headers with user info."""
    return register(client, "Test User", "test@example.com")


@pytest.fixture
def other_headers(client):
    """A second, unrelated user."""
    return register(client, "Other User", "other@example.com")
