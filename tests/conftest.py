"""Shared test fixtures."""

from datetime import UTC, datetime

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session, SQLModel, create_engine
from sqlmodel.pool import StaticPool

from encore.core.database import get_session
from encore.main import app
from encore.models import User
from encore.notifications import NotificationCenter
from encore.routes.deps import get_notifier
from encore.store import SqlDocumentStore
from encore.store.collections import EVENTS, USERS


@pytest.fixture(name="engine")
def engine_fixture():
    """Create an in-memory SQLite database for testing."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture(name="session")
def session_fixture(engine):
    """Create a new database session for each test."""
    with Session(engine) as session:
        yield session


@pytest.fixture(name="store")
def store_fixture(session: Session) -> SqlDocumentStore:
    """Document store on the test session."""
    return SqlDocumentStore(session)


@pytest.fixture(name="notifier")
def notifier_fixture() -> NotificationCenter:
    """A notification center that keeps messages for the whole test."""
    return NotificationCenter(ttl_seconds=60)


@pytest.fixture(name="client")
def client_fixture(session: Session, notifier: NotificationCenter):
    """Create a test client with the test database session."""

    def get_session_override():
        return session

    app.dependency_overrides[get_session] = get_session_override
    app.dependency_overrides[get_notifier] = lambda: notifier
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()


def _add_user(store: SqlDocumentStore, user_id: str, name: str, handle: str) -> User:
    now = datetime.now(UTC)
    user = User(
        id=user_id,
        name=name,
        handle=handle,
        email=f"{handle}@example.com",
        created_at=now,
        updated_at=now,
    )
    store.set(USERS, user_id, user.to_document())
    return user


@pytest.fixture(name="alice")
def alice_fixture(store: SqlDocumentStore) -> User:
    return _add_user(store, "alice", "Alice Moreno", "alice")


@pytest.fixture(name="bob")
def bob_fixture(store: SqlDocumentStore) -> User:
    return _add_user(store, "bob", "Bob Tran", "bobt")


@pytest.fixture(name="carol")
def carol_fixture(store: SqlDocumentStore) -> User:
    return _add_user(store, "carol", "Carol Singh", "carol_s")


@pytest.fixture(name="add_event")
def add_event_fixture(store: SqlDocumentStore):
    """Factory that writes a catalog event in the importer's nested schema."""

    def add_event(
        event_id: str,
        local_date: str | None = None,
        name: str = "Untitled Show",
        performer: str | None = None,
        venue: str = "The Fillmore",
        city: str = "San Francisco",
        genre: str = "Rock",
    ) -> dict:
        data = {
            "name": name,
            "venue": {"name": venue, "city": {"name": city}},
            "classification": {"genre": {"name": genre}},
            "attractions": [{"name": performer}] if performer else [],
        }
        if local_date is not None:
            data["dates"] = {"start": {"localDate": local_date}}
        store.set(EVENTS, event_id, data)
        return data

    return add_event
