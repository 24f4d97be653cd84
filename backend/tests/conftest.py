"""Pytest fixtures for the Trust Portal backend.

Provides reusable test fixtures for:
- Database session on an in-memory SQLite database (fresh per test)
- Application instance with its own in-memory rate limit store
- Test client with the database dependency overridden
- Tickets in each lifecycle status

Usage:
    def test_webhook(client, resolved_ticket):
        response = client.post("/api/webhooks/inbound-email", data={...})
        assert response.status_code == 200
"""

import os
from typing import Generator

# Set environment variables BEFORE any imports to ensure they take effect
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("LOG_JSON", "false")
os.environ.setdefault("RATE_LIMIT_BACKEND", "memory")

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from trustportal.config import Settings
from trustportal.database import get_db
from trustportal.domain.tickets.ticket_status import TicketStatus
from trustportal.main import create_app
from trustportal.models import Base, Ticket


TICKET_ID = "550e8400-e29b-41d4-a716-446655440000"


@pytest.fixture(scope="function")
def test_settings() -> Settings:
    """Settings for tests: SQLite, plain-text logs, in-memory rate limits."""
    return Settings(
        DATABASE_URL="sqlite://",
        LOG_JSON=False,
        LOG_LEVEL="INFO",
        RATE_LIMIT_BACKEND="memory",
        INBOUND_DEDUP_TTL_SECONDS=0,
    )


@pytest.fixture(scope="function")
def db_engine():
    """Create a fresh in-memory database with all tables."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db_session(db_engine) -> Generator[Session, None, None]:
    """Create a database session for each test."""
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="function")
def app(test_settings: Settings, db_session: Session) -> FastAPI:
    """Create an application instance using the test database session."""
    application = create_app(test_settings)

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    application.dependency_overrides[get_db] = override_get_db
    return application


@pytest.fixture(scope="function")
def client(app: FastAPI) -> TestClient:
    """Create an unauthenticated test client (all endpoints here are public)."""
    return TestClient(app)


def _make_ticket(db_session: Session, status: TicketStatus, ticket_id: str = TICKET_ID) -> Ticket:
    from uuid import UUID

    ticket = Ticket(
        id=UUID(ticket_id),
        name="Jane Requester",
        email="jane@x.com",
        organization="Acme",
        subject="Help with SOC 2 report",
        message="Can I get the latest SOC 2 report?",
        status=status.value,
    )
    db_session.add(ticket)
    db_session.commit()
    db_session.refresh(ticket)
    return ticket


@pytest.fixture(scope="function")
def new_ticket(db_session: Session) -> Ticket:
    """Create a ticket in status 'new'."""
    return _make_ticket(db_session, TicketStatus.NEW)


@pytest.fixture(scope="function")
def in_progress_ticket(db_session: Session) -> Ticket:
    """Create a ticket in status 'in_progress'."""
    return _make_ticket(db_session, TicketStatus.IN_PROGRESS)


@pytest.fixture(scope="function")
def resolved_ticket(db_session: Session) -> Ticket:
    """Create a ticket in status 'resolved'."""
    return _make_ticket(db_session, TicketStatus.RESOLVED)
