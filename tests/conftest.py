"""
Pytest configuration and fixtures for testing.

This file provides reusable test fixtures for:
- Database setup/teardown
- FastAPI test client
- Captured outgoing email
- Accounts and access tokens
- A controllable clock for the two-factor windows
"""

import re
import uuid
from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from delivery_hub.core.database import Base, get_db
from delivery_hub.core.security import create_access_token, get_password_hash
from delivery_hub.models.user import User, UserRole
from delivery_hub.services.email_service import EmailService
from main import app


# Use in-memory SQLite for testing (fast, isolated)
SQLALCHEMY_TEST_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

CODE_PATTERN = re.compile(r">(\d{6})</h2>")


class FrozenClock:
    """Clock that only moves when told to."""

    def __init__(self, start=None):
        self.now = start or datetime(2025, 11, 3, 8, 0, tzinfo=timezone.utc)

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now = self.now + timedelta(**kwargs)


def extract_code(html_body: str) -> str:
    """Pull the 6-digit code out of a two-factor email body."""
    match = CODE_PATTERN.search(html_body)
    assert match, "no verification code in email body"
    return match.group(1)


def auth_headers(user: User) -> dict:
    token = create_access_token(data={"sub": str(user.id), "role": user.role.value})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def db_session():
    """
    Create a fresh database session for each test.
    Tables are dropped after the test completes.
    """
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db_session):
    """
    FastAPI test client with overridden database dependency.
    """
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def clock():
    return FrozenClock()


@pytest.fixture
def sent_emails(monkeypatch):
    """
    Capture outgoing email instead of calling the provider.

    Returns the list of (to_email, subject, html_body) tuples sent so far.
    """
    outbox = []

    def fake_send_email(self, to_email, subject, html_body):
        outbox.append((to_email, subject, html_body))
        return True

    monkeypatch.setattr(EmailService, "send_email", fake_send_email)
    return outbox


@pytest.fixture
def failing_mailer(monkeypatch):
    """Make every outgoing email fail as if the provider rejected it."""
    def fake_send_email(self, to_email, subject, html_body):
        return False

    monkeypatch.setattr(EmailService, "send_email", fake_send_email)


@pytest.fixture
def make_user(db_session):
    """Factory fixture creating an account directly in the database."""
    def _make_user(email="driver@example.com", password="TestPass123!", role=UserRole.DRIVER, **kwargs):
        user = User(
            id=uuid.uuid4(),
            email=email,
            hashed_password=get_password_hash(password),
            role=role,
            is_active=kwargs.pop("is_active", True),
            **kwargs
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make_user


@pytest.fixture
def driver(make_user):
    return make_user(email="driver@example.com", role=UserRole.DRIVER)


@pytest.fixture
def admin(make_user):
    return make_user(email="admin@example.com", role=UserRole.ADMIN)
