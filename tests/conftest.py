"""
Shared fixtures for API and service tests.

The app is imported with a throwaway SQLite configuration; each test
gets a fresh in-memory database (foreign keys ON, so cascades behave
like Postgres) injected through `app.dependency_overrides`.
"""
import os
import uuid
from datetime import datetime, timedelta, timezone

# Settings are read at import time, so configure them first.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SUPABASE_JWT_SECRET", "test-secret")

import pytest
from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy import event
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, Session, create_engine

from app.core.config import get_settings
from app.database import get_session
from app.main import app
from app.models.issue import Issue
from app.models.user import User


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def session_calls():
    """Records every time the API opens a DB session."""
    return []


@pytest.fixture
def client(engine, session_calls):
    def _get_session():
        session_calls.append(True)
        with Session(engine) as session:
            yield session

    app.dependency_overrides[get_session] = _get_session
    yield TestClient(app)
    app.dependency_overrides.clear()


def make_token(
    user_id: uuid.UUID | str,
    email: str = "citizen@example.com",
    role: str | None = None,
    expires_in: timedelta = timedelta(hours=1),
) -> str:
    """Mint a Supabase-style access token signed with the test secret."""
    settings = get_settings()
    claims = {
        "sub": str(user_id),
        "email": email,
        "role": "authenticated",
        "exp": datetime.now(timezone.utc) + expires_in,
    }
    if role is not None:
        claims["app_metadata"] = {"role": role}
    return jwt.encode(claims, settings.SUPABASE_JWT_SECRET, algorithm=settings.SUPABASE_JWT_ALG)


def auth_headers(user: User) -> dict[str, str]:
    return {"Authorization": f"Bearer {make_token(user.id, user.email, user.role)}"}


@pytest.fixture
def make_user(session):
    def _make_user(email: str = "citizen@example.com", name: str = "Asha", role: str = "user") -> User:
        user = User(email=email, name=name, role=role, avatar="https://cdn.example.com/a.png")
        session.add(user)
        session.commit()
        session.refresh(user)
        return user

    return _make_user


@pytest.fixture
def make_issue(session):
    base = datetime(2025, 1, 1, tzinfo=timezone.utc)

    def _make_issue(
        user: User,
        minutes: int,
        status: str = "open",
        category: str = "pothole",
        title: str = "Issue",
    ) -> Issue:
        issue = Issue(
            user_id=user.id,
            title=title,
            status=status,
            category=category,
            created_at=base + timedelta(minutes=minutes),
        )
        session.add(issue)
        session.commit()
        session.refresh(issue)
        return issue

    return _make_issue
