"""
tests/conftest.py -- Shared fixtures for the Webnode API tests.

This module provides:
  - engine / db: one in-memory SQLite database per test, tables created fresh
  - client: TestClient with get_db overridden to use that database
  - make_user: factory that registers a user straight through crud_user
  - auth_headers: builds a Bearer header for a user

StaticPool keeps a single connection alive so every session, including the
ones TestClient opens from its worker threads, sees the same in-memory schema.

Settings are read at import time, so the environment is populated before
anything under ``app`` is imported.
"""

from __future__ import annotations

import os
import tempfile
from collections.abc import Callable, Generator

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="webnode-uploads-"))
os.environ.setdefault("ADMIN_PASSWORD", "Adm1n!Pass")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.api.deps import get_db
from app.core.security import TokenClaims, create_access_token
from app.crud import crud_user
from app.database import Base
from app.main import app
from app.models.user import User
from app.schemas.user import UserCreate

DEFAULT_PASSWORD = "Str0ng!Pass"


@pytest.fixture
def engine():
    test_engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=test_engine)
    yield test_engine
    Base.metadata.drop_all(bind=test_engine)
    test_engine.dispose()


@pytest.fixture
def session_factory(engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory) -> Generator[Session, None, None]:
    """Session for arranging data and inspecting results directly."""
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(session_factory) -> Generator[TestClient, None, None]:
    def override_get_db() -> Generator[Session, None, None]:
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    try:
        with TestClient(app) as test_client:
            yield test_client
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def make_user(db: Session) -> Callable[..., User]:
    """Factory: ``make_user("alice")`` creates alice@example.com / Str0ng!Pass."""

    def _make_user(
        username: str,
        *,
        name: str | None = None,
        email: str | None = None,
        password: str = DEFAULT_PASSWORD,
        is_admin: bool = False,
    ) -> User:
        user_in = UserCreate(
            email=email or f"{username}@example.com",
            password=password,
            name=name or username.capitalize(),
            username=username,
        )
        return crud_user.create_user(db, user_in=user_in, is_admin=is_admin)

    return _make_user


@pytest.fixture
def auth_headers() -> Callable[[User], dict[str, str]]:
    def _auth_headers(user: User) -> dict[str, str]:
        token = create_access_token(TokenClaims.from_user(user))
        return {"Authorization": f"Bearer {token}"}

    return _auth_headers
