"""
PerkBoard Backend - Test Configuration (conftest.py)
======================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixtures:
    ├── mock_db_session: AsyncMock session (no real DB needed)
    ├── make_user / make_post / make_perk: lightweight stand-ins for ORM rows
    ├── definitions_file: temporary perk-definition asset
    └── test_client / as_viewer: HTTPX AsyncClient with dependency overrides
"""

import os

# Override settings for testing BEFORE any app imports
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./test.db"
os.environ["SESSION_SECRET"] = "test-session-secret"
os.environ["IDENTITY_BROKER_KEY"] = "test-broker-key"
os.environ["LOG_LEVEL"] = "WARNING"

from datetime import datetime, timezone
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient


@pytest.fixture
def mock_db_session():
    """
    A mock async database session.

    Usage:
        mock_db_session.get.return_value = post
        await post_service.save_post(mock_db_session, viewer, post.id)
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.get = AsyncMock(return_value=None)
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def make_user():
    def _make(**overrides):
        data = {
            "id": uuid4(),
            "username": "entity",
            "profile_pic": None,
            "perk_skin": None,
            "google_id": None,
            "steam_id": None,
            "saved_post_ids": [],
            "following_ids": [],
            "followers": 0,
            "save_count": 0,
            "post_count": 0,
            "is_admin": False,
            "created_at": datetime.now(timezone.utc),
        }
        data.update(overrides)
        return SimpleNamespace(**data)
    return _make


@pytest.fixture
def make_post():
    def _make(name="Build", description="", perk_ids=None, **overrides):
        data = {
            "id": uuid4(),
            "name": name,
            "description": description,
            "perk_ids": list(perk_ids or []),
            "saves": 0,
            "author_id": uuid4(),
            "type": "survivor",
            "created_at": datetime.now(timezone.utc),
        }
        data.update(overrides)
        return SimpleNamespace(**data)
    return _make


@pytest.fixture
def make_perk():
    def _make(name, **overrides):
        data = {
            "id": uuid4(),
            "name": name,
            "description": f"{name} description",
            "owner": "All",
            "role": "Survivor",
            "img_url": None,
        }
        data.update(overrides)
        return SimpleNamespace(**data)
    return _make


@pytest.fixture
def definitions_file(tmp_path):
    """Write perk-definition text to a temp file and return its path."""
    def _write(content, encoding="utf-8"):
        path = tmp_path / "perk_definitions.txt"
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_bytes(content.encode(encoding))
        return str(path)
    return _write


@pytest_asyncio.fixture
async def test_client(mock_db_session):
    """
    HTTPX AsyncClient talking to the FastAPI app through ASGITransport.

    The database session is replaced by mock_db_session and the viewer is
    anonymous unless a test calls as_viewer(user).
    """
    from app.database import get_db_session
    from app.dependencies import get_optional_user
    from app.main import app

    app.dependency_overrides[get_db_session] = lambda: mock_db_session
    app.dependency_overrides[get_optional_user] = lambda: None

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
def as_viewer():
    """Make the given user the signed-in viewer for route tests."""
    from app.dependencies import get_optional_user
    from app.main import app

    def _set(user):
        app.dependency_overrides[get_optional_user] = lambda: user
    return _set
