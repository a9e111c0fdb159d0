from __future__ import annotations

import uuid
from collections.abc import Iterator
from datetime import UTC, datetime
from pathlib import Path

import pytest

import cvfast.data.db as app_db
from cvfast.clock import FixedClock, use_clock
from cvfast.config import get_settings
from cvfast.data.db import init_db
from cvfast.data.models import User

TEST_SECRET = "test-secret-key-with-enough-bytes-for-hs256"


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Pin configuration for every test and drop the cached settings afterwards."""
    monkeypatch.setenv("JWT_SECRET_KEY", TEST_SECRET)
    monkeypatch.delenv("PUBLIC_BASE_URL", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def tmp_db(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Iterator[None]:
    """Point the lazy engine at a temporary SQLite database."""
    db_path = tmp_path / "test.db"
    monkeypatch.setenv("DB_URL", f"sqlite:///{db_path.as_posix()}")
    app_db.dispose_engine()
    init_db()
    yield
    # Dispose engine to release connections
    app_db.dispose_engine()


@pytest.fixture
def api_db(tmp_db: None) -> None:
    """Use a temporary SQLite DB for API tests."""


@pytest.fixture(autouse=True)
def api_modules_use_tmp_db(request: pytest.FixtureRequest) -> None:
    """Give every test in an API test file its own temporary database."""
    if "api" in request.node.path.stem.lower():
        request.getfixturevalue("api_db")


@pytest.fixture
def owner_id(tmp_db: None) -> uuid.UUID:
    """Create a user that owns the curricula under test."""
    with app_db.get_session() as session:
        user = User(email="owner@example.com", name="Owner", password_hash="salt:hash")
        session.add(user)
        session.flush()
        return user.id


@pytest.fixture
def fixed_clock() -> Iterator[FixedClock]:
    """Freeze service timestamps at a known instant."""
    with use_clock(FixedClock(datetime(2025, 1, 15, 12, 0, tzinfo=UTC))) as clock:
        yield clock
