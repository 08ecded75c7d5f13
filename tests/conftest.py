"""
tests/conftest.py -- Shared test fixtures for the user API.

This module provides:
  - settings:  a debug Settings instance with a fixed signing secret
  - store:     an isolated in-memory UserStore per test
  - client:    TestClient over the real app with a patched lifespan

Design: Named shared-memory SQLite URIs (not plain :memory:) are required
because TestClient runs `def` route handlers in a thread pool. Plain :memory:
DBs are per-connection and would present a blank schema to each worker
thread. A uuid in the name keeps every test's database separate.
"""

from __future__ import annotations

import uuid
from collections.abc import Generator
from contextlib import asynccontextmanager

import pytest
from fastapi.testclient import TestClient

from api.limiter import limiter
from api.main import app
from auth.store import UserStore
from core.config import Settings

TEST_SECRET = "test-signing-secret-0123456789abcdef"


def _make_test_store() -> UserStore:
    return UserStore(f"sqlite:///file:test_auth_{uuid.uuid4().hex}?mode=memory&cache=shared&uri=true")


def _patch_lifespan(user_store: UserStore, settings: Settings):
    """Return a lifespan that wires the test store and settings into app.state."""

    @asynccontextmanager
    async def test_lifespan(app):
        app.state.settings = settings
        app.state.user_store = user_store
        yield

    return test_lifespan


@pytest.fixture
def settings() -> Settings:
    return Settings(debug=True, jwt_secret=TEST_SECRET)


@pytest.fixture
def store() -> Generator[UserStore, None, None]:
    s = _make_test_store()
    yield s
    s.close()


@pytest.fixture
def client(store: UserStore, settings: Settings) -> Generator[TestClient, None, None]:
    """TestClient hitting the real route handlers with an isolated store.

    Rate limiting is switched off so tests can call /login and /register as
    often as they like; the rate limit test turns it back on itself.
    """
    limiter.enabled = False
    app.router.lifespan_context = _patch_lifespan(store, settings)
    with TestClient(app, raise_server_exceptions=True) as c:
        yield c
    limiter.enabled = True
