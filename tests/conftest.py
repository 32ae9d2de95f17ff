"""Test fixtures for the API and the in-memory document store."""

from __future__ import annotations

import os

# Settings are read at import time; give the app a connection string so the
# lifespan accepts startup. The store itself is swapped for mongomock below.
os.environ.setdefault("MONGODB_URI", "mongodb://localhost:27017/hundred_days_test")
os.environ.setdefault("ENVIRONMENT", "development")

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from mongomock_motor import AsyncMongoMockClient  # noqa: E402

import hundred_days.main as main_module  # noqa: E402
from hundred_days.database import DocumentStore  # noqa: E402
from hundred_days.main import app  # noqa: E402
from hundred_days.security.rate_limit import limiter  # noqa: E402

# Disable rate limiting in tests to prevent cross-test 429 flakes
limiter.enabled = False

TEST_DATABASE = "hundred_days_test"


def make_store() -> DocumentStore:
    store = DocumentStore(AsyncMongoMockClient(tz_aware=True), TEST_DATABASE)
    # Nothing to release for the in-memory client
    store.close = lambda: None
    return store


@pytest.fixture
def client(monkeypatch):
    """TestClient running the full lifespan against a fresh in-memory store."""
    monkeypatch.setattr(main_module, "build_store", lambda config: make_store())
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def lenient_client(monkeypatch):
    """Like ``client`` but returns 500 responses instead of re-raising."""
    monkeypatch.setattr(main_module, "build_store", lambda config: make_store())
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client


@pytest_asyncio.fixture
async def memory_store() -> DocumentStore:
    """Standalone store for service-level tests, indexes included."""
    store = make_store()
    await store.ensure_indexes()
    return store


def _post_payload(**overrides) -> dict:
    payload = {
        "id": "post-1",
        "title": "Day one notes",
        "content": "Started the challenge today.",
        "author": "Sam Rivera",
        "tags": ["python", "habits"],
    }
    payload.update(overrides)
    return payload


def _challenge_payload(**overrides) -> dict:
    payload = {
        "id": "c1",
        "title": "X",
        "description": "Y",
        "author": "Z",
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def post_payload():
    """Factory for blog post request bodies."""
    return _post_payload


@pytest.fixture
def challenge_payload():
    """Factory for challenge request bodies."""
    return _challenge_payload
