"""
tests/conftest.py -- Shared test fixtures for Teashop tests.

This module provides:
  - _patch_lifespan(): wires a test TeashopService into app.state, bypassing
    the real startup that opens the production database
  - make_service(): TeashopService over fresh in-memory stores
  - api_client: module-scoped TestClient over in-memory stores
  - signup_and_login(): register an account through the API, return its token

The DEBUG and BCRYPT_ROUNDS env vars must be set before any auth/core import:
DEBUG so get_settings() auto-generates SECRET_KEY instead of raising
ConfigurationError, BCRYPT_ROUNDS so every hash in the suite is cheap.
"""

from __future__ import annotations

import os
from collections.abc import Generator
from contextlib import asynccontextmanager

# CRITICAL: Set env before any auth/core import -- settings are read once.
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest
from fastapi.testclient import TestClient

from api.main import app
from auth.store import MemoryAccountStore
from inventory.store import MemoryTeaStore
from services.teashop import TeashopService

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def make_service() -> TeashopService:
    return TeashopService(MemoryAccountStore(), MemoryTeaStore())


def _patch_lifespan(service: TeashopService):
    """Return an async context manager that replaces the real lifespan."""

    @asynccontextmanager
    async def test_lifespan(app):
        app.state.service = service
        yield

    return test_lifespan


def auth_header(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def signup_and_login(client: TestClient, phone: str, password: str = "pw-123456") -> str:
    """Register phone through the API and return a bearer token for it."""
    resp = client.post("/api/v1/auth/signup", json={"phone": phone, "password": password})
    assert resp.status_code == 201, resp.text
    resp = client.post("/api/v1/auth/login", json={"phone": phone, "password": password})
    assert resp.status_code == 200, resp.text
    return resp.json()["token"]


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def service() -> TeashopService:
    return make_service()


@pytest.fixture(scope="module")
def api_client() -> Generator[tuple[TestClient, TeashopService], None, None]:
    """Yield (client, service) for API integration tests.

    The TestClient uses the real FastAPI app with a patched lifespan so
    tests hit real route handlers and dependencies but use in-memory stores.
    One client per test module; tests use distinct phone numbers so they do
    not depend on each other.
    """
    svc = make_service()
    app.router.lifespan_context = _patch_lifespan(svc)

    with TestClient(app, raise_server_exceptions=True) as client:
        yield client, svc

    svc.close()
