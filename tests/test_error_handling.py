"""
tests/test_error_handling.py -- Unexpected failures become a generic 500.

A tea store that raises on every call stands in for a lost database
connection. The client must get the internal_error envelope and nothing from
the exception itself.

Covers:
  - 500 internal_error envelope on store failure
  - Exception text never reaches the response body
"""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from api.main import app
from auth.store import MemoryAccountStore
from conftest import _patch_lifespan, auth_header, signup_and_login
from inventory.store import MemoryTeaStore
from services.teashop import TeashopService

_SECRET_DETAIL = "connection refused: db-primary.internal:5432"


class _BrokenTeaStore(MemoryTeaStore):
    def list_by_owner(self, owner_id):
        raise RuntimeError(_SECRET_DETAIL)


@pytest.fixture
def broken_client():
    svc = TeashopService(MemoryAccountStore(), _BrokenTeaStore())
    app.router.lifespan_context = _patch_lifespan(svc)
    with TestClient(app, raise_server_exceptions=False) as client:
        yield client


def test_store_failure_returns_generic_500(broken_client):
    token = signup_and_login(broken_client, "5552000")
    resp = broken_client.get("/api/v1/teas", headers=auth_header(token))
    assert resp.status_code == 500
    assert resp.json() == {
        "error": {"code": "internal_error", "message": "An unexpected error occurred.", "detail": None}
    }
    assert _SECRET_DETAIL not in resp.text
