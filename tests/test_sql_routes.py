"""
tests/test_sql_routes.py -- Tea routes over the SQLite-backed stores.

The other API tests use the in-memory stores. This module wires AccountStore
and TeaStore on a temporary SQLite file so path ids reach a real database.

Covers:
  - An id too large for a SQLite INTEGER answers 404 tea_not_found on GET,
    PUT and DELETE, not a 500
  - A normal create/read round trip through the SQL store
"""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from api.main import app
from auth.store import AccountStore
from conftest import _patch_lifespan, auth_header, signup_and_login
from inventory.store import TeaStore
from services.teashop import TeashopService

HUGE_ID = "99999999999999999999"
PHONES = {"GET": "5553001", "PUT": "5553002", "DELETE": "5553003"}


@pytest.fixture(scope="module")
def sql_client(tmp_path_factory):
    db_url = f"sqlite:///{tmp_path_factory.mktemp('sql_routes') / 'teashop.db'}"
    svc = TeashopService(AccountStore(db_url), TeaStore(db_url))
    app.router.lifespan_context = _patch_lifespan(svc)
    with TestClient(app, raise_server_exceptions=False) as client:
        yield client
    svc.close()


@pytest.mark.parametrize("method", ["GET", "PUT", "DELETE"])
def test_oversized_tea_id_is_not_found(sql_client, method):
    headers = auth_header(signup_and_login(sql_client, PHONES[method]))
    body = {"name": "Oolong", "price": 12.5} if method == "PUT" else None
    resp = sql_client.request(method, f"/api/v1/teas/{HUGE_ID}", json=body, headers=headers)
    assert resp.status_code == 404
    assert resp.json()["error"]["code"] == "tea_not_found"


def test_create_and_read_back(sql_client):
    headers = auth_header(signup_and_login(sql_client, "5553010"))
    created = sql_client.post("/api/v1/teas", json={"name": "Sencha", "price": 9.0}, headers=headers).json()
    resp = sql_client.get(f"/api/v1/teas/{created['id']}", headers=headers)
    assert resp.status_code == 200
    assert resp.json() == created
