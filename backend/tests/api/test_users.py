"""Users API - create/list round trip, input validation, and store failure mapping.

Invariants:
    - POST then GET returns the submitted pair with a non-empty id
    - Missing or blank fields -> 400, and the store is never called
    - Store unavailable -> 503 envelope for both GET and POST (never 500, never [])
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from bson import ObjectId
from httpx import ASGITransport, AsyncClient

from roster.core.errors import DuplicateRecordError, StoreQueryError
from roster.infrastructure.document_store import MongoUserStore
from roster.main import create_app


@pytest.mark.parametrize("payload", [
    {"name": "Test", "email": "test@example.com"},
    {"name": "Ada Lovelace", "email": "ada@analytical.engine"},
    {"name": "  Padded  ", "email": " padded@example.com "},
])
async def test_create_then_list_includes_user(client, payload):
    res = await client.post("/users", json=payload)
    assert res.status_code == 201
    created = res.json()
    assert created["id"]
    assert created["name"] == payload["name"].strip()
    assert created["email"] == payload["email"].strip()

    listed = await client.get("/users")
    assert listed.status_code == 200
    assert created in listed.json()


async def test_list_empty_store_returns_empty_array(client):
    res = await client.get("/users")
    assert res.status_code == 200
    assert res.json() == []


async def test_list_is_capped_by_list_limit(client, app, user_store):
    app.state.settings.list_limit = 2
    for i in range(4):
        await user_store.insert({"name": f"u{i}", "email": f"u{i}@example.com"})
    res = await client.get("/users")
    assert len(res.json()) == 2


@pytest.mark.parametrize("payload, field", [
    ({"email": "test@example.com"}, "name"),
    ({"name": "Test"}, "email"),
    ({"name": "   ", "email": "test@example.com"}, "name"),
    ({"name": "Test", "email": "not-an-email"}, "email"),
    ({"name": 42, "email": "test@example.com"}, "name"),
])
async def test_invalid_payload_returns_400_without_store_call(
    client, user_store, payload, field,
):
    res = await client.post("/users", json=payload)
    assert res.status_code == 400
    error = res.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    assert set(error) == {"code", "message", "category", "severity", "details"}
    assert any(d["field"].endswith(field) for d in error["details"])
    assert user_store.records == []


async def test_malformed_json_returns_400(client):
    res = await client.post(
        "/users", content=b"{not json",
        headers={"content-type": "application/json"},
    )
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "VALIDATION_ERROR"


async def test_list_with_store_unavailable_returns_503(client, user_store):
    user_store.available = False
    res = await client.get("/users")
    assert res.status_code == 503
    error = res.json()["error"]
    assert error["code"] == "STORE_UNAVAILABLE"
    assert error["category"] == "dependency_unavailable"
    assert error["context"]["store"] == "users"


async def test_list_with_store_unavailable_is_deterministic(client, user_store):
    user_store.available = False
    codes = {(await client.get("/users")).status_code for _ in range(3)}
    assert codes == {503}


async def test_create_with_store_unavailable_returns_503(client, user_store):
    user_store.available = False
    res = await client.post("/users", json={"name": "Test", "email": "t@example.com"})
    assert res.status_code == 503
    assert res.json()["error"]["code"] == "STORE_UNAVAILABLE"


async def test_store_query_failure_returns_502(client, user_store):
    user_store.fail_with = StoreQueryError("users", "insert")
    res = await client.post("/users", json={"name": "Test", "email": "t@example.com"})
    assert res.status_code == 502
    assert res.json()["error"]["code"] == "STORE_ERROR"


async def test_duplicate_key_returns_409(client, user_store):
    user_store.fail_with = DuplicateRecordError("users")
    res = await client.post("/users", json={"name": "Test", "email": "t@example.com"})
    assert res.status_code == 409
    assert res.json()["error"]["code"] == "DUPLICATE_RECORD"


async def test_error_body_does_not_leak_driver_details(client, user_store):
    user_store.available = False
    body = (await client.get("/users")).text
    assert "Traceback" not in body
    assert "pymongo" not in body


async def test_list_skips_stored_document_missing_email(settings, item_store):
    collection = MagicMock()
    collection.find.return_value.to_list = AsyncMock(return_value=[
        {"_id": ObjectId(), "name": "ok", "email": "ok@x.io"},
        {"_id": ObjectId(), "name": "legacy"},
    ])
    client = MagicMock()
    client.get_default_database.return_value = {"users": collection}
    app = create_app(
        settings, user_store=MongoUserStore(client), item_store=item_store,
    )

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        res = await c.get("/users")

    assert res.status_code == 200
    assert [u["name"] for u in res.json()] == ["ok"]
