"""App Factory & Lifespan - explicit store wiring, fail-fast startup, uniform error envelope.

Invariants:
    - Injected stores are used as given; nothing reads a test-mode flag
    - Lifespan-built stores must connect or startup raises StoreUnavailableError
    - Unhandled exceptions become a 500 envelope without internals
    - Requests exceeding request_timeout_seconds get a 504 envelope

Design Decisions:
    - lifespan_context driven directly: httpx ASGITransport does not run lifespan
"""

import asyncio

import pytest
from httpx import ASGITransport, AsyncClient

from roster.core.errors import StoreUnavailableError
from roster.infrastructure.database import SqlItemStore
from roster.main import create_app


def _patch_mongo(monkeypatch, store):
    monkeypatch.setattr(
        "roster.main.MongoUserStore.from_uri",
        lambda *args, **kwargs: store,
    )


async def test_missing_store_resolves_to_503(settings):
    app = create_app(settings)
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        res = await c.get("/users")
    assert res.status_code == 503
    assert res.json()["error"]["code"] == "STORE_UNAVAILABLE"


async def test_lifespan_builds_and_closes_stores(settings, monkeypatch, user_store):
    settings.database_create_schema = True
    _patch_mongo(monkeypatch, user_store)
    app = create_app(settings)

    async with app.router.lifespan_context(app):
        assert app.state.user_store is user_store
        assert isinstance(app.state.item_store, SqlItemStore)
        assert await app.state.item_store.list_all(10) == []

    assert user_store.closed
    assert app.state.user_store is None
    assert app.state.item_store is None


async def test_lifespan_fails_fast_when_document_store_unreachable(
    settings, monkeypatch, user_store,
):
    user_store.available = False
    _patch_mongo(monkeypatch, user_store)
    app = create_app(settings)

    with pytest.raises(StoreUnavailableError):
        async with app.router.lifespan_context(app):
            pass
    assert user_store.closed


async def test_lifespan_fails_fast_when_relational_store_unreachable(
    settings, monkeypatch, user_store, tmp_path,
):
    settings.database_url = f"sqlite+aiosqlite:///{tmp_path}/missing/dir/db.sqlite3"
    _patch_mongo(monkeypatch, user_store)
    app = create_app(settings)

    with pytest.raises(StoreUnavailableError):
        async with app.router.lifespan_context(app):
            pass
    assert user_store.closed


async def test_lifespan_logs_and_aborts_on_malformed_mongo_uri(settings, caplog):
    settings.mongo_uri = "not-a-mongo-uri"
    app = create_app(settings)

    with pytest.raises(StoreUnavailableError):
        async with app.router.lifespan_context(app):
            pass
    assert "Startup aborted" in caplog.text


async def test_lifespan_keeps_injected_stores_open(settings, user_store, item_store):
    app = create_app(settings, user_store=user_store, item_store=item_store)
    async with app.router.lifespan_context(app):
        assert app.state.user_store is user_store
    assert not user_store.closed


async def test_unhandled_exception_returns_500_envelope(settings, user_store, item_store):
    user_store.fail_with = RuntimeError("secret connection string mongodb://u:p@h")
    app = create_app(settings, user_store=user_store, item_store=item_store)
    async with AsyncClient(
        transport=ASGITransport(app=app, raise_app_exceptions=False),
        base_url="http://test",
    ) as c:
        res = await c.get("/users")
    assert res.status_code == 500
    assert res.json()["error"]["code"] == "INTERNAL_ERROR"
    assert "secret" not in res.text


async def test_unknown_route_uses_error_envelope(client):
    res = await client.get("/nope")
    assert res.status_code == 404
    assert res.json()["error"]["code"] == "NOT_FOUND"


async def test_wrong_method_uses_error_envelope(client):
    res = await client.delete("/users")
    assert res.status_code == 405
    assert res.json()["error"]["code"] == "METHOD_NOT_ALLOWED"


async def test_slow_request_times_out_with_504(settings, user_store, item_store):
    settings.request_timeout_seconds = 0.05

    async def _slow(limit):
        await asyncio.sleep(1)
        return []
    user_store.list_all = _slow

    app = create_app(settings, user_store=user_store, item_store=item_store)
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        res = await c.get("/users")
    assert res.status_code == 504
    assert res.json()["error"]["code"] == "REQUEST_TIMEOUT"
