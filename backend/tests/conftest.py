"""Shared test fixtures - explicit settings, fake user store, SQLite item store, app client.

Invariants:
    - Every test gets a fresh in-memory SQLite database for items
    - Users go through FakeUserStore (same contract as MongoUserStore, no server)
    - Stores are injected into create_app(); nothing is patched at module level

Design Decisions:
    - SQLite in-memory: real SQL path for items, no external dependency
    - FakeUserStore raises the same roster.core.errors types the Mongo adapter does,
      so route error mapping is exercised without a network
"""

import itertools
from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient

from roster.config import Settings
from roster.core.errors import StoreUnavailableError
from roster.infrastructure.database import SqlItemStore, create_engine_from_url
from roster.main import create_app


class FakeUserStore:
    """In-memory UserStore. Set `available = False` to simulate an outage,
    or `fail_with` to an exception instance raised by every data call."""

    def __init__(self):
        self.records: list[dict[str, Any]] = []
        self.available = True
        self.fail_with: Exception | None = None
        self.closed = False
        self._ids = itertools.count(1)

    def _check(self, operation: str):
        if not self.available:
            raise StoreUnavailableError("users", operation)
        if self.fail_with is not None:
            raise self.fail_with

    async def connect(self) -> None:
        self._check("connect")

    async def close(self) -> None:
        self.closed = True

    async def ping(self) -> bool:
        return self.available

    async def list_all(self, limit: int) -> list[dict[str, Any]]:
        self._check("list")
        return [dict(r) for r in self.records[:limit]]

    async def insert(self, record: dict[str, Any]) -> dict[str, Any]:
        self._check("insert")
        created = {
            "id": f"{next(self._ids):024x}",
            "name": record["name"],
            "email": record["email"],
        }
        self.records.append(created)
        return dict(created)

    async def find_by_email(self, email: str) -> dict[str, Any] | None:
        self._check("find")
        return next((dict(r) for r in self.records if r["email"] == email), None)

    async def delete_all(self) -> int:
        self._check("delete")
        count = len(self.records)
        self.records.clear()
        return count


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        mongo_uri="mongodb://localhost:27017/roster_test",
        database_url="sqlite+aiosqlite:///:memory:",
        log_format="text",
        request_timeout_seconds=5.0,
    )


@pytest.fixture
def user_store():
    return FakeUserStore()


@pytest.fixture
async def item_store():
    store = SqlItemStore(create_engine_from_url("sqlite+aiosqlite:///:memory:"))
    await store.create_schema()
    yield store
    await store.close()


@pytest.fixture
def app(settings, user_store, item_store):
    return create_app(settings, user_store=user_store, item_store=item_store)


@pytest.fixture
async def client(app):
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c
