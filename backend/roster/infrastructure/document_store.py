"""Document Store - MongoDB user store adapter over pymongo's async client.

Invariants:
    - One AsyncMongoClient per store; its pool is shared by all requests
    - Documents leave this module as {"id", "name", "email"} with id = str(ObjectId)
    - All pymongo exceptions mapped to roster.core.errors types
    - Listing is always bounded by an explicit limit

Design Decisions:
    - Client is passed in (from_uri builds one from settings) so tests can hand
      in a mocked client and the app never holds a module-level connection
    - serverSelectionTimeoutMS bounds every call: an unreachable server fails
      fast with StoreUnavailableError instead of hanging the request
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator

from pymongo import AsyncMongoClient
from pymongo.errors import (
    ConfigurationError, ConnectionFailure, DuplicateKeyError, ExecutionTimeout,
    PyMongoError,
)

from roster.core.errors import (
    DuplicateRecordError, StoreQueryError, StoreUnavailableError,
)

logger = logging.getLogger(__name__)

STORE_NAME = "users"
DEFAULT_DATABASE = "demo"
COLLECTION = "users"

# Documents written by other tools may lack fields; only these are listed.
WELL_FORMED = {"name": {"$type": "string"}, "email": {"$type": "string"}}


def is_well_formed(doc: dict[str, Any]) -> bool:
    return isinstance(doc.get("name"), str) and isinstance(doc.get("email"), str)


def to_public(doc: dict[str, Any]) -> dict[str, Any]:
    """Map a stored user document to its public shape."""
    return {
        "id": str(doc["_id"]),
        "name": doc["name"],
        "email": doc["email"],
    }


class MongoUserStore:
    """User store over a single MongoDB collection."""

    def __init__(self, client: AsyncMongoClient, database: str | None = None):
        self._client = client
        if database:
            db = client[database]
        else:
            db = client.get_default_database(default=DEFAULT_DATABASE)
        self._collection = db[COLLECTION]

    @classmethod
    def from_uri(
        cls, uri: str, database: str | None = None, timeout_ms: int = 5000,
    ) -> "MongoUserStore":
        try:
            client = AsyncMongoClient(
                uri,
                serverSelectionTimeoutMS=timeout_ms,
                connectTimeoutMS=timeout_ms,
            )
        except ConfigurationError as e:
            logger.error(f"Mongo configuration error: {e}", extra={"store": STORE_NAME})
            raise StoreUnavailableError(STORE_NAME, "configure")
        return cls(client, database)

    @asynccontextmanager
    async def _guard(self, operation: str) -> AsyncGenerator[None, None]:
        """Translate pymongo failures into the store error taxonomy."""
        try:
            yield
        except DuplicateKeyError as e:
            logger.warning(f"Mongo duplicate key: {e}", extra={"store": STORE_NAME})
            raise DuplicateRecordError(STORE_NAME)
        except (ConnectionFailure, ExecutionTimeout) as e:
            logger.error(f"Mongo unavailable: {e}", extra={"store": STORE_NAME})
            raise StoreUnavailableError(STORE_NAME, operation)
        except PyMongoError as e:
            logger.error(f"Mongo error: {e}", extra={"store": STORE_NAME})
            raise StoreQueryError(STORE_NAME, operation)

    async def connect(self) -> None:
        """Verify the server is reachable; raises StoreUnavailableError otherwise."""
        async with self._guard("connect"):
            await self._client.admin.command("ping")
        logger.info("Document store connected", extra={"store": STORE_NAME})

    async def close(self) -> None:
        await self._client.close()

    async def ping(self) -> bool:
        """Check server reachability (for readiness probes)."""
        try:
            async with self._guard("ping"):
                await self._client.admin.command("ping")
            return True
        except (StoreUnavailableError, StoreQueryError) as e:
            logger.error(f"Mongo health check failed: {e}")
            return False

    async def list_all(self, limit: int) -> list[dict[str, Any]]:
        async with self._guard("list"):
            cursor = self._collection.find(
                WELL_FORMED, sort=[("_id", 1)], limit=limit,
            )
            docs = await cursor.to_list(length=limit)
        users = []
        for doc in docs:
            if not is_well_formed(doc):
                logger.warning(
                    f"Skipping malformed user document {doc.get('_id')}",
                    extra={"store": STORE_NAME},
                )
                continue
            users.append(to_public(doc))
        return users

    async def insert(self, record: dict[str, Any]) -> dict[str, Any]:
        doc = {"name": record["name"], "email": record["email"]}
        async with self._guard("insert"):
            result = await self._collection.insert_one(dict(doc))
        logger.info(f"User {result.inserted_id} created", extra={"store": STORE_NAME})
        return {"id": str(result.inserted_id), **doc}

    async def find_by_email(self, email: str) -> dict[str, Any] | None:
        async with self._guard("find"):
            doc = await self._collection.find_one({"email": email})
        return to_public(doc) if doc and is_well_formed(doc) else None

    async def delete_all(self) -> int:
        """Bulk delete; only used to reset state in tests and tooling."""
        async with self._guard("delete"):
            result = await self._collection.delete_many({})
        return result.deleted_count
