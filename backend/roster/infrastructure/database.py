"""Relational Store - async SQLAlchemy engine and the item store adapter.

Invariants:
    - Every write runs in engine.begin(): commit on success, rollback on exception
    - Connection pool uses pool_pre_ping for stale connection detection
    - All SQLAlchemy/driver exceptions mapped to roster.core.errors types
    - Listing is always bounded by an explicit LIMIT

Design Decisions:
    - Core insert/select over ORM sessions: items need no identity map, and
      inserted_primary_key works the same on SQLite and PostgreSQL
    - Engine is passed in (from_url builds one from settings): tests hand in an
      in-memory SQLite engine instead of patching module state
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator

from sqlalchemy import insert, select, text
from sqlalchemy.engine import make_url
from sqlalchemy.exc import (
    DBAPIError, IntegrityError, OperationalError, SQLAlchemyError,
)
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine, create_async_engine

from roster.core.errors import (
    DuplicateRecordError, StoreQueryError, StoreUnavailableError,
)
from roster.db.base import Base
from roster.models.item import Item

logger = logging.getLogger(__name__)

STORE_NAME = "items"
items_table = Item.__table__


def create_engine_from_url(
    database_url: str, pool_size: int = 5, max_overflow: int = 10,
) -> AsyncEngine:
    """Create the async engine; pool sizing only applies to server databases."""
    kwargs: dict[str, Any] = {"pool_pre_ping": True}
    if make_url(database_url).get_backend_name() != "sqlite":
        kwargs.update(
            pool_size=pool_size, max_overflow=max_overflow, pool_recycle=3600,
        )
    return create_async_engine(database_url, **kwargs)


def _is_unique_violation(exc: IntegrityError) -> bool:
    """SQLSTATE 23505 (asyncpg) or SQLite's UNIQUE constraint message."""
    if getattr(exc.orig, "sqlstate", None) == "23505":
        return True
    return "UNIQUE constraint failed" in str(exc.orig)


class SqlItemStore:
    """Item store over a SQLAlchemy async engine."""

    def __init__(self, engine: AsyncEngine):
        self.engine = engine

    @classmethod
    def from_url(
        cls, database_url: str, pool_size: int = 5, max_overflow: int = 10,
    ) -> "SqlItemStore":
        return cls(create_engine_from_url(database_url, pool_size, max_overflow))

    @asynccontextmanager
    async def _transaction(
        self, operation: str,
    ) -> AsyncGenerator[AsyncConnection, None]:
        """Provide a connection in a transaction; translate driver failures."""
        try:
            async with self.engine.begin() as conn:
                yield conn
        except IntegrityError as e:
            if _is_unique_violation(e):
                logger.warning(f"DB unique violation: {e}", extra={"store": STORE_NAME})
                raise DuplicateRecordError(STORE_NAME)
            logger.error(f"DB integrity error: {e}", extra={"store": STORE_NAME})
            raise StoreQueryError(STORE_NAME, operation)
        except (OperationalError, PoolTimeoutError, OSError) as e:
            logger.error(f"DB operational error: {e}", extra={"store": STORE_NAME})
            raise StoreUnavailableError(STORE_NAME, operation)
        except DBAPIError as e:
            logger.error(f"DB driver error: {e}", extra={"store": STORE_NAME})
            raise StoreQueryError(STORE_NAME, operation)
        except SQLAlchemyError as e:
            logger.error(f"SQLAlchemy error: {e}", extra={"store": STORE_NAME})
            raise StoreQueryError(STORE_NAME, operation)

    async def connect(self) -> None:
        """Verify connectivity once at startup."""
        async with self._transaction("connect") as conn:
            await conn.execute(text("SELECT 1"))
        logger.info("Relational store connected", extra={"store": STORE_NAME})

    async def create_schema(self) -> None:
        """Create the items table directly (dev and tests; alembic otherwise)."""
        async with self._transaction("create schema") as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def close(self) -> None:
        await self.engine.dispose()

    async def ping(self) -> bool:
        """Check database connectivity (for readiness probes)."""
        try:
            async with self._transaction("ping") as conn:
                await conn.execute(text("SELECT 1"))
            return True
        except (StoreUnavailableError, StoreQueryError) as e:
            logger.error(f"DB health check failed: {e}")
            return False

    async def list_all(self, limit: int) -> list[dict[str, Any]]:
        query = (
            select(items_table.c.id, items_table.c.name)
            .order_by(items_table.c.id)
            .limit(limit)
        )
        async with self._transaction("list") as conn:
            result = await conn.execute(query)
            return [dict(row) for row in result.mappings()]

    async def insert(self, record: dict[str, Any]) -> dict[str, Any]:
        async with self._transaction("insert") as conn:
            result = await conn.execute(
                insert(items_table).values(name=record["name"]),
            )
            item_id = result.inserted_primary_key[0]
        logger.info(f"Item {item_id} created", extra={"store": STORE_NAME})
        return {"id": item_id, "name": record["name"]}
