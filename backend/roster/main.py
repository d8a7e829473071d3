"""Roster API - FastAPI application factory.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Store handles are explicit: passed to create_app() or built by the lifespan
      from Settings, and kept on app.state (no module-level connection)
    - A store the lifespan builds must connect, or startup fails with a logged
      diagnostic (uvicorn then exits non-zero)
    - Injected stores are used as given and are not closed by the app

Design Decisions:
    - Factory over a module-level app: behavior is a function of its arguments,
      so tests inject fakes instead of toggling an environment flag
    - Lifespan over @app.on_event for startup/shutdown
"""

import logging
from contextlib import AsyncExitStack, asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from roster.api.error_handlers import register_error_handlers
from roster.api.middleware import RequestContextMiddleware
from roster.api.routes import health, items, users
from roster.config import Settings, get_settings
from roster.core.errors import RosterError
from roster.core.repository_protocols import ItemStore, UserStore
from roster.infrastructure.database import SqlItemStore
from roster.infrastructure.document_store import MongoUserStore
from roster.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


async def _open_stores(app: FastAPI, settings: Settings, stack: AsyncExitStack):
    """Build and connect whichever stores were not injected."""
    if app.state.user_store is None:
        user_store = MongoUserStore.from_uri(
            settings.mongo_uri,
            database=settings.mongo_database,
            timeout_ms=settings.mongo_timeout_ms,
        )
        stack.push_async_callback(user_store.close)
        await user_store.connect()
        app.state.user_store = user_store

    if app.state.item_store is None:
        item_store = SqlItemStore.from_url(
            settings.database_url,
            pool_size=settings.database_pool_size,
            max_overflow=settings.database_max_overflow,
        )
        stack.push_async_callback(item_store.close)
        await item_store.connect()
        if settings.database_create_schema:
            await item_store.create_schema()
        app.state.item_store = item_store


def create_app(
    settings: Settings | None = None,
    *,
    user_store: UserStore | None = None,
    item_store: ItemStore | None = None,
) -> FastAPI:
    """Build the application around explicit settings and store handles."""
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        setup_logging(settings.log_level, settings.log_format)
        async with AsyncExitStack() as stack:
            try:
                await _open_stores(app, settings, stack)
            except RosterError as e:
                logger.critical(
                    f"Startup aborted: {e.message}",
                    extra={"error_code": e.code},
                )
                raise
            logger.info("Roster API started")
            yield
            logger.info("Roster API shutting down")
        app.state.user_store = user_store
        app.state.item_store = item_store

    app = FastAPI(title="Roster API", version="1.0.0", lifespan=lifespan)
    app.state.settings = settings
    app.state.user_store = user_store
    app.state.item_store = item_store

    app.add_middleware(
        RequestContextMiddleware,
        timeout_seconds=settings.request_timeout_seconds,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health.router)
    app.include_router(users.router)
    app.include_router(items.router)

    register_error_handlers(app)
    return app
