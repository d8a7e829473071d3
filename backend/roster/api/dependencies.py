"""Route Dependencies - resolve the store handles attached to the running app.

Invariants:
    - Stores live on app.state, set by create_app() or its lifespan, never on a module
    - A missing store resolves to StoreUnavailableError (503), not AttributeError (500)
"""

from fastapi import Request

from roster.config import Settings
from roster.core.errors import StoreUnavailableError
from roster.core.repository_protocols import ItemStore, UserStore


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_user_store(request: Request) -> UserStore:
    store = getattr(request.app.state, "user_store", None)
    if store is None:
        raise StoreUnavailableError("users", "resolve")
    return store


def get_item_store(request: Request) -> ItemStore:
    store = getattr(request.app.state, "item_store", None)
    if store is None:
        raise StoreUnavailableError("items", "resolve")
    return store
