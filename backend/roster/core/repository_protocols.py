"""Store Protocols - contracts between the routes and the persistence adapters.

Invariants:
    - Routes depend on these Protocols only, never on pymongo or SQLAlchemy types
    - Records cross the boundary as plain dicts keyed by public field names
    - Adapters raise roster.core.errors types, never driver exceptions

Design Decisions:
    - Protocol over ABC: structural subtyping, test fakes need no inheritance
"""

from typing import Any, Protocol


class UserStore(Protocol):
    """Contract for user persistence (document store)."""
    async def connect(self) -> None: ...
    async def close(self) -> None: ...
    async def ping(self) -> bool: ...
    async def list_all(self, limit: int) -> list[dict[str, Any]]: ...
    async def insert(self, record: dict[str, Any]) -> dict[str, Any]: ...
    async def find_by_email(self, email: str) -> dict[str, Any] | None: ...
    async def delete_all(self) -> int: ...


class ItemStore(Protocol):
    """Contract for item persistence (relational store)."""
    async def connect(self) -> None: ...
    async def close(self) -> None: ...
    async def ping(self) -> bool: ...
    async def create_schema(self) -> None: ...
    async def list_all(self, limit: int) -> list[dict[str, Any]]: ...
    async def insert(self, record: dict[str, Any]) -> dict[str, Any]: ...
