"""Seed the default admin user into the document store.

Idempotent: a user with ADMIN_EMAIL is created only if none exists.
Exit status 0 on success (created or already present), 1 on any store failure.
"""

import asyncio
import logging
import sys

from roster.config import Settings, get_settings
from roster.core.errors import RosterError
from roster.core.repository_protocols import UserStore
from roster.infrastructure.document_store import MongoUserStore
from roster.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)

ADMIN_NAME = "Admin"
ADMIN_EMAIL = "admin@example.com"


async def seed_admin(store: UserStore) -> bool:
    """Create the admin user if missing. Returns True if a user was created."""
    if await store.find_by_email(ADMIN_EMAIL):
        logger.info("Admin user already exists.")
        return False
    await store.insert({"name": ADMIN_NAME, "email": ADMIN_EMAIL})
    logger.info("Default admin user created.")
    return True


async def run(settings: Settings) -> int:
    store = MongoUserStore.from_uri(
        settings.mongo_uri,
        database=settings.mongo_database,
        timeout_ms=settings.mongo_timeout_ms,
    )
    try:
        await store.connect()
        await seed_admin(store)
    except RosterError as e:
        logger.error(f"Seeding failed: {e.message}", extra={"error_code": e.code})
        return 1
    finally:
        await store.close()
    return 0


def main() -> None:
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    sys.exit(asyncio.run(run(settings)))


if __name__ == "__main__":
    main()
