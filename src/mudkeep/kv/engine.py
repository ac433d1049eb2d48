"""Store construction from settings."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog

from mudkeep.config import Settings, get_settings

from .base import KeyValueStore
from .redis_store import RedisStore
from .sql_store import SQLStore

logger = structlog.get_logger(__name__)


def create_store(settings: Settings | None = None) -> KeyValueStore:
    """
    Create the key-value store selected by the settings.

    Args:
        settings: Settings to use. Uses the cached settings when omitted.

    Returns:
        An uninitialized store; call ``initialize()`` before use
    """
    settings = settings or get_settings()

    if settings.store_backend == "sql":
        store: KeyValueStore = SQLStore.from_url(settings.database_url, echo=settings.debug)
    else:
        store = RedisStore.from_url(
            settings.redis_url,
            socket_timeout=settings.redis_socket_timeout,
        )

    logger.info("store_created", backend=settings.store_backend)
    return store


@asynccontextmanager
async def open_store(settings: Settings | None = None) -> AsyncGenerator[KeyValueStore, None]:
    """
    Async context manager yielding an initialized store.

    Yields:
        A ready-to-use key-value store, closed on exit

    Example:
        async with open_store() as store:
            world = World(store)
            await world.areas.get_areas()
    """
    store = create_store(settings)
    try:
        await store.initialize()
        yield store
    finally:
        await store.close()
