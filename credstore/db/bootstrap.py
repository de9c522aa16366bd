# credstore/db/bootstrap.py
import logging
from typing import Mapping

from credstore.core.context import AppContext
from credstore.core.errors import StoreConnectionError
from credstore.core.hooks import POST_ENTITIES, PRE_ENTITIES
from credstore.db.loader import EntityLoaded, StoreFailed, StoreLoader, StoreReady, StoreStarted

logger = logging.getLogger(__name__)


async def connect_store(ctx: AppContext, create_tables: bool = True) -> Mapping[str, type]:
    """
    Connect the context's store and load its entities.

    Fires PRE_ENTITIES before connecting and POST_ENTITIES once every
    entity is loaded. On success the entity mapping is stored on
    ctx.entities and returned.

    Raises:
        StoreConnectionError: the store could not be reached or loaded.
            Start-up must not continue.
    """
    # Import models so every entity is registered on Base
    import credstore.models  # noqa: F401

    log = logger.debug if ctx.quiet else logger.info

    await ctx.hooks.fire(PRE_ENTITIES, ctx)

    loader = StoreLoader(
        ctx.engine,
        connect_timeout=ctx.settings.DATABASE_CONNECT_TIMEOUT,
        create_tables=create_tables,
    )
    async for event in loader.begin():
        if isinstance(event, StoreStarted):
            log("[db] Connecting to %s", event.address)
        elif isinstance(event, EntityLoaded):
            ctx.last_loaded = event.name
            logger.debug("[db] Loaded entity %s -> %s", event.name, event.definition.__name__)
        elif isinstance(event, StoreFailed):
            logger.error("[db] DB CONNECTION ERR: %s", event.message)
            raise StoreConnectionError(f"DB CONNECTION ERR: {event.message}") from event.error
        elif isinstance(event, StoreReady):
            ctx.entities = dict(event.entities)
            await ctx.hooks.fire(POST_ENTITIES, ctx)
            log("[schm] %s", ", ".join(event.entities))

    return ctx.entities
