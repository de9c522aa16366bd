import asyncio
import logging
import sys

from credstore.core.config import get_settings
from credstore.core.context import AppContext
from credstore.core.errors import StoreConnectionError
from credstore.db.bootstrap import connect_store

logger = logging.getLogger("init_db")


async def init_models() -> int:
    settings = get_settings()
    ctx = None
    try:
        ctx = AppContext.create(settings)
        entities = await connect_store(ctx)
        logger.info("Tables ready: %s", ", ".join(entities))
        return 0
    except StoreConnectionError as e:
        logger.error("Start-up aborted: %s", e)
        return 1
    finally:
        if ctx is not None:
            await ctx.dispose()


if __name__ == "__main__":
    logging.basicConfig(level=get_settings().LOG_LEVEL)
    sys.exit(asyncio.run(init_models()))
