# credstore/core/context.py
"""
Application context.

One AppContext is built at process start and passed to whatever needs
configuration, the store connection or the loaded entities.
"""
from dataclasses import dataclass, field
from typing import Dict, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from credstore.core.config import Settings
from credstore.core.errors import StoreConnectionError
from credstore.core.hooks import HookRegistry
from credstore.db.session import create_engine_from_settings, create_session_factory


@dataclass
class AppContext:
    settings: Settings
    engine: AsyncEngine
    session_factory: async_sessionmaker[AsyncSession]
    hooks: HookRegistry = field(default_factory=HookRegistry)
    # entity name -> mapped class, filled once the store is ready
    entities: Dict[str, type] = field(default_factory=dict)
    # name of the entity most recently loaded from the store
    last_loaded: Optional[str] = None
    quiet: bool = False

    @classmethod
    def create(cls, settings: Settings, hooks: Optional[HookRegistry] = None, quiet: bool = False) -> "AppContext":
        """
        Build the context and its engine.

        Raises:
            StoreConnectionError: no engine can be built for DATABASE_URL
                (driver not installed, sync-only dialect, malformed URL)
        """
        try:
            engine = create_engine_from_settings(settings)
        except (ImportError, SQLAlchemyError, ValueError) as e:
            raise StoreConnectionError(
                f"DB CONNECTION ERR: cannot open store: {type(e).__name__}: {e}"
            ) from e
        return cls(
            settings=settings,
            engine=engine,
            session_factory=create_session_factory(engine),
            hooks=hooks or HookRegistry(),
            quiet=quiet,
        )

    @property
    def is_ready(self) -> bool:
        return bool(self.entities)

    async def dispose(self) -> None:
        await self.engine.dispose()
