# credstore/db/loader.py
"""
Store start-up sequence.

StoreLoader connects to the database and loads the entity definitions
declared on Base. Progress is reported as a stream of typed events:

    StoreStarted -> EntityLoaded* -> StoreReady
    StoreStarted -> EntityLoaded* -> StoreFailed

Exactly one of StoreReady / StoreFailed ends the stream. Store failures
are never raised out of begin(); they arrive as StoreFailed.
"""
import asyncio
import enum
import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import AsyncIterator, Awaitable, Dict, List, Mapping, Optional, Type, TypeVar, Union

from sqlalchemy import inspect
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine

from credstore.core.errors import StoreConnectionError
from credstore.db.base import Base

logger = logging.getLogger(__name__)

T = TypeVar("T")


class LoaderState(str, enum.Enum):
    IDLE = "idle"
    CONNECTING = "connecting"
    LOADING_ENTITIES = "loading-entities"
    READY = "ready"
    FAILED = "failed"


@dataclass(frozen=True)
class StoreStarted:
    address: str


@dataclass(frozen=True)
class EntityLoaded:
    name: str
    definition: type


@dataclass(frozen=True)
class StoreFailed:
    error: StoreConnectionError

    @property
    def message(self) -> str:
        return str(self.error)


@dataclass(frozen=True)
class StoreReady:
    entities: Mapping[str, type]


StoreEvent = Union[StoreStarted, EntityLoaded, StoreFailed, StoreReady]


class StoreLoader:
    """
    One-shot connect-and-load sequence for a store.

    Args:
        engine: Engine for the store; the loader borrows it, it does not
            dispose it
        base: Declarative base whose mapped classes are the entities
        connect_timeout: Seconds allowed for connecting and preparing the
            schema. None waits as long as the driver does.
        create_tables: Create missing tables. When False, every entity's
            table must already exist or the sequence fails.
    """

    def __init__(
        self,
        engine: AsyncEngine,
        base: Type[Base] = Base,
        connect_timeout: Optional[float] = None,
        create_tables: bool = True,
    ):
        self.engine = engine
        self.base = base
        self.connect_timeout = connect_timeout
        self.create_tables = create_tables
        self.state = LoaderState.IDLE

    @property
    def address(self) -> str:
        return self.engine.url.render_as_string(hide_password=True)

    def entity_definitions(self) -> Dict[str, type]:
        """Mapped classes keyed by table name, in declaration order."""
        by_table = {m.local_table.name: m.class_ for m in self.base.registry.mappers}
        return {name: by_table[name] for name in self.base.metadata.tables if name in by_table}

    def begin(self) -> AsyncIterator[StoreEvent]:
        """
        Start the sequence and return the stream of lifecycle events.

        May only be called once; a second call raises RuntimeError
        immediately.
        """
        if self.state is not LoaderState.IDLE:
            raise RuntimeError(f"StoreLoader already used (state={self.state.value})")

        self.state = LoaderState.CONNECTING
        return self._run()

    async def _run(self) -> AsyncIterator[StoreEvent]:
        yield StoreStarted(address=self.address)

        entities: Dict[str, type] = {}
        try:
            conn = await self._bounded(self.engine.connect().start())
            try:
                await self._bounded(self._prepare(conn))
                self.state = LoaderState.LOADING_ENTITIES
                for name, definition in self.entity_definitions().items():
                    entities[name] = definition
                    yield EntityLoaded(name=name, definition=definition)
            finally:
                await conn.close()
        except Exception as e:
            self.state = LoaderState.FAILED
            logger.debug("Store start-up failed", exc_info=True)
            error = e if isinstance(e, StoreConnectionError) else StoreConnectionError(_describe(e))
            yield StoreFailed(error=error)
            return

        self.state = LoaderState.READY
        yield StoreReady(entities=MappingProxyType(entities))

    async def _bounded(self, work: Awaitable[T]) -> T:
        if self.connect_timeout is None:
            return await work
        return await asyncio.wait_for(work, timeout=self.connect_timeout)

    async def _prepare(self, conn: AsyncConnection) -> None:
        if self.create_tables:
            await conn.run_sync(self.base.metadata.create_all)
            await conn.commit()
            return

        names = list(self.entity_definitions())
        missing: List[str] = await conn.run_sync(
            lambda sync_conn: [n for n in names if not inspect(sync_conn).has_table(n)]
        )
        if missing:
            raise StoreConnectionError(f"missing tables: {', '.join(missing)}")


def _describe(exc: Exception) -> str:
    if isinstance(exc, asyncio.TimeoutError):
        return "timed out waiting for the store"
    return f"{type(exc).__name__}: {exc}"
