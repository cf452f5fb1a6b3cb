from contextlib import AsyncExitStack

from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine, create_async_engine
from sqlalchemy.orm import declarative_base

from traindb.core.environment import get_database_url


DATABASE_URL = get_database_url()

engine = create_async_engine(
    DATABASE_URL,
    echo=False,
    future=True,
)

Base = declarative_base()


class ConnectionScope:
    """
    Request-scoped set of database connections.

    Every call to `connect()` checks out a fresh connection from the engine so that
    independent queries can run concurrently. All connections are released exactly
    once, when the scope exits, whether the request succeeded or failed.
    """

    def __init__(self, engine: AsyncEngine):
        self.engine = engine
        self._stack = AsyncExitStack()
        self.opened = 0

    async def connect(self) -> AsyncConnection:
        conn = await self._stack.enter_async_context(self.engine.connect())
        self.opened += 1
        return conn

    async def __aenter__(self) -> "ConnectionScope":
        await self._stack.__aenter__()
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return await self._stack.__aexit__(exc_type, exc, tb)


async def get_db():
    async with ConnectionScope(engine) as scope:
        yield scope
