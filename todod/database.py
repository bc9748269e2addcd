from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlmodel import SQLModel

from todod.core.config import Settings
from todod.models import Todo  # noqa: F401


def create_engine(settings: Settings) -> AsyncEngine:
    """Create the async engine, sizing its pool from the connection settings.

    ``max_idle_conns`` connections are kept in the pool and up to
    ``max_open_conns`` may be open at once. A zero lifetime means
    connections are never recycled.
    """
    return create_async_engine(
        settings.dsn,
        echo=False,
        pool_size=settings.max_idle_conns,
        max_overflow=settings.max_open_conns - settings.max_idle_conns,
        pool_recycle=int(settings.conn_max_lifetime.total_seconds()) or -1,
    )


# Helper function to create tables (optional, useful for testing)
async def create_db_and_tables(engine: AsyncEngine):
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
