import asyncio
import logging
from contextlib import asynccontextmanager

from sqlalchemy import delete, insert, text, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine
from sqlmodel import select

from todod.core.config import Settings
from todod.database import create_engine
from todod.errors import StorageError
from todod.models import Todo

logger = logging.getLogger(__name__)

# backoff between startup connectivity probes, in seconds
PROBE_DELAYS = (0.05, 0.1, 0.2, 0.6, 1.2)
PROBE_TIMEOUT = 3.0


def _to_todo(row) -> Todo:
    return Todo(id=row.id, name=row.name, description=row.description)


class TodoStore:
    """Data access for the ``todos`` table.

    Every operation issues exactly one statement in its own transaction.
    The store owns the engine (and therefore the connection pool) until
    :meth:`close` is called.
    """

    def __init__(self, engine: AsyncEngine):
        self._engine = engine

    @classmethod
    def from_settings(cls, settings: Settings) -> "TodoStore":
        return cls(create_engine(settings))

    @property
    def engine(self) -> AsyncEngine:
        return self._engine

    @asynccontextmanager
    async def _transaction(self):
        try:
            async with self._engine.begin() as conn:
                yield conn
        except StorageError:
            raise
        except Exception as e:
            # drivers raise outside SQLAlchemyError too, e.g. OverflowError
            logger.error(f"Storage error: {e}")
            raise StorageError(str(e)) from e

    async def get_all_todos(self) -> list[Todo]:
        query = select(Todo.id, Todo.name, Todo.description)
        async with self._transaction() as conn:
            result = await conn.execute(query)
            return [_to_todo(row) for row in result]

    async def get_todo(self, todo_id: int) -> Todo | None:
        query = select(Todo.id, Todo.name, Todo.description).where(Todo.id == todo_id)
        async with self._transaction() as conn:
            result = await conn.execute(query)
            row = result.first()
        if row is None:
            return None
        return _to_todo(row)

    async def create_todo(self, name: str, description: str) -> Todo:
        stmt = (
            insert(Todo)
            .values(name=name, description=description)
            .returning(Todo.id)
        )
        async with self._transaction() as conn:
            result = await conn.execute(stmt)
            todo_id = result.scalar_one()
        return Todo(id=todo_id, name=name, description=description)

    async def update_todo(self, todo_id: int, name: str, description: str) -> Todo:
        stmt = (
            update(Todo)
            .where(Todo.id == todo_id)
            .values(name=name, description=description)
            .returning(Todo.id, Todo.name, Todo.description)
        )
        async with self._transaction() as conn:
            result = await conn.execute(stmt)
            row = result.first()
        if row is None:
            raise StorageError(f"todo {todo_id} does not exist")
        return _to_todo(row)

    async def delete_todo(self, todo_id: int) -> None:
        stmt = delete(Todo).where(Todo.id == todo_id)
        async with self._transaction() as conn:
            await conn.execute(stmt)

    async def ping(self) -> None:
        async with self._transaction() as conn:
            await conn.execute(text("SELECT 1"))

    async def wait_until_ready(
        self, delays: tuple[float, ...] = PROBE_DELAYS, timeout: float = PROBE_TIMEOUT
    ) -> None:
        """Ping the database, backing off between failed attempts.

        Raises:
            StorageError: when every attempt failed
        """
        last_error = "no attempts made"
        for delay in delays:
            try:
                await asyncio.wait_for(self.ping(), timeout)
                logger.info("db connection established")
                return
            except StorageError as e:
                last_error = str(e)
            except asyncio.TimeoutError:
                last_error = f"ping timed out after {timeout}s"
            logger.warning(f"db ping failed, retrying in {delay}s: {last_error}")
            await asyncio.sleep(delay)
        raise StorageError(f"could not ping db: {last_error}")

    async def close(self) -> None:
        logger.info("db pool closing")
        try:
            await self._engine.dispose()
        except (SQLAlchemyError, OSError) as e:
            logger.error(f"could not close db pool: {e}")
        else:
            logger.info("db pool closed")
