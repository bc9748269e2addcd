"""
pytest configuration and fixtures.
"""

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from todod.core.config import Settings
from todod.database import create_db_and_tables
from todod.errors import StorageError
from todod.main import create_app
from todod.models import Todo
from todod.services.todo_store import TodoStore


def _copy(todo: Todo) -> Todo:
    return Todo(id=todo.id, name=todo.name, description=todo.description)


class FakeTodoStore:
    """In-memory stand-in for TodoStore.

    Setting ``fail_with`` makes every operation raise StorageError.
    """

    def __init__(self):
        self.todos: dict[int, Todo] = {}
        self.next_id = 1
        self.fail_with: str | None = None

    def _check(self):
        if self.fail_with:
            raise StorageError(self.fail_with)

    async def get_all_todos(self) -> list[Todo]:
        self._check()
        return [_copy(todo) for todo in self.todos.values()]

    async def get_todo(self, todo_id: int) -> Todo | None:
        self._check()
        todo = self.todos.get(todo_id)
        return _copy(todo) if todo else None

    async def create_todo(self, name: str, description: str) -> Todo:
        self._check()
        todo = Todo(id=self.next_id, name=name, description=description)
        self.todos[todo.id] = todo
        self.next_id += 1
        return _copy(todo)

    async def update_todo(self, todo_id: int, name: str, description: str) -> Todo:
        self._check()
        if todo_id not in self.todos:
            raise StorageError(f"todo {todo_id} does not exist")
        self.todos[todo_id] = Todo(id=todo_id, name=name, description=description)
        return _copy(self.todos[todo_id])

    async def delete_todo(self, todo_id: int) -> None:
        self._check()
        self.todos.pop(todo_id, None)


@pytest.fixture
def store() -> FakeTodoStore:
    return FakeTodoStore()


@pytest.fixture
def client(store):
    with TestClient(create_app(store=store)) as test_client:
        yield test_client


@pytest.fixture
def sqlite_settings(tmp_path) -> Settings:
    return Settings(
        dsn=f"sqlite+aiosqlite:///{tmp_path / 'todo.db'}",
        max_open_conns=2,
        max_idle_conns=1,
    )


@pytest_asyncio.fixture
async def sqlite_store(sqlite_settings):
    todo_store = TodoStore.from_settings(sqlite_settings)
    await create_db_and_tables(todo_store.engine)
    yield todo_store
    await todo_store.close()
