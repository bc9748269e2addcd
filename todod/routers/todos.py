import logging
import re
from typing import Annotated

from fastapi import APIRouter, Depends, Path, Request, status

from todod import responders
from todod.errors import NotFoundError, StorageError, ValidationError
from todod.models import TodoCreate, TodoResponse, TodoUpdate
from todod.responders import ErrorEnvelope, SuccessEnvelope
from todod.services.todo_store import TodoStore

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/todo",
    tags=["todo"],
    responses={
        400: {"model": ErrorEnvelope},
        500: {"model": ErrorEnvelope},
    },
)


def get_store(request: Request) -> TodoStore:
    return request.app.state.store


_ID_PATTERN = re.compile(r"[+-]?[0-9]+")
_ID_MIN = -(2**63)
_ID_MAX = 2**63 - 1


def parse_todo_id(todo_id: str = Path()) -> int:
    """Parse a path id as a signed 64-bit integer."""
    if not _ID_PATTERN.fullmatch(todo_id):
        raise ValidationError(f"invalid todo id {todo_id!r}")
    value = int(todo_id)
    if not _ID_MIN <= value <= _ID_MAX:
        raise ValidationError(f"todo id {todo_id!r} out of range")
    return value


TodoId = Annotated[int, Depends(parse_todo_id)]


@router.get("/", response_model=SuccessEnvelope[list[TodoResponse]])
async def list_todos(store: TodoStore = Depends(get_store)):
    """List all todos"""
    todos = await store.get_all_todos()
    return responders.success(status.HTTP_200_OK, todos)


@router.get(
    "/{todo_id}",
    response_model=SuccessEnvelope[TodoResponse],
    responses={404: {"model": ErrorEnvelope}},
)
async def get_todo(todo_id: TodoId, store: TodoStore = Depends(get_store)):
    """Get a specific todo by ID"""
    todo = await store.get_todo(todo_id)
    if todo is None:
        raise NotFoundError(f"todo {todo_id} not found")
    return responders.success(status.HTTP_200_OK, todo)


@router.post(
    "/",
    response_model=SuccessEnvelope[TodoResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_todo(todo_data: TodoCreate, store: TodoStore = Depends(get_store)):
    """Create a new todo"""
    todo = await store.create_todo(todo_data.name, todo_data.description)
    return responders.success(status.HTTP_201_CREATED, todo)


@router.put("/{todo_id}", response_model=SuccessEnvelope[TodoResponse])
async def update_todo(
    todo_id: TodoId, todo_data: TodoUpdate, store: TodoStore = Depends(get_store)
):
    """Replace a todo's name and description"""
    if todo_data.id and todo_data.id != todo_id:
        raise ValidationError("id does not match")
    todo = await store.update_todo(todo_id, todo_data.name, todo_data.description)
    return responders.success(status.HTTP_200_OK, todo)


@router.delete("/{todo_id}", response_model=SuccessEnvelope[None])
async def delete_todo(todo_id: TodoId, store: TodoStore = Depends(get_store)):
    """Delete a todo; deleting a missing todo is not an error"""
    try:
        await store.delete_todo(todo_id)
    except StorageError as e:
        # storage failures on delete are reported as 400
        logger.error(f"Delete of todo {todo_id} failed: {e}")
        return responders.error(status.HTTP_400_BAD_REQUEST, e)
    return responders.success(status.HTTP_200_OK, None)
