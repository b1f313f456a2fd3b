from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, status

from ..repositories import Repository, get_repository
from ..schemas import (
    ErrorOut,
    TodoCreate,
    TodoEnvelope,
    TodoListEnvelope,
    TodoOut,
    TodoUpdate,
)
from ..services import TodoService

router = APIRouter(
    prefix="/api/todos",
    tags=["todos"],
)


def get_todo_service(repo: Repository = Depends(get_repository)) -> TodoService:
    """
    Dependency building the service over the configured repository.
    """
    return TodoService(repo)


# PUBLIC_INTERFACE
@router.post(
    "",
    response_model=TodoEnvelope,
    status_code=status.HTTP_201_CREATED,
    summary="Create Todo",
    description="Create a new Todo placed above every existing one.",
    responses={
        201: {"description": "Todo created successfully"},
        400: {"model": ErrorOut, "description": "Validation error"},
    },
)
def create_todo(payload: TodoCreate, svc: TodoService = Depends(get_todo_service)) -> TodoEnvelope:
    """
    Create a new Todo.
    """
    created = svc.create(payload.value)
    return TodoEnvelope(todo=TodoOut(**created))


# PUBLIC_INTERFACE
@router.get(
    "",
    response_model=TodoListEnvelope,
    summary="List Todos",
    description="List every todo sorted by order, highest first.",
    responses={200: {"description": "List retrieved successfully"}},
)
def list_todos(svc: TodoService = Depends(get_todo_service)) -> TodoListEnvelope:
    return TodoListEnvelope(todos=[TodoOut(**it) for it in svc.list()])


# PUBLIC_INTERFACE
@router.patch(
    "/{todoId}",
    summary="Update Todo",
    description=(
        "Partially update a Todo. Moving a todo to an order held by another todo "
        "swaps the two orders. `done` marks the todo done (true) or open (false)."
    ),
    responses={
        200: {"description": "Todo updated"},
        404: {"model": ErrorOut, "description": "Todo not found"},
    },
)
def patch_todo(
    todoId: str,
    payload: Optional[TodoUpdate] = None,
    svc: TodoService = Depends(get_todo_service),
) -> dict:
    # A request without a body is an empty update
    svc.update(todoId, payload or TodoUpdate())
    return {}


# PUBLIC_INTERFACE
@router.delete(
    "/{todoId}",
    summary="Delete Todo",
    description="Delete a Todo item by ID.",
    responses={
        200: {"description": "Todo deleted"},
        404: {"model": ErrorOut, "description": "Todo not found"},
    },
)
def delete_todo(todoId: str, svc: TodoService = Depends(get_todo_service)) -> dict:
    """
    Delete a Todo. Returns an empty object on success, 404 if not found.
    """
    svc.delete(todoId)
    return {}
