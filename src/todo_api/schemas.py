from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

VALUE_MIN_LENGTH = 1
VALUE_MAX_LENGTH = 50


# PUBLIC_INTERFACE
class TodoCreate(BaseModel):
    """
    Schema for creating a new Todo item.
    """

    model_config = ConfigDict(json_schema_extra={"example": {"value": "buy milk"}})

    value: str = Field(
        ...,
        description="Task description",
        min_length=VALUE_MIN_LENGTH,
        max_length=VALUE_MAX_LENGTH,
    )


# PUBLIC_INTERFACE
class TodoUpdate(BaseModel):
    """
    Schema for updating an existing Todo item.

    All fields are optional. Falsy ``value`` and ``order`` are ignored; ``done``
    is applied whenever it is present in the payload, even as false or null.
    """

    model_config = ConfigDict(
        json_schema_extra={"example": {"value": "walk dog", "order": 2, "done": True}}
    )

    value: Optional[str] = Field(default=None, description="New task description")
    order: Optional[int] = Field(
        default=None, description="Target order; swaps with the todo currently holding it"
    )
    done: Optional[bool] = Field(default=None, description="Mark the todo done or not done")

    @property
    def done_provided(self) -> bool:
        """True when the client sent ``done`` explicitly."""
        return "done" in self.model_fields_set


# PUBLIC_INTERFACE
class TodoOut(BaseModel):
    """
    Schema returned by the API for a Todo item.
    """

    model_config = ConfigDict(
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "id": "3f1c2b9d8e7a4c6b9a0d1e2f3a4b5c6d",
                "value": "buy milk",
                "order": 1,
                "doneAt": None,
            }
        },
    )

    id: str = Field(..., description="Unique identifier of the todo item")
    value: str = Field(..., description="Task description")
    order: int = Field(..., description="Display order; highest first")
    done_at: Optional[datetime] = Field(
        default=None, alias="doneAt", description="Completion timestamp, null while open"
    )


class TodoEnvelope(BaseModel):
    todo: TodoOut


class TodoListEnvelope(BaseModel):
    todos: List[TodoOut]


class ErrorOut(BaseModel):
    """Body of every failure response."""

    errorMessage: str
