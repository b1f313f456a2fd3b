from __future__ import annotations

from datetime import datetime
from typing import Optional, TypedDict


# PUBLIC_INTERFACE
class TodoEntity(TypedDict):
    """
    A Todo document as held by the storage backends.

    Fields:
    - id: Opaque unique identifier assigned on insert
    - value: Task description (1..50 chars on creation)
    - order: Display position; higher orders are listed first
    - done_at: Completion timestamp, or None while the todo is open
    """

    id: str
    value: str
    order: int
    done_at: Optional[datetime]
