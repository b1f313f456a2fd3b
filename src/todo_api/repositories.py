from __future__ import annotations

import logging
import uuid
from abc import ABC, abstractmethod
from datetime import datetime
from functools import lru_cache
from threading import RLock
from typing import List, Optional

from .errors import NotFoundError
from .models import TodoEntity
from .settings import get_settings

logger = logging.getLogger(__name__)


def new_todo_id() -> str:
    return uuid.uuid4().hex


# PUBLIC_INTERFACE
class Repository(ABC):
    """
    Abstract document-collection contract for todo storage backends.

    Each method is a single store operation; callers compose them without a
    surrounding transaction.
    """

    name: str = "abstract"

    @abstractmethod
    def insert(self, value: str, order: int, done_at: Optional[datetime] = None) -> TodoEntity:
        """Store a new todo and return it with its assigned id."""

    @abstractmethod
    def get(self, todo_id: str) -> Optional[TodoEntity]:
        """Return a TodoEntity by id, or None if not found."""

    @abstractmethod
    def find_by_order(self, order: int) -> Optional[TodoEntity]:
        """Return the first todo holding ``order``, or None."""

    @abstractmethod
    def find_max_order(self) -> Optional[TodoEntity]:
        """Return the todo with the highest order, or None when empty."""

    @abstractmethod
    def list(self) -> List[TodoEntity]:
        """Return all todos sorted by order, descending."""

    @abstractmethod
    def save(self, entity: TodoEntity) -> None:
        """Replace the stored todo with ``entity``. Raise NotFoundError if it is gone."""

    @abstractmethod
    def delete(self, todo_id: str) -> bool:
        """Delete a todo by id. Return True if deleted, False if not found."""


class InMemoryRepository(Repository):
    """
    Thread-safe in-memory repository suitable for testing and default runtime.
    """

    name = "memory"

    def __init__(self) -> None:
        self._lock = RLock()
        self._items: dict[str, TodoEntity] = {}

    def insert(self, value: str, order: int, done_at: Optional[datetime] = None) -> TodoEntity:
        entity: TodoEntity = {
            "id": new_todo_id(),
            "value": value,
            "order": order,
            "done_at": done_at,
        }
        with self._lock:
            self._items[entity["id"]] = entity
        return entity.copy()

    def get(self, todo_id: str) -> Optional[TodoEntity]:
        with self._lock:
            item = self._items.get(todo_id)
            return None if item is None else item.copy()

    def find_by_order(self, order: int) -> Optional[TodoEntity]:
        with self._lock:
            for item in self._items.values():
                if item["order"] == order:
                    return item.copy()
            return None

    def find_max_order(self) -> Optional[TodoEntity]:
        items = self.list()
        return items[0] if items else None

    def list(self) -> List[TodoEntity]:
        with self._lock:
            items_sorted = sorted(self._items.values(), key=lambda t: t["order"], reverse=True)
            # Return copies to avoid external mutation
            return [t.copy() for t in items_sorted]

    def save(self, entity: TodoEntity) -> None:
        with self._lock:
            if entity["id"] not in self._items:
                raise NotFoundError()
            self._items[entity["id"]] = entity.copy()

    def delete(self, todo_id: str) -> bool:
        with self._lock:
            return self._items.pop(todo_id, None) is not None


# PUBLIC_INTERFACE
@lru_cache(maxsize=1)
def get_repository() -> Repository:
    """
    Return the process-wide repository selected by settings.
    - memory: InMemoryRepository
    - sqlite: SQLiteRepository
    """
    settings = get_settings()
    if settings.persistence_backend == "sqlite":
        from .db import SQLiteRepository

        logger.info("Using sqlite storage at %s", settings.sqlite_db_path)
        return SQLiteRepository(settings.sqlite_db_path)
    logger.info("Using in-memory storage")
    return InMemoryRepository()
