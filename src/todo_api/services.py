"""
Todo business rules: order assignment, order swapping and completion stamps.

The service composes single-document repository calls without a transaction.
Two concurrent creates can read the same max order and store duplicate orders,
and a crash between the two writes of a swap leaves it half applied.
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import List

from .errors import NotFoundError
from .models import TodoEntity
from .repositories import Repository
from .schemas import TodoUpdate

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)


# PUBLIC_INTERFACE
class TodoService:
    """Application service behind the todo endpoints."""

    def __init__(self, repo: Repository) -> None:
        self.repo = repo

    def next_order(self) -> int:
        """Order for a new todo: one above the current maximum, or 1 when empty."""
        top = self.repo.find_max_order()
        return top["order"] + 1 if top else 1

    def create(self, value: str) -> TodoEntity:
        todo = self.repo.insert(value=value, order=self.next_order())
        logger.info("Created todo %s with order %d", todo["id"], todo["order"])
        return todo

    def list(self) -> List[TodoEntity]:
        return self.repo.list()

    def get(self, todo_id: str) -> TodoEntity:
        todo = self.repo.get(todo_id)
        if todo is None:
            raise NotFoundError()
        return todo

    def update(self, todo_id: str, changes: TodoUpdate) -> None:
        """
        Apply a partial update.

        A truthy ``order`` already held by another todo swaps the two orders;
        ``order: 0`` is treated as absent. ``done`` stamps or clears ``done_at``
        whenever it was sent.
        """
        current = self.get(todo_id)

        if changes.value:
            current["value"] = changes.value

        if changes.order:
            target = self.repo.find_by_order(changes.order)
            if target is not None:
                target["order"] = current["order"]
                self.repo.save(target)
                logger.info(
                    "Swapped order of todo %s to %d", target["id"], target["order"]
                )
            current["order"] = changes.order

        if changes.done_provided:
            current["done_at"] = _now() if changes.done else None

        self.repo.save(current)
        logger.info("Updated todo %s", todo_id)

    def delete(self, todo_id: str) -> None:
        self.get(todo_id)
        self.repo.delete(todo_id)
        logger.info("Deleted todo %s", todo_id)
