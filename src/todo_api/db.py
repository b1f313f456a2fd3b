from __future__ import annotations

import os
import sqlite3
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime
from typing import Generator, List, Optional

from .errors import NotFoundError, StorageError
from .models import TodoEntity
from .repositories import Repository, new_todo_id


@dataclass(frozen=True)
class _Cols:
    table: str = "todos"
    id: str = "id"
    value: str = "value"
    order: str = '"order"'
    done_at: str = "done_at"


_COLS = _Cols()


class SQLiteRepository(Repository):
    """
    Lightweight SQLite repository implementing the Repository interface.
    """

    name = "sqlite"

    def __init__(self, db_path: str) -> None:
        os.makedirs(os.path.dirname(db_path) or ".", exist_ok=True)
        self._db_path = db_path
        self._init_db()

    @contextmanager
    def _conn(self) -> Generator[sqlite3.Connection, None, None]:
        try:
            conn = sqlite3.connect(self._db_path)
        except sqlite3.Error as e:
            raise StorageError(f"Cannot open database: {e}") from e
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            raise StorageError(str(e)) from e
        finally:
            conn.close()

    def _init_db(self) -> None:
        with self._conn() as conn:
            conn.execute(
                f"""
                CREATE TABLE IF NOT EXISTS {_COLS.table} (
                    {_COLS.id} TEXT PRIMARY KEY,
                    {_COLS.value} TEXT NOT NULL,
                    {_COLS.order} INTEGER NOT NULL,
                    {_COLS.done_at} TEXT NULL
                )
                """
            )
            # Not unique: concurrent creates may legitimately collide on order
            conn.execute(
                f"CREATE INDEX IF NOT EXISTS idx_{_COLS.table}_order ON {_COLS.table}({_COLS.order})"
            )

    def _row_to_entity(self, row: sqlite3.Row) -> TodoEntity:
        done_at = row["done_at"]
        return {
            "id": str(row["id"]),
            "value": str(row["value"]),
            "order": int(row["order"]),
            "done_at": datetime.fromisoformat(done_at) if done_at is not None else None,
        }

    def _fetch_one(self, sql: str, params: tuple) -> Optional[TodoEntity]:
        with self._conn() as conn:
            row = conn.execute(sql, params).fetchone()
            return self._row_to_entity(row) if row else None

    def insert(self, value: str, order: int, done_at: Optional[datetime] = None) -> TodoEntity:
        entity: TodoEntity = {
            "id": new_todo_id(),
            "value": value,
            "order": order,
            "done_at": done_at,
        }
        with self._conn() as conn:
            conn.execute(
                f"""
                INSERT INTO {_COLS.table} ({_COLS.id}, {_COLS.value}, {_COLS.order}, {_COLS.done_at})
                VALUES (?, ?, ?, ?)
                """,
                (entity["id"], value, order, done_at.isoformat() if done_at else None),
            )
        return entity

    def get(self, todo_id: str) -> Optional[TodoEntity]:
        return self._fetch_one(f"SELECT * FROM {_COLS.table} WHERE {_COLS.id} = ?", (todo_id,))

    def find_by_order(self, order: int) -> Optional[TodoEntity]:
        return self._fetch_one(
            f"SELECT * FROM {_COLS.table} WHERE {_COLS.order} = ? LIMIT 1", (order,)
        )

    def find_max_order(self) -> Optional[TodoEntity]:
        return self._fetch_one(
            f"SELECT * FROM {_COLS.table} ORDER BY {_COLS.order} DESC LIMIT 1", ()
        )

    def list(self) -> List[TodoEntity]:
        with self._conn() as conn:
            rows = conn.execute(
                f"SELECT * FROM {_COLS.table} ORDER BY {_COLS.order} DESC"
            ).fetchall()
            return [self._row_to_entity(r) for r in rows]

    def save(self, entity: TodoEntity) -> None:
        done_at = entity["done_at"]
        with self._conn() as conn:
            cur = conn.execute(
                f"""
                UPDATE {_COLS.table}
                SET {_COLS.value} = ?, {_COLS.order} = ?, {_COLS.done_at} = ?
                WHERE {_COLS.id} = ?
                """,
                (
                    entity["value"],
                    entity["order"],
                    done_at.isoformat() if done_at else None,
                    entity["id"],
                ),
            )
            if cur.rowcount == 0:
                raise NotFoundError()

    def delete(self, todo_id: str) -> bool:
        with self._conn() as conn:
            cur = conn.execute(f"DELETE FROM {_COLS.table} WHERE {_COLS.id} = ?", (todo_id,))
            return cur.rowcount > 0
