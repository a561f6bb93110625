from __future__ import annotations

import os
import sqlite3
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime
from typing import Generator, List, Optional

from ..timestamps import format_timestamp, parse_timestamp
from .models import TodoEntity
from .repositories import Repository, TodoNotFoundError


@dataclass(frozen=True)
class _Cols:
    table: str = "todos"
    id: str = "id"
    text: str = "text"
    scheduled_at: str = "scheduled_at"
    completed: str = "completed"
    created_at: str = "created_at"


_COLS = _Cols()


class SQLiteRepository(Repository):
    """
    Lightweight SQLite repository implementing the Repository interface.

    Timestamps are stored as wire-format text (UTC, millisecond precision), so
    ORDER BY on the text columns is chronological.
    """

    def __init__(self, db_path: str) -> None:
        super().__init__()
        os.makedirs(os.path.dirname(db_path) or ".", exist_ok=True)
        self._db_path = db_path
        self._init_db()
        self._last_created = self._latest_created_at()

    @contextmanager
    def _conn(self) -> Generator[sqlite3.Connection, None, None]:
        conn = sqlite3.connect(self._db_path)
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        finally:
            conn.close()

    def _init_db(self) -> None:
        with self._conn() as conn:
            conn.execute(
                f"""
                CREATE TABLE IF NOT EXISTS {_COLS.table} (
                    {_COLS.id} TEXT PRIMARY KEY,
                    {_COLS.text} TEXT NOT NULL,
                    {_COLS.scheduled_at} TEXT NULL,
                    {_COLS.completed} INTEGER NOT NULL DEFAULT 0,
                    {_COLS.created_at} TEXT NOT NULL
                )
                """
            )
            conn.execute(
                f"CREATE INDEX IF NOT EXISTS idx_{_COLS.table}_scheduled_at ON {_COLS.table}({_COLS.scheduled_at})"
            )

    def _latest_created_at(self) -> Optional[datetime]:
        with self._conn() as conn:
            row = conn.execute(f"SELECT MAX({_COLS.created_at}) AS latest FROM {_COLS.table}").fetchone()
            return parse_timestamp(row["latest"]) if row else None

    def _row_to_entity(self, row: sqlite3.Row) -> TodoEntity:
        return {
            "id": str(row[_COLS.id]),
            "text": str(row[_COLS.text]),
            "scheduled_at": parse_timestamp(row[_COLS.scheduled_at]),
            "completed": bool(row[_COLS.completed]),
            "created_at": parse_timestamp(row[_COLS.created_at]),  # type: ignore
        }  # type: ignore

    def _fetch(self, conn: sqlite3.Connection, todo_id: str) -> Optional[sqlite3.Row]:
        return conn.execute(f"SELECT * FROM {_COLS.table} WHERE {_COLS.id} = ?", (todo_id,)).fetchone()

    def create(self, text: str, scheduled_at: Optional[datetime] = None) -> TodoEntity:
        new_id = self._new_id()
        created = format_timestamp(self._next_created_at())
        scheduled = format_timestamp(scheduled_at) if scheduled_at else None
        with self._conn() as conn:
            conn.execute(
                f"""
                INSERT INTO {_COLS.table} ({_COLS.id}, {_COLS.text}, {_COLS.scheduled_at},
                    {_COLS.completed}, {_COLS.created_at})
                VALUES (?, ?, ?, 0, ?)
                """,
                (new_id, text, scheduled, created),
            )
            row = self._fetch(conn, new_id)
            assert row is not None
            return self._row_to_entity(row)

    def get(self, todo_id: str) -> Optional[TodoEntity]:
        with self._conn() as conn:
            row = self._fetch(conn, todo_id)
            return self._row_to_entity(row) if row else None

    def update(self, todo_id: str, text: str, scheduled_at: Optional[datetime] = None) -> TodoEntity:
        with self._conn() as conn:
            cur = conn.execute(
                f"""
                UPDATE {_COLS.table}
                SET {_COLS.text} = ?, {_COLS.scheduled_at} = ?
                WHERE {_COLS.id} = ?
                """,
                (text, format_timestamp(scheduled_at) if scheduled_at else None, todo_id),
            )
            if cur.rowcount == 0:
                raise TodoNotFoundError(todo_id)
            row = self._fetch(conn, todo_id)
            assert row is not None
            return self._row_to_entity(row)

    def delete(self, todo_id: str) -> None:
        with self._conn() as conn:
            cur = conn.execute(f"DELETE FROM {_COLS.table} WHERE {_COLS.id} = ?", (todo_id,))
            if cur.rowcount == 0:
                raise TodoNotFoundError(todo_id)

    def list(self) -> List[TodoEntity]:
        with self._conn() as conn:
            rows = conn.execute(
                f"""
                SELECT * FROM {_COLS.table}
                ORDER BY {_COLS.scheduled_at} IS NULL, {_COLS.scheduled_at} ASC,
                    {_COLS.created_at} ASC, {_COLS.id} ASC
                """
            ).fetchall()
            return [self._row_to_entity(r) for r in rows]

    def clear(self) -> int:
        with self._conn() as conn:
            cur = conn.execute(f"DELETE FROM {_COLS.table}")
            return cur.rowcount
