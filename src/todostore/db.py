from __future__ import annotations

import os
import sqlite3
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Generator, List, Optional, Sequence

from .models import TodoRecord
from .repositories import Repository, parse_todos, serialize_todos


@dataclass(frozen=True)
class _Cols:
    table: str = "slots"
    key: str = "key"
    value: str = "value"


_COLS = _Cols()


class SQLiteRepository(Repository):
    """
    SQLite-backed key/value slots implementing the Repository interface.
    The whole todo sequence is stored as JSON text under a single key.
    """

    def __init__(self, db_path: str, key: str = "todos") -> None:
        os.makedirs(os.path.dirname(db_path) or ".", exist_ok=True)
        self._db_path = db_path
        self._key = key
        self._init_db()

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
                    {_COLS.key} TEXT PRIMARY KEY,
                    {_COLS.value} TEXT NOT NULL
                )
                """
            )

    def _get_raw(self) -> Optional[str]:
        with self._conn() as conn:
            row = conn.execute(
                f"SELECT {_COLS.value} FROM {_COLS.table} WHERE {_COLS.key} = ?", (self._key,)
            ).fetchone()
            return str(row[_COLS.value]) if row else None

    def read(self) -> List[TodoRecord]:
        return parse_todos(self._get_raw())

    def write(self, items: Sequence[TodoRecord]) -> None:
        with self._conn() as conn:
            conn.execute(
                f"""
                INSERT INTO {_COLS.table} ({_COLS.key}, {_COLS.value}) VALUES (?, ?)
                ON CONFLICT({_COLS.key}) DO UPDATE SET {_COLS.value} = excluded.{_COLS.value}
                """,
                (self._key, serialize_todos(items)),
            )
