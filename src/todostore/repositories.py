from __future__ import annotations

import json
import logging
import sqlite3
from abc import ABC, abstractmethod
from threading import RLock
from typing import List, Optional, Sequence

from pydantic import TypeAdapter, ValidationError

from .models import TodoRecord
from .schemas import TodoOut
from .settings import get_settings

logger = logging.getLogger(__name__)

_RECORDS = TypeAdapter(List[TodoOut])


def serialize_todos(items: Sequence[TodoRecord]) -> str:
    """Serialize a todo sequence to the JSON text kept in the storage slot."""
    return json.dumps(
        [{"id": t["id"], "title": t["title"], "completed": t["completed"]} for t in items],
        ensure_ascii=False,
    )


def parse_todos(raw: Optional[str]) -> List[TodoRecord]:
    """
    Parse the storage slot text back into records.

    Missing, unparseable or structurally invalid data yields an empty list.
    """
    if raw is None or raw == "":
        return []
    try:
        payload = json.loads(raw)
    except ValueError:
        logger.warning("Ignoring unparseable todo storage slot")
        return []
    try:
        records = _RECORDS.validate_python(payload)
    except ValidationError:
        logger.warning("Ignoring malformed todo storage slot")
        return []
    return [{"id": r.id, "title": r.title, "completed": r.completed} for r in records]


# PUBLIC_INTERFACE
class Repository(ABC):
    """Storage contract for the persisted todo sequence."""

    @abstractmethod
    def read(self) -> List[TodoRecord]:
        """Return the persisted sequence, or an empty list if none is stored or it is unreadable."""

    @abstractmethod
    def write(self, items: Sequence[TodoRecord]) -> None:
        """Persist the full sequence, replacing whatever was stored before."""


class InMemoryRepository(Repository):
    """
    Thread-safe in-memory key/value slots suitable for testing and default runtime.
    """

    def __init__(self, key: str = "todos") -> None:
        self._lock = RLock()
        self._key = key
        self._slots: dict[str, str] = {}

    @property
    def raw(self) -> Optional[str]:
        """Serialized slot text, as it would be seen by other readers of the store."""
        with self._lock:
            return self._slots.get(self._key)

    @raw.setter
    def raw(self, value: Optional[str]) -> None:
        with self._lock:
            if value is None:
                self._slots.pop(self._key, None)
            else:
                self._slots[self._key] = value

    def read(self) -> List[TodoRecord]:
        return parse_todos(self.raw)

    def write(self, items: Sequence[TodoRecord]) -> None:
        self.raw = serialize_todos(items)


# PUBLIC_INTERFACE
def get_repository() -> Repository:
    """
    Factory to return the configured repository based on settings.
    - memory: InMemoryRepository
    - sqlite: SQLiteRepository (requires sqlite3 standard library)
    """
    settings = get_settings()
    if settings.persistence_backend == "sqlite":
        from .db import SQLiteRepository

        try:
            return SQLiteRepository(settings.sqlite_db_path, key=settings.storage_key)
        except (OSError, sqlite3.Error):
            # Fallback to memory if the database location is not usable
            logger.warning("SQLite storage at %s unavailable, using memory", settings.sqlite_db_path)
            return InMemoryRepository(key=settings.storage_key)
    return InMemoryRepository(key=settings.storage_key)
