from __future__ import annotations

import logging
import uuid
from abc import ABC, abstractmethod
from datetime import datetime, timedelta
from functools import lru_cache
from threading import RLock
from typing import List, Optional

from ..ordering import schedule_sort_key
from ..timestamps import utc_now
from .models import TodoEntity
from .settings import get_settings

logger = logging.getLogger(__name__)


class TodoNotFoundError(LookupError):
    """Raised when an operation targets a todo id that does not exist."""

    def __init__(self, todo_id: str) -> None:
        super().__init__(f"Todo not found: {todo_id}")
        self.todo_id = todo_id


def entity_sort_key(entity: TodoEntity):
    return schedule_sort_key(entity["scheduled_at"], entity["created_at"], entity["id"])


# PUBLIC_INTERFACE
class Repository(ABC):
    """
    Abstract repository contract for todo storage backends.

    The store owns identity and creation timestamps. Creation timestamps are
    strictly increasing within a process so that unscheduled todos keep their
    creation order even when created within the same millisecond.
    """

    def __init__(self) -> None:
        self._clock_lock = RLock()
        self._last_created: Optional[datetime] = None

    def _new_id(self) -> str:
        return str(uuid.uuid4())

    def _next_created_at(self) -> datetime:
        with self._clock_lock:
            now = utc_now()
            if self._last_created is not None and now <= self._last_created:
                now = self._last_created + timedelta(milliseconds=1)
            self._last_created = now
            return now

    @abstractmethod
    def create(self, text: str, scheduled_at: Optional[datetime] = None) -> TodoEntity:
        """Create and return a new TodoEntity."""

    @abstractmethod
    def get(self, todo_id: str) -> Optional[TodoEntity]:
        """Return a TodoEntity by id, or None if not found."""

    @abstractmethod
    def update(self, todo_id: str, text: str, scheduled_at: Optional[datetime] = None) -> TodoEntity:
        """
        Replace text and scheduled_at of an existing TodoEntity and return it.
        A scheduled_at of None clears the schedule.
        Raises TodoNotFoundError if the id does not exist.
        """

    @abstractmethod
    def delete(self, todo_id: str) -> None:
        """Delete a TodoEntity by id. Raises TodoNotFoundError if the id does not exist."""

    @abstractmethod
    def list(self) -> List[TodoEntity]:
        """
        Return all TodoEntities:
        - scheduled first, by scheduled_at ascending
        - then unscheduled, by created_at ascending
        - remaining ties by id
        """

    @abstractmethod
    def clear(self) -> int:
        """Delete every TodoEntity and return how many were removed."""


class InMemoryRepository(Repository):
    """
    Thread-safe in-memory repository suitable for testing and default runtime.
    """

    def __init__(self) -> None:
        super().__init__()
        self._lock = RLock()
        self._items: dict[str, TodoEntity] = {}

    def create(self, text: str, scheduled_at: Optional[datetime] = None) -> TodoEntity:
        entity: TodoEntity = {
            "id": self._new_id(),
            "text": text,
            "scheduled_at": scheduled_at,
            "completed": False,
            "created_at": self._next_created_at(),
        }
        with self._lock:
            self._items[entity["id"]] = entity
        logger.debug("Created todo %s", entity["id"])
        return entity.copy()

    def get(self, todo_id: str) -> Optional[TodoEntity]:
        with self._lock:
            item = self._items.get(todo_id)
            return None if item is None else item.copy()

    def update(self, todo_id: str, text: str, scheduled_at: Optional[datetime] = None) -> TodoEntity:
        with self._lock:
            existing = self._items.get(todo_id)
            if existing is None:
                raise TodoNotFoundError(todo_id)

            # Full replacement of the mutable fields
            updated = existing.copy()
            updated["text"] = text
            updated["scheduled_at"] = scheduled_at

            self._items[todo_id] = updated
            return updated.copy()

    def delete(self, todo_id: str) -> None:
        with self._lock:
            if self._items.pop(todo_id, None) is None:
                raise TodoNotFoundError(todo_id)

    def list(self) -> List[TodoEntity]:
        with self._lock:
            # Return copies to avoid external mutation
            return [t.copy() for t in sorted(self._items.values(), key=entity_sort_key)]

    def clear(self) -> int:
        with self._lock:
            count = len(self._items)
            self._items.clear()
            return count


# PUBLIC_INTERFACE
@lru_cache(maxsize=1)
def get_repository() -> Repository:
    """
    Return the configured repository based on settings. One instance is shared
    by every request of the process.
    - memory: InMemoryRepository
    - sqlite: SQLiteRepository (standard library sqlite3)
    """
    settings = get_settings()
    if settings.persistence_backend == "sqlite":
        from .db import SQLiteRepository

        logger.info("Using SQLite store at %s", settings.sqlite_db_path)
        return SQLiteRepository(settings.sqlite_db_path)
    logger.info("Using in-memory store")
    return InMemoryRepository()
