from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from functools import lru_cache
from threading import RLock
from typing import Dict, Iterable, List, Optional

from .models import TodoEntity

logger = logging.getLogger(__name__)


# PUBLIC_INTERFACE
class Repository(ABC):
    """
    Abstract store contract for todo records.

    Implementations must make put atomic with respect to readers: get and list
    observe either the previous record or the new one, never a partial write.
    """

    @abstractmethod
    def allocate_id(self) -> str:
        """Return an identifier that no live record uses."""

    @abstractmethod
    def get(self, todo_id: str) -> Optional[TodoEntity]:
        """Return a copy of the TodoEntity with this id, or None if not found."""

    @abstractmethod
    def put(self, entity: TodoEntity) -> TodoEntity:
        """Insert or replace the record keyed by entity['id'] and return a copy of it."""

    @abstractmethod
    def list(self) -> List[TodoEntity]:
        """Return copies of all records in insertion order."""

    def insert(self, entity: TodoEntity) -> TodoEntity:
        """Assign a fresh id to entity and store it."""
        stored: TodoEntity = {**entity, "id": self.allocate_id()}  # type: ignore[misc]
        return self.put(stored)


class InMemoryRepository(Repository):
    """
    Thread-safe in-memory repository suitable for testing and default runtime.
    """

    def __init__(self, initial: Optional[Iterable[TodoEntity]] = None) -> None:
        self._lock = RLock()
        self._items: Dict[str, TodoEntity] = {}
        self._next_id = 1
        for entity in initial or ():
            self.put(entity)

    def allocate_id(self) -> str:
        with self._lock:
            while str(self._next_id) in self._items:
                self._next_id += 1
            i = self._next_id
            self._next_id += 1
            return str(i)

    def get(self, todo_id: str) -> Optional[TodoEntity]:
        with self._lock:
            item = self._items.get(todo_id)
            return None if item is None else item.copy()

    def put(self, entity: TodoEntity) -> TodoEntity:
        stored = entity.copy()
        with self._lock:
            replaced = stored["id"] in self._items
            # dicts keep the first insertion position on replace
            self._items[stored["id"]] = stored
        logger.debug("%s todo id=%s", "Replaced" if replaced else "Inserted", stored["id"])
        return stored.copy()

    def list(self) -> List[TodoEntity]:
        with self._lock:
            return [t.copy() for t in self._items.values()]

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)


@lru_cache(maxsize=1)
def _default_repository() -> InMemoryRepository:
    return InMemoryRepository()


# PUBLIC_INTERFACE
def get_repository() -> Repository:
    """
    Return the process-wide in-memory repository.
    Tests replace it through FastAPI's dependency_overrides.
    """
    return _default_repository()
