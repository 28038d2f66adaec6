"""
Todo operations on top of a ``Repository``.

``TodoService`` is the seam between the HTTP layer and the store: it fills
creation defaults, merges partial updates, and runs list queries through the
filter/sort/paginate pipeline in ``query``.
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Callable, Optional

from .errors import TodoNotFoundError
from .models import TodoEntity
from .query import (
    CursorBatch,
    OffsetPage,
    TodoFilters,
    TodoOrdering,
    paginate_cursor,
    paginate_offset,
    select_todos,
)
from .repositories import Repository
from .schemas import TodoCreate, TodoUpdate

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# PUBLIC_INTERFACE
def merge_update(existing: TodoEntity, update: TodoUpdate) -> TodoEntity:
    """
    Merge a partial update into an existing record.

    Two steps: the validated payload (including schema defaults such as
    priority=MEDIUM) is laid over the record, then date and priority fall back
    to the existing values unless the caller explicitly supplied them.
    Unset or null title/completed leave the stored values untouched.
    """
    merged: TodoEntity = existing.copy()
    filled = update.model_dump(exclude_none=True)
    for field in ("title", "completed", "date", "priority"):
        if field in filled:
            merged[field] = filled[field]  # type: ignore[literal-required]

    supplied = update.model_fields_set
    merged["date"] = update.date if "date" in supplied and update.date is not None else existing["date"]
    merged["priority"] = (
        update.priority if "priority" in supplied and update.priority is not None else existing["priority"]
    )
    merged["id"] = existing["id"]
    return merged


class TodoService:
    """Create, fetch, update and list todos held by a Repository."""

    def __init__(self, repo: Repository, clock: Callable[[], datetime] = _utcnow) -> None:
        self._repo = repo
        self._clock = clock

    def create(self, data: TodoCreate) -> TodoEntity:
        entity: TodoEntity = {
            "id": "",
            "title": data.title,
            "completed": data.completed,
            "date": data.date if data.date is not None else self._clock(),
            "priority": data.priority,
        }
        created = self._repo.insert(entity)
        logger.info("Created todo id=%s", created["id"])
        return created

    def get(self, todo_id: str) -> TodoEntity:
        item = self._repo.get(todo_id)
        if item is None:
            logger.warning("Todo id=%s not found", todo_id)
            raise TodoNotFoundError(todo_id)
        return item

    def update(self, todo_id: str, data: TodoUpdate) -> TodoEntity:
        existing = self.get(todo_id)
        merged = merge_update(existing, data)
        stored = self._repo.put(merged)
        logger.info("Updated todo id=%s fields=%s", todo_id, sorted(data.model_fields_set))
        return stored

    def list_page(
        self,
        filters: Optional[TodoFilters] = None,
        ordering: Optional[TodoOrdering] = None,
        page: int = 1,
        limit: int = 10,
    ) -> OffsetPage:
        selected = select_todos(self._repo.list(), filters or TodoFilters(), ordering or TodoOrdering())
        logger.debug("Offset query filters=%s ordering=%s page=%d limit=%d matched=%d",
                     filters, ordering, page, limit, len(selected))
        return paginate_offset(selected, page, limit)

    def scroll(
        self,
        filters: Optional[TodoFilters] = None,
        ordering: Optional[TodoOrdering] = None,
        cursor: int = 0,
        limit: int = 10,
    ) -> CursorBatch:
        selected = select_todos(self._repo.list(), filters or TodoFilters(), ordering or TodoOrdering())
        logger.debug("Cursor query filters=%s ordering=%s cursor=%d limit=%d matched=%d",
                     filters, ordering, cursor, limit, len(selected))
        return paginate_cursor(selected, cursor, limit)

    def count(self) -> int:
        return len(self._repo.list())
