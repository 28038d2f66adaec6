from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from functools import cmp_to_key
from typing import Callable, Iterable, List, Optional, Union

from .models import PRIORITY_RANK, Priority, TodoEntity

Predicate = Callable[[TodoEntity], bool]
SortValue = Union[str, int]


@dataclass(frozen=True)
class TodoFilters:
    """
    Filter constraints for listing todos. None means unconstrained.
    Date bounds are inclusive.
    """
    completed: Optional[bool] = None
    priority: Optional[Priority] = None
    date_gte: Optional[datetime] = None
    date_lte: Optional[datetime] = None


@dataclass(frozen=True)
class TodoOrdering:
    field: str = "date"  # one of id, title, completed, date, priority
    order: str = "asc"  # asc or desc


@dataclass(frozen=True)
class OffsetPage:
    todos: List[TodoEntity]
    total_todos: int
    has_next_page: bool
    next_page: Optional[int]


@dataclass(frozen=True)
class CursorBatch:
    todos: List[TodoEntity]
    next_cursor: Optional[int]
    has_next_page: bool


# PUBLIC_INTERFACE
def build_predicate(filters: TodoFilters) -> Predicate:
    """Return the logical AND of every constraint set on filters."""
    checks: List[Predicate] = []
    if filters.completed is not None:
        wanted = filters.completed
        checks.append(lambda t: t["completed"] is wanted)
    if filters.priority is not None:
        priority = filters.priority
        checks.append(lambda t: t["priority"] == priority)
    if filters.date_gte is not None:
        lower = filters.date_gte
        checks.append(lambda t: t["date"] >= lower)
    if filters.date_lte is not None:
        upper = filters.date_lte
        checks.append(lambda t: t["date"] <= upper)

    def predicate(todo: TodoEntity) -> bool:
        return all(check(todo) for check in checks)

    return predicate


# PUBLIC_INTERFACE
def sort_value(todo: TodoEntity, field: str) -> SortValue:
    """
    Project a todo onto a comparable value for the given sort field.
    Callers validate field beforehand; anything else raises KeyError.
    """
    if field == "id":
        return todo["id"]
    if field == "title":
        return todo["title"]
    if field == "completed":
        return 1 if todo["completed"] else 0
    if field == "date":
        # epoch milliseconds
        return int(todo["date"].timestamp() * 1000)
    if field == "priority":
        return PRIORITY_RANK[Priority(todo["priority"])]
    raise KeyError(field)


# PUBLIC_INTERFACE
def compare(va: SortValue, vb: SortValue, order: str = "asc") -> int:
    """Three-way comparison of two sort values, inverted for order='desc'."""
    if va < vb:
        result = -1
    elif va > vb:
        result = 1
    else:
        return 0
    return -result if order == "desc" else result


def make_comparator(ordering: TodoOrdering) -> Callable[[TodoEntity, TodoEntity], int]:
    def comparator(a: TodoEntity, b: TodoEntity) -> int:
        return compare(sort_value(a, ordering.field), sort_value(b, ordering.field), ordering.order)

    return comparator


# PUBLIC_INTERFACE
def sort_todos(todos: Iterable[TodoEntity], ordering: TodoOrdering) -> List[TodoEntity]:
    """
    Order todos by the requested field and direction.
    sorted() is stable, so equal keys keep their upstream order in both directions.
    """
    return sorted(todos, key=cmp_to_key(make_comparator(ordering)))


# PUBLIC_INTERFACE
def select_todos(todos: Iterable[TodoEntity], filters: TodoFilters, ordering: TodoOrdering) -> List[TodoEntity]:
    """Filter then sort; both paginators slice the sequence returned here."""
    predicate = build_predicate(filters)
    return sort_todos((t for t in todos if predicate(t)), ordering)


# PUBLIC_INTERFACE
def paginate_offset(todos: List[TodoEntity], page: int, limit: int) -> OffsetPage:
    """
    Slice a 1-based page of the given size. Pages past the end are empty.
    page and limit must already be normalised to positive integers.
    """
    start = (page - 1) * limit
    end = start + limit
    total = len(todos)
    has_next = end < total
    return OffsetPage(
        todos=todos[start:end],
        total_todos=total,
        has_next_page=has_next,
        next_page=page + 1 if has_next else None,
    )


# PUBLIC_INTERFACE
def paginate_cursor(todos: List[TodoEntity], cursor: int, limit: int) -> CursorBatch:
    """
    Slice limit todos starting at the absolute index cursor.

    The cursor carries no record of the filters or ordering that produced it;
    it only addresses the same window when the next call repeats them.
    """
    batch = todos[cursor:cursor + limit]
    new_cursor = cursor + len(batch)
    has_next = new_cursor < len(todos)
    return CursorBatch(
        todos=batch,
        next_cursor=new_cursor if has_next else None,
        has_next_page=has_next,
    )
