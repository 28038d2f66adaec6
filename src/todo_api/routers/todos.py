from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from ..errors import TodoNotFoundError
from ..models import TodoEntity
from ..params import (
    DEFAULT_ORDER,
    DEFAULT_SORT,
    parse_bool,
    parse_datetime,
    parse_int,
    parse_or_default,
    parse_order,
    parse_priority,
    parse_sort_field,
)
from ..query import TodoFilters, TodoOrdering
from ..repositories import Repository, get_repository
from ..schemas import TodoCreate, TodoOut, TodoPage, TodoScrollBatch, TodoUpdate
from ..service import TodoService
from ..settings import get_settings

router = APIRouter(
    prefix="/todos",
    tags=["todos"],
)

_NOT_FOUND = "Todo not found"


def _get_service(repo: Repository = Depends(get_repository)) -> TodoService:
    """
    Dependency building a TodoService over the configured repository.
    """
    return TodoService(repo)


def _out(item: TodoEntity) -> TodoOut:
    return TodoOut(**item)  # type: ignore[arg-type]


def _filters(
    completed: Optional[str] = Query(None, description="Filter by completion status: 'true' or 'false'"),
    priority: Optional[str] = Query(None, description="Filter by priority: LOW, MEDIUM or HIGH"),
    dateGte: Optional[str] = Query(None, description="Only todos dated on or after this ISO8601 value"),
    dateLte: Optional[str] = Query(None, description="Only todos dated on or before this ISO8601 value"),
) -> TodoFilters:
    """
    Shared filter parameters. Unrecognised values are ignored rather than rejected.
    """
    return TodoFilters(
        completed=parse_or_default(completed, parse_bool, None),
        priority=parse_or_default(priority, parse_priority, None),
        date_gte=parse_or_default(dateGte, parse_datetime, None),
        date_lte=parse_or_default(dateLte, parse_datetime, None),
    )


def _ordering(
    sort: Optional[str] = Query(
        None, description="Sort field: id, title, completed, date or priority (default: date)"
    ),
    order: Optional[str] = Query(None, description="Sort direction: asc or desc (default: asc)"),
) -> TodoOrdering:
    return TodoOrdering(
        field=parse_or_default(sort, parse_sort_field, DEFAULT_SORT),
        order=parse_or_default(order, parse_order, DEFAULT_ORDER),
    )


def _limit(raw: Optional[str]) -> int:
    settings = get_settings()
    limit = parse_or_default(raw, parse_int, settings.default_page_size)
    if limit < 1:
        return settings.default_page_size
    return min(limit, settings.max_page_size)


# PUBLIC_INTERFACE
@router.post(
    "",
    response_model=TodoOut,
    status_code=status.HTTP_201_CREATED,
    summary="Create Todo",
    description=(
        "Create a new Todo item and return the created resource. "
        "completed defaults to false, priority to MEDIUM and date to the current time."
    ),
    responses={
        201: {"description": "Todo created successfully"},
        422: {"description": "Validation error"},
    },
)
def create_todo(payload: TodoCreate, service: TodoService = Depends(_get_service)) -> TodoOut:
    """
    Create a new Todo.
    """
    return _out(service.create(payload))


# PUBLIC_INTERFACE
@router.get(
    "",
    response_model=TodoPage,
    summary="List Todos",
    description=(
        "List todos with optional filters, sorting and page-number pagination.\n\n"
        "Query parameters:\n"
        "- completed: 'true' or 'false'\n"
        "- priority: LOW, MEDIUM or HIGH\n"
        "- dateGte / dateLte: inclusive ISO8601 date bounds\n"
        "- page: page number starting from 1 (default 1)\n"
        "- limit: todos per page (default 10)\n"
        "- sort: id, title, completed, date or priority (default date)\n"
        "- order: asc or desc (default asc)\n\n"
        "Unrecognised values are ignored and the defaults apply."
    ),
    responses={
        200: {"description": "List retrieved successfully"},
    },
)
def list_todos(
    page: Optional[str] = Query(None, description="Page number (starting from 1)"),
    limit: Optional[str] = Query(None, description="Number of todos per page"),
    filters: TodoFilters = Depends(_filters),
    ordering: TodoOrdering = Depends(_ordering),
    service: TodoService = Depends(_get_service),
) -> TodoPage:
    """
    List todos with page-number pagination.
    """
    page_num = max(parse_or_default(page, parse_int, 1), 1)
    result = service.list_page(filters, ordering, page=page_num, limit=_limit(limit))
    return TodoPage(
        todos=[_out(t) for t in result.todos],
        totalTodos=result.total_todos,
        hasNextPage=result.has_next_page,
        nextPage=result.next_page,
    )


# PUBLIC_INTERFACE
@router.get(
    "/scroll",
    response_model=TodoScrollBatch,
    summary="Scroll Todos",
    description=(
        "Retrieve todos in batches for infinite scrolling.\n\n"
        "Accepts the same filters and sorting as the list endpoint, plus:\n"
        "- nextCursor: zero-based index of the first todo to return (default 0)\n"
        "- limit: batch size (default 10)\n\n"
        "The cursor is a plain index into the filtered and sorted sequence. "
        "Reuse it only with the same filters and sorting that produced it."
    ),
    responses={
        200: {"description": "A batch of todos"},
    },
)
def scroll_todos(
    nextCursor: Optional[str] = Query(None, description="The starting index for the next batch of todos"),
    limit: Optional[str] = Query(None, description="Number of todos to retrieve per request"),
    filters: TodoFilters = Depends(_filters),
    ordering: TodoOrdering = Depends(_ordering),
    service: TodoService = Depends(_get_service),
) -> TodoScrollBatch:
    """
    Cursor-based batch retrieval.
    """
    cursor = max(parse_or_default(nextCursor, parse_int, 0), 0)
    result = service.scroll(filters, ordering, cursor=cursor, limit=_limit(limit))
    return TodoScrollBatch(
        todos=[_out(t) for t in result.todos],
        nextCursor=result.next_cursor,
        hasNextPage=result.has_next_page,
    )


# PUBLIC_INTERFACE
@router.get(
    "/{todo_id}",
    response_model=TodoOut,
    summary="Get Todo",
    description="Get a single Todo item by ID.",
    responses={
        200: {"description": "Todo found"},
        404: {"description": "Todo not found"},
    },
)
def get_todo(todo_id: str, service: TodoService = Depends(_get_service)) -> TodoOut:
    """
    Retrieve a single Todo item by its ID.
    """
    try:
        return _out(service.get(todo_id))
    except TodoNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=_NOT_FOUND)


def _update(todo_id: str, payload: TodoUpdate, service: TodoService) -> TodoOut:
    try:
        return _out(service.update(todo_id, payload))
    except TodoNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=_NOT_FOUND)


# PUBLIC_INTERFACE
@router.put(
    "/{todo_id}",
    response_model=TodoOut,
    summary="Update Todo",
    description=(
        "Update a Todo item. Fields omitted from the body keep their current values; "
        "an id in the body is ignored in favour of the path."
    ),
    responses={
        200: {"description": "Todo updated"},
        404: {"description": "Todo not found"},
        422: {"description": "Validation error"},
    },
)
def put_todo(todo_id: str, payload: TodoUpdate, service: TodoService = Depends(_get_service)) -> TodoOut:
    """
    Partial-merge update of a Todo item.
    """
    return _update(todo_id, payload, service)


# PUBLIC_INTERFACE
@router.patch(
    "/{todo_id}",
    response_model=TodoOut,
    summary="Patch Todo",
    description="Same partial-merge semantics as PUT.",
    responses={
        200: {"description": "Todo updated"},
        404: {"description": "Todo not found"},
        422: {"description": "Validation error"},
    },
)
def patch_todo(todo_id: str, payload: TodoUpdate, service: TodoService = Depends(_get_service)) -> TodoOut:
    """
    Partial update of a Todo item.
    """
    return _update(todo_id, payload, service)
