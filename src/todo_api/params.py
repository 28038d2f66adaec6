"""
Permissive parsing of list query parameters.

Every optional parameter goes through ``parse_or_default``: a parser either
returns a value or raises ``ValueError``, and any failure (or a missing
value) yields the supplied default. Malformed filter, sort and pagination
input therefore never becomes a client error.
"""
from __future__ import annotations

from datetime import datetime
from typing import Callable, Optional, TypeVar

from .models import Priority
from .schemas import parse_date

T = TypeVar("T")

SORT_FIELDS = ("id", "title", "completed", "date", "priority")
DEFAULT_SORT = "date"
SORT_ORDERS = ("asc", "desc")
DEFAULT_ORDER = "asc"


# PUBLIC_INTERFACE
def parse_or_default(raw: Optional[str], parser: Callable[[str], T], default: T) -> T:
    """Apply parser to raw, returning default when raw is None or parser raises ValueError."""
    if raw is None:
        return default
    try:
        return parser(raw)
    except ValueError:
        return default


def parse_bool(raw: str) -> bool:
    """Only the literals 'true' and 'false' are recognised."""
    if raw == "true":
        return True
    if raw == "false":
        return False
    raise ValueError(f"not a boolean literal: {raw!r}")


def parse_int(raw: str) -> int:
    return int(raw.strip(), 10)


def parse_datetime(raw: str) -> datetime:
    parsed = parse_date(raw)
    if parsed is None:
        raise ValueError("empty date")
    return parsed


def parse_priority(raw: str) -> Priority:
    return Priority(raw)


def _choice(allowed) -> Callable[[str], str]:
    def parse(raw: str) -> str:
        if raw not in allowed:
            raise ValueError(f"{raw!r} is not one of {', '.join(allowed)}")
        return raw

    return parse


parse_sort_field = _choice(SORT_FIELDS)
parse_order = _choice(SORT_ORDERS)
