from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Dict, TypedDict


# PUBLIC_INTERFACE
class Priority(str, Enum):
    """Priority levels for a todo item."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


# Fixed total order used when sorting by priority
PRIORITY_RANK: Dict[Priority, int] = {
    Priority.LOW: 1,
    Priority.MEDIUM: 2,
    Priority.HIGH: 3,
}


# PUBLIC_INTERFACE
class TodoEntity(TypedDict):
    """
    Domain record for a Todo item as held by the in-memory store.

    Fields:
    - id: Opaque string identifier assigned by the store on insert
    - title: Short title (1..200 chars, trimmed on input via schemas)
    - completed: Boolean completion flag
    - date: Timezone-aware UTC datetime, always set
    - priority: One of LOW, MEDIUM, HIGH
    """

    id: str
    title: str
    completed: bool
    date: datetime
    priority: Priority
