from __future__ import annotations

from datetime import date, datetime, timezone
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictBool, field_validator

from .models import Priority

# Shared type for incoming dates which can be a date, datetime, or ISO8601 string
DateInput = Union[date, datetime, str]


def to_utc(value: datetime) -> datetime:
    """
    Return an aware UTC datetime; naive values are taken to be UTC already.
    Raises ValueError when the offset shifts the value outside years 1..9999.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    try:
        return value.astimezone(timezone.utc)
    except OverflowError as e:
        raise ValueError("date is out of range once converted to UTC") from e


# PUBLIC_INTERFACE
def parse_date(value: Optional[DateInput]) -> Optional[datetime]:
    """
    Normalize a date input into an aware UTC datetime.
    - If value is a string, parse it as ISO8601; a trailing 'Z' is accepted and a bare date means midnight.
    - If value is a date (not datetime), convert to datetime at 00:00 UTC.
    - If value is a datetime, convert it to UTC.
    Raises ValueError for anything that cannot be parsed.
    """
    if value is None:
        return None

    if isinstance(value, datetime):
        return to_utc(value)

    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)

    if isinstance(value, str):
        s = value.strip()
        if s.endswith(("Z", "z")):
            s = s[:-1] + "+00:00"
        try:
            return to_utc(datetime.fromisoformat(s))
        except ValueError:
            try:
                d = date.fromisoformat(s)
                return datetime(d.year, d.month, d.day, tzinfo=timezone.utc)
            except ValueError as e:
                raise ValueError(
                    "Invalid date format. Use ISO8601 date or datetime string (e.g., '2025-01-31' or '2025-01-31T13:45:00Z')."
                ) from e

    raise ValueError("Invalid type for date; expected date, datetime, or ISO8601 string.")


def _check_title(v: str) -> str:
    if not v.strip():
        raise ValueError("title must not be blank")
    return v


# PUBLIC_INTERFACE
class TodoCreate(BaseModel):
    """
    Schema for creating a new Todo item.
    completed defaults to false and priority to MEDIUM; date is optional.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "Buy groceries",
                "completed": False,
                "date": "2025-02-01T09:00:00Z",
                "priority": "HIGH",
            }
        }
    )

    title: str = Field(..., description="Short title for the todo item", min_length=1)
    completed: StrictBool = Field(default=False, description="Completion status flag")
    date: Optional[datetime] = Field(
        default=None,
        description="Date of the todo item (ISO8601). Defaults to the creation time when omitted",
    )
    priority: Priority = Field(default=Priority.MEDIUM, description="Priority level")

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        """
        Reject blank titles; the text is stored as given.
        """
        return _check_title(v)

    @field_validator("date", mode="before")
    @classmethod
    def normalize_date(cls, v: Optional[DateInput]) -> Optional[datetime]:
        return parse_date(v)


# PUBLIC_INTERFACE
class TodoUpdate(BaseModel):
    """
    Schema for updating an existing Todo item.
    All fields are optional; only provided fields will be updated.
    priority carries the schema default MEDIUM; the update merge restores the
    stored priority (and date) whenever the caller did not supply one.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "Buy groceries and supplies",
                "completed": True,
                "date": "2025-02-02T09:30:00Z",
                "priority": "LOW",
            }
        }
    )

    title: Optional[str] = Field(default=None, description="Short title for the todo item", min_length=1)
    completed: Optional[StrictBool] = Field(default=None, description="Completion status flag")
    date: Optional[datetime] = Field(default=None, description="Date of the todo item (ISO8601)")
    priority: Optional[Priority] = Field(default=Priority.MEDIUM, description="Priority level")

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return _check_title(v)

    @field_validator("date", mode="before")
    @classmethod
    def normalize_date(cls, v: Optional[DateInput]) -> Optional[datetime]:
        return parse_date(v)


# PUBLIC_INTERFACE
class TodoOut(BaseModel):
    """
    Schema returned by the API for a Todo item.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "1",
                "title": "Buy groceries",
                "completed": False,
                "date": "2025-02-01T09:00:00Z",
                "priority": "MEDIUM",
            }
        }
    )

    id: str = Field(..., description="Unique identifier of the todo item")
    title: str = Field(..., description="Short title for the todo item")
    completed: bool = Field(..., description="Completion status flag")
    date: datetime = Field(..., description="Date of the todo item as an ISO8601 datetime")
    priority: Priority = Field(..., description="Priority level")


# PUBLIC_INTERFACE
class TodoPage(BaseModel):
    """
    Envelope for offset-paginated list responses.
    """

    todos: List[TodoOut] = Field(..., description="Todos on the requested page")
    totalTodos: int = Field(..., description="Number of todos matching the filters, across all pages")
    hasNextPage: bool = Field(..., description="Whether another page follows this one")
    nextPage: Optional[int] = Field(default=None, description="Number of the next page, or null on the last page")


# PUBLIC_INTERFACE
class TodoScrollBatch(BaseModel):
    """
    Envelope for cursor-paginated (infinite scroll) responses.
    """

    todos: List[TodoOut] = Field(..., description="Todos in this batch")
    nextCursor: Optional[int] = Field(default=None, description="Cursor for the next batch, or null if exhausted")
    hasNextPage: bool = Field(..., description="Whether there are more todos to load")
