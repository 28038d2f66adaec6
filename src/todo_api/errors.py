from __future__ import annotations


class TodoNotFoundError(LookupError):
    """Raised when an operation targets a todo id that the store does not hold."""

    def __init__(self, todo_id: str) -> None:
        super().__init__(f"Todo {todo_id!r} not found")
        self.todo_id = todo_id
