# src/todo_cache/cache/models.py

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

QueryKey = str

# The list query has no parameters, so a single fixed key identifies it.
TODOS_QUERY_KEY: QueryKey = "todos"


@dataclass(frozen=True, slots=True)
class Todo:
    id: str
    text: str
    completed: bool = False

    @classmethod
    def from_payload(cls, raw: Mapping[str, Any]) -> Todo:
        todo_id = raw.get("id")
        if todo_id is None or str(todo_id) == "":
            raise ValueError("todo payload is missing id")
        return cls(
            id=str(todo_id),
            text=str(raw.get("text") or ""),
            completed=bool(raw.get("completed", False)),
        )


@dataclass(frozen=True, slots=True)
class TodoPatch:
    """
    Partial todo returned by the edit mutation.

    Only fields the remote actually returned are set; None means "not returned".
    """

    id: str
    completed: bool | None = None
    text: str | None = None

    @classmethod
    def from_payload(cls, raw: Mapping[str, Any]) -> TodoPatch:
        todo_id = raw.get("id")
        if todo_id is None or str(todo_id) == "":
            raise ValueError("todo patch payload is missing id")
        completed = raw.get("completed")
        text = raw.get("text")
        return cls(
            id=str(todo_id),
            completed=None if completed is None else bool(completed),
            text=None if text is None else str(text),
        )

    def fields(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        if self.completed is not None:
            out["completed"] = self.completed
        if self.text is not None:
            out["text"] = self.text
        return out


CachedTodos = tuple[Todo, ...]
