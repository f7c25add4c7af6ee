# src/todo_cache/api/offline.py

from __future__ import annotations

import itertools
from collections.abc import Iterable

from ..cache.models import Todo, TodoPatch
from ..core.errors import RemoteAPIError


class OfflineTodoAPI:
    """
    Offline deterministic TodoAPI used for demos when no endpoint is configured.

    Behavior:
    - ids are sequential strings ("1", "2", ...) and never reused
    - edit returns only {id, completed}, like the remote edit mutation
    - unknown ids raise RemoteAPIError
    """

    def __init__(self, seed: Iterable[str] = ()) -> None:
        self._ids = itertools.count(1)
        self._todos: dict[str, Todo] = {}
        for text in seed:
            todo = Todo(id=str(next(self._ids)), text=text, completed=False)
            self._todos[todo.id] = todo

    async def aclose(self) -> None:
        return

    async def fetch_todos(self) -> list[Todo]:
        return list(self._todos.values())

    async def add_todo(self, text: str) -> Todo:
        todo = Todo(id=str(next(self._ids)), text=text, completed=False)
        self._todos[todo.id] = todo
        return todo

    async def edit_todo(self, todo_id: str, completed: bool) -> TodoPatch:
        todo = self._todos.get(todo_id)
        if todo is None:
            raise RemoteAPIError(f"EditTodo: todo {todo_id} not found")
        self._todos[todo_id] = Todo(id=todo.id, text=todo.text, completed=bool(completed))
        return TodoPatch(id=todo_id, completed=bool(completed))

    async def delete_todo(self, todo_id: str) -> str:
        if self._todos.pop(todo_id, None) is None:
            raise RemoteAPIError(f"DeleteTodo: todo {todo_id} not found")
        return todo_id
