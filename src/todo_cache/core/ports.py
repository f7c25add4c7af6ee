# src/todo_cache/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The core depends on Protocols instead of concrete implementations.
This keeps the remote API adapter swappable and makes testing easier.
"""

from collections.abc import Callable
from typing import Protocol

from ..cache.models import CachedTodos, Todo, TodoPatch

CacheSubscriber = Callable[[CachedTodos], None]
# Called with the full new value after every write to a subscribed query key.


class TodoAPI(Protocol):
    """
    Remote query/mutation collaborator.

    Implementations raise on failure (RemoteAPIError or anything else);
    the client turns that into FetchFailure / MutationFailure.
    """

    async def fetch_todos(self) -> list[Todo]: ...

    async def add_todo(self, text: str) -> Todo: ...

    async def edit_todo(self, todo_id: str, completed: bool) -> TodoPatch: ...

    async def delete_todo(self, todo_id: str) -> str: ...

    async def aclose(self) -> None: ...
