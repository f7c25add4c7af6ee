# src/todo_cache/core/todo_list.py

from __future__ import annotations

"""
Todo list client.

Issues queries/mutations through the TodoAPI port and keeps the cached
list query in sync:
- load() populates the cache on a miss (or on an explicit refetch)
- request_* await the mutation and reconcile only after it succeeded

A failed mutation never touches the cache; the failure is raised to the caller.
"""

import logging
from collections.abc import Iterable

from ..cache.models import TODOS_QUERY_KEY, CachedTodos, QueryKey, Todo, TodoPatch
from ..cache.reconciler import MergePolicy, MutationReconciler
from ..cache.store import CacheStore
from .errors import FetchFailure, MutationFailure
from .ports import TodoAPI

logger = logging.getLogger(__name__)


def sorted_for_display(todos: Iterable[Todo]) -> list[Todo]:
    """Completed todos first; relative order is otherwise kept. Returns a new list."""
    return sorted(todos, key=lambda t: not t.completed)


class TodoListClient:
    def __init__(
        self,
        api: TodoAPI,
        store: CacheStore,
        reconciler: MutationReconciler | None = None,
        *,
        query_key: QueryKey = TODOS_QUERY_KEY,
    ) -> None:
        self.api = api
        self.store = store
        self.query_key = query_key
        self.reconciler = reconciler or MutationReconciler(store, query_key=query_key)
        self.last_error: Exception | None = None
        # Set while the list query has failed and no later fetch succeeded.
        self.fetch_error: FetchFailure | None = None

    def todos(self) -> CachedTodos | None:
        return self.store.read(self.query_key)

    async def load(self, *, force: bool = False) -> CachedTodos:
        """
        Return the cached list, fetching it when absent (or always with force=True).

        Raises FetchFailure if the query fails; the cache is not written then.
        """
        cached = self.store.read(self.query_key)
        if cached is not None and not force:
            return cached

        try:
            fetched = await self.api.fetch_todos()
        except Exception as e:
            self.last_error = e
            self.fetch_error = FetchFailure(str(e) or e.__class__.__name__)
            logger.warning("Fetch todos failed: %s", e)
            raise self.fetch_error from e

        self.last_error = None
        self.fetch_error = None
        value = self.store.write(self.query_key, fetched)
        logger.info("Fetched todos count=%d", len(value))
        return value

    async def request_add(self, text: str) -> Todo:
        try:
            todo = await self.api.add_todo(text)
        except Exception as e:
            raise self._mutation_failed("add", e) from e

        self.reconciler.reconcile(MergePolicy.INSERT, todo)
        logger.info("Todo added id=%s", todo.id)
        return todo

    async def request_toggle(self, todo_id: str, current_completed: bool) -> TodoPatch:
        try:
            patch = await self.api.edit_todo(todo_id, not current_completed)
        except Exception as e:
            raise self._mutation_failed("toggle", e) from e

        self.reconciler.reconcile(MergePolicy.PATCH, patch)
        logger.info("Todo toggled id=%s completed=%s", patch.id, patch.completed)
        return patch

    async def request_remove(self, todo_id: str) -> str:
        try:
            removed_id = await self.api.delete_todo(todo_id)
        except Exception as e:
            raise self._mutation_failed("remove", e) from e

        self.reconciler.reconcile(MergePolicy.REMOVE, removed_id)
        logger.info("Todo removed id=%s", removed_id)
        return removed_id

    def _mutation_failed(self, operation: str, err: Exception) -> MutationFailure:
        self.last_error = err
        logger.warning("Mutation %s failed: %s", operation, err)
        return MutationFailure(operation, str(err) or err.__class__.__name__)
