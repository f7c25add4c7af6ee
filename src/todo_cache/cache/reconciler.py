# src/todo_cache/cache/reconciler.py

from __future__ import annotations

"""
Mutation reconciler.

Derives the next cached list from the current one plus the outcome of one
successful mutation, and commits it through the CacheStore.

Merge policies:
- insert: append the created todo (optionally last-write-wins by id)
- remove: drop every todo with the confirmed id
- patch:  keep the cached todos as they are, or merge the returned fields
          when patch_applies_fields is enabled

A cache miss is treated as an empty list by every policy.
"""

import logging
from collections.abc import Iterable
from dataclasses import replace
from enum import StrEnum

from .models import TODOS_QUERY_KEY, CachedTodos, QueryKey, Todo, TodoPatch
from .store import CacheStore

logger = logging.getLogger(__name__)


class MergePolicy(StrEnum):
    INSERT = "insert"
    PATCH = "patch"
    REMOVE = "remove"


def append_todo(current: Iterable[Todo], todo: Todo, *, dedupe: bool = False) -> CachedTodos:
    items = tuple(current)
    if dedupe:
        for i, existing in enumerate(items):
            if existing.id == todo.id:
                return items[:i] + (todo,) + items[i + 1 :]
    return items + (todo,)


def drop_todo(current: Iterable[Todo], todo_id: str) -> CachedTodos:
    return tuple(t for t in current if t.id != todo_id)


def merge_patch(current: Iterable[Todo], patch: TodoPatch, *, apply_fields: bool = False) -> CachedTodos:
    items = tuple(current)
    if not apply_fields:
        return items
    fields = patch.fields()
    if not fields:
        return items
    return tuple(replace(t, **fields) if t.id == patch.id else t for t in items)


class MutationReconciler:
    """
    Applies merge policies to one query key of a CacheStore.

    Holds no cached data itself: each call reads the current value,
    derives a new one and hands it back to the store in one step.
    """

    def __init__(
        self,
        store: CacheStore,
        *,
        query_key: QueryKey = TODOS_QUERY_KEY,
        patch_applies_fields: bool = False,
        dedupe_inserts: bool = False,
    ) -> None:
        self._store = store
        self.query_key = query_key
        self.patch_applies_fields = patch_applies_fields
        self.dedupe_inserts = dedupe_inserts

    def insert_on_success(self, todo: Todo) -> CachedTodos:
        value = self._store.update(
            self.query_key,
            lambda current: append_todo(current or (), todo, dedupe=self.dedupe_inserts),
        )
        logger.debug("Reconciled %s id=%s size=%d", MergePolicy.INSERT.value, todo.id, len(value))
        return value

    def remove_on_success(self, todo_id: str) -> CachedTodos:
        value = self._store.update(
            self.query_key,
            lambda current: drop_todo(current or (), todo_id),
        )
        logger.debug("Reconciled %s id=%s size=%d", MergePolicy.REMOVE.value, todo_id, len(value))
        return value

    def patch_on_success(self, patch: TodoPatch) -> CachedTodos:
        value = self._store.update(
            self.query_key,
            lambda current: merge_patch(current or (), patch, apply_fields=self.patch_applies_fields),
        )
        logger.debug(
            "Reconciled %s id=%s applied_fields=%s size=%d",
            MergePolicy.PATCH.value,
            patch.id,
            self.patch_applies_fields,
            len(value),
        )
        return value

    def reconcile(self, policy: MergePolicy, outcome: Todo | TodoPatch | str) -> CachedTodos:
        """Dispatch a mutation outcome to the matching policy."""
        if policy == MergePolicy.INSERT:
            if not isinstance(outcome, Todo):
                raise TypeError("insert expects a Todo")
            return self.insert_on_success(outcome)
        if policy == MergePolicy.PATCH:
            if not isinstance(outcome, TodoPatch):
                raise TypeError("patch expects a TodoPatch")
            return self.patch_on_success(outcome)
        if policy == MergePolicy.REMOVE:
            todo_id = outcome if isinstance(outcome, str) else outcome.id
            return self.remove_on_success(todo_id)
        raise ValueError(f"Unknown merge policy: {policy!r}")
