# src/todo_cache/cache/store.py

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable

from ..core.ports import CacheSubscriber
from .models import CachedTodos, QueryKey, Todo

logger = logging.getLogger(__name__)


class CacheStore:
    """
    In-memory store of materialized query results.

    Values are immutable tuples and are replaced wholesale:
    - read() returns either the old or the new tuple, never a partial sequence
    - write() establishes a key if it had no value yet
    - update() runs read-compute-write under a per-key lock, so concurrent
      reconciliations against one key are serialized

    Subscribers are notified while the key's lock is held, in registration order,
    so they observe values in commit order. A subscriber may read the store or
    write the same key from its own thread (the lock is reentrant).
    """

    def __init__(self) -> None:
        self._values: dict[QueryKey, CachedTodos] = {}
        self._subscribers: dict[QueryKey, list[CacheSubscriber]] = {}
        self._key_locks: dict[QueryKey, threading.RLock] = {}
        self._guard = threading.Lock()

    # ---- low-level helpers ----

    def _lock_for(self, query_key: QueryKey) -> threading.RLock:
        with self._guard:
            lock = self._key_locks.get(query_key)
            if lock is None:
                lock = threading.RLock()
                self._key_locks[query_key] = lock
            return lock

    def _notify(self, query_key: QueryKey, value: CachedTodos) -> None:
        with self._guard:
            subscribers = list(self._subscribers.get(query_key, ()))
        for callback in subscribers:
            try:
                callback(value)
            except Exception:
                logger.exception("Cache subscriber failed key=%s", query_key)

    # ---- public API ----

    def read(self, query_key: QueryKey) -> CachedTodos | None:
        return self._values.get(query_key)

    def write(self, query_key: QueryKey, new_result: Iterable[Todo]) -> CachedTodos:
        value = tuple(new_result)
        with self._lock_for(query_key):
            self._values[query_key] = value
            logger.debug("Cache write key=%s size=%d", query_key, len(value))
            self._notify(query_key, value)
        return value

    def update(
        self,
        query_key: QueryKey,
        fn: Callable[[CachedTodos | None], Iterable[Todo]],
    ) -> CachedTodos:
        """Compute the next value from the current one and commit it in one step."""
        with self._lock_for(query_key):
            value = tuple(fn(self._values.get(query_key)))
            self._values[query_key] = value
            logger.debug("Cache update key=%s size=%d", query_key, len(value))
            self._notify(query_key, value)
        return value

    def evict(self, query_key: QueryKey) -> None:
        with self._lock_for(query_key):
            self._values.pop(query_key, None)
            with self._guard:
                self._subscribers.pop(query_key, None)
                self._key_locks.pop(query_key, None)
        logger.debug("Cache evict key=%s", query_key)

    def keys(self) -> list[QueryKey]:
        return list(self._values)

    def subscribe(self, query_key: QueryKey, callback: CacheSubscriber) -> Callable[[], None]:
        """Register a callback for writes to query_key. Returns an unsubscribe function."""
        with self._guard:
            self._subscribers.setdefault(query_key, []).append(callback)

        def unsubscribe() -> None:
            with self._guard:
                callbacks = self._subscribers.get(query_key)
                if callbacks and callback in callbacks:
                    callbacks.remove(callback)

        return unsubscribe
