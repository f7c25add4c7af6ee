# tests/test_cache_store.py

from __future__ import annotations

import threading
import time

from todo_cache.cache.models import TODOS_QUERY_KEY, Todo
from todo_cache.cache.store import CacheStore

from .fakes import RecordingSubscriber


def test_read_miss_returns_none(store: CacheStore) -> None:
    assert store.read(TODOS_QUERY_KEY) is None
    assert store.keys() == []


def test_write_establishes_and_replaces_value(store: CacheStore) -> None:
    first = [Todo("1", "a")]
    store.write(TODOS_QUERY_KEY, first)
    value = store.read(TODOS_QUERY_KEY)
    assert value == (Todo("1", "a"),)

    # The stored value is a snapshot; mutating the input list does not leak in.
    first.append(Todo("2", "b"))
    assert store.read(TODOS_QUERY_KEY) == (Todo("1", "a"),)

    store.write(TODOS_QUERY_KEY, [Todo("2", "b", True)])
    assert store.read(TODOS_QUERY_KEY) == (Todo("2", "b", True),)
    # Old snapshot is untouched by the replace.
    assert value == (Todo("1", "a"),)


def test_keys_are_independent(store: CacheStore) -> None:
    store.write("todos", [Todo("1", "a")])
    store.write("other", [])
    assert store.read("todos") == (Todo("1", "a"),)
    assert store.read("other") == ()
    assert sorted(store.keys()) == ["other", "todos"]


def test_subscribers_see_every_write_until_unsubscribed(store: CacheStore) -> None:
    sub = RecordingSubscriber()
    unsubscribe = store.subscribe(TODOS_QUERY_KEY, sub)

    store.write(TODOS_QUERY_KEY, [Todo("1", "a")])
    store.update(TODOS_QUERY_KEY, lambda cur: (cur or ()) + (Todo("2", "b"),))
    store.write("other", [Todo("9", "z")])

    assert sub.values == [
        (Todo("1", "a"),),
        (Todo("1", "a"), Todo("2", "b")),
    ]

    unsubscribe()
    store.write(TODOS_QUERY_KEY, [])
    assert len(sub.values) == 2


def test_failing_subscriber_does_not_break_write(store: CacheStore) -> None:
    def boom(_value) -> None:
        raise RuntimeError("render failed")

    sub = RecordingSubscriber()
    store.subscribe(TODOS_QUERY_KEY, boom)
    store.subscribe(TODOS_QUERY_KEY, sub)

    store.write(TODOS_QUERY_KEY, [Todo("1", "a")])

    assert store.read(TODOS_QUERY_KEY) == (Todo("1", "a"),)
    assert sub.values == [(Todo("1", "a"),)]


def test_evict_drops_value_and_subscribers(store: CacheStore) -> None:
    sub = RecordingSubscriber()
    store.subscribe(TODOS_QUERY_KEY, sub)
    store.write(TODOS_QUERY_KEY, [Todo("1", "a")])

    store.evict(TODOS_QUERY_KEY)
    assert store.read(TODOS_QUERY_KEY) is None

    store.write(TODOS_QUERY_KEY, [])
    assert len(sub.values) == 1


def test_concurrent_updates_are_not_lost(store: CacheStore) -> None:
    def worker(start: int) -> None:
        for i in range(start, start + 50):
            store.update(TODOS_QUERY_KEY, lambda cur, i=i: (cur or ()) + (Todo(str(i), "t"),))

    threads = [threading.Thread(target=worker, args=(n * 1000,)) for n in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    value = store.read(TODOS_QUERY_KEY)
    assert value is not None
    assert len(value) == 200
    assert len({t.id for t in value}) == 200


def test_subscribers_see_writes_in_commit_order(store: CacheStore) -> None:
    started = threading.Event()
    seen: list = []

    def slow_render(value) -> None:
        if value == (Todo("A", "a"),):
            started.set()
            time.sleep(0.3)
        seen.append(value)

    store.subscribe(TODOS_QUERY_KEY, slow_render)

    writer = threading.Thread(target=store.write, args=(TODOS_QUERY_KEY, [Todo("A", "a")]))
    writer.start()
    assert started.wait(timeout=5)

    store.write(TODOS_QUERY_KEY, [Todo("B", "b")])
    writer.join()

    assert seen == [(Todo("A", "a"),), (Todo("B", "b"),)]
    assert seen[-1] == store.read(TODOS_QUERY_KEY)


def test_subscriber_may_read_store_during_notify(store: CacheStore) -> None:
    reads: list = []
    store.subscribe(TODOS_QUERY_KEY, lambda _value: reads.append(store.read(TODOS_QUERY_KEY)))

    store.write(TODOS_QUERY_KEY, [Todo("1", "a")])

    assert reads == [(Todo("1", "a"),)]


def test_evict_releases_key_lock(store: CacheStore) -> None:
    for i in range(10):
        key = f"todos:{i}"
        store.write(key, [Todo(str(i), "t")])
        store.evict(key)

    assert store.keys() == []
    assert store._key_locks == {}
