# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from todo_cache.cache.reconciler import MutationReconciler
from todo_cache.cache.store import CacheStore
from todo_cache.cli.bootstrap import create_initial_state
from todo_cache.core.state import AppState
from todo_cache.core.todo_list import TodoListClient

from .fakes import FakeTodoAPI


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and bootstrap.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the environment.
    """
    return SimpleNamespace(
        app_name="todo-test",
        log_level="DEBUG",
        data_dir=tmp_path / "data",
        api_url=None,
        api_connect_timeout=1.0,
        api_read_timeout=1.0,
        patch_applies_fields=False,
        dedupe_inserts=False,
    )


@pytest.fixture()
def store() -> CacheStore:
    return CacheStore()


@pytest.fixture()
def reconciler(store: CacheStore) -> MutationReconciler:
    return MutationReconciler(store)


@pytest.fixture()
def api() -> FakeTodoAPI:
    return FakeTodoAPI()


@pytest.fixture()
def client(api: FakeTodoAPI, store: CacheStore, reconciler: MutationReconciler) -> TodoListClient:
    return TodoListClient(api, store, reconciler)


@pytest.fixture()
def state(settings: SimpleNamespace, api: FakeTodoAPI) -> AppState:
    """AppState wired by the real composition root with a fake remote API."""
    return create_initial_state(settings=settings, api=api)
