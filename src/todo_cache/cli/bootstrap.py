# src/todo_cache/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures the local (gitignored) data directory exists,
- wires the remote API, cache store, reconciler and list client into AppState.
"""

from __future__ import annotations

import logging

from ..api.client import GraphQLTodoAPI
from ..api.offline import OfflineTodoAPI
from ..cache.reconciler import MutationReconciler
from ..cache.store import CacheStore
from ..config import get_settings
from ..core.ports import TodoAPI
from ..core.state import AppState
from ..core.todo_list import TodoListClient

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings=None, api: TodoAPI | None = None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings (and the API) injectable makes the app easier to test.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    if api is None:
        try:
            api = GraphQLTodoAPI(settings)
            logger.info("Using GraphQL todo API at %s", api.url)
        except RuntimeError as e:
            # Fallback for demos / local runs without a remote endpoint.
            logger.info("%s Falling back to offline mode.", e)
            api = OfflineTodoAPI()

    store = CacheStore()
    reconciler = MutationReconciler(
        store,
        patch_applies_fields=bool(getattr(settings, "patch_applies_fields", False)),
        dedupe_inserts=bool(getattr(settings, "dedupe_inserts", False)),
    )

    return AppState(
        settings=settings,
        api=api,
        store=store,
        reconciler=reconciler,
        todo_list=TodoListClient(api, store, reconciler),
    )
