# src/todo_cache/core/state.py

from __future__ import annotations

from dataclasses import dataclass

from ..cache.reconciler import MutationReconciler
from ..cache.store import CacheStore
from .ports import TodoAPI
from .todo_list import TodoListClient


@dataclass
class AppState:
    # Settings are kept on the state so commands can show them (/status).
    settings: object

    api: TodoAPI
    store: CacheStore
    reconciler: MutationReconciler
    todo_list: TodoListClient
