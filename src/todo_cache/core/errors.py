# src/todo_cache/core/errors.py

from __future__ import annotations


class TodoCacheError(Exception):
    """Base class for errors surfaced by the todo client."""


class RemoteAPIError(TodoCacheError):
    """Raised by remote adapters for transport, HTTP, or GraphQL-level failures."""


class FetchFailure(TodoCacheError):
    """The list query failed; no cached value was established or changed."""


class MutationFailure(TodoCacheError):
    """
    A mutation was rejected by the remote collaborator.

    The cache is left untouched. `operation` is one of "add", "toggle", "remove".
    """

    def __init__(self, operation: str, message: str) -> None:
        super().__init__(message)
        self.operation = operation


def friendly_error_message(err: BaseException) -> str:
    msg = str(err).strip()
    if isinstance(err, FetchFailure):
        return f"Could not load todos: {msg or 'remote error'}"
    if isinstance(err, MutationFailure):
        return f"Could not {err.operation} todo: {msg or 'remote error'}"
    if "not configured" in msg:
        return "Todo API is not configured. Set TODO_API_URL in .env (see config.example.py)."
    return msg or err.__class__.__name__
