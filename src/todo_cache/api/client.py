# src/todo_cache/api/client.py

from __future__ import annotations

import logging
from typing import Any

import httpx

from ..cache.models import Todo, TodoPatch
from ..core.errors import RemoteAPIError

logger = logging.getLogger(__name__)

TODOS_QUERY = """
query Todos {
  todos {
    id
    text
    completed
  }
}
"""

ADD_TODO_MUTATION = """
mutation AddTodo($text: String!) {
  addTodo(text: $text) {
    id
    text
    completed
  }
}
"""

EDIT_TODO_MUTATION = """
mutation EditTodo($id: ID!, $completed: Boolean) {
  editTodo(id: $id, completed: $completed) {
    id
    completed
  }
}
"""

DELETE_TODO_MUTATION = """
mutation DeleteTodo($id: ID!) {
  deleteTodo(id: $id) {
    id
  }
}
"""


def _make_timeout(connect_s: float, read_s: float) -> httpx.Timeout:
    return httpx.Timeout(
        connect=connect_s,
        read=read_s,
        write=10.0,
        pool=connect_s,
    )


class GraphQLTodoAPI:
    """
    TodoAPI over a GraphQL endpoint (httpx.AsyncClient).

    Every failure mode is raised as RemoteAPIError:
    - network / timeout errors
    - non-2xx HTTP responses
    - a GraphQL "errors" array or a missing data field

    No retries here: the caller decides what to do with a failed operation.
    """

    def __init__(self, settings, *, client: httpx.AsyncClient | None = None) -> None:
        url = (getattr(settings, "api_url", None) or "").strip()
        if not url:
            raise RuntimeError("Todo API URL is not configured. Set TODO_API_URL in your .env.")

        self.url = url
        if client is None:
            client = httpx.AsyncClient(
                timeout=_make_timeout(
                    connect_s=float(getattr(settings, "api_connect_timeout", 5.0)),
                    read_s=float(getattr(settings, "api_read_timeout", 15.0)),
                ),
                headers={"Accept": "application/json"},
            )
        self._client = client

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _execute(self, operation: str, document: str, variables: dict[str, Any] | None = None) -> dict[str, Any]:
        payload: dict[str, Any] = {"operationName": operation, "query": document}
        if variables:
            payload["variables"] = variables

        logger.debug("GraphQL %s variables=%s", operation, variables)
        try:
            resp = await self._client.post(self.url, json=payload)
            resp.raise_for_status()
            body = resp.json()
        except httpx.TimeoutException as e:
            raise RemoteAPIError(f"{operation}: request timed out") from e
        except httpx.HTTPStatusError as e:
            raise RemoteAPIError(f"{operation}: HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise RemoteAPIError(f"{operation}: network error ({e.__class__.__name__})") from e
        except ValueError as e:
            raise RemoteAPIError(f"{operation}: response is not valid JSON") from e

        if not isinstance(body, dict):
            raise RemoteAPIError(f"{operation}: unexpected response shape")

        errors = body.get("errors")
        if errors:
            first = errors[0] if isinstance(errors, list) else errors
            msg = first.get("message") if isinstance(first, dict) else str(first)
            raise RemoteAPIError(f"{operation}: {msg or 'GraphQL error'}")

        data = body.get("data")
        if not isinstance(data, dict):
            raise RemoteAPIError(f"{operation}: response has no data")
        return data

    @staticmethod
    def _field(data: dict[str, Any], operation: str, name: str) -> Any:
        value = data.get(name)
        if value is None:
            raise RemoteAPIError(f"{operation}: response has no {name}")
        return value

    async def fetch_todos(self) -> list[Todo]:
        data = await self._execute("Todos", TODOS_QUERY)
        raw = self._field(data, "Todos", "todos")
        if not isinstance(raw, list):
            raise RemoteAPIError("Todos: todos is not a list")
        try:
            return [Todo.from_payload(item) for item in raw]
        except (ValueError, AttributeError) as e:
            raise RemoteAPIError(f"Todos: malformed todo ({e})") from e

    async def add_todo(self, text: str) -> Todo:
        data = await self._execute("AddTodo", ADD_TODO_MUTATION, {"text": text})
        try:
            return Todo.from_payload(self._field(data, "AddTodo", "addTodo"))
        except (ValueError, AttributeError) as e:
            raise RemoteAPIError(f"AddTodo: malformed todo ({e})") from e

    async def edit_todo(self, todo_id: str, completed: bool) -> TodoPatch:
        data = await self._execute("EditTodo", EDIT_TODO_MUTATION, {"id": todo_id, "completed": completed})
        try:
            return TodoPatch.from_payload(self._field(data, "EditTodo", "editTodo"))
        except (ValueError, AttributeError) as e:
            raise RemoteAPIError(f"EditTodo: malformed todo ({e})") from e

    async def delete_todo(self, todo_id: str) -> str:
        data = await self._execute("DeleteTodo", DELETE_TODO_MUTATION, {"id": todo_id})
        raw = self._field(data, "DeleteTodo", "deleteTodo")
        deleted_id = raw.get("id") if isinstance(raw, dict) else None
        if deleted_id is None:
            raise RemoteAPIError("DeleteTodo: response has no id")
        return str(deleted_id)
