# tests/test_commands.py

from __future__ import annotations

import pytest

from todo_cache.cache.models import Todo
from todo_cache.cli.commands import CommandRegistry, format_todos
from todo_cache.cli.commands import registry as default_registry

from .fakes import FakeTodoAPI


@pytest.mark.asyncio
async def test_command_registry_routes_2_and_3_params(state) -> None:
    reg = CommandRegistry()
    called = {"h2": 0, "h3": 0}
    notes: list[str] = []

    def h2(state, args):
        called["h2"] += 1
        return "h2"

    async def h3(state, args, emit):
        called["h3"] += 1
        if emit is not None:
            emit("note")
        return "h3"

    reg.register("a", h2, "a")
    reg.register("b", h3, "b")

    assert await reg.handle(state, "/a x") == "h2"
    assert await reg.handle(state, "/b y", emit=notes.append) == "h3"
    assert called == {"h2": 1, "h3": 1}
    assert notes == ["note"]


@pytest.mark.asyncio
async def test_command_registry_unknown_and_non_command(state) -> None:
    reg = CommandRegistry()
    assert await reg.handle(state, "hello") is None
    assert "Unknown command" in (await reg.handle(state, "/nope") or "")


@pytest.mark.asyncio
async def test_add_toggle_remove_flow(state, api: FakeTodoAPI) -> None:
    await state.todo_list.load()

    reply = await default_registry.handle(state, "/add buy milk")
    assert reply is not None and "buy milk" in reply
    (todo,) = state.todo_list.todos()

    reply = await default_registry.handle(state, f"/toggle {todo.id}")
    assert reply is not None and "/refresh" in reply
    assert api.calls[-1] == ("edit", (todo.id, True))

    assert await default_registry.handle(state, f"/rm {todo.id}") == f"Removed {todo.id}."
    assert state.todo_list.todos() == ()


@pytest.mark.asyncio
async def test_failed_add_reports_error(state, api: FakeTodoAPI) -> None:
    state.store.write(state.todo_list.query_key, [Todo("1", "a")])
    api.fail_on.add("add")

    reply = await default_registry.handle(state, "/add b")

    assert reply is not None and reply.startswith("Error!")
    assert state.todo_list.todos() == (Todo("1", "a"),)


@pytest.mark.asyncio
async def test_toggle_unknown_id(state) -> None:
    assert await default_registry.handle(state, "/toggle 42") == "Unknown todo id: 42"


@pytest.mark.asyncio
async def test_refresh_reports_fetch_error(state, api: FakeTodoAPI) -> None:
    api.fail_on.add("fetch")
    reply = await default_registry.handle(state, "/refresh")
    assert reply is not None and reply.startswith("Error! Could not load todos")


def test_format_todos_states() -> None:
    assert format_todos(None) == "Loading..."
    assert "No todos yet" in format_todos(())
    out = format_todos((Todo("1", "a"), Todo("2", "b", True)))
    assert out.splitlines() == ["  [x] b  (id=2)", "  [ ] a  (id=1)"]


@pytest.mark.asyncio
async def test_list_shows_error_after_failed_fetch(state, api: FakeTodoAPI) -> None:
    api.fail_on.add("fetch")
    assert (await default_registry.handle(state, "/refresh") or "").startswith("Error!")

    reply = await default_registry.handle(state, "/list")

    assert reply == "Error! Could not load todos: fetch rejected"


@pytest.mark.asyncio
async def test_list_recovers_after_successful_refetch(state, api: FakeTodoAPI) -> None:
    api.fail_on.add("fetch")
    await default_registry.handle(state, "/refresh")
    api.fail_on.clear()
    api.todos = [Todo("1", "a")]

    await default_registry.handle(state, "/refresh")

    assert await default_registry.handle(state, "/list") == "  [ ] a  (id=1)"


@pytest.mark.asyncio
async def test_failed_mutation_before_load_is_not_a_fetch_error(state, api: FakeTodoAPI) -> None:
    api.fail_on.add("add")
    await default_registry.handle(state, "/add x")
    assert await default_registry.handle(state, "/list") == "Loading..."
