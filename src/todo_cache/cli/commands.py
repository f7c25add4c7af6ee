# src/todo_cache/cli/commands.py

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Callable
from typing import cast

from ..cache.models import Todo
from ..core.errors import FetchFailure, MutationFailure, friendly_error_message
from ..core.state import AppState
from ..core.todo_list import sorted_for_display

CommandEmitter = Callable[[str], None]
CommandResult = str | Awaitable[str]
CommandHandler2 = Callable[[AppState, list[str]], CommandResult]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], CommandResult]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by the console connector (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    async def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 3

        if nparams >= 3:
            result = cast(CommandHandler3, handler)(state, args, emit)
        else:
            result = cast(CommandHandler2, handler)(state, args)

        if inspect.isawaitable(result):
            result = await result
        return cast(str, result)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def format_todos(todos: tuple[Todo, ...] | None, error: Exception | None = None) -> str:
    if todos is None:
        # No value yet: either the first fetch is pending or it failed.
        if error is not None:
            return f"Error! {friendly_error_message(error)}"
        return "Loading..."
    if not todos:
        return "No todos yet. Type a task to add it."
    lines = []
    for t in sorted_for_display(todos):
        mark = "x" if t.completed else " "
        lines.append(f"  [{mark}] {t.text}  (id={t.id})")
    return "\n".join(lines)


def _find_todo(state: AppState, todo_id: str) -> Todo | None:
    for t in state.todo_list.todos() or ():
        if t.id == todo_id:
            return t
    return None


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_list(state: AppState, args: list[str]) -> str:
    return format_todos(state.todo_list.todos(), state.todo_list.fetch_error)


def cmd_status(state: AppState, args: list[str]) -> str:
    s = state.settings
    api_url = getattr(s, "api_url", None) or "offline"
    cached = state.todo_list.todos()
    size = "miss" if cached is None else str(len(cached))
    return (
        "Status:\n"
        f"  API: {api_url}\n"
        f"  Cached todos: {size}\n"
        f"  Patch applies fields: {'ON' if state.reconciler.patch_applies_fields else 'OFF'}\n"
        f"  Dedupe inserts: {'ON' if state.reconciler.dedupe_inserts else 'OFF'}"
    )


async def cmd_add(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """/add <text> -> create a todo"""
    text = " ".join(args).strip()
    if not text:
        return "Usage: /add <text>"
    return await add_text(state, text)


async def add_text(state: AppState, text: str) -> str:
    """Add a todo with exactly this text (the console's plain-input path)."""
    try:
        todo = await state.todo_list.request_add(text)
    except MutationFailure as e:
        return f"Error! {friendly_error_message(e)}"
    return f"Added: {todo.text} (id={todo.id})"


async def cmd_toggle(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """/toggle <id> -> flip completed"""
    if not args:
        return "Usage: /toggle <id>"
    todo = _find_todo(state, args[0])
    if todo is None:
        return f"Unknown todo id: {args[0]}"
    try:
        patch = await state.todo_list.request_toggle(todo.id, todo.completed)
    except MutationFailure as e:
        return f"Error! {friendly_error_message(e)}"
    if not state.reconciler.patch_applies_fields:
        return f"Toggled {patch.id} on the server. Use /refresh to see the new state."
    return f"Toggled {patch.id}."


async def cmd_remove(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """/rm <id> -> delete a todo"""
    if not args:
        return "Usage: /rm <id>"
    try:
        removed_id = await state.todo_list.request_remove(args[0])
    except MutationFailure as e:
        return f"Error! {friendly_error_message(e)}"
    return f"Removed {removed_id}."


async def cmd_refresh(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    if emit:
        emit("Refreshing...")
    try:
        todos = await state.todo_list.load(force=True)
    except FetchFailure as e:
        return f"Error! {friendly_error_message(e)}"
    return f"Loaded {len(todos)} todos."


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("list", cmd_list, help_text="Show the cached todo list.", aliases=["ls"])
registry.register("add", cmd_add, help_text="Add a todo: /add <text> (plain text works too).")
registry.register("toggle", cmd_toggle, help_text="Toggle completed: /toggle <id>.", aliases=["t"])
registry.register("rm", cmd_remove, help_text="Remove a todo: /rm <id>.", aliases=["del", "remove"])
registry.register("refresh", cmd_refresh, help_text="Refetch the list from the server.")
registry.register("status", cmd_status, help_text="Show API and cache settings.")
