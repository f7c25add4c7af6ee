# src/todo_cache/connectors/console_connector.py

from __future__ import annotations

import asyncio
import logging
import threading
from datetime import datetime

from ..cache.models import CachedTodos
from ..cli.commands import add_text, format_todos
from ..cli.commands import registry as command_registry
from ..core.errors import FetchFailure
from ..core.state import AppState

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}", flush=True)


async def read_line(prompt: str) -> str:
    """
    Read one line from stdin without blocking the event loop.

    input() runs in a daemon thread rather than the default executor:
    Ctrl+C is delivered to the main thread (asyncio.run cancels the loop),
    and shutdown does not wait for a thread still blocked on stdin.
    EOFError from input() is re-raised here.
    """
    loop = asyncio.get_running_loop()
    fut: asyncio.Future[str] = loop.create_future()

    def deliver(line: str | None, err: Exception | None) -> None:
        if fut.done():
            return
        if err is not None:
            fut.set_exception(err)
        else:
            fut.set_result(line or "")

    def worker() -> None:
        try:
            line = input(prompt)
        except Exception as e:
            loop.call_soon_threadsafe(deliver, None, e)
        else:
            loop.call_soon_threadsafe(deliver, line, None)

    threading.Thread(target=worker, name="console-stdin", daemon=True).start()
    return await fut


async def run_console_loop(state: AppState) -> None:
    """
    Console REPL. Ends on /exit, /quit or EOF.

    Ctrl+C is not handled here: asyncio.run cancels this coroutine, the
    subscription is dropped in `finally`, and the caller sees KeyboardInterrupt.
    """
    logger.info("Console connector started.")
    _print_ts("[CONSOLE] Type a task to add it. Use /help for commands. Use /exit to quit.\n")

    def render(todos: CachedTodos) -> None:
        print(format_todos(todos), flush=True)

    # Every cache write re-renders the list.
    unsubscribe = state.store.subscribe(state.todo_list.query_key, render)

    try:
        print("Loading...", flush=True)
        try:
            await state.todo_list.load()
        except FetchFailure:
            print(format_todos(state.todo_list.todos(), state.todo_list.fetch_error), flush=True)

        while True:
            try:
                raw = await read_line(">>> ")
            except EOFError:
                logger.info("Console EOF received, exiting.")
                break

            user_input = raw.strip()
            if not user_input:
                continue

            if user_input.lower() in ("/exit", "/quit"):
                logger.info("Console exit command received.")
                break

            try:
                if user_input.startswith("/"):
                    response = await command_registry.handle(state, user_input, emit=_print_ts)
                else:
                    # Plain text behaves like the "Add" button: the text is sent as typed.
                    response = await add_text(state, raw)
            except Exception:
                logger.exception("Command handler crashed.")
                response = "Internal error while handling a command."

            if response is not None:
                _print_ts(response)
    finally:
        unsubscribe()

    logger.info("Console connector finished.")
