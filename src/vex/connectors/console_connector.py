# src/vex/connectors/console_connector.py

from __future__ import annotations

import logging
from collections.abc import Callable

from ..cli.commands import error_line
from ..cli.commands import registry as command_registry
from ..core.state import AppState

logger = logging.getLogger(__name__)

LINE = "____________________________________________________________"

EXIT_WORD = "bye"


def _print_block(lines: list[str]) -> None:
    print(LINE)
    for line in lines:
        print(line)
    print(LINE)


def greeting_lines(state: AppState) -> list[str]:
    app_name = str(getattr(state.settings, "app_name", "Vex"))
    return [f"Hello! I'm {app_name}", "What can I do for you?"]


def farewell_lines() -> list[str]:
    return ["Bye. Hope to see you again soon!"]


def reply_to(state: AppState, user_input: str) -> list[str]:
    """Run one command under the state lock; a crashing handler becomes an error line."""
    try:
        with state.lock:
            return command_registry.handle(state, user_input)
    except Exception:
        logger.exception("Command handler crashed.")
        return [error_line("Internal error while handling that command.")]


def run_console_loop(state: AppState, read_line: Callable[[str], str] = input) -> None:
    logger.info("Console connector started (tasks=%d).", state.tasks.size())

    if state.startup_warning:
        _print_block([error_line(state.startup_warning)])
        state.startup_warning = None
    _print_block(greeting_lines(state))

    while True:
        try:
            user_input = read_line("").strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if not user_input:
            continue

        if user_input.lower() == EXIT_WORD:
            logger.info("Console exit command received.")
            break

        _print_block(reply_to(state, user_input))

    _print_block(farewell_lines())
    logger.info("Console connector finished.")
