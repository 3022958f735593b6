# src/vex/cli/commands.py

"""
Command parsing and dispatch.

A line is split into a command word (matched case-insensitively) and the
trimmed rest of the line. Handlers validate their arguments, act on
state.tasks, persist through state.storage when they mutate, and return the
reply as a list of lines. Errors never escape CommandRegistry.handle.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from datetime import date, datetime

from ..core.state import AppState
from ..errors import TaskIndexError, ValidationError, VexError
from ..tasks.task_list import TaskList
from ..tasks.task_models import Task, format_display_date

CommandHandler = Callable[[AppState, str], list[str]]

logger = logging.getLogger(__name__)

INPUT_DATETIME_FORMAT = "%Y-%m-%d %H%M"
INPUT_DATE_FORMAT = "%Y-%m-%d"

# strptime accepts unpadded fields; these pin the exact shape first.
_DATETIME_SHAPE = re.compile(r"\d{4}-\d{2}-\d{2} \d{4}")
_DATE_SHAPE = re.compile(r"\d{4}-\d{2}-\d{2}")

_BY = re.compile(r"(?:^|\s)/by(?:\s|$)")
_FROM = re.compile(r"(?:^|\s)/from(?:\s|$)")
_TO = re.compile(r"(?:^|\s)/to(?:\s|$)")

SAVE_FAILED_WARNING = "Warning: your changes could not be saved to disk."


class CommandRegistry:
    """Registry of task commands (list, todo, mark, ...) used by connectors."""

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

    def handle(self, state: AppState, line: str) -> list[str]:
        """
        Handle one input line and return the reply lines.

        Validation and index errors become a single "Oh no! ..." line.
        """
        parts = line.strip().split(maxsplit=1)
        if not parts:
            return [error_line("Please type a command. Use help to list available commands.")]

        name = parts[0].lower()
        args = parts[1].strip() if len(parts) > 1 else ""

        handler = self._handlers.get(name)
        if not handler:
            logger.debug("Unknown command word=%r", parts[0])
            return [error_line("I apologise, but I am unsure of what that means. Care to edit your message? :-(")]

        try:
            return handler(state, args)
        except VexError as e:
            logger.debug("Command %s rejected: %s", name, e)
            return [error_line(str(e))]

    def build_help(self) -> list[str]:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  {name} - {help_text}")
        lines.append("  bye - Exit.")
        return lines


registry = CommandRegistry()


def error_line(message: str) -> str:
    return f"Oh no! {message}"


# ---- argument parsing ----


def parse_task_number(raw: str, tasks: TaskList) -> int:
    """Convert a 1-based task number from user input into a valid 0-based index."""
    if not raw:
        raise ValidationError("You must specify a task number.")
    try:
        number = int(raw)
    except ValueError:
        raise ValidationError("Invalid task number format.") from None
    index = number - 1
    size = tasks.size()
    if not 0 <= index < size:
        raise TaskIndexError(index, size, f"Task number out of range. You have {size} tasks in the list.")
    return index


def parse_datetime(raw: str) -> datetime:
    text = raw.strip()
    error = ValidationError(f"Invalid date-time {text!r}. Use yyyy-MM-dd HHmm.")
    if not _DATETIME_SHAPE.fullmatch(text):
        raise error
    try:
        return datetime.strptime(text, INPUT_DATETIME_FORMAT)
    except ValueError:
        raise error from None


def parse_date(raw: str) -> date:
    text = raw.strip()
    error = ValidationError("Invalid date format. Use yyyy-MM-dd.")
    if not _DATE_SHAPE.fullmatch(text):
        raise error
    try:
        return datetime.strptime(text, INPUT_DATE_FORMAT).date()
    except ValueError:
        raise error from None


def parse_todo(args: str) -> Task:
    if not args:
        raise ValidationError("The description of a todo cannot be empty.")
    return Task.todo(args)


def parse_deadline(args: str) -> Task:
    m = _BY.search(args)
    if not m:
        raise ValidationError("Invalid deadline format. Use: deadline <desc> /by yyyy-MM-dd HHmm")

    desc = args[: m.start()].strip()
    if not desc:
        raise ValidationError("The description of a deadline cannot be empty.")
    return Task.deadline(desc, parse_datetime(args[m.end() :]))


def parse_event(args: str) -> Task:
    m_from = _FROM.search(args)
    m_to = _TO.search(args)
    if not m_from or not m_to or m_to.start() < m_from.end():
        raise ValidationError(
            "Invalid event format. Use: event <desc> /from yyyy-MM-dd HHmm /to yyyy-MM-dd HHmm"
        )

    desc = args[: m_from.start()].strip()
    if not desc:
        raise ValidationError("The description of an event cannot be empty.")

    start = parse_datetime(args[m_from.end() : m_to.start()])
    end = parse_datetime(args[m_to.end() :])
    return Task.event(desc, start, end)


def parse_remind_days(args: str, default: int) -> int:
    if not args:
        return default
    parts = args.split()
    if len(parts) != 1:
        raise ValidationError("Usage: remind [days], where days is a single non-negative integer.")
    try:
        days = int(parts[0])
    except ValueError:
        raise ValidationError("Usage: remind [days], where days is a single non-negative integer.") from None
    if days < 0:
        raise ValidationError("days must be non-negative!")
    return days


# ---- helpers ----


def _persist(state: AppState, reply: list[str]) -> list[str]:
    """Save after a mutation; a failed save is a warning, not a failed command."""
    if not state.storage.save(state.tasks.tasks()):
        logger.warning("Task change applied in memory but not saved.")
        reply.append(SAVE_FAILED_WARNING)
    return reply


def _numbered(tasks: TaskList, prefix: str = "") -> list[str]:
    return [f"{prefix}{i}.{t.render()}" for i, t in enumerate(tasks, start=1)]


def _count_line(tasks: TaskList) -> str:
    n = tasks.size()
    return f"Now you have {n} {'task' if n == 1 else 'tasks'} in the list."


# ---- handlers ----


def cmd_help(state: AppState, args: str) -> list[str]:
    return registry.build_help()


def cmd_list(state: AppState, args: str) -> list[str]:
    if args:
        raise ValidationError("list does not take any arguments.")
    if state.tasks.is_empty():
        return ["Your task list is empty."]
    return ["Here are the tasks in your list:", *_numbered(state.tasks)]


def cmd_show(state: AppState, args: str) -> list[str]:
    if not args:
        raise ValidationError("You must provide a date in yyyy-MM-dd format.")
    day = parse_date(args)
    matches = state.tasks.on_date(day)
    reply = [f"Tasks on {format_display_date(day)}:"]
    if matches.is_empty():
        reply.append("No tasks found on this date.")
    else:
        reply.extend(t.render() for t in matches)
    return reply


def cmd_mark(state: AppState, args: str) -> list[str]:
    task = state.tasks.get(parse_task_number(args, state.tasks))
    task.mark_done()
    return _persist(state, ["Nice! I've marked this task as done:", f"  {task.render()}"])


def cmd_unmark(state: AppState, args: str) -> list[str]:
    task = state.tasks.get(parse_task_number(args, state.tasks))
    task.mark_undone()
    return _persist(state, ["OK, I've marked this task as not done yet:", f"  {task.render()}"])


def cmd_delete(state: AppState, args: str) -> list[str]:
    removed = state.tasks.delete(parse_task_number(args, state.tasks))
    return _persist(
        state,
        ["Noted. I've removed this task:", f"  {removed.render()}", _count_line(state.tasks)],
    )


def _add(state: AppState, task: Task) -> list[str]:
    state.tasks.add(task)
    return _persist(
        state,
        ["Got it. I've added this task:", f"  {task.render()}", _count_line(state.tasks)],
    )


def cmd_todo(state: AppState, args: str) -> list[str]:
    return _add(state, parse_todo(args))


def cmd_deadline(state: AppState, args: str) -> list[str]:
    return _add(state, parse_deadline(args))


def cmd_event(state: AppState, args: str) -> list[str]:
    return _add(state, parse_event(args))


def cmd_find(state: AppState, args: str) -> list[str]:
    if not args:
        raise ValidationError("You must provide a keyword to find.")
    matches = state.tasks.find_by_keyword(args)
    if matches.is_empty():
        return ["No matching tasks found in your list!"]
    return ["Here are the matching tasks in your list:", *_numbered(matches, prefix=" ")]


def cmd_remind(state: AppState, args: str) -> list[str]:
    default = int(getattr(state.settings, "remind_days", 7))
    days = parse_remind_days(args, default)
    due = state.tasks.reminders_within(days)
    label = "day" if days == 1 else "days"
    if due.is_empty():
        return [f"No upcoming tasks in the next {days} {label}."]
    return [f"Here are your tasks due in the next {days} {label}:", *_numbered(due)]


registry.register("help", cmd_help, help_text="Show available commands.")
registry.register("list", cmd_list, help_text="Show all tasks.")
registry.register("show", cmd_show, help_text="Tasks on a date: show yyyy-MM-dd.")
registry.register("mark", cmd_mark, help_text="Mark task n as done: mark n.")
registry.register("unmark", cmd_unmark, help_text="Mark task n as not done: unmark n.")
registry.register("delete", cmd_delete, help_text="Remove task n: delete n.")
registry.register("todo", cmd_todo, help_text="Add a todo: todo <desc>.")
registry.register(
    "deadline", cmd_deadline, help_text="Add a deadline: deadline <desc> /by yyyy-MM-dd HHmm."
)
registry.register(
    "event",
    cmd_event,
    help_text="Add an event: event <desc> /from yyyy-MM-dd HHmm /to yyyy-MM-dd HHmm.",
)
registry.register("find", cmd_find, help_text="Search tasks: find <keyword>.")
registry.register("remind", cmd_remind, help_text="Upcoming tasks: remind [days] (default 7).")
