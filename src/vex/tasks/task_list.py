# src/vex/tasks/task_list.py

from __future__ import annotations

import copy
import logging
from collections.abc import Callable, Iterable, Iterator
from datetime import date

from ..errors import InvalidArgumentError, TaskIndexError
from .task_models import Task

logger = logging.getLogger(__name__)


class TaskList:
    """
    Ordered in-memory task store.

    Insertion order is display order. Indexes are 0-based here; the command
    layer converts from the 1-based numbers users type.

    Query methods (find_by_keyword, on_date, reminders_within) return new
    TaskList snapshots holding copies, so callers can't mutate this store
    through them.
    """

    def __init__(self, tasks: Iterable[Task] | None = None) -> None:
        self._tasks: list[Task] = []
        for task in tasks or ():
            self.add(task)

    # ---- mutation ----

    def add(self, task: Task | None) -> None:
        if task is None:
            raise InvalidArgumentError("task must not be None")
        self._tasks.append(task)
        logger.debug("Task added index=%d kind=%s", len(self._tasks) - 1, task.kind.value)

    def delete(self, index: int) -> Task:
        self._check_index(index)
        removed = self._tasks.pop(index)
        logger.debug("Task deleted index=%d remaining=%d", index, len(self._tasks))
        return removed

    # ---- access ----

    def get(self, index: int) -> Task:
        self._check_index(index)
        return self._tasks[index]

    def size(self) -> int:
        return len(self._tasks)

    def is_empty(self) -> bool:
        return not self._tasks

    def tasks(self) -> tuple[Task, ...]:
        """Read-only view of the stored tasks, in order."""
        return tuple(self._tasks)

    def __len__(self) -> int:
        return len(self._tasks)

    def __iter__(self) -> Iterator[Task]:
        return iter(tuple(self._tasks))

    # ---- queries ----

    def find_by_keyword(self, keyword: str | None) -> TaskList:
        """Tasks whose rendered line contains `keyword` (case-sensitive)."""
        if keyword is None:
            raise InvalidArgumentError("keyword must not be None")
        return self._snapshot(lambda t: keyword in t.render())

    def on_date(self, day: date) -> TaskList:
        return self._snapshot(lambda t: t.occurs_on(day))

    def reminders_within(self, days: int, today: date | None = None) -> TaskList:
        """Deadlines due and events starting within `days` days of `today` (inclusive)."""
        if days < 0:
            raise InvalidArgumentError("days must be non-negative!")
        if today is None:
            today = date.today()
        return self._snapshot(lambda t: t.is_due_within(today, days))

    # ---- helpers ----

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self._tasks):
            raise TaskIndexError(index, len(self._tasks))

    def _snapshot(self, predicate: Callable[[Task], bool]) -> TaskList:
        return TaskList(copy.copy(t) for t in self._tasks if predicate(t))
