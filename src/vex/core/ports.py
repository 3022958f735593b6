# src/vex/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

Command handlers depend on these Protocols rather than on concrete classes,
so the flat-file storage can be swapped for a fake in tests.
"""

from collections.abc import Iterable
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from ..tasks.task_list import TaskList
    from ..tasks.task_models import Task


class TaskStorage(Protocol):
    """Persists the whole task list at once."""

    def save(self, tasks: Iterable[Task]) -> bool: ...

    def load(self) -> TaskList: ...
