# src/vex/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- wires the flat-file storage into AppState,
- loads the saved task list, degrading to an empty in-memory list on I/O failure.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.state import AppState
from ..errors import StorageError
from ..tasks.task_list import TaskList
from ..tasks.task_storage import TaskFileStorage

logger = logging.getLogger(__name__)

LOAD_ERROR_MESSAGE = (
    "Your saved tasks could not be read. Starting with an empty list; "
    "changes will not be saved this session so the file is left untouched."
)


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    If settings is None, falls back to get_settings().
    Never raises for storage problems: they end up in state.startup_warning.
    """
    if settings is None:
        settings = get_settings()

    storage = TaskFileStorage(settings.tasks_path)
    warning: str | None = None

    try:
        tasks = storage.load()
    except StorageError:
        logger.warning("Continuing with an empty task list (load failed for %s).", storage.path)
        tasks = TaskList()
        warning = LOAD_ERROR_MESSAGE
    else:
        skipped = len(storage.skipped_lines)
        if skipped:
            warning = (
                f"Ignored {skipped} corrupted {'line' if skipped == 1 else 'lines'} "
                f"in {storage.path}."
            )

    return AppState(settings=settings, tasks=tasks, storage=storage, startup_warning=warning)
