# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from vex.core.state import AppState
from vex.tasks.task_list import TaskList
from vex.tasks.task_storage import TaskFileStorage

from .fakes import RecordingStorage


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and bootstrap.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the environment and any local .env.
    """
    return SimpleNamespace(
        app_name="Vex",
        log_level="WARNING",
        log_to_file=False,
        data_dir=tmp_path / "data",
        tasks_path=tmp_path / "data" / "tasks.txt",
        remind_days=7,
    )


@pytest.fixture()
def state(settings: SimpleNamespace) -> AppState:
    """
    AppState wired with the real flat-file storage under tmp_path.
    """
    storage = TaskFileStorage(settings.tasks_path)
    return AppState(settings=settings, tasks=storage.load(), storage=storage)


@pytest.fixture()
def fake_state(settings: SimpleNamespace) -> AppState:
    """AppState with a RecordingStorage, for asserting when saves happen."""
    return AppState(settings=settings, tasks=TaskList(), storage=RecordingStorage())
