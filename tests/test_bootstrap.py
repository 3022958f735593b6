# tests/test_bootstrap.py

from __future__ import annotations

from pathlib import Path

from vex.cli.bootstrap import LOAD_ERROR_MESSAGE, create_initial_state
from vex.cli.commands import SAVE_FAILED_WARNING, registry


def test_fresh_start_creates_empty_file(settings) -> None:
    state = create_initial_state(settings=settings)
    assert state.tasks.is_empty()
    assert state.startup_warning is None
    assert settings.tasks_path.exists()


def test_corrupted_lines_become_startup_warning(settings) -> None:
    settings.tasks_path.parent.mkdir(parents=True)
    settings.tasks_path.write_text("garbage\nT | 0 | run marathons\n", "utf-8")

    state = create_initial_state(settings=settings)
    assert state.tasks.size() == 1
    assert state.startup_warning is not None
    assert "1 corrupted line" in state.startup_warning


def test_unreadable_file_falls_back_to_empty_list(settings) -> None:
    settings.tasks_path.mkdir(parents=True)

    state = create_initial_state(settings=settings)
    assert state.tasks.is_empty()
    assert state.startup_warning == LOAD_ERROR_MESSAGE


def test_invalid_utf8_line_keeps_other_tasks_and_saves(settings) -> None:
    settings.tasks_path.parent.mkdir(parents=True)
    settings.tasks_path.write_bytes(b"T | 0 | run marathons\nT | 0 | caf\xe9\n")

    state = create_initial_state(settings=settings)
    assert [t.render() for t in state.tasks] == ["[T][ ] run marathons"]
    assert "1 corrupted line" in state.startup_warning

    registry.handle(state, "todo new")
    assert settings.tasks_path.read_text("utf-8").splitlines() == [
        "T | 0 | run marathons",
        "T | 0 | new",
    ]


def test_unreadable_file_is_never_overwritten(settings, monkeypatch) -> None:
    settings.tasks_path.parent.mkdir(parents=True)
    settings.tasks_path.write_text("T | 0 | run marathons\n", "utf-8")

    def unreadable(self):
        raise PermissionError("denied")

    monkeypatch.setattr(Path, "read_bytes", unreadable)
    state = create_initial_state(settings=settings)
    monkeypatch.undo()

    assert state.startup_warning == LOAD_ERROR_MESSAGE
    assert state.storage.read_only

    reply = registry.handle(state, "todo new")
    assert reply[-1] == SAVE_FAILED_WARNING
    assert settings.tasks_path.read_text("utf-8") == "T | 0 | run marathons\n"
