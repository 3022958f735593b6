# tests/test_task_storage.py

from __future__ import annotations

from datetime import datetime
from pathlib import Path

import pytest

from vex.errors import CorruptRecordError, StorageError
from vex.tasks.task_models import Task, TaskKind
from vex.tasks.task_storage import TaskFileStorage, parse_record


def test_save_and_load_preserve_order_and_done(tmp_path: Path) -> None:
    storage = TaskFileStorage(tmp_path / "nested" / "tasks.txt")

    todo = Task.todo("run marathons")
    todo.mark_done()
    tasks = [
        todo,
        Task.deadline("return book", datetime(2025, 12, 2, 18, 0)),
        Task.event("Meeting", datetime(2026, 2, 1, 10, 0), datetime(2026, 2, 1, 12, 0)),
    ]
    assert storage.save(tasks) is True

    assert storage.path.read_text("utf-8").splitlines() == [
        "T | 1 | run marathons",
        "D | 0 | return book | 2025-12-02T18:00",
        "E | 0 | Meeting | 2026-02-01T10:00 | 2026-02-01T12:00",
    ]

    loaded = storage.load()
    assert [t.render() for t in loaded] == [t.render() for t in tasks]
    assert loaded.get(0).done
    assert storage.skipped_lines == []


def test_load_missing_file_creates_it(tmp_path: Path) -> None:
    path = tmp_path / "data" / "tasks.txt"
    storage = TaskFileStorage(path)

    tasks = storage.load()
    assert tasks.is_empty()
    assert path.exists()
    assert path.read_text("utf-8") == ""


def test_load_skips_corrupted_lines(tmp_path: Path) -> None:
    path = tmp_path / "tasks.txt"
    path.write_text(
        "this is not a task\n"
        "T | 0 | run marathons\n"
        "\n"
        "D | 0 | no date\n"
        "E | 1 | bad | 2026-02-01T10:00 | not-a-date\n"
        "X | 0 | unknown type\n"
        "T | 2 | bad flag\n",
        "utf-8",
    )
    storage = TaskFileStorage(path)

    tasks = storage.load()
    assert tasks.size() == 1
    assert tasks.get(0).render() == "[T][ ] run marathons"
    assert len(storage.skipped_lines) == 5


def test_load_unreadable_path_raises_storage_error(tmp_path: Path) -> None:
    # The "file" is a directory, so it exists but cannot be read as text.
    path = tmp_path / "tasks.txt"
    path.mkdir()

    with pytest.raises(StorageError):
        TaskFileStorage(path).load()


def test_save_failure_returns_false(tmp_path: Path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("a file, not a directory", "utf-8")

    storage = TaskFileStorage(blocker / "tasks.txt")
    assert storage.save([Task.todo("x")]) is False


def test_parse_record_variants() -> None:
    event = parse_record("E | 1 | Meeting | 2026-02-01T10:00 | 2026-02-01T12:00")
    assert event.kind is TaskKind.EVENT
    assert event.done
    assert event.start == datetime(2026, 2, 1, 10, 0)
    assert event.to_record() == "E | 1 | Meeting | 2026-02-01T10:00 | 2026-02-01T12:00"

    # Seconds are accepted on load and dropped on save.
    deadline = parse_record("D | 0 | pay rent | 2026-03-01T09:30:00")
    assert deadline.to_record() == "D | 0 | pay rent | 2026-03-01T09:30"

    # Only the date fields are split from the right; the rest is description.
    todo = parse_record("T | 0 | extra | field")
    assert todo.kind is TaskKind.TODO
    assert todo.description == "extra | field"


@pytest.mark.parametrize(
    "line",
    [
        "T | 0",
        "D | 0 | missing date",
        "E | 0 | one date | 2026-02-01T10:00",
        "E | 0 | backwards | 2026-02-02T10:00 | 2026-02-01T10:00",
        "D | 0 | old format | Dec 2 2025 18:00",
        "T | 0 |   ",
    ],
)
def test_parse_record_rejects_corrupt(line: str) -> None:
    with pytest.raises(CorruptRecordError):
        parse_record(line)


def test_description_containing_separator_round_trips(tmp_path: Path) -> None:
    storage = TaskFileStorage(tmp_path / "tasks.txt")
    tasks = [
        Task.todo("read a | b"),
        Task.deadline("pay | rent", datetime(2026, 3, 1, 9, 30)),
        Task.event("a | b | c", datetime(2026, 2, 1, 10, 0), datetime(2026, 2, 1, 12, 0)),
    ]
    assert storage.save(tasks) is True

    loaded = storage.load()
    assert storage.skipped_lines == []
    assert [t.description for t in loaded] == ["read a | b", "pay | rent", "a | b | c"]
    assert [t.to_record() for t in loaded] == [t.to_record() for t in tasks]


def test_invalid_utf8_line_is_skipped_and_rest_kept(tmp_path: Path) -> None:
    path = tmp_path / "tasks.txt"
    path.write_bytes(b"T | 0 | run marathons\nT | 0 | caf\xe9\nT | 1 | caf\xc3\xa9\n")
    storage = TaskFileStorage(path)

    tasks = storage.load()
    assert [t.render() for t in tasks] == ["[T][ ] run marathons", "[T][X] café"]
    assert len(storage.skipped_lines) == 1
    assert not storage.read_only


def test_failed_load_makes_storage_read_only(tmp_path: Path, monkeypatch) -> None:
    path = tmp_path / "tasks.txt"
    path.write_text("T | 0 | run marathons\n", "utf-8")
    storage = TaskFileStorage(path)

    def unreadable(self):
        raise PermissionError("denied")

    monkeypatch.setattr(Path, "read_bytes", unreadable)
    with pytest.raises(StorageError):
        storage.load()
    monkeypatch.undo()

    assert storage.read_only
    assert storage.save([Task.todo("new")]) is False
    assert path.read_text("utf-8") == "T | 0 | run marathons\n"
