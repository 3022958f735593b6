# src/vex/tasks/task_storage.py

from __future__ import annotations

import logging
import os
from collections.abc import Iterable
from datetime import datetime
from pathlib import Path

from ..errors import CorruptRecordError, StorageError, ValidationError
from .task_list import TaskList
from .task_models import RECORD_SEPARATOR, Task, TaskKind

logger = logging.getLogger(__name__)

# Date fields per record type; they are taken from the right so the
# description may itself contain the separator.
_DATE_FIELDS = {
    TaskKind.TODO: 0,
    TaskKind.DEADLINE: 1,
    TaskKind.EVENT: 2,
}


def format_record(task: Task) -> str:
    return task.to_record()


def _parse_iso(raw: str, line: str) -> datetime:
    try:
        return datetime.fromisoformat(raw.strip())
    except ValueError:
        raise CorruptRecordError(line, f"Unparsable date {raw!r}") from None


def parse_record(line: str) -> Task:
    """
    Parse one stored line into a Task.

    Layout: type | done | description [| date [| date]]. Type and done are
    split from the left, dates from the right; everything in between is the
    description.

    Raises CorruptRecordError for missing fields, unknown type, bad done flag,
    unparsable date, or a record that fails task validation.
    """
    head = line.rstrip("\r\n").split(RECORD_SEPARATOR, 2)
    if len(head) < 3:
        raise CorruptRecordError(line, "Too few fields")

    raw_kind, raw_done, rest = head[0].strip(), head[1].strip(), head[2]
    try:
        kind = TaskKind(raw_kind)
    except ValueError:
        raise CorruptRecordError(line, f"Unknown task type {raw_kind!r}") from None

    if raw_done not in ("0", "1"):
        raise CorruptRecordError(line, f"Bad done flag {raw_done!r}")

    n_dates = _DATE_FIELDS[kind]
    fields = rest.rsplit(RECORD_SEPARATOR, n_dates) if n_dates else [rest]
    if len(fields) != n_dates + 1:
        raise CorruptRecordError(line, f"Expected {n_dates} date fields for type {kind.value}")
    desc, dates = fields[0], fields[1:]

    try:
        if kind is TaskKind.DEADLINE:
            task = Task.deadline(desc, _parse_iso(dates[0], line))
        elif kind is TaskKind.EVENT:
            task = Task.event(desc, _parse_iso(dates[0], line), _parse_iso(dates[1], line))
        else:
            task = Task.todo(desc)
    except ValidationError as e:
        raise CorruptRecordError(line, str(e)) from e

    if raw_done == "1":
        task.mark_done()
    return task


def _decode_line(raw: bytes) -> str:
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError:
        raise CorruptRecordError(raw.decode("utf-8", errors="replace"), "Not valid UTF-8") from None


class TaskFileStorage:
    """
    Flat-file task persistence: one pipe-delimited record per line.

    - save() never raises on I/O errors; it logs and returns False.
    - load() skips corrupted lines (kept in `skipped_lines`), including lines
      that are not valid UTF-8, and raises StorageError only when the file
      cannot be created or read at all.
    - After such a failed load the storage is read-only: save() refuses to
      overwrite a file whose contents were never loaded.
    """

    def __init__(self, file_path: str | Path) -> None:
        if file_path is None:
            raise ValueError("file_path is required")
        self._path = Path(file_path)
        self.skipped_lines: list[str] = []
        self.read_only = False

    @property
    def path(self) -> Path:
        return self._path

    def save(self, tasks: Iterable[Task]) -> bool:
        if self.read_only:
            logger.warning("Not saving to %s: the existing file could not be loaded.", self._path)
            return False

        lines = [format_record(t) for t in tasks if t is not None]
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            tmp = self._path.with_suffix(self._path.suffix + ".tmp")
            with tmp.open("w", encoding="utf-8", newline="\n") as f:
                for line in lines:
                    f.write(line + "\n")
            os.replace(tmp, self._path)
        except OSError:
            logger.exception("Failed to save tasks to %s", self._path)
            return False
        logger.debug("Saved %d tasks to %s", len(lines), self._path)
        return True

    def load(self) -> TaskList:
        self.skipped_lines = []
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            if not self._path.exists():
                self._path.touch()
                logger.info("Created empty task file %s", self._path)
                self.read_only = False
                return TaskList()
            raw_lines = self._path.read_bytes().splitlines()
        except OSError as e:
            logger.exception("Failed to load tasks from %s", self._path)
            self.read_only = True
            raise StorageError(f"Cannot read task file {self._path}: {e}") from e

        self.read_only = False
        tasks = TaskList()
        for lineno, raw in enumerate(raw_lines, start=1):
            if not raw.strip():
                continue
            try:
                tasks.add(parse_record(_decode_line(raw)))
            except CorruptRecordError as e:
                logger.warning("Ignoring corrupted data at %s:%d (%s)", self._path, lineno, e.reason)
                self.skipped_lines.append(e.line)

        logger.info(
            "Loaded %d tasks from %s (skipped=%d)", tasks.size(), self._path, len(self.skipped_lines)
        )
        return tasks
