# src/vex/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from enum import StrEnum

from ..errors import ValidationError

RECORD_SEPARATOR = " | "


class TaskKind(StrEnum):
    """
    Task variant tag.

    The value doubles as the bracketed display tag and the record type field.
    """

    TODO = "T"
    DEADLINE = "D"
    EVENT = "E"


def format_display(dt: datetime) -> str:
    """Render a date-time as e.g. 'Feb 1 2026 10:00'."""
    return f"{dt:%b} {dt.day} {dt:%Y %H:%M}"


def format_display_date(day: date) -> str:
    return f"{day:%b} {day.day} {day:%Y}"


def format_iso(dt: datetime) -> str:
    # Minute precision: '2026-02-01T10:00'.
    return dt.isoformat(timespec="minutes")


def _required(value: datetime | None, name: str) -> datetime:
    if value is None:
        raise ValidationError(f"Task date '{name}' is missing.")
    return value


@dataclass(slots=True)
class Task:
    """
    One tracked task.

    A single record for all variants; `kind` selects which date fields are used:
    - TODO: no dates
    - DEADLINE: `by`
    - EVENT: `start` .. `end` (start <= end)

    Build tasks with Task.todo / Task.deadline / Task.event.
    """

    kind: TaskKind
    description: str
    done: bool = False
    by: datetime | None = None
    start: datetime | None = None
    end: datetime | None = None

    def __post_init__(self) -> None:
        if self.description is None or not self.description.strip():
            noun = self.kind.name.lower()
            article = "an" if noun[0] in "aeiou" else "a"
            raise ValidationError(f"The description of {article} {noun} cannot be empty.")

        if self.kind is TaskKind.DEADLINE:
            if self.by is None:
                raise ValidationError("Deadline date must not be empty.")
        elif self.kind is TaskKind.EVENT:
            if self.start is None or self.end is None:
                raise ValidationError("Event dates must not be empty.")
            if self.start > self.end:
                raise ValidationError("Event start time cannot be after end time.")

    # ---- constructors ----

    @classmethod
    def todo(cls, description: str) -> Task:
        return cls(kind=TaskKind.TODO, description=description)

    @classmethod
    def deadline(cls, description: str, by: datetime | None) -> Task:
        return cls(kind=TaskKind.DEADLINE, description=description, by=by)

    @classmethod
    def event(cls, description: str, start: datetime | None, end: datetime | None) -> Task:
        return cls(kind=TaskKind.EVENT, description=description, start=start, end=end)

    # ---- state ----

    def mark_done(self) -> None:
        self.done = True

    def mark_undone(self) -> None:
        self.done = False

    @property
    def status_icon(self) -> str:
        return "X" if self.done else " "

    # ---- date queries ----

    def occurs_on(self, day: date | None) -> bool:
        """True if the task falls on `day` (events: any day of the span, inclusive)."""
        if day is None:
            return False
        if self.kind is TaskKind.DEADLINE:
            return _required(self.by, "by").date() == day
        if self.kind is TaskKind.EVENT:
            return _required(self.start, "start").date() <= day <= _required(self.end, "end").date()
        return False

    def is_due_within(self, today: date, days: int) -> bool:
        """
        True if the task is due (deadline) or starts (event) in [today, today + days].
        Todos have no date and never match.
        """
        last = today + timedelta(days=days)
        if self.kind is TaskKind.DEADLINE:
            return today <= _required(self.by, "by").date() <= last
        if self.kind is TaskKind.EVENT:
            return today <= _required(self.start, "start").date() <= last
        return False

    # ---- rendering ----

    def render(self) -> str:
        text = f"[{self.kind.value}][{self.status_icon}] {self.description}"
        if self.kind is TaskKind.DEADLINE:
            text += f" (by: {format_display(_required(self.by, 'by'))})"
        elif self.kind is TaskKind.EVENT:
            start, end = _required(self.start, "start"), _required(self.end, "end")
            text += f" (from: {format_display(start)} to: {format_display(end)})"
        return text

    def to_record(self) -> str:
        fields = [self.kind.value, "1" if self.done else "0", self.description]
        if self.kind is TaskKind.DEADLINE:
            fields.append(format_iso(_required(self.by, "by")))
        elif self.kind is TaskKind.EVENT:
            start, end = _required(self.start, "start"), _required(self.end, "end")
            fields.extend([format_iso(start), format_iso(end)])
        return RECORD_SEPARATOR.join(fields)

    def __str__(self) -> str:
        return self.render()
