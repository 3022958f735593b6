# src/vex/errors.py

"""
Error taxonomy for the task core.

Everything raised here is recoverable: the command layer turns these into
user-facing lines, and bootstrap turns StorageError into a startup warning.
"""

from __future__ import annotations


class VexError(Exception):
    """Base class for all core errors."""


class ValidationError(VexError, ValueError):
    """Bad or missing command arguments, malformed dates, invalid ranges."""


class InvalidArgumentError(ValidationError):
    """An argument passed to the task store is unusable (None task, negative days)."""


class TaskIndexError(VexError, IndexError):
    def __init__(self, index: int, size: int, message: str | None = None) -> None:
        super().__init__(message or f"Task index {index} is out of range (size={size}).")
        self.index = index
        self.size = size


class CorruptRecordError(VexError, ValueError):
    """A single stored line could not be parsed into a task."""

    def __init__(self, line: str, reason: str) -> None:
        super().__init__(f"{reason}: {line!r}")
        self.line = line
        self.reason = reason


class StorageError(VexError, OSError):
    """The backing file or its directory cannot be created or read."""
