# src/vex/core/state.py

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Any

from ..tasks.task_list import TaskList
from .ports import TaskStorage


@dataclass
class AppState:
    # Settings object (config.Settings or a test SimpleNamespace).
    settings: Any

    tasks: TaskList
    storage: TaskStorage

    # Shown once by the connector, then cleared.
    startup_warning: str | None = None

    # Connectors take this around command handling.
    lock: threading.Lock = field(default_factory=threading.Lock)
