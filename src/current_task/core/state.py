# src/current_task/core/state.py

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..tasks.provider import TasksStateProvider
from .engine import StateEngine
from .ports import SnapshotListener, TaskSource


@dataclass
class AppState:
    """
    Explicitly owned application objects, passed to loops and commands.

    There is no global engine: whoever needs it gets this object.
    """

    settings: Any

    engine: StateEngine
    provider: TasksStateProvider

    # Used when switching back to the file integration at runtime.
    file_source: TaskSource | None = None
    listeners: list[SnapshotListener] = field(default_factory=list)
