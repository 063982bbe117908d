# src/current_task/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) between the engine and its collaborators.

The engine never talks to a task service or a UI directly: task sources feed
the provider, listeners receive the published snapshot.
"""

from typing import Protocol

from .snapshot import Snapshot
from .task_metrics import TaskData


class TaskSource(Protocol):
    """Where tasks come from (a local file, a hosted task service, ...)."""

    async def fetch_tasks(self) -> list[TaskData]: ...

    async def perform_cleanup(self) -> None: ...


class SnapshotListener(Protocol):
    """Rendering collaborator: window, tray, console..."""

    def on_snapshot(self, snapshot: Snapshot) -> None: ...
