# src/current_task/tasks/file_source.py

from __future__ import annotations

import asyncio
import json
import logging
from datetime import date, datetime
from pathlib import Path
from typing import Any

from ..core.task_metrics import TaskData

logger = logging.getLogger(__name__)


class TaskFileError(RuntimeError):
    """Raised when the tasks file can't be read; the message ends up in the status bar."""


def _parse_date(raw: Any) -> date | None:
    if not raw:
        return None
    return date.fromisoformat(str(raw)[:10])


def _parse_datetime(raw: Any) -> datetime | None:
    if not raw:
        return None
    dt = datetime.fromisoformat(str(raw))
    if dt.tzinfo is not None:
        # Compare in local wall-clock time, like the rest of the engine.
        dt = dt.astimezone().replace(tzinfo=None)
    return dt


def parse_task(raw: dict[str, Any]) -> TaskData:
    due_datetime = _parse_datetime(raw.get("dueDatetime"))
    due_date = _parse_date(raw.get("dueDate"))
    if due_date is None and due_datetime is not None:
        due_date = due_datetime.date()

    return TaskData(
        title=str(raw.get("title", "")),
        due_date=due_date,
        due_datetime=due_datetime,
        marked_current=bool(raw.get("markedCurrent", False)),
    )


def load_tasks(path: Path) -> list[TaskData]:
    """
    Read tasks from a JSON list:
        [{"title": "...", "dueDate": "2020-08-14", "dueDatetime": null, "markedCurrent": true}]
    """
    try:
        data = json.loads(path.read_text("utf-8"))
    except FileNotFoundError as e:
        raise TaskFileError(f"Tasks file not found: {path}") from e
    except (OSError, ValueError) as e:
        raise TaskFileError(f"Could not read tasks file: {e}") from e

    if not isinstance(data, list):
        raise TaskFileError("Tasks file must contain a JSON list")

    tasks: list[TaskData] = []
    for item in data:
        if not isinstance(item, dict):
            continue
        try:
            tasks.append(parse_task(item))
        except ValueError as e:
            raise TaskFileError(f"Invalid task date in {item.get('title', '?')!r}: {e}") from e
    return tasks


class JsonFileTaskSource:
    """TaskSource backed by a local JSON file (re-read on every refresh)."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    async def fetch_tasks(self) -> list[TaskData]:
        return await asyncio.to_thread(load_tasks, self._path)

    async def perform_cleanup(self) -> None:
        # Nothing to tidy up in a plain file.
        logger.debug("No cleanup needed for %s", self._path)
