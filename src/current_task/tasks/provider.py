# src/current_task/tasks/provider.py

from __future__ import annotations

"""
Tasks state provider.

Sits between a (slow, async) task source and the (fast, sync) tick:
- refresh() fetches tasks and keeps the latest result or error message,
- get_metrics(now) turns whatever is held into TaskMetrics for the engine.

Two integration types:
- manual: the current task is typed in by hand (/task <title>)
- file:   tasks come from a TaskSource (JsonFileTaskSource by default)
"""

import logging
from datetime import datetime
from enum import StrEnum

from ..core.ports import TaskSource
from ..core.task_metrics import TaskData, TaskMetrics, TaskMetricsCalculator

logger = logging.getLogger(__name__)


class IntegrationType(StrEnum):
    MANUAL = "manual"
    FILE = "file"

    @classmethod
    def parse(cls, raw: str | None) -> IntegrationType:
        try:
            return cls((raw or "").strip().lower())
        except ValueError:
            return cls.MANUAL


class TasksStateProvider:
    def __init__(
            self,
            calculator: TaskMetricsCalculator,
            *,
            integration_type: IntegrationType = IntegrationType.MANUAL,
            source: TaskSource | None = None,
            manual_task: str | None = None,
    ) -> None:
        self._calculator = calculator
        self._integration_type = IntegrationType.MANUAL
        self._source: TaskSource | None = None
        self._tasks: list[TaskData] | None = None
        self._error_message: str | None = None
        self._manual_task: str | None = None

        self._set_integration(integration_type, source)
        if self._integration_type == IntegrationType.MANUAL:
            self._manual_task = manual_task or None

    @property
    def integration_type(self) -> IntegrationType:
        return self._integration_type

    @property
    def error_message(self) -> str | None:
        return self._error_message

    @property
    def manual_task(self) -> str | None:
        return self._manual_task

    def _set_integration(self, integration_type: IntegrationType, source: TaskSource | None) -> None:
        if integration_type == IntegrationType.FILE and source is None:
            raise ValueError("file integration requires a task source")

        self._integration_type = integration_type
        self._source = source if integration_type != IntegrationType.MANUAL else None

        self._manual_task = None
        self._tasks = [] if self._source is not None else None
        self._error_message = None

    def change_integration_type(
            self,
            integration_type: IntegrationType,
            source: TaskSource | None = None,
    ) -> bool:
        """Switch integrations. Returns False when nothing changed."""
        if integration_type == self._integration_type:
            return False

        self._set_integration(integration_type, source)
        logger.info("Changed integration type to %s", integration_type.value)
        return True

    # ---- manual integration ----

    def set_manual_current_task(self, title: str) -> bool:
        if self._integration_type != IntegrationType.MANUAL:
            return False
        title = (title or "").strip()
        if not title:
            return False
        self._manual_task = title
        logger.info("Set manual current task")
        return True

    def remove_manual_current_task(self) -> bool:
        if self._integration_type != IntegrationType.MANUAL:
            return False
        self._manual_task = None
        logger.info("Removed manual current task")
        return True

    # ---- source integration ----

    async def refresh(self) -> None:
        source = self._source
        if source is None:
            return

        try:
            tasks = await source.fetch_tasks()
            error_message = None
        except Exception as e:
            logger.debug("Task source refresh failed", exc_info=True)
            tasks = []
            error_message = str(e) or e.__class__.__name__

        # Integration was switched while the fetch was in flight.
        if source is not self._source:
            return

        self._tasks = list(tasks)
        self._error_message = error_message

    async def perform_cleanup(self) -> None:
        source = self._source
        if source is None:
            return

        logger.debug("Performing periodic cleanup for integration")
        try:
            await source.perform_cleanup()
            logger.debug("Successfully performed periodic cleanup for integration")
        except Exception:
            # Maintenance only: never surfaces as the provider's error message.
            logger.exception("Failed to perform cleanup for current integration")

    def get_metrics(self, now: datetime) -> TaskMetrics:
        if self._integration_type == IntegrationType.MANUAL:
            return self._calculator.manual(self._manual_task)
        if self._tasks is not None:
            return self._calculator.calculate(self._tasks, now)
        return self._calculator.placeholder()
