# src/current_task/core/task_metrics.py

from __future__ import annotations

"""
Task metrics.

Reduces the task list handed over by a task source into the fixed set of
numbers/flags that conditions can refer to.
"""

from collections.abc import Iterable
from dataclasses import dataclass, replace
from datetime import date, datetime


@dataclass(frozen=True, slots=True)
class TaskData:
    title: str
    due_date: date | None = None
    due_datetime: datetime | None = None
    marked_current: bool = False


@dataclass(frozen=True, slots=True)
class TaskMetrics:
    """
    Invariant: the current_task_* fields are only filled in when exactly one
    task is marked current. Otherwise they keep their blank defaults.
    """

    number_overdue_with_time: int = 0
    number_overdue_with_time_marked_current: int = 0
    number_overdue_with_time_not_marked_current: int = 0
    number_marked_current: int = 0
    current_task_title: str = ""
    current_task_has_date: bool = False
    current_task_has_time: bool = False
    current_task_is_overdue: bool = False


def _is_overdue(task: TaskData, now: datetime) -> bool:
    if task.due_datetime is not None:
        return task.due_datetime < now
    if task.due_date is not None:
        return task.due_date < now.date()
    return False


class TaskMetricsCalculator:
    def calculate(self, tasks: Iterable[TaskData], now: datetime) -> TaskMetrics:
        overdue_current = 0
        overdue_not_current = 0
        current: list[TaskData] = []

        for task in tasks:
            if task.marked_current:
                current.append(task)

            if task.due_datetime is not None and task.due_datetime < now:
                if task.marked_current:
                    overdue_current += 1
                else:
                    overdue_not_current += 1

        metrics = TaskMetrics(
            number_overdue_with_time=overdue_current + overdue_not_current,
            number_overdue_with_time_marked_current=overdue_current,
            number_overdue_with_time_not_marked_current=overdue_not_current,
            number_marked_current=len(current),
        )

        if len(current) != 1:
            return metrics

        task = current[0]
        return replace(
            metrics,
            current_task_title=task.title,
            current_task_has_date=task.due_date is not None,
            current_task_has_time=task.due_datetime is not None,
            current_task_is_overdue=_is_overdue(task, now),
        )

    def placeholder(self) -> TaskMetrics:
        """Metrics shown before the first successful refresh."""
        return TaskMetrics()

    def manual(self, title: str | None) -> TaskMetrics:
        """Metrics for a current task typed in by hand (no dates attached)."""
        if not title:
            return TaskMetrics()
        return TaskMetrics(number_marked_current=1, current_task_title=title)
