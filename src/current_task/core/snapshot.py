# src/current_task/core/snapshot.py

from __future__ import annotations

"""
Snapshot: the flat record conditions are evaluated against.

Field names exposed to conditions and message templates are the camelCase names
users write in their rule files. The set is closed: anything outside FIELD_NAMES
is unknown.
"""

from dataclasses import dataclass, fields, replace
from datetime import datetime
from typing import Any

from .task_metrics import TaskMetrics

# camelCase name (rule files) -> attribute name
FIELD_NAMES: dict[str, str] = {
    "numberOverdueWithTime": "number_overdue_with_time",
    "numberOverdueWithTimeMarkedCurrent": "number_overdue_with_time_marked_current",
    "numberOverdueWithTimeNotMarkedCurrent": "number_overdue_with_time_not_marked_current",
    "numberMarkedCurrent": "number_marked_current",
    "currentTaskTitle": "current_task_title",
    "currentTaskHasDate": "current_task_has_date",
    "currentTaskHasTime": "current_task_has_time",
    "currentTaskIsOverdue": "current_task_is_overdue",
    "dayOfWeek": "day_of_week",
    "hours": "hours",
    "minutes": "minutes",
    "seconds": "seconds",
    "status": "status",
    "message": "message",
    "secondsInCurrentStatus": "seconds_in_current_status",
    "secondsSinceOkStatus": "seconds_since_ok_status",
    "naggingEnabled": "nagging_enabled",
    "downtimeEnabled": "downtime_enabled",
}


def day_of_week(now: datetime) -> int:
    """Sunday=0 ... Saturday=6 (the convention rule files are written in)."""
    return (now.weekday() + 1) % 7


@dataclass(frozen=True, slots=True)
class Snapshot:
    number_overdue_with_time: int = 0
    number_overdue_with_time_marked_current: int = 0
    number_overdue_with_time_not_marked_current: int = 0
    number_marked_current: int = 0
    current_task_title: str = ""
    current_task_has_date: bool = False
    current_task_has_time: bool = False
    current_task_is_overdue: bool = False

    day_of_week: int = 0
    hours: int = 0
    minutes: int = 0
    seconds: int = 0

    status: str = "ok"
    message: str = ""
    seconds_in_current_status: int = 0
    seconds_since_ok_status: int = 0
    nagging_enabled: bool = False
    downtime_enabled: bool = False

    @classmethod
    def build(cls, metrics: TaskMetrics, now: datetime, *, status: str, message: str) -> Snapshot:
        """Metrics + time fields + status/message; timers and flags at their defaults."""
        metric_values = {f.name: getattr(metrics, f.name) for f in fields(metrics)}
        return cls(
            **metric_values,
            day_of_week=day_of_week(now),
            hours=now.hour,
            minutes=now.minute,
            seconds=now.second,
            status=status,
            message=message,
        )

    def with_values(self, **changes: Any) -> Snapshot:
        return replace(self, **changes)

    def lookup(self, name: str) -> tuple[bool, Any]:
        """Closed-schema field lookup by camelCase name: (found, value)."""
        attr = FIELD_NAMES.get(name)
        if attr is None:
            return False, None
        return True, getattr(self, attr)

    def to_dict(self) -> dict[str, Any]:
        return {name: getattr(self, attr) for name, attr in FIELD_NAMES.items()}
