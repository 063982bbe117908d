# src/current_task/core/status_timer.py

from __future__ import annotations

from datetime import datetime


def _seconds_between(start: datetime, end: datetime) -> int:
    return int((end - start).total_seconds())


class StatusTimer:
    """
    Wall-clock durations derived from the status history:
    - seconds in the current status
    - seconds since the status was last "ok"
    """

    def __init__(self, now: datetime) -> None:
        self.current_status: str | None = None
        self.status_start = now
        self.last_ok = now

    def reset(self, now: datetime) -> None:
        self.status_start = now
        self.last_ok = now

    def update_from_status(self, status: str, now: datetime) -> None:
        if status != self.current_status:
            self.current_status = status
            self.status_start = now

        # Refreshed on every update while ok, not only on the transition.
        if status == "ok":
            self.last_ok = now

    def seconds_in_current_status(self, now: datetime) -> int:
        return _seconds_between(self.status_start, now)

    def seconds_since_ok_status(self, now: datetime) -> int:
        return _seconds_between(self.last_ok, now)
