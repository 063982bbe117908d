# tests/test_status_timer.py

from __future__ import annotations

from datetime import datetime, timedelta

from current_task.core.status_timer import StatusTimer


def test_timer_tracks_status_and_ok(now: datetime) -> None:
    timer = StatusTimer(now)

    timer.update_from_status("ok", now)
    later = now + timedelta(seconds=30)
    timer.update_from_status("ok", later)

    # Same status: start unchanged, last ok refreshed.
    assert timer.seconds_in_current_status(later) == 30
    assert timer.seconds_since_ok_status(later) == 0

    err_at = later + timedelta(seconds=10)
    timer.update_from_status("error", err_at)
    check = err_at + timedelta(seconds=5)
    assert timer.current_status == "error"
    assert timer.seconds_in_current_status(check) == 5
    assert timer.seconds_since_ok_status(check) == 15


def test_reset_sets_both_timestamps(now: datetime) -> None:
    timer = StatusTimer(now)
    timer.update_from_status("error", now)

    reset_at = now + timedelta(minutes=10)
    timer.reset(reset_at)

    assert timer.seconds_in_current_status(reset_at) == 0
    assert timer.seconds_since_ok_status(reset_at) == 0
    # reset doesn't forget the status itself
    assert timer.current_status == "error"


def test_durations_are_whole_seconds(now: datetime) -> None:
    timer = StatusTimer(now)
    timer.update_from_status("ok", now)
    assert timer.seconds_in_current_status(now + timedelta(milliseconds=1999)) == 1
