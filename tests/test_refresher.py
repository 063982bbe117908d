# tests/test_refresher.py

from __future__ import annotations

import asyncio
from datetime import datetime, timedelta

import pytest

from current_task.core.engine import StateEngine
from current_task.core.rules import AdvancedConfiguration
from current_task.core.task_metrics import TaskData, TaskMetricsCalculator
from current_task.tasks.provider import IntegrationType, TasksStateProvider
from current_task.tasks.refresher import run_cleanup_loop, run_refresh_loop, run_tick_loop, tick

from .fakes import BrokenListener, FakeTaskSource, RecordingListener


def _provider(source: FakeTaskSource) -> TasksStateProvider:
    return TasksStateProvider(
        TaskMetricsCalculator(), integration_type=IntegrationType.FILE, source=source
    )


async def _run_briefly(coro) -> None:
    runner = asyncio.create_task(coro)
    await asyncio.sleep(0.05)
    runner.cancel()
    with pytest.raises(asyncio.CancelledError):
        await runner


def test_tick_publishes_ok_snapshot(now: datetime) -> None:
    provider = TasksStateProvider(TaskMetricsCalculator(), manual_task="Write report")
    engine = StateEngine(AdvancedConfiguration(), now)
    listener = RecordingListener()

    snapshot = tick(engine, provider, [listener], now)

    assert snapshot.status == "ok"
    assert snapshot.message == "Write report"
    assert listener.snapshots == [snapshot]


@pytest.mark.asyncio
async def test_tick_maps_fetch_error_to_error_status(now: datetime) -> None:
    source = FakeTaskSource()
    source.fetch_error = RuntimeError("Service unavailable")
    provider = _provider(source)
    engine = StateEngine(
        AdvancedConfiguration.from_dict(
            {"customStateRules": [{"condition": {}, "resultingStatus": "custom", "resultingMessage": "m"}]}
        ),
        now,
    )
    await provider.refresh()

    snapshot = tick(engine, provider, [], now)

    assert snapshot.status == "error"
    assert snapshot.message == "Service unavailable"


def test_broken_listener_does_not_stop_others(now: datetime) -> None:
    provider = TasksStateProvider(TaskMetricsCalculator())
    engine = StateEngine(AdvancedConfiguration(), now)
    listener = RecordingListener()

    tick(engine, provider, [BrokenListener(), listener], now)

    assert len(listener.snapshots) == 1


@pytest.mark.asyncio
async def test_tick_loop_runs_until_cancelled(now: datetime) -> None:
    provider = TasksStateProvider(TaskMetricsCalculator())
    engine = StateEngine(AdvancedConfiguration(), now)
    listener = RecordingListener()
    times = iter(now + timedelta(seconds=i) for i in range(10_000))

    await _run_briefly(
        run_tick_loop(engine, provider, [listener], interval_seconds=0.01, clock=lambda: next(times))
    )

    assert len(listener.snapshots) >= 2
    assert listener.snapshots[-1].seconds_in_current_status >= 1


@pytest.mark.asyncio
async def test_refresh_and_cleanup_loops(now: datetime) -> None:
    source = FakeTaskSource([TaskData(title="A", marked_current=True)])
    source.cleanup_error = RuntimeError("cleanup failed")
    provider = _provider(source)

    await _run_briefly(run_refresh_loop(provider, interval_seconds=0.01))
    await _run_briefly(run_cleanup_loop(provider, interval_seconds=0.01))

    assert source.fetch_calls >= 2
    assert source.cleanup_calls >= 2
    assert provider.error_message is None
    assert provider.get_metrics(now).current_task_title == "A"
