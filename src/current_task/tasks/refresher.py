# src/current_task/tasks/refresher.py

from __future__ import annotations

"""
Polling loops.

Three independent intervals:
- refresh: fetch tasks from the source (may be slow)
- cleanup: source maintenance (rare, failures ignored)
- tick:    provider -> engine -> listeners (fixed rate, never waits on a fetch)

To stop a loop, cancel the coroutine/task.
"""

import asyncio
import logging
from collections.abc import Callable, Iterable
from datetime import datetime

from ..core.engine import StateEngine
from ..core.ports import SnapshotListener
from ..core.snapshot import Snapshot
from .provider import TasksStateProvider

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


async def run_refresh_loop(provider: TasksStateProvider, *, interval_seconds: float = 2.0) -> None:
    sleep_s = max(0.01, float(interval_seconds))

    while True:
        try:
            await provider.refresh()
        except Exception:
            logger.exception("Task refresh crashed")
        await asyncio.sleep(sleep_s)


async def run_cleanup_loop(provider: TasksStateProvider, *, interval_seconds: float = 600.0) -> None:
    sleep_s = max(0.01, float(interval_seconds))

    while True:
        await provider.perform_cleanup()
        await asyncio.sleep(sleep_s)


def tick(
        engine: StateEngine,
        provider: TasksStateProvider,
        listeners: Iterable[SnapshotListener],
        now: datetime,
) -> Snapshot:
    """One update cycle: hand the latest metrics (or error) to the engine and publish."""
    error_message = provider.error_message
    metrics = provider.get_metrics(now)

    if error_message is not None:
        snapshot = engine.update_with_error(error_message, now, metrics)
    else:
        snapshot = engine.update(metrics, now)

    for listener in listeners:
        try:
            listener.on_snapshot(snapshot)
        except Exception:
            logger.exception("Snapshot listener %r failed", listener)

    return snapshot


async def run_tick_loop(
        engine: StateEngine,
        provider: TasksStateProvider,
        listeners: Iterable[SnapshotListener],
        *,
        interval_seconds: float = 1.0,
        clock: Clock = datetime.now,
) -> None:
    sleep_s = max(0.01, float(interval_seconds))
    listeners = list(listeners)

    while True:
        tick(engine, provider, listeners, clock())
        await asyncio.sleep(sleep_s)
