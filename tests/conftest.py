# tests/conftest.py

from __future__ import annotations

from datetime import datetime
from pathlib import Path
from types import SimpleNamespace

import pytest

from current_task.core.engine import StateEngine
from current_task.core.rules import AdvancedConfiguration
from current_task.core.state import AppState
from current_task.core.task_metrics import TaskMetricsCalculator
from current_task.tasks.provider import TasksStateProvider

from .fakes import FakeTaskSource


@pytest.fixture()
def now() -> datetime:
    # Saturday
    return datetime(2020, 8, 15, 18, 15, 0)


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with bootstrap and AppState.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="current-task-test",
        log_level="DEBUG",
        data_dir=tmp_path,
        rules_path=tmp_path / "rules.json",
        tasks_path=tmp_path / "tasks.json",
        integration_type="manual",
        manual_task_title="",
        console_enabled=False,
        tick_interval_seconds=0.01,
        refresh_interval_seconds=0.01,
        cleanup_interval_seconds=0.01,
    )


@pytest.fixture()
def state(settings: SimpleNamespace, now: datetime) -> AppState:
    """AppState wired with a manual provider and a fake file source."""
    return AppState(
        settings=settings,
        engine=StateEngine(AdvancedConfiguration(), now),
        provider=TasksStateProvider(TaskMetricsCalculator()),
        file_source=FakeTaskSource(),
    )
