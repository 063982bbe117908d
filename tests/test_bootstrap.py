# tests/test_bootstrap.py

from __future__ import annotations

import json
from dataclasses import replace
from datetime import datetime
from pathlib import Path
from types import SimpleNamespace

import pytest

from current_task.cli.bootstrap import create_initial_state, load_rules
from current_task.config import Settings
from current_task.connectors.console_connector import ConsoleStatusPrinter, format_status_line
from current_task.core.rules import AdvancedConfiguration
from current_task.core.snapshot import Snapshot
from current_task.tasks.provider import IntegrationType


def test_load_rules_missing_or_broken_file(tmp_path: Path) -> None:
    assert load_rules(tmp_path / "missing.json") == AdvancedConfiguration()
    assert load_rules(None) == AdvancedConfiguration()

    broken = tmp_path / "rules.json"
    broken.write_text("{oops", "utf-8")
    assert load_rules(broken) == AdvancedConfiguration()

    broken.write_text("[]", "utf-8")
    assert load_rules(broken) == AdvancedConfiguration()


def test_create_initial_state_wires_rules_and_provider(settings: SimpleNamespace, now: datetime) -> None:
    settings.rules_path.write_text(
        json.dumps({"naggingConditions": [{"numberMarkedCurrent": 0}]}), "utf-8"
    )
    settings.manual_task_title = "From env"

    state = create_initial_state(settings=settings, now=now)

    assert state.provider.integration_type == IntegrationType.MANUAL
    assert state.listeners == []
    snapshot = state.engine.update(state.provider.get_metrics(now), now)
    assert snapshot.message == "From env"
    assert snapshot.nagging_enabled is False


def test_create_initial_state_file_integration(settings: SimpleNamespace, now: datetime) -> None:
    settings.integration_type = "file"
    settings.console_enabled = True

    state = create_initial_state(settings=settings, now=now)

    assert state.provider.integration_type == IntegrationType.FILE
    assert state.file_source is not None
    assert isinstance(state.listeners[0], ConsoleStatusPrinter)


def test_settings_from_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("CURRENT_TASK_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("CURRENT_TASK_TICK_INTERVAL", "0.5")
    monkeypatch.setenv("CURRENT_TASK_REFRESH_INTERVAL", "not a number")
    monkeypatch.setenv("CURRENT_TASK_CONSOLE_ENABLED", "no")
    monkeypatch.delenv("CURRENT_TASK_INTEGRATION", raising=False)
    monkeypatch.delenv("CURRENT_TASK_RULES_PATH", raising=False)
    monkeypatch.delenv("CURRENT_TASK_TASKS_PATH", raising=False)

    settings = Settings.from_env()

    assert settings.rules_path == tmp_path / "rules.json"
    assert settings.tick_interval_seconds == 0.5
    assert settings.refresh_interval_seconds == 2.0
    assert settings.console_enabled is False
    assert settings.integration_type == "manual"

    (tmp_path / "tasks.json").write_text("[]", "utf-8")
    assert Settings.from_env().integration_type == "file"


def test_console_printer_only_prints_visible_changes(now: datetime) -> None:
    lines: list[str] = []
    printer = ConsoleStatusPrinter(emit=lines.append)
    base = Snapshot(status="ok", message="Write report")

    printer.on_snapshot(base)
    printer.on_snapshot(replace(base, seconds_in_current_status=5))
    printer.on_snapshot(replace(base, nagging_enabled=True))

    assert lines == ["OK: Write report", "OK: Write report [nagging]"]
    assert format_status_line(replace(base, status="error", downtime_enabled=True)) == (
        "ERROR: Write report [downtime]"
    )
