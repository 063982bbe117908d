# src/current_task/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures the local (gitignored) data directory exists,
- reads the rules file (best-effort),
- wires provider, engine and listeners into AppState.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any

from ..config import get_settings
from ..connectors.console_connector import ConsoleStatusPrinter
from ..core.engine import StateEngine
from ..core.rules import AdvancedConfiguration
from ..core.state import AppState
from ..core.task_metrics import TaskMetricsCalculator
from ..tasks.file_source import JsonFileTaskSource
from ..tasks.provider import IntegrationType, TasksStateProvider

logger = logging.getLogger(__name__)


def load_rules(path: str | Path | None) -> AdvancedConfiguration:
    """Read the rules JSON file. Missing/unreadable file -> no rules at all."""
    if not path:
        return AdvancedConfiguration()
    path = Path(path)
    if not path.exists():
        logger.info("No rules file at %s, running without rules", path)
        return AdvancedConfiguration()
    try:
        data: Any = json.loads(path.read_text("utf-8"))
    except Exception:
        logger.exception("Failed to read rules from %s", path)
        return AdvancedConfiguration()

    if not isinstance(data, dict):
        logger.warning("Rules file %s must contain a JSON object", path)
        return AdvancedConfiguration()

    configuration = AdvancedConfiguration.from_dict(data)
    logger.info(
        "Loaded rules from %s: custom=%s nagging=%s downtime=%s",
        path,
        _count(configuration.custom_state_rules),
        _count(configuration.nagging_conditions),
        _count(configuration.downtime_conditions),
    )
    return configuration


def _count(items) -> str:
    return "off" if items is None else str(len(items))


def create_initial_state(*, settings=None, now: datetime | None = None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()
    if now is None:
        now = datetime.now()

    settings.data_dir.mkdir(parents=True, exist_ok=True)

    file_source = JsonFileTaskSource(settings.tasks_path)
    integration_type = IntegrationType.parse(settings.integration_type)

    provider = TasksStateProvider(
        TaskMetricsCalculator(),
        integration_type=integration_type,
        source=file_source if integration_type == IntegrationType.FILE else None,
        manual_task=settings.manual_task_title or None,
    )
    logger.info("Initializing %s integration", integration_type.value)

    engine = StateEngine(load_rules(settings.rules_path), now)

    listeners = []
    if settings.console_enabled:
        listeners.append(ConsoleStatusPrinter())

    return AppState(
        settings=settings,
        engine=engine,
        provider=provider,
        file_source=file_source,
        listeners=listeners,
    )
