# src/current_task/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- Every value has a sensible default; nothing is required at import time.
- Rules themselves live in a JSON file (rules_path), not in the environment.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

ENV_PREFIX = "CURRENT_TASK"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _load_dotenv_if_available() -> None:
    """Load .env locally if python-dotenv is installed. Safe no-op otherwise."""
    try:
        from dotenv import load_dotenv  # type: ignore
    except Exception:
        return
    load_dotenv(override=False)


_load_dotenv_if_available()


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Local paths ----
    data_dir: Path
    rules_path: Path
    tasks_path: Path

    # ---- Integration ----
    integration_type: str
    manual_task_title: str

    # ---- Connectors ----
    console_enabled: bool

    # ---- Intervals (seconds) ----
    tick_interval_seconds: float
    refresh_interval_seconds: float
    cleanup_interval_seconds: float

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "current-task")
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/current-task"))
        rules_path = _env_path(_k("RULES_PATH"), data_dir / "rules.json")
        tasks_path = _env_path(_k("TASKS_PATH"), data_dir / "tasks.json")

        # Default to the file integration only when there is a file to read.
        default_integration = "file" if tasks_path.exists() else "manual"
        integration_type = _env(_k("INTEGRATION"), default_integration).strip().lower()
        manual_task_title = _env(_k("MANUAL_TASK"), "").strip()

        console_enabled = _env_bool(_k("CONSOLE_ENABLED"), True)

        tick_interval_seconds = _env_float(_k("TICK_INTERVAL"), 1.0)
        refresh_interval_seconds = _env_float(_k("REFRESH_INTERVAL"), 2.0)
        cleanup_interval_seconds = _env_float(_k("CLEANUP_INTERVAL"), 10 * 60.0)

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            rules_path=rules_path,
            tasks_path=tasks_path,
            integration_type=integration_type,
            manual_task_title=manual_task_title,
            console_enabled=console_enabled,
            tick_interval_seconds=tick_interval_seconds,
            refresh_interval_seconds=refresh_interval_seconds,
            cleanup_interval_seconds=cleanup_interval_seconds,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
