# src/current_task/connectors/console_connector.py

from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Callable

from ..cli.commands import registry as command_registry
from ..core.snapshot import Snapshot
from ..core.state import AppState

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}", flush=True)


def format_status_line(snapshot: Snapshot) -> str:
    flags = []
    if snapshot.downtime_enabled:
        flags.append("downtime")
    if snapshot.nagging_enabled:
        flags.append("nagging")
    suffix = f" [{', '.join(flags)}]" if flags else ""
    return f"{snapshot.status.upper()}: {snapshot.message}{suffix}"


class ConsoleStatusPrinter:
    """
    SnapshotListener that prints a line whenever the visible state changes
    (status, message or one of the flags). Timer fields alone don't count.
    """

    def __init__(self, emit: Callable[[str], None] = _print_ts) -> None:
        self._emit = emit
        self._last: tuple[str, str, bool, bool] | None = None

    def on_snapshot(self, snapshot: Snapshot) -> None:
        visible = (
            snapshot.status,
            snapshot.message,
            snapshot.nagging_enabled,
            snapshot.downtime_enabled,
        )
        if visible == self._last:
            return
        self._last = visible
        self._emit(format_status_line(snapshot))


async def run_console_loop(state: AppState) -> None:
    """Read commands from stdin without blocking the tick loop."""
    logger.info("Console connector started.")
    _print_ts("[CONSOLE] Use /help for commands. Use /exit to quit.")

    while True:
        try:
            line = (await asyncio.to_thread(input, "")).strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break

        if not line:
            continue

        if line.lower() in ("/exit", "/quit"):
            logger.info("Console exit command received.")
            break

        try:
            response = command_registry.handle(state, line)
        except Exception:
            logger.exception("Command handler crashed.")
            response = "Internal error while handling a command."

        if response is None:
            response = "Not a command. Use /help to list available commands."
        print(f"[{_ts_local()}] {response}", flush=True)

    logger.info("Console connector finished.")
