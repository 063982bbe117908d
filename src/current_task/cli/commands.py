# src/current_task/cli/commands.py

from __future__ import annotations

import json
import logging
from collections.abc import Callable

from ..core.state import AppState
from ..tasks.provider import IntegrationType

CommandHandler = Callable[[AppState, list[str]], str]

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Simple slash-command registry used by the console connector (/help, /state, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    def handle(self, state: AppState, line: str) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        return handler(state, args)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_state(state: AppState, args: list[str]) -> str:
    """Full snapshot as pretty JSON (the same names rule files use)."""
    return json.dumps(state.engine.snapshot.to_dict(), ensure_ascii=False, indent=4)


def cmd_task(state: AppState, args: list[str]) -> str:
    """
    /task <title>  -> set the manual current task
    """
    if state.provider.integration_type != IntegrationType.MANUAL:
        return "The current task can only be set by hand in manual mode (/source manual)."

    title = " ".join(args).strip()
    if not title:
        return "Usage: /task <title>"

    state.provider.set_manual_current_task(title)
    return f"Current task set: {title}"


def cmd_clear(state: AppState, args: list[str]) -> str:
    if state.provider.integration_type != IntegrationType.MANUAL:
        return "Nothing to clear outside manual mode."

    state.provider.remove_manual_current_task()
    return "Current task removed."


def cmd_source(state: AppState, args: list[str]) -> str:
    """
    /source          -> show the integration type
    /source manual   -> current task typed in by hand
    /source file     -> read tasks from the tasks file
    """
    current = state.provider.integration_type
    if not args:
        return f"Integration: {current.value}. Use /source manual or /source file."

    arg = args[0].lower()
    if arg not in {t.value for t in IntegrationType}:
        return "Usage: /source manual | /source file"

    target = IntegrationType(arg)
    if target == IntegrationType.FILE and state.file_source is None:
        return "No tasks file configured."

    source = state.file_source if target == IntegrationType.FILE else None
    if not state.provider.change_integration_type(target, source):
        return f"Integration is already {target.value}."

    logger.debug("Integration switched from console: %s -> %s", current.value, target.value)
    return f"Integration changed to {target.value}."


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("state", cmd_state, help_text="Show the full current state as JSON.")
registry.register("task", cmd_task, help_text="Set the current task (manual mode): /task <title>.")
registry.register("clear", cmd_clear, help_text="Remove the current task (manual mode).")
registry.register("source", cmd_source, help_text="Switch integration: /source manual | /source file.")
