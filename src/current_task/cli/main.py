# src/current_task/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, then runs the loops on one asyncio event loop:
- task refresh and cleanup (independent intervals),
- the fixed-rate tick that updates the engine and prints state changes,
- the console command reader (optional).
"""

from __future__ import annotations

import asyncio
import contextlib
import logging

from ..cli.bootstrap import create_initial_state
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..core.state import AppState
from ..logging_setup import setup_logging
from ..tasks.refresher import run_cleanup_loop, run_refresh_loop, run_tick_loop

logger = logging.getLogger(__name__)


async def run_app(state: AppState) -> None:
    settings = state.settings

    background = [
        asyncio.create_task(
            run_refresh_loop(state.provider, interval_seconds=settings.refresh_interval_seconds)
        ),
        asyncio.create_task(
            run_cleanup_loop(state.provider, interval_seconds=settings.cleanup_interval_seconds)
        ),
        asyncio.create_task(
            run_tick_loop(
                state.engine,
                state.provider,
                state.listeners,
                interval_seconds=settings.tick_interval_seconds,
            )
        ),
    ]

    try:
        if settings.console_enabled:
            await run_console_loop(state)
        else:
            logger.info("Console disabled. Press Ctrl+C to stop.")
            await asyncio.gather(*background)
    finally:
        for t in background:
            t.cancel()
        for t in background:
            with contextlib.suppress(asyncio.CancelledError):
                await t


def main() -> None:
    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)
    setup_logging(log_dir=settings.data_dir, console_level=console_level)

    logger.info("Starting %s...", settings.app_name)

    state = create_initial_state(settings=settings)

    try:
        asyncio.run(run_app(state))
    except KeyboardInterrupt:
        logger.info("KeyboardInterrupt, shutting down...")
    finally:
        logger.info("Bye.")


if __name__ == "__main__":
    main()
