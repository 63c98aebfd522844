# src/checklist_app/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds the ChecklistApp, subscribes to the store, starts
the reminder poller, then runs the console REPL on the same event loop.
"""

from __future__ import annotations

import asyncio
import logging

from ..cli.bootstrap import create_app
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..core.checklist import ChecklistApp
from ..errors import StoreError
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


async def _shutdown(app: ChecklistApp) -> None:
    """Best-effort shutdown (no exceptions should escape)."""
    try:
        await app.stop()
    except Exception:
        logger.exception("Failed to stop the app cleanly.")

    try:
        await app.store.close()
    except Exception:
        logger.debug("Store close failed.", exc_info=True)

    close = getattr(app.notifier, "close", None)
    if close is not None:
        try:
            await close()
        except Exception:
            logger.debug("Notifier close failed.", exc_info=True)


async def run(settings) -> None:
    try:
        app = create_app(settings=settings)
        await app.start()
    except StoreError as e:
        logger.error("Could not open the task store: %s", e)
        return

    try:
        await run_console_loop(app)
    finally:
        await _shutdown(app)
        logger.info("Bye.")


def main() -> None:
    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)
    setup_logging(log_dir=settings.data_dir, console_level=console_level)

    logger.info("Starting %s (store=%s, notifier=%s)...", settings.app_name, settings.store_backend, settings.notifier)

    try:
        asyncio.run(run(settings))
    except KeyboardInterrupt:
        logger.info("Interrupted.")


if __name__ == "__main__":
    main()
