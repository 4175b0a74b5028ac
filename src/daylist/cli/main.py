# src/daylist/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds the engine, loads the collections, then runs the
console REPL on the asyncio event loop.
"""

from __future__ import annotations

import asyncio
import logging

from ..cli.bootstrap import create_engine
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


async def _run() -> None:
    settings = get_settings()
    engine = create_engine(settings=settings)

    result = await engine.reload()
    if not result.ok:
        # Not fatal: the session starts with whatever could be loaded.
        print(f"Warning: {result.failure}. Use /reload to try again.", flush=True)

    await run_console_loop(engine)


def main() -> None:
    settings = get_settings()

    level_name = str(settings.log_level).upper()
    console_level = getattr(logging, level_name, logging.INFO)
    setup_logging(log_dir=settings.data_dir, console_level=console_level)

    logger.info("Starting %s...", settings.app_name)
    try:
        asyncio.run(_run())
    except KeyboardInterrupt:
        logger.info("Interrupted.")
    logger.info("Bye.")


if __name__ == "__main__":
    main()
