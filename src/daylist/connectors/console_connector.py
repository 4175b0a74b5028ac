# src/daylist/connectors/console_connector.py

from __future__ import annotations

import asyncio
import logging
from datetime import datetime

from ..cli.commands import CommandRegistry, format_day
from ..cli.commands import registry as command_registry
from ..core.engine import TaskViewEngine
from ..tasks.task_models import Task

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}", flush=True)


async def _ainput(prompt: str) -> str:
    # input() blocks; keep the event loop free for store I/O.
    return await asyncio.to_thread(input, prompt)


class ConsoleConfirmer:
    """DeletionConfirmer that asks on the terminal."""

    async def confirm_deletion(self, task: Task) -> bool:
        try:
            answer = await _ainput(f"Delete '{task.title}'? [y/N] ")
        except EOFError:
            return False
        return answer.strip().lower() in ("y", "yes")


class AlwaysConfirm:
    """DeletionConfirmer used when confirmation is switched off in settings."""

    async def confirm_deletion(self, task: Task) -> bool:
        return True


async def run_console_loop(
    engine: TaskViewEngine,
    *,
    registry: CommandRegistry | None = None,
) -> None:
    registry = registry or command_registry
    logger.info("Console connector started.")
    _print_ts("Type /help for commands, /exit to quit.")
    print(format_day(engine), flush=True)

    while True:
        try:
            line = (await _ainput("> ")).strip()
        except EOFError:
            logger.info("Console EOF received, exiting.")
            break
        except KeyboardInterrupt:
            logger.info("Console KeyboardInterrupt, exiting.")
            print()
            break

        if not line:
            continue

        if line.lower() in ("/exit", "/quit", "/q"):
            logger.info("Console exit command received.")
            break

        if not line.startswith("/"):
            # Bare text is a shortcut for /add on the selected day.
            line = "/add " + line

        try:
            reply = await registry.handle(engine, line, emit=_print_ts)
        except Exception:
            logger.exception("Command handler crashed.")
            reply = "Internal error while handling a command."

        if reply is not None:
            print(reply, flush=True)

    logger.info("Console connector finished.")
