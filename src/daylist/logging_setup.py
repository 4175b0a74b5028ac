# src/daylist/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path

LOG_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


class _ReplFilter(logging.Filter):
    """Keeps stderr readable next to the REPL prompt; the log file gets everything."""

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name.startswith("daylist.tasks.task_store"):
            # one line per save otherwise
            return record.levelno >= logging.WARNING
        if record.name.startswith("daylist."):
            return True
        return record.levelno >= logging.ERROR


def setup_logging(
    *,
    log_dir: str | Path = ".local/daylist",
    console_level: int = logging.WARNING,
    file_level: int = logging.DEBUG,
) -> Path:
    """Route daylist logs to stderr (filtered) and to <log_dir>/daylist.log. Returns the log file path."""
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / "daylist.log"

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for handler in list(root.handlers):
        root.removeHandler(handler)

    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATEFMT)

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setLevel(console_level)
    stderr_handler.setFormatter(formatter)
    stderr_handler.addFilter(_ReplFilter())
    root.addHandler(stderr_handler)

    file_handler = logging.FileHandler(str(log_file), encoding="utf-8")
    file_handler.setLevel(file_level)
    file_handler.setFormatter(formatter)
    root.addHandler(file_handler)

    logging.captureWarnings(True)
    return log_file
