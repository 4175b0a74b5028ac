# src/daylist/errors.py

"""
Store failures surfaced by the engine.

Both carry the operation name and the underlying cause so the console (or any
other front-end) can render a message without inspecting tracebacks.
"""

from __future__ import annotations


class StoreFailure(Exception):
    def __init__(self, operation: str, cause: BaseException | None = None) -> None:
        self.operation = operation
        self.cause = cause
        detail = f": {cause}" if cause is not None and str(cause) else ""
        name = type(cause).__name__ if cause is not None else "error"
        super().__init__(f"{operation} failed ({name}){detail}")


class LoadFailure(StoreFailure):
    """Reading from the store failed; the last known-good collection is kept."""


class SaveFailure(StoreFailure):
    """Writing to the store failed after the in-memory change was applied (not reverted)."""
