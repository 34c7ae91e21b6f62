"""Event sink interface for audit and telemetry writes."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class EventSink(Protocol):
    """Narrow storage capability: insert rows into a named table.

    Returns an error description on failure and None on success. Any
    storage backend that can append rows satisfies it.
    """

    async def insert(self, table: str, rows: list[dict[str, Any]]) -> str | None:
        """Insert rows; return an error message or None."""
        ...
