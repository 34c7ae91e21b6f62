"""Best-effort telemetry writes to an event sink.

Every public method catches and logs its own failures. A broken sink must
never change or abort a scoring decision.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import structlog

from ats_gate_core.interfaces.sink import EventSink
from ats_gate_core.models.events import AiCallRecord, ScoringRunRecord, TelemetryEvent

logger = structlog.get_logger()

EVENTS_TABLE = "ats_events"
SCORING_RUNS_TABLE = "scoring_runs"
AI_COST_TABLE = "ai_cost_ledger"


class NullEventSink:
    """Sink that accepts and discards everything."""

    async def insert(self, table: str, rows: list[dict[str, Any]]) -> str | None:
        return None


class InMemoryEventSink:
    """Sink that keeps rows per table, for tests and dry runs."""

    def __init__(self) -> None:
        self.tables: dict[str, list[dict[str, Any]]] = {}

    async def insert(self, table: str, rows: list[dict[str, Any]]) -> str | None:
        self.tables.setdefault(table, []).extend(rows)
        return None

    def rows(self, table: str) -> list[dict[str, Any]]:
        """Rows written to ``table`` so far."""
        return list(self.tables.get(table, []))

    def event_types(self) -> list[str]:
        """Event types written to the events table, in order."""
        return [row["event_type"] for row in self.tables.get(EVENTS_TABLE, [])]


class TelemetryEmitter:
    """Fire-and-forget writer for events, scoring runs and AI cost rows."""

    def __init__(self, sink: EventSink | None = None) -> None:
        self.sink: EventSink = sink or NullEventSink()

    async def _write(self, table: str, rows: list[dict[str, Any]]) -> bool:
        if not rows:
            return True
        try:
            error = await self.sink.insert(table, rows)
        except Exception as e:
            logger.error(
                "telemetry_write_failed",
                table=table,
                rows=len(rows),
                error=str(e),
                error_type=type(e).__name__,
            )
            return False
        if error:
            logger.error("telemetry_insert_rejected", table=table, rows=len(rows), error=error)
            return False
        return True

    async def emit(self, event: TelemetryEvent) -> bool:
        """Write one event. Returns False (after logging) on failure."""
        return await self.emit_many([event])

    async def emit_many(self, events: Sequence[TelemetryEvent]) -> bool:
        """Write several events in a single insert."""
        try:
            rows = [event.to_row() for event in events]
        except Exception as e:
            logger.error("telemetry_serialize_failed", error=str(e))
            return False
        return await self._write(EVENTS_TABLE, rows)

    async def record_scoring_run(self, record: ScoringRunRecord) -> bool:
        """Persist an immutable scoring-run snapshot."""
        try:
            row = record.to_row()
        except Exception as e:
            logger.error("scoring_run_serialize_failed", error=str(e))
            return False
        return await self._write(SCORING_RUNS_TABLE, [row])

    async def log_ai_call(self, call: AiCallRecord) -> bool:
        """Append one LLM call to the cost ledger."""
        try:
            row = call.to_row()
        except Exception as e:
            logger.error("ai_call_serialize_failed", error=str(e))
            return False
        return await self._write(AI_COST_TABLE, [row])
