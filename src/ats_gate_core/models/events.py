"""Telemetry event and audit snapshot models."""

from __future__ import annotations

from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, Field


class EventType(StrEnum):
    """Event types written to the ats_events table."""

    SCORE_COMPUTED = "ats_score_computed"
    GATE_PASSED = "ats_gate_passed"
    GATE_BLOCKED = "ats_gate_blocked"
    GATE_REVIEW = "ats_gate_review"
    GOVERNANCE_FLAG = "governance_flag"
    YEARS_DISCREPANCY = "candidate_years_discrepancy"


class TelemetryEvent(BaseModel):
    """A single audit/telemetry event, keyed by candidate/job/application."""

    event_type: EventType
    event_source: str = Field(default="system")
    tenant_id: str | None = None
    candidate_id: str | None = None
    job_id: str | None = None
    match_id: str | None = None
    application_id: str | None = None
    actor_user_id: str | None = None
    payload: dict[str, Any] = Field(default_factory=dict)
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    def to_row(self) -> dict[str, Any]:
        """Flatten to a sink row."""
        return self.model_dump(mode="json")


class ScoringRunRecord(BaseModel):
    """Immutable snapshot of one scoring computation for reproducibility audits.

    Same ``inputs_hash`` and ``model_version`` guarantee the same
    deterministic dimensions.
    """

    candidate_id: str | None = None
    job_id: str | None = None
    application_id: str | None = None
    model_version: str
    scoring_profile: str
    inputs_hash: str = Field(description="SHA-256 of canonical sorted-key input JSON")
    inputs_summary: dict[str, Any] = Field(default_factory=dict)
    total_score: int
    dimensions_json: dict[str, Any] = Field(default_factory=dict)
    confidence: int | None = None
    confidence_bucket: str | None = None
    evidence_count: int | None = None
    ai_tokens_used: int | None = None
    ai_cost_usd: float | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    def to_row(self) -> dict[str, Any]:
        """Flatten to a sink row."""
        return self.model_dump(mode="json")


class AiCallRecord(BaseModel):
    """One LLM API call for the AI cost ledger."""

    call_type: str
    model: str
    input_tokens: int = 0
    output_tokens: int = 0
    cost_usd: float = 0.0
    cache_hit: bool = False
    duration_ms: int | None = None
    candidate_id: str | None = None
    job_id: str | None = None
    application_id: str | None = None
    tenant_id: str | None = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    def to_row(self) -> dict[str, Any]:
        """Flatten to a sink row."""
        return self.model_dump(mode="json")
