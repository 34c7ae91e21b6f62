"""Scoring request and outcome models for the gated pipeline."""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import BaseModel, Field

from ats_gate_core.models.candidate import CandidateProfile
from ats_gate_core.models.policy import ConfidenceBucket, GateDecision, ScoringProfile
from ats_gate_core.models.requirements import JobRequirements
from ats_gate_core.models.score import ATSScoreResult


class ScoringRequest(BaseModel):
    """One candidate/job pair to score and gate."""

    job_title: str = Field(description="Job title as posted")
    job_description: str = Field(default="", description="Job description text")
    requirements: JobRequirements = Field(description="Structured job requirements")
    candidate: CandidateProfile = Field(description="Candidate profile")
    profile: ScoringProfile | str | None = Field(
        default=None, description="Operating profile key; None uses the configured default"
    )
    job_id: str | None = Field(default=None, description="Job identifier for telemetry")
    application_id: str | None = Field(default=None, description="Application identifier")
    tenant_id: str | None = Field(default=None, description="Tenant identifier")
    override_threshold: int | None = Field(
        default=None, ge=0, le=100, description="Job-level gate threshold override"
    )


class ConfidenceEstimate(BaseModel):
    """Evidence-quality estimate behind a score."""

    confidence: int = Field(ge=0, le=100, description="0-100 evidence confidence")
    evidence_count: int = Field(ge=0, description="Distinct evidence tokens found")


class ScoringOutcome(BaseModel):
    """Score, confidence and gate decision for one request."""

    result: ATSScoreResult
    confidence: ConfidenceEstimate
    confidence_bucket: ConfidenceBucket
    gate: GateDecision
    profile: ScoringProfile
    inputs_hash: str
    fairness_scrubbed: bool = False
    computation_ms: int = 0
    ai_tokens_used: int = 0
    ai_cost_usd: float = 0.0
    scored_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
