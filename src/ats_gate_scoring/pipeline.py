"""Gated scoring pipeline: policy, fairness scrub, score, confidence, gate, telemetry."""

from __future__ import annotations

import hashlib
import json
import time
from typing import Any

import structlog

from ats_gate_core.config.settings import Settings
from ats_gate_core.constants import YEARS_DISCREPANCY_THRESHOLD
from ats_gate_core.models.candidate import CandidateProfile
from ats_gate_core.models.events import EventType, ScoringRunRecord, TelemetryEvent
from ats_gate_core.models.policy import GateDecision, PolicyConfig
from ats_gate_core.models.requirements import JobRequirements
from ats_gate_core.models.run import ScoringOutcome, ScoringRequest
from ats_gate_core.models.score import Dimension
from ats_gate_scoring.confidence import compute_confidence_bucket, estimate_confidence
from ats_gate_scoring.engine import ATSEngine
from ats_gate_scoring.experience_merger import ExperienceSummary, compute_experience_duration
from ats_gate_scoring.observability.cost_tracker import track_run_usage
from ats_gate_scoring.observability.logging import bind_scoring_context, clear_scoring_context
from ats_gate_scoring.observability.telemetry import TelemetryEmitter
from ats_gate_scoring.policy import (
    apply_fairness_exclusions,
    evaluate_gate_decision,
    get_policy,
    meets_min_confidence,
    resolve_weights,
)

logger = structlog.get_logger()


def compute_inputs_hash(
    job_title: str,
    job_description: str,
    requirements: JobRequirements,
    candidate: CandidateProfile,
    weights: dict[Dimension, float],
    model_version: str,
) -> str:
    """SHA-256 over canonical sorted-key JSON of everything that feeds the score."""
    payload = {
        "job_title": job_title,
        "job_description": job_description,
        "requirements": requirements.model_dump(mode="json"),
        "candidate": candidate.model_dump(mode="json"),
        "weights": {str(k): round(v, 6) for k, v in weights.items()},
        "model_version": model_version,
    }
    canonical = json.dumps(payload, sort_keys=True, separators=(",", ":"), ensure_ascii=False)
    return hashlib.sha256(canonical.encode()).hexdigest()


def gate_event_type(gate: GateDecision) -> EventType:
    """Event type recorded for a gate decision."""
    if not gate.passes:
        return EventType.GATE_BLOCKED
    if gate.recommend_review:
        return EventType.GATE_REVIEW
    return EventType.GATE_PASSED


class ScoringPipeline:
    """Runs one scoring request end to end."""

    def __init__(
        self,
        settings: Settings | None = None,
        engine: ATSEngine | None = None,
        telemetry: TelemetryEmitter | None = None,
    ) -> None:
        self.settings = settings or Settings()
        self.engine = engine or ATSEngine(self.settings)
        self.telemetry = telemetry or TelemetryEmitter()

    def resolve_policy(self, request: ScoringRequest) -> PolicyConfig:
        profile = request.profile if request.profile is not None else self.settings.default_profile
        return get_policy(profile)

    async def run(self, request: ScoringRequest) -> ScoringOutcome:
        """Score, bucket and gate one candidate/job pair.

        Telemetry is written after the decision is made and cannot change it.
        """
        start = time.monotonic()
        policy = self.resolve_policy(request)
        bind_scoring_context(
            candidate_id=request.candidate.candidate_id,
            job_id=request.job_id,
            profile=policy.profile,
        )
        try:
            candidate = apply_fairness_exclusions(request.candidate, policy)
            scrubbed = candidate.visa_status != request.candidate.visa_status
            weights = resolve_weights(self.engine.weights, policy.weight_overrides)

            with track_run_usage(
                tenant_id=request.tenant_id,
                candidate_id=candidate.candidate_id,
                job_id=request.job_id,
                application_id=request.application_id,
            ) as usage:
                result = await self.engine.compute_ats_score(
                    request.job_title,
                    request.job_description,
                    request.requirements,
                    candidate,
                    weights=weights,
                )

            experience = compute_experience_duration(candidate.experience)
            estimate = estimate_confidence(candidate, request.requirements, result, experience)
            bucket = compute_confidence_bucket(estimate.confidence)
            gate = evaluate_gate_decision(
                result.total_score, bucket, policy, request.override_threshold
            )

            outcome = ScoringOutcome(
                result=result,
                confidence=estimate,
                confidence_bucket=bucket,
                gate=gate,
                profile=policy.profile,
                inputs_hash=compute_inputs_hash(
                    request.job_title,
                    request.job_description,
                    request.requirements,
                    candidate,
                    weights,
                    result.model_version,
                ),
                fairness_scrubbed=scrubbed,
                computation_ms=int((time.monotonic() - start) * 1000),
                ai_tokens_used=usage.total_tokens,
                ai_cost_usd=round(usage.cost_usd, 6),
            )

            logger.info(
                "ats_score_computed",
                total_score=result.total_score,
                confidence=estimate.confidence,
                confidence_bucket=bucket,
                gate_passes=gate.passes,
                recommend_review=gate.recommend_review,
                threshold=gate.threshold_used,
                normal_gate=meets_min_confidence(bucket, policy),
            )

            try:
                await self._emit_telemetry(request, candidate, policy, outcome, experience)
            except Exception as e:
                logger.error("telemetry_emit_failed", error=str(e), error_type=type(e).__name__)
            return outcome
        finally:
            clear_scoring_context()

    async def _emit_telemetry(
        self,
        request: ScoringRequest,
        candidate: CandidateProfile,
        policy: PolicyConfig,
        outcome: ScoringOutcome,
        experience: ExperienceSummary,
    ) -> None:
        ids: dict[str, Any] = {
            "tenant_id": request.tenant_id,
            "candidate_id": candidate.candidate_id,
            "job_id": request.job_id,
            "application_id": request.application_id,
        }
        result = outcome.result
        gate = outcome.gate

        events = [
            TelemetryEvent(
                event_type=EventType.SCORE_COMPUTED,
                payload={
                    "ats_score": result.total_score,
                    "ats_confidence": outcome.confidence.confidence,
                    "ats_confidence_bucket": outcome.confidence_bucket,
                    "ats_evidence_count": outcome.confidence.evidence_count,
                    "model_version": result.model_version,
                    "scoring_profile": policy.profile,
                    "computation_ms": outcome.computation_ms,
                    "ai_tokens_used": outcome.ai_tokens_used,
                    "ai_cost_usd": outcome.ai_cost_usd,
                },
                **ids,
            ),
            TelemetryEvent(
                event_type=gate_event_type(gate),
                payload={
                    "ats_score": result.total_score,
                    "confidence_bucket": outcome.confidence_bucket,
                    "threshold_used": gate.threshold_used,
                    "scoring_profile": policy.profile,
                    "recommend_review": gate.recommend_review,
                },
                **ids,
            ),
        ]

        if outcome.fairness_scrubbed:
            events.append(
                TelemetryEvent(
                    event_type=EventType.GOVERNANCE_FLAG,
                    payload={
                        "flag_type": "fairness_exclusion",
                        "detail": "visa_status replaced with sponsorship signal",
                        "affected_fields": ["visa_status"],
                    },
                    **ids,
                )
            )

        declared = candidate.years_of_experience
        if declared is not None and experience.raw_role_count > experience.unparseable_count:
            delta = round(abs(declared - experience.total_years), 1)
            if delta >= YEARS_DISCREPANCY_THRESHOLD:
                events.append(
                    TelemetryEvent(
                        event_type=EventType.YEARS_DISCREPANCY,
                        payload={
                            "profile_years": declared,
                            "computed_years": experience.total_years,
                            "delta": delta,
                            "confidence": experience.confidence,
                        },
                        **ids,
                    )
                )

        await self.telemetry.emit_many(events)

        if policy.governance.always_write_scoring_run or self.settings.always_write_scoring_run:
            await self.telemetry.record_scoring_run(
                ScoringRunRecord(
                    candidate_id=candidate.candidate_id,
                    job_id=request.job_id,
                    application_id=request.application_id,
                    model_version=result.model_version,
                    scoring_profile=policy.profile,
                    inputs_hash=outcome.inputs_hash,
                    inputs_summary={
                        "job_title": request.job_title,
                        "skills_count": len(candidate.skills) + len(candidate.tools),
                        "must_have_count": len(request.requirements.must_have_skills),
                        "experience_roles": len(candidate.experience),
                        "has_resume_text": bool(candidate.resume_text.strip()),
                        "fairness_scrubbed": outcome.fairness_scrubbed,
                    },
                    total_score=result.total_score,
                    dimensions_json={
                        str(d): s.model_dump(mode="json") for d, s in result.dimensions.items()
                    },
                    confidence=outcome.confidence.confidence,
                    confidence_bucket=outcome.confidence_bucket,
                    evidence_count=outcome.confidence.evidence_count,
                    ai_tokens_used=outcome.ai_tokens_used,
                    ai_cost_usd=outcome.ai_cost_usd,
                )
            )
