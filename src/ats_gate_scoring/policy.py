"""Operating-profile policies and the apply gate.

Profile logic lives here only. The scorers and combiner never branch on a
profile; they receive a resolved weight vector and a (possibly scrubbed)
candidate.
"""

from __future__ import annotations

import re
from collections.abc import Mapping

import structlog

from ats_gate_core.constants import (
    NEEDS_SPONSORSHIP,
    NO_SPONSORSHIP_NEEDED,
    VISA_SPONSORSHIP_PATTERN,
)
from ats_gate_core.models.candidate import CandidateProfile
from ats_gate_core.models.policy import (
    AutomationPermissions,
    ConfidenceBucket,
    GateDecision,
    GateThresholds,
    GovernanceRules,
    KpiMeta,
    PolicyConfig,
    ScoringProfile,
)
from ats_gate_core.models.score import Dimension
from ats_gate_scoring.combiner import normalize_weights

logger = structlog.get_logger()

_VISA_RE = re.compile(VISA_SPONSORSHIP_PATTERN, re.IGNORECASE)
_BUCKET_ORDER = list(ConfidenceBucket)

PROFILE_A = PolicyConfig(
    profile=ScoringProfile.AGENCY,
    display_name="OPT / Agency Placement",
    weight_overrides=None,
    # Relaxed when the resume is sparse, stricter with full evidence
    gate_thresholds=GateThresholds(insufficient=38, moderate=48, good=52, high=57),
    allowed_automation=AutomationPermissions(
        outreach=True,
        follow_up_sequences=True,
        auto_apply=False,
    ),
    governance=GovernanceRules(
        enabled=False,
        always_write_scoring_run=False,
        fairness_exclusion_enabled=False,
        hard_block_allowed=True,
    ),
    kpis=(
        "interview_conversion_rate",
        "time_to_interview_days",
        "variant_win_rate",
        "outreach_reply_rate",
        "placement_rate",
        "ai_cost_per_placement",
    ),
    min_confidence_for_normal_gate=ConfidenceBucket.MODERATE,
)

PROFILE_C = PolicyConfig(
    profile=ScoringProfile.ENTERPRISE,
    display_name="Enterprise Internal Mobility",
    # Sums to 0.87 over the six dimensions; renormalized when resolved
    weight_overrides={
        Dimension.KEYWORD: 0.28,
        Dimension.EXPERIENCE: 0.22,
        Dimension.TITLE: 0.14,
        Dimension.EDUCATION: 0.12,
        Dimension.LOCATION: 0.08,
        Dimension.SOFT: 0.03,
    },
    gate_thresholds=GateThresholds(insufficient=45, moderate=55, good=60, high=65),
    allowed_automation=AutomationPermissions(),
    governance=GovernanceRules(
        enabled=True,
        always_write_scoring_run=True,
        fairness_exclusion_enabled=True,
        hard_block_allowed=False,
    ),
    kpis=(
        "time_to_internal_placement_days",
        "score_to_outcome_correlation",
        "fairness_disparity_index",
        "scoring_run_reproducibility_rate",
        "human_review_override_rate",
    ),
    min_confidence_for_normal_gate=ConfidenceBucket.GOOD,
)

PROFILES: dict[ScoringProfile, PolicyConfig] = {
    ScoringProfile.AGENCY: PROFILE_A,
    ScoringProfile.ENTERPRISE: PROFILE_C,
}

KPI_REGISTRY: dict[str, KpiMeta] = {
    meta.key: meta
    for meta in (
        KpiMeta(key="interview_conversion_rate", label="Interview Conversion Rate",
                unit="%", higher_is_better=True),
        KpiMeta(key="time_to_interview_days", label="Avg Days to Interview",
                unit="days", higher_is_better=False),
        KpiMeta(key="variant_win_rate", label="Variant Win Rate",
                unit="%", higher_is_better=True),
        KpiMeta(key="outreach_reply_rate", label="Outreach Reply Rate",
                unit="%", higher_is_better=True),
        KpiMeta(key="placement_rate", label="Placement Rate",
                unit="%", higher_is_better=True),
        KpiMeta(key="ai_cost_per_placement", label="AI Cost Per Placement",
                unit="USD", higher_is_better=False),
        KpiMeta(key="time_to_internal_placement_days", label="Time to Internal Placement",
                unit="days", higher_is_better=False),
        KpiMeta(key="score_to_outcome_correlation", label="Score to Outcome Correlation",
                unit="r", higher_is_better=True),
        KpiMeta(key="fairness_disparity_index", label="Fairness Disparity Index",
                unit="index", higher_is_better=False),
        KpiMeta(key="scoring_run_reproducibility_rate", label="Scoring Reproducibility",
                unit="%", higher_is_better=True),
        KpiMeta(key="human_review_override_rate", label="Human Review Override Rate",
                unit="%", higher_is_better=False),
    )
}  # fmt: skip


def get_policy(profile: ScoringProfile | str | None) -> PolicyConfig:
    """Resolve a profile key to its policy; anything unrecognised gets profile A."""
    key = str(profile).strip().upper() if profile is not None else ""
    try:
        return PROFILES[ScoringProfile(key)]
    except ValueError:
        if key:
            logger.warning("unknown_scoring_profile", profile=key, fallback="A")
        return PROFILE_A


def evaluate_gate_decision(
    score: int,
    bucket: ConfidenceBucket | str,
    policy: PolicyConfig,
    override_threshold: int | None = None,
) -> GateDecision:
    """Decide whether a scored candidate clears the apply gate.

    Under a policy that disallows hard blocks the candidate always passes and
    ``recommend_review`` is the only failure signal.
    """
    bucket = ConfidenceBucket(bucket)
    threshold = (
        override_threshold
        if override_threshold is not None
        else policy.gate_thresholds.for_bucket(bucket)
    )

    if not policy.governance.hard_block_allowed:
        below = score < threshold
        if below:
            reason = (
                f"Score {score} below threshold {threshold}; flagged for human review "
                f"(enterprise policy: no hard blocks)"
            )
        else:
            reason = (
                f"Score {score} meets threshold {threshold} ({bucket} confidence); "
                f"recommended for shortlist"
            )
        return GateDecision(
            passes=True,
            threshold_used=threshold,
            reason=reason,
            recommend_review=below,
            confidence_bucket=bucket,
            profile=policy.profile,
        )

    passes = score >= threshold
    if passes:
        reason = f"Score {score} >= {threshold} ({bucket} confidence); gate passed"
    else:
        reason = f"Score {score} < {threshold} ({bucket} confidence); gate blocked"
    return GateDecision(
        passes=passes,
        threshold_used=threshold,
        reason=reason,
        recommend_review=False,
        confidence_bucket=bucket,
        profile=policy.profile,
    )


def resolve_weights(
    defaults: Mapping[Dimension | str, float],
    overrides: Mapping[Dimension | str, float] | None,
) -> dict[Dimension, float]:
    """Merge overrides into defaults, renormalizing if the sum drifts from 1."""
    merged: dict[str, float] = {str(k): v for k, v in defaults.items()}
    if overrides:
        merged.update({str(k): v for k, v in overrides.items()})
    return normalize_weights(merged)


def meets_min_confidence(bucket: ConfidenceBucket | str, policy: PolicyConfig) -> bool:
    """Whether the evidence is strong enough for the profile's normal gate."""
    return _BUCKET_ORDER.index(ConfidenceBucket(bucket)) >= _BUCKET_ORDER.index(
        policy.min_confidence_for_normal_gate
    )


def scrub_visa_status(visa_status: str) -> str:
    """Collapse free-text visa status to a two-valued sponsorship signal."""
    if visa_status in (NEEDS_SPONSORSHIP, NO_SPONSORSHIP_NEEDED):
        return visa_status
    return NEEDS_SPONSORSHIP if _VISA_RE.search(visa_status) else NO_SPONSORSHIP_NEEDED


def apply_fairness_exclusions(
    candidate: CandidateProfile, policy: PolicyConfig
) -> CandidateProfile:
    """Return a copy with nationality-correlated text scrubbed under governance.

    Profiles without fairness exclusion get the same object back. The input
    is never mutated.
    """
    if not policy.governance.fairness_exclusion_enabled:
        return candidate
    if candidate.visa_status is None:
        return candidate.model_copy()
    return candidate.model_copy(
        update={"visa_status": scrub_visa_status(candidate.visa_status)}
    )


def get_profile_kpis(policy: PolicyConfig) -> list[KpiMeta]:
    """KPI metadata for a profile, skipping keys missing from the registry."""
    return [KPI_REGISTRY[key] for key in policy.kpis if key in KPI_REGISTRY]


def is_automation_allowed(policy: PolicyConfig, feature: str) -> bool:
    """Whether ``feature`` (outreach, follow_up_sequences, auto_apply) may run."""
    return bool(getattr(policy.allowed_automation, feature, False))
