"""Operating-profile policy and gate decision models."""

from __future__ import annotations

from enum import StrEnum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from ats_gate_core.models.score import Dimension


class ScoringProfile(StrEnum):
    """Named operating profiles."""

    AGENCY = "A"  # OPT / agency placement
    ENTERPRISE = "C"  # Enterprise internal mobility (governance)


class ConfidenceBucket(StrEnum):
    """Ordered evidence-confidence tiers used to pick a gate threshold."""

    INSUFFICIENT = "insufficient"
    MODERATE = "moderate"
    GOOD = "good"
    HIGH = "high"


class GateThresholds(BaseModel):
    """One gate threshold per confidence bucket."""

    model_config = ConfigDict(frozen=True)

    insufficient: int = Field(ge=0, le=100)
    moderate: int = Field(ge=0, le=100)
    good: int = Field(ge=0, le=100)
    high: int = Field(ge=0, le=100)

    def for_bucket(self, bucket: ConfidenceBucket | str) -> int:
        """Return the threshold for a bucket."""
        return int(getattr(self, ConfidenceBucket(bucket).value))


class AutomationPermissions(BaseModel):
    """Automation features a profile may run without a human."""

    model_config = ConfigDict(frozen=True)

    outreach: bool = False
    follow_up_sequences: bool = False
    auto_apply: bool = False


class GovernanceRules(BaseModel):
    """Audit and compliance switches."""

    model_config = ConfigDict(frozen=True)

    enabled: bool = False
    always_write_scoring_run: bool = False
    fairness_exclusion_enabled: bool = False
    hard_block_allowed: bool = True


class PolicyConfig(BaseModel):
    """Static configuration for one operating profile. Never mutated at runtime."""

    model_config = ConfigDict(frozen=True)

    profile: ScoringProfile
    display_name: str
    weight_overrides: dict[Dimension, float] | None = Field(
        default=None, description="Dimension weight overrides; None uses engine defaults"
    )
    gate_thresholds: GateThresholds
    allowed_automation: AutomationPermissions = Field(default_factory=AutomationPermissions)
    governance: GovernanceRules = Field(default_factory=GovernanceRules)
    kpis: tuple[str, ...] = Field(default_factory=tuple)
    min_confidence_for_normal_gate: ConfidenceBucket = ConfidenceBucket.MODERATE


class GateDecision(BaseModel):
    """Outcome of the apply gate for one scored candidate/job pair.

    When the policy disallows hard blocks ``passes`` is always True and
    ``recommend_review`` carries the real outcome.
    """

    passes: bool
    threshold_used: int
    reason: str
    recommend_review: bool = False
    confidence_bucket: ConfidenceBucket
    profile: ScoringProfile


class KpiMeta(BaseModel):
    """Display metadata for a profile KPI."""

    model_config = ConfigDict(frozen=True)

    key: str
    label: str
    unit: Literal["%", "days", "USD", "r", "index"]
    higher_is_better: bool
