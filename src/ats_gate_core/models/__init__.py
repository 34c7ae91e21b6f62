"""Domain models for ats-gate."""

from ats_gate_core.models.candidate import (
    CandidateProfile,
    Certification,
    EducationEntry,
    WorkExperience,
)
from ats_gate_core.models.events import (
    AiCallRecord,
    EventType,
    ScoringRunRecord,
    TelemetryEvent,
)
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
from ats_gate_core.models.requirements import (
    Domain,
    EducationLevel,
    JobRequirements,
    LocationType,
    SeniorityLevel,
)
from ats_gate_core.models.run import ConfidenceEstimate, ScoringOutcome, ScoringRequest
from ats_gate_core.models.score import ATSScoreResult, Dimension, DimensionScore

__all__ = [
    "ATSScoreResult",
    "AiCallRecord",
    "AutomationPermissions",
    "CandidateProfile",
    "Certification",
    "ConfidenceBucket",
    "ConfidenceEstimate",
    "Dimension",
    "DimensionScore",
    "Domain",
    "EducationEntry",
    "EducationLevel",
    "EventType",
    "GateDecision",
    "GateThresholds",
    "GovernanceRules",
    "JobRequirements",
    "KpiMeta",
    "LocationType",
    "PolicyConfig",
    "ScoringOutcome",
    "ScoringProfile",
    "ScoringRequest",
    "ScoringRunRecord",
    "SeniorityLevel",
    "TelemetryEvent",
    "WorkExperience",
]
