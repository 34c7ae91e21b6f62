"""Evidence confidence and confidence buckets.

The bucket breakpoints are a stored contract: downstream tables constrain
``confidence_bucket`` to these four values.
"""

from __future__ import annotations

from ats_gate_core.constants import (
    CONFIDENCE_GOOD_BELOW,
    CONFIDENCE_INSUFFICIENT_BELOW,
    CONFIDENCE_MODERATE_BELOW,
)
from ats_gate_core.models.candidate import CandidateProfile
from ats_gate_core.models.policy import ConfidenceBucket
from ats_gate_core.models.requirements import JobRequirements
from ats_gate_core.models.run import ConfidenceEstimate
from ats_gate_core.models.score import ATSScoreResult
from ats_gate_scoring.experience_merger import ExperienceSummary, compute_experience_duration
from ats_gate_scoring.numeric import clamp_score, round_half_up

DECLARED_YEARS_CONFIDENCE = 0.6
RICH_RESUME_CHARS = 500
SKILL_POINTS = 4
MAX_SKILL_POINTS = 20


def compute_confidence_bucket(confidence: int | None) -> ConfidenceBucket:
    """Map a 0-100 confidence integer to a bucket; None is insufficient."""
    if confidence is None or confidence < CONFIDENCE_INSUFFICIENT_BELOW:
        return ConfidenceBucket.INSUFFICIENT
    if confidence < CONFIDENCE_MODERATE_BELOW:
        return ConfidenceBucket.MODERATE
    if confidence < CONFIDENCE_GOOD_BELOW:
        return ConfidenceBucket.GOOD
    return ConfidenceBucket.HIGH


def float_confidence_to_int(confidence: float) -> int:
    """Clamp a 0-1 float confidence and scale it to 0-100."""
    return round_half_up(max(0.0, min(1.0, confidence)) * 100)


def estimate_confidence(
    candidate: CandidateProfile,
    requirements: JobRequirements,
    result: ATSScoreResult,
    experience: ExperienceSummary | None = None,
) -> ConfidenceEstimate:
    """Score how much evidence the candidate's data gave the scorers.

    Points: dated work history up to 40 (declared years alone count 0.6 of
    that), resume text 20 (10 under RICH_RESUME_CHARS), skills up to 20,
    education 10, and 10 when the job names must-haves to compare against.
    Matched keywords are only counted into ``evidence_count``.
    """
    summary = experience or compute_experience_duration(candidate.experience)

    if summary.raw_role_count:
        history = summary.confidence
    elif candidate.years_of_experience is not None:
        history = DECLARED_YEARS_CONFIDENCE
    else:
        history = 0.0
    points = history * 40

    resume = candidate.resume_text.strip()
    if len(resume) >= RICH_RESUME_CHARS:
        points += 20
    elif resume:
        points += 10

    skill_count = len({s.strip().lower() for s in [*candidate.skills, *candidate.tools] if s})
    points += min(MAX_SKILL_POINTS, skill_count * SKILL_POINTS)

    if candidate.education:
        points += 10
    if requirements.must_have_skills:
        points += 10

    return ConfidenceEstimate(
        confidence=clamp_score(points),
        evidence_count=len(result.matched_keywords),
    )
