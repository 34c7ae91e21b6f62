"""ATS scoring engine: six dimensions, weighted total, explanation."""

from __future__ import annotations

import time
from collections.abc import Mapping
from datetime import date

import structlog
from pydantic import ValidationError

from ats_gate_core.config.settings import Settings
from ats_gate_core.decoding import DecodeOk, parse_requirements
from ats_gate_core.exceptions import InvalidCandidateError, InvalidRequirementsError
from ats_gate_core.interfaces.soft_fit import SoftFitProvider
from ats_gate_core.models.candidate import CandidateProfile
from ats_gate_core.models.requirements import JobRequirements
from ats_gate_core.models.score import ATSScoreResult, Dimension
from ats_gate_scoring.agents.soft_fit import SoftFitScorer
from ats_gate_scoring.canonical import SkillCanonicalizer, default_canonicalizer
from ats_gate_scoring.combiner import combine_scores, default_weights, normalize_weights
from ats_gate_scoring.dimensions import (
    score_education,
    score_experience,
    score_keywords,
    score_location,
    score_title,
)
from ats_gate_scoring.taxonomy import DomainClassifier, default_classifier

logger = structlog.get_logger()


def _require_requirements(requirements: object) -> JobRequirements:
    if requirements is None:
        msg = "Job requirements are required to compute an ATS score"
        raise InvalidRequirementsError(msg)
    if isinstance(requirements, JobRequirements):
        return requirements
    decoded = parse_requirements(requirements)
    if isinstance(decoded, DecodeOk):
        return decoded.value
    msg = f"Malformed job requirements: {decoded.reason}"
    raise InvalidRequirementsError(msg)


def _require_candidate(candidate: object) -> CandidateProfile:
    if isinstance(candidate, CandidateProfile):
        return candidate
    if isinstance(candidate, Mapping):
        try:
            return CandidateProfile.model_validate(dict(candidate))
        except ValidationError as e:
            msg = f"Malformed candidate profile: {e.error_count()} error(s)"
            raise InvalidCandidateError(msg) from e
    msg = "Candidate profile is required to compute an ATS score"
    raise InvalidCandidateError(msg)


class ATSEngine:
    """Scores one candidate against one job.

    The five deterministic dimensions are pure and run inline; the soft-fit
    provider is the only awaited call. Weights passed per call override the
    engine's vector for that call only.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        soft_fit: SoftFitProvider | None = None,
        weights: Mapping[Dimension | str, float] | None = None,
        canonicalizer: SkillCanonicalizer | None = None,
        classifier: DomainClassifier | None = None,
    ) -> None:
        self.settings = settings or Settings()
        self.soft_fit: SoftFitProvider = soft_fit or SoftFitScorer(self.settings)
        self.weights = normalize_weights(weights) if weights else default_weights()
        self.canonicalizer = canonicalizer or default_canonicalizer()
        self.classifier = classifier or default_classifier()

    async def compute_ats_score(
        self,
        job_title: str,
        job_description: str,
        requirements: JobRequirements | Mapping[str, object] | None,
        candidate: CandidateProfile | Mapping[str, object] | None,
        weights: Mapping[Dimension | str, float] | None = None,
        today: date | None = None,
    ) -> ATSScoreResult:
        """Compute the six-dimension score for a candidate/job pair.

        Raises InvalidRequirementsError before any scoring when requirements
        are missing or malformed.
        """
        reqs = _require_requirements(requirements)
        profile = _require_candidate(candidate)
        start = time.monotonic()

        keyword = score_keywords(
            reqs, profile.skills, profile.tools, profile.resume_text, self.canonicalizer
        )
        experience = score_experience(
            reqs, profile.years_of_experience, profile.experience, today=today
        )
        title = score_title(
            reqs, job_title, profile.primary_title, profile.secondary_titles, self.classifier
        )
        education = score_education(reqs, profile.education, profile.certifications)
        location = score_location(
            reqs,
            profile.location,
            profile.visa_status,
            profile.open_to_remote,
            profile.open_to_relocation,
            profile.target_locations,
        )
        soft = await self.soft_fit.score(
            job_title, job_description, profile.primary_title, profile.resume_text, keyword
        )

        dimensions = {
            Dimension.KEYWORD: keyword,
            Dimension.EXPERIENCE: experience,
            Dimension.TITLE: title,
            Dimension.EDUCATION: education,
            Dimension.LOCATION: location,
            Dimension.SOFT: soft,
        }
        resolved = normalize_weights(weights) if weights else self.weights
        total, reason = combine_scores(dimensions, resolved)

        logger.debug(
            "ats_dimensions_scored",
            total_score=total,
            **{f"{d}_score": s.score for d, s in dimensions.items()},
            duration_ms=int((time.monotonic() - start) * 1000),
        )

        return ATSScoreResult(
            total_score=total,
            dimensions=dimensions,
            reason=reason,
            matched_keywords=list(keyword.matched),
            missing_keywords=list(keyword.missing),
            weights_used=resolved,
            model_version=self.settings.model_version,
        )


async def compute_ats_score(
    job_title: str,
    job_description: str,
    requirements: JobRequirements | Mapping[str, object] | None,
    candidate: CandidateProfile | Mapping[str, object] | None,
    weights: Mapping[Dimension | str, float] | None = None,
    soft_fit: SoftFitProvider | None = None,
    settings: Settings | None = None,
) -> ATSScoreResult:
    """One-shot scoring with a throwaway engine."""
    engine = ATSEngine(settings=settings, soft_fit=soft_fit)
    return await engine.compute_ats_score(
        job_title, job_description, requirements, candidate, weights=weights
    )
