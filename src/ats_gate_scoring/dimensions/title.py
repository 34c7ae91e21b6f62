"""Title/domain alignment dimension."""

from __future__ import annotations

from collections.abc import Sequence

from ats_gate_core.models.requirements import Domain, JobRequirements
from ats_gate_core.models.score import DimensionScore
from ats_gate_scoring.taxonomy import DomainClassifier, default_classifier, extract_seniority

EXACT_TITLE_SCORE = 100
SAME_DOMAIN_SCORE = 85
ADJACENT_DOMAIN_SCORE = 65
GENERAL_TITLE_SCORE = 45
MISMATCH_SCORE = 25
SENIORITY_BONUS = 10


def score_title(
    requirements: JobRequirements,
    job_title: str,
    primary_title: str,
    secondary_titles: Sequence[str],
    classifier: DomainClassifier | None = None,
) -> DimensionScore:
    """Score how well the candidate's titles align with the job.

    The result also drives the combiner's domain-mismatch cap, so a strong
    keyword match cannot hide a fundamentally different role.
    """
    domains = classifier or default_classifier()
    job_lower = (job_title or "").strip().lower()
    titles = [
        t.strip().lower() for t in [primary_title, *secondary_titles] if t and t.strip()
    ]

    if job_lower:
        for title in titles:
            if title == job_lower or title in job_lower or job_lower in title:
                return DimensionScore(
                    score=EXACT_TITLE_SCORE,
                    details=f'Direct title match: "{title}"',
                )

    job_domain = requirements.domain
    candidate_domains = [domains.classify(t) for t in titles] or [Domain.GENERAL]

    if job_domain in candidate_domains:
        return DimensionScore(score=SAME_DOMAIN_SCORE, details=f"Same domain: {job_domain}")

    if any(domains.is_adjacent(job_domain, d) for d in candidate_domains):
        return DimensionScore(
            score=ADJACENT_DOMAIN_SCORE,
            details=f"Adjacent domain: candidate={candidate_domains[0]}, job={job_domain}",
        )

    bonus = (
        SENIORITY_BONUS
        if extract_seniority(job_lower) == extract_seniority((primary_title or "").lower())
        else 0
    )

    if Domain.GENERAL in candidate_domains:
        return DimensionScore(
            score=GENERAL_TITLE_SCORE + bonus,
            details=f"Generic title, job is {job_domain}",
        )

    return DimensionScore(
        score=max(10, MISMATCH_SCORE + bonus),
        details=f"Domain mismatch: candidate={candidate_domains[0]}, job={job_domain}",
    )
