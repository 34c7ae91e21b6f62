"""Keyword dimension: must-have / nice-to-have skill coverage."""

from __future__ import annotations

from collections.abc import Sequence

from ats_gate_core.constants import (
    MUST_HAVE_WEIGHT,
    NEUTRAL_KEYWORD_SCORE,
    NICE_TO_HAVE_WEIGHT,
)
from ats_gate_core.models.requirements import JobRequirements
from ats_gate_core.models.score import DimensionScore
from ats_gate_scoring.canonical import SkillCanonicalizer, default_canonicalizer
from ats_gate_scoring.numeric import clamp_score


def _unique_canonical(skills: Sequence[str], canonicalizer: SkillCanonicalizer) -> list[str]:
    """Canonicalize requirement skills, dropping blanks and duplicates in order."""
    seen: set[str] = set()
    result: list[str] = []
    for skill in skills:
        if not skill or not skill.strip():
            continue
        canonical = canonicalizer.canonicalize(skill)
        if canonical not in seen:
            seen.add(canonical)
            result.append(canonical)
    return result


def missing_must_have_penalty(required: int, matched: int) -> int:
    """Penalty for weak must-have coverage.

    A plain weighted ratio under-punishes candidates who tick trivial
    nice-to-haves while missing every critical requirement.
    """
    if required == 0:
        return 0
    ratio = matched / required
    if matched == 0:
        return 40
    if required >= 3 and ratio < 0.33:
        return 25
    if required >= 3 and ratio < 0.5:
        return 15
    return 0


def score_keywords(
    requirements: JobRequirements,
    skills: Sequence[str],
    tools: Sequence[str],
    resume_text: str,
    canonicalizer: SkillCanonicalizer | None = None,
) -> DimensionScore:
    """Score skill coverage with a résumé-text substring fallback.

    Must-have coverage carries 75% of the raw score and nice-to-have 25%.
    Matched lists must-haves first, then nice-to-haves; missing lists only
    must-haves.
    """
    canon = canonicalizer or default_canonicalizer()
    candidate = canon.canonicalize_all([*skills, *tools])
    resume_lower = (resume_text or "").lower()

    must_have = _unique_canonical(requirements.must_have_skills, canon)
    nice_to_have = _unique_canonical(requirements.nice_to_have_skills, canon)
    if not must_have and not nice_to_have:
        return DimensionScore(
            score=NEUTRAL_KEYWORD_SCORE, details="No explicit skill requirements"
        )

    matched: list[str] = []
    missing: list[str] = []

    must_matched = 0
    for skill in must_have:
        if skill in candidate or skill in resume_lower:
            must_matched += 1
            matched.append(skill)
        else:
            missing.append(skill)

    nice_matched = 0
    for skill in nice_to_have:
        if skill in candidate or skill in resume_lower:
            nice_matched += 1
            if skill not in matched:
                matched.append(skill)

    must_ratio = must_matched / (len(must_have) or 1)
    nice_ratio = nice_matched / (len(nice_to_have) or 1)
    raw = (must_ratio * MUST_HAVE_WEIGHT + nice_ratio * NICE_TO_HAVE_WEIGHT) * 100

    penalty = missing_must_have_penalty(len(must_have), must_matched)
    score = clamp_score(raw - penalty)

    if must_have:
        details = f"{must_matched}/{len(must_have)} must-have"
    else:
        details = "No explicit requirements"
    if nice_to_have:
        details += f", {nice_matched}/{len(nice_to_have)} nice-to-have"
    if penalty:
        details += f" (-{penalty} missing must-haves)"

    return DimensionScore(score=score, details=details, matched=matched, missing=missing)
