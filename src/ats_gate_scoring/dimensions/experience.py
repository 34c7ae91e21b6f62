"""Experience dimension: years of experience against the job's target range."""

from __future__ import annotations

import re
from collections.abc import Sequence
from datetime import date

from ats_gate_core.constants import NEUTRAL_EXPERIENCE_SCORE, SENIORITY_YEARS
from ats_gate_core.models.candidate import WorkExperience
from ats_gate_core.models.requirements import JobRequirements
from ats_gate_core.models.score import DimensionScore
from ats_gate_scoring.numeric import format_years, round_half_up

_YEAR_RE = re.compile(r"(19|20)\d{2}")


def estimate_years_from_history(
    experience: Sequence[WorkExperience], today: date | None = None
) -> float | None:
    """Career span from the earliest parseable start year, or None."""
    years: list[int] = []
    for entry in experience:
        match = _YEAR_RE.search(entry.start_date or "")
        if match:
            years.append(int(match.group(0)))
    if not years:
        return None
    current_year = (today or date.today()).year
    return float(max(0, current_year - min(years)))


def target_range(requirements: JobRequirements) -> tuple[int, int] | None:
    """Resolve (minimum, target) years, or None when the job states nothing."""
    minimum = requirements.min_years_experience
    preferred = requirements.preferred_years_experience
    if minimum is None and preferred is not None:
        minimum = preferred
    if minimum is None and requirements.seniority_level is not None:
        minimum, preferred = SENIORITY_YEARS[requirements.seniority_level.value]
    if minimum is None:
        return None
    return minimum, preferred or minimum


def experience_band_score(years: float, minimum: int, target: int) -> int:
    """Piecewise-linear experience score; breakpoints are part of the contract.

    >= target: 100. Within [minimum, target): 75..100 linear.
    Below minimum by <= 1y: 60, <= 2y: 40, else max(10, 40 - 8 * gap).
    """
    if years >= target:
        return 100
    if years >= minimum:
        ratio = (years - minimum) / max(1, target - minimum)
        return round_half_up(75 + ratio * 25)
    gap = minimum - years
    if gap <= 1:
        return 60
    if gap <= 2:
        return 40
    return max(10, round_half_up(40 - gap * 8))


def score_experience(
    requirements: JobRequirements,
    candidate_years: float | None,
    experience: Sequence[WorkExperience],
    today: date | None = None,
) -> DimensionScore:
    """Score declared (or history-derived) years against the job's range."""
    years = candidate_years
    if years is None:
        years = estimate_years_from_history(experience, today)
    if years is None:
        years = 0.0
    shown = format_years(years)

    resolved = target_range(requirements)
    if resolved is None:
        return DimensionScore(
            score=NEUTRAL_EXPERIENCE_SCORE,
            details=f"{shown} years experience (no requirement specified)",
        )

    minimum, target = resolved
    score = experience_band_score(years, minimum, target)

    if years >= target:
        details = f"{shown}yr meets {target}yr+ requirement"
    elif years >= minimum:
        details = f"{shown}yr within {minimum}-{target}yr range"
    else:
        gap = format_years(minimum - years)
        details = f"{shown}yr, {gap}yr below {minimum}yr minimum"
    return DimensionScore(score=score, details=details)
