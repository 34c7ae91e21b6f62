"""Location / work-authorization dimension."""

from __future__ import annotations

from collections.abc import Sequence

from ats_gate_core.constants import (
    LOCATION_BASELINE_SCORE,
    NO_SPONSORSHIP_NEEDED,
    VISA_LOCATION_MARKERS,
)
from ats_gate_core.models.requirements import JobRequirements, LocationType
from ats_gate_core.models.score import DimensionScore

VISA_PENALTY = 40
LOCATION_FLOOR = 20


def _city_match(job_city: str, location: str, targets: Sequence[str]) -> bool:
    for place in [location, *targets]:
        if place and (job_city in place or place in job_city):
            return True
    return False


def needs_sponsorship(visa_status: str | None) -> bool:
    """True when the visa text signals the candidate needs sponsorship."""
    visa = (visa_status or "").strip().lower()
    if not visa or visa == NO_SPONSORSHIP_NEEDED:
        return False
    return any(marker in visa for marker in VISA_LOCATION_MARKERS)


def score_location(
    requirements: JobRequirements,
    location: str | None,
    visa_status: str | None,
    open_to_remote: bool,
    open_to_relocation: bool,
    target_locations: Sequence[str],
) -> DimensionScore:
    """Score location fit; sponsorship only matters when no city is named."""
    if requirements.location_type == LocationType.REMOTE:
        if open_to_remote:
            return DimensionScore(score=100, details="Remote job, candidate open to remote")
        return DimensionScore(score=80, details="Remote job available")

    job_city = (requirements.location_city or "").strip().lower()
    if job_city:
        candidate_location = (location or "").strip().lower()
        targets = [t.strip().lower() for t in target_locations if t and t.strip()]
        if _city_match(job_city, candidate_location, targets):
            return DimensionScore(score=100, details=f"Location match: {job_city}")
        if open_to_relocation:
            return DimensionScore(score=70, details="Different city but open to relocation")
        shown = location or "unknown"
        if requirements.location_type == LocationType.HYBRID:
            return DimensionScore(
                score=50, details=f"Hybrid in {job_city}, candidate in {shown}"
            )
        return DimensionScore(
            score=30,
            details=f"Onsite in {job_city}, candidate in {shown}, not open to relocation",
        )

    if requirements.visa_sponsorship is False and needs_sponsorship(visa_status):
        return DimensionScore(
            score=max(LOCATION_FLOOR, LOCATION_BASELINE_SCORE - VISA_PENALTY),
            details="Visa sponsorship not offered",
        )
    return DimensionScore(score=LOCATION_BASELINE_SCORE, details="Location compatible")
