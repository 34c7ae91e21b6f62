"""Education dimension: degree level, field relevance, certifications."""

from __future__ import annotations

import re
from collections.abc import Sequence

from ats_gate_core.constants import DEGREE_RANK, NEUTRAL_EDUCATION_SCORE
from ats_gate_core.models.candidate import Certification, EducationEntry
from ats_gate_core.models.requirements import JobRequirements
from ats_gate_core.models.score import DimensionScore
from ats_gate_scoring.numeric import round_half_up

# Short degree keys ("ms", "ba", "as") only count as whole words, otherwise
# "diploma" would read as a master's via "ma".
_SHORT_KEY_LEN = 3


def degree_rank(degree: str | None) -> int:
    """Highest rank among degree keywords found in free text (0 if none)."""
    text = (degree or "").lower().replace(".", "")
    if not text:
        return 0
    best = 0
    for key, rank in DEGREE_RANK.items():
        if len(key) <= _SHORT_KEY_LEN:
            found = re.search(rf"\b{re.escape(key)}\b", text) is not None
        else:
            found = key in text or key.replace("_", " ") in text
        if found and rank > best:
            best = rank
    return best


def _overlaps(a: str, b: str) -> bool:
    return bool(a) and bool(b) and (a in b or b in a)


def _degree_score(required_rank: int, best_rank: int) -> int:
    if best_rank >= required_rank:
        return 100
    if best_rank == required_rank - 1:
        return 65
    if best_rank > 0:
        return 35
    return 15


def score_education(
    requirements: JobRequirements,
    education: Sequence[EducationEntry],
    certifications: Sequence[Certification],
) -> DimensionScore:
    """Blend degree, field and certification sub-scores.

    Absent requirements leave the matching sub-score at the neutral 75; a
    job with no education requirements at all scores a flat 75.
    """
    required_degree = requirements.required_education
    required_fields = [
        f.strip().lower() for f in requirements.preferred_education_fields if f and f.strip()
    ]
    required_certs = [c.strip().lower() for c in requirements.certifications if c and c.strip()]

    if required_degree is None and not required_fields and not required_certs:
        return DimensionScore(
            score=NEUTRAL_EDUCATION_SCORE, details="No education requirements specified"
        )

    degree_score = NEUTRAL_EDUCATION_SCORE
    if required_degree is not None:
        best = max((degree_rank(e.degree) for e in education), default=0)
        degree_score = _degree_score(DEGREE_RANK[required_degree.value], best)

    field_score = NEUTRAL_EDUCATION_SCORE
    if required_fields and education:
        candidate_fields = [(e.field or e.degree or "").strip().lower() for e in education]
        relevant = any(
            _overlaps(rf, cf) for rf in required_fields for cf in candidate_fields
        )
        field_score = 100 if relevant else 40

    cert_score = NEUTRAL_EDUCATION_SCORE
    if required_certs:
        held = [c.name.strip().lower() for c in certifications]
        found = sum(1 for rc in required_certs if any(_overlaps(rc, hc) for hc in held))
        cert_score = round_half_up(found / len(required_certs) * 100)

    weights = {
        "degree": 0.5 if required_degree is not None else 0.3,
        "field": 0.3,
        "cert": 0.2 if required_certs else 0.1,
    }
    total_weight = sum(weights.values())
    score = round_half_up(
        (
            degree_score * weights["degree"]
            + field_score * weights["field"]
            + cert_score * weights["cert"]
        )
        / total_weight
    )

    parts: list[str] = []
    if required_degree is not None:
        verdict = "meets" if degree_score >= 65 else "below"
        parts.append(f"Degree: {verdict} {required_degree}")
    if required_fields:
        parts.append(f"Field: {'relevant' if field_score >= 65 else 'different'}")
    if required_certs:
        if cert_score == 100:
            cert_verdict = "all held"
        elif cert_score > 0:
            cert_verdict = "partial"
        else:
            cert_verdict = "missing"
        parts.append(f"Certs: {cert_verdict}")

    return DimensionScore(score=score, details=", ".join(parts) or "Education evaluated")
