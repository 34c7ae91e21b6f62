"""Weighted total, domain-mismatch cap and overall reason."""

from __future__ import annotations

from collections.abc import Mapping

import structlog

from ats_gate_core.constants import (
    BELOW_THRESHOLD_SCORE,
    DEFAULT_WEIGHTS,
    DOMAIN_CAPS,
    MODERATE_MATCH_SCORE,
    STRONG_MATCH_SCORE,
    WEIGHT_SUM_EPSILON,
)
from ats_gate_core.models.score import Dimension, DimensionScore
from ats_gate_scoring.numeric import clamp_score, round_half_up

logger = structlog.get_logger()


def default_weights() -> dict[Dimension, float]:
    """Engine default weight vector keyed by dimension."""
    return {Dimension(name): weight for name, weight in DEFAULT_WEIGHTS.items()}


def normalize_weights(weights: Mapping[Dimension | str, float]) -> dict[Dimension, float]:
    """Project weights onto the six dimensions and rescale them to sum to 1.

    Unknown keys are ignored and missing dimensions get 0. A vector already
    within epsilon of 1 is returned unscaled. An all-zero vector falls back
    to the engine defaults.
    """
    known = {d.value for d in Dimension}
    projected = {d: 0.0 for d in Dimension}
    for key, weight in weights.items():
        name = str(key)
        if name in known:
            projected[Dimension(name)] = max(0.0, float(weight))

    total = sum(projected.values())
    if total <= 0:
        logger.warning("weights_all_zero_using_defaults")
        return default_weights()
    if abs(total - 1.0) <= WEIGHT_SUM_EPSILON:
        return projected
    return {d: w / total for d, w in projected.items()}


def apply_domain_cap(total: int, title_score: int) -> int:
    """Cap the total when the title dimension signals a cross-domain mismatch."""
    for ceiling, cap in DOMAIN_CAPS:
        if title_score <= ceiling:
            return min(total, cap)
    return total


def _strongest(dimensions: Mapping[Dimension, DimensionScore]) -> Dimension:
    # max/min keep the first of equal scores, so ties resolve in Dimension order
    return max(Dimension, key=lambda d: dimensions[d].score)


def _weakest(dimensions: Mapping[Dimension, DimensionScore]) -> Dimension:
    return min(Dimension, key=lambda d: dimensions[d].score)


def build_reason(total: int, dimensions: Mapping[Dimension, DimensionScore]) -> str:
    """Pick a narrative template by score band."""
    strongest = _strongest(dimensions)
    weakest = _weakest(dimensions)
    if total >= STRONG_MATCH_SCORE:
        return f"Strong match: {dimensions[strongest].details}"
    if total >= MODERATE_MATCH_SCORE:
        return (
            f"Moderate match; strongest: {strongest} ({dimensions[strongest].score}), "
            f"gap: {weakest} ({dimensions[weakest].score})"
        )
    if total >= BELOW_THRESHOLD_SCORE:
        return f"Below threshold; weakest area: {weakest} ({dimensions[weakest].details})"
    return f"Poor fit; {weakest}: {dimensions[weakest].details}"


def combine_scores(
    dimensions: Mapping[Dimension, DimensionScore],
    weights: Mapping[Dimension | str, float] | None = None,
) -> tuple[int, str]:
    """Combine six dimension scores into ``(total_score, reason)``."""
    missing = [d for d in Dimension if d not in dimensions]
    if missing:
        raise ValueError(f"Missing dimension scores: {', '.join(missing)}")

    resolved = normalize_weights(weights) if weights is not None else default_weights()
    raw = round_half_up(sum(dimensions[d].score * resolved[d] for d in Dimension))
    total = clamp_score(apply_domain_cap(raw, dimensions[Dimension.TITLE].score))
    return total, build_reason(total, dimensions)
