"""Tests for weight normalization, the domain cap and reasons."""

from __future__ import annotations

import pytest

from ats_gate_core.models.score import Dimension, DimensionScore
from ats_gate_scoring.combiner import (
    apply_domain_cap,
    build_reason,
    combine_scores,
    default_weights,
    normalize_weights,
)
from tests.mocks.mock_factories import make_dimensions


@pytest.mark.unit
class TestNormalizeWeights:
    """Test weight projection and rescaling."""

    def test_defaults_sum_to_one(self) -> None:
        """The default vector covers all six dimensions and sums to 1."""
        weights = default_weights()
        assert set(weights) == set(Dimension)
        assert sum(weights.values()) == pytest.approx(1.0)
        assert weights[Dimension.KEYWORD] == 0.35

    def test_rescales_drifted_vector(self) -> None:
        """A vector summing to 0.9 is rescaled proportionally."""
        weights = normalize_weights(
            {
                "keyword": 0.3,
                "experience": 0.2,
                "title": 0.1,
                "education": 0.1,
                "location": 0.1,
                "soft": 0.1,
            }
        )
        assert sum(weights.values()) == pytest.approx(1.0)
        assert weights[Dimension.KEYWORD] == pytest.approx(0.3 / 0.9)
        assert weights[Dimension.SOFT] == pytest.approx(0.1 / 0.9)

    def test_within_epsilon_left_alone(self) -> None:
        """A sum within 0.001 of 1 is not rescaled."""
        weights = normalize_weights({**default_weights(), Dimension.SOFT: 0.1005})
        assert weights[Dimension.SOFT] == 0.1005

    def test_unknown_keys_ignored_and_negatives_zeroed(self) -> None:
        """Unknown dimensions are dropped and negative weights count as 0."""
        weights = normalize_weights({"keyword": 1.0, "charisma": 5.0, "title": -2.0})
        assert weights[Dimension.KEYWORD] == 1.0
        assert weights[Dimension.TITLE] == 0.0
        assert set(weights) == set(Dimension)

    def test_all_zero_falls_back_to_defaults(self) -> None:
        """An all-zero vector yields the engine defaults."""
        assert normalize_weights({"keyword": 0.0}) == default_weights()


@pytest.mark.unit
class TestDomainCap:
    """Test the cross-domain cap."""

    @pytest.mark.parametrize(
        ("total", "title", "expected"),
        [
            (89, 25, 30),
            (89, 10, 30),
            (92, 45, 55),
            (92, 46, 92),
            (20, 25, 20),
            (40, 45, 40),
        ],
    )
    def test_cap(self, total: int, title: int, expected: int) -> None:
        """Title at or below 25 caps at 30; at or below 45 caps at 55."""
        assert apply_domain_cap(total, title) == expected


@pytest.mark.unit
class TestCombineScores:
    """Test the weighted total."""

    def test_all_hundred(self) -> None:
        """Perfect dimensions score 100 with a strong-match reason."""
        total, reason = combine_scores(make_dimensions())
        assert total == 100
        assert reason == "Strong match: keyword details"

    def test_domain_mismatch_caps_total(self) -> None:
        """Strong dimensions cannot hide a cross-domain title."""
        total, _ = combine_scores(make_dimensions(title=25))
        assert total == 30
        total, _ = combine_scores(make_dimensions(title=45))
        assert total == 55

    def test_weighted_sum_rounds_half_up(self) -> None:
        """The weighted sum is rounded half-up."""
        dims = make_dimensions(keyword=10, experience=40, title=85, education=75, soft=50)
        total, _ = combine_scores(dims)
        assert total == 47

    def test_custom_weights(self) -> None:
        """Only keyword weighted: total equals the keyword score."""
        dims = make_dimensions(keyword=64)
        total, _ = combine_scores(dims, {"keyword": 1.0})
        assert total == 64

    def test_missing_dimension_raises(self) -> None:
        """All six dimensions are required."""
        dims = make_dimensions()
        del dims[Dimension.SOFT]
        with pytest.raises(ValueError, match="soft"):
            combine_scores(dims)

    def test_bounds(self) -> None:
        """Totals stay within 0-100 at the extremes."""
        zero = {d: DimensionScore(score=0, details="none") for d in Dimension}
        assert combine_scores(zero)[0] == 0
        assert 0 <= combine_scores(make_dimensions())[0] <= 100


@pytest.mark.unit
class TestBuildReason:
    """Test reason templates by band."""

    def test_moderate(self) -> None:
        """75-81 names the strongest and weakest dimensions."""
        reason = build_reason(78, make_dimensions(location=40))
        assert reason == "Moderate match; strongest: keyword (100), gap: location (40)"

    def test_below_threshold(self) -> None:
        """50-74 names the weakest area and its details."""
        reason = build_reason(60, make_dimensions(education=20))
        assert reason == "Below threshold; weakest area: education (education details)"

    def test_poor_fit(self) -> None:
        """Under 50 is a poor fit."""
        reason = build_reason(30, make_dimensions(title=25))
        assert reason == "Poor fit; title: title details"

    def test_ties_resolve_in_dimension_order(self) -> None:
        """Equal scores pick the earlier dimension."""
        reason = build_reason(60, make_dimensions(experience=10, location=10))
        assert reason.startswith("Below threshold; weakest area: experience")
