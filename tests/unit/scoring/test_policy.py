"""Tests for operating profiles, the gate and fairness scrubbing."""

from __future__ import annotations

import pytest

from ats_gate_core.models.candidate import CandidateProfile
from ats_gate_core.models.policy import ConfidenceBucket, ScoringProfile
from ats_gate_core.models.score import Dimension
from ats_gate_scoring.combiner import default_weights
from ats_gate_scoring.policy import (
    KPI_REGISTRY,
    PROFILE_A,
    PROFILE_C,
    apply_fairness_exclusions,
    evaluate_gate_decision,
    get_policy,
    get_profile_kpis,
    is_automation_allowed,
    meets_min_confidence,
    resolve_weights,
    scrub_visa_status,
)


@pytest.mark.unit
class TestGetPolicy:
    """Test profile resolution."""

    @pytest.mark.parametrize(
        ("key", "expected"),
        [
            ("A", PROFILE_A),
            ("C", PROFILE_C),
            ("c", PROFILE_C),
            (" c ", PROFILE_C),
            (ScoringProfile.ENTERPRISE, PROFILE_C),
            (None, PROFILE_A),
            ("", PROFILE_A),
            ("Z", PROFILE_A),
        ],
    )
    def test_resolution(self, key: object, expected: object) -> None:
        """Known keys resolve case-insensitively; anything else gets A."""
        assert get_policy(key) is expected  # type: ignore[arg-type]

    def test_profile_c_weights_renormalise(self) -> None:
        """Profile C overrides sum to 0.87 and are rescaled when resolved."""
        assert PROFILE_C.weight_overrides is not None
        assert sum(PROFILE_C.weight_overrides.values()) == pytest.approx(0.87)
        weights = resolve_weights(default_weights(), PROFILE_C.weight_overrides)
        assert sum(weights.values()) == pytest.approx(1.0)
        assert weights[Dimension.KEYWORD] == pytest.approx(0.28 / 0.87)

    def test_profile_a_uses_defaults(self) -> None:
        """Profile A keeps the engine default weights."""
        assert resolve_weights(default_weights(), PROFILE_A.weight_overrides) == default_weights()

    def test_partial_override_merges(self) -> None:
        """Overrides replace only the dimensions they name."""
        weights = resolve_weights(default_weights(), {"soft": 0.0})
        assert weights[Dimension.SOFT] == 0.0
        assert sum(weights.values()) == pytest.approx(1.0)
        assert weights[Dimension.KEYWORD] == pytest.approx(0.35 / 0.9)


@pytest.mark.unit
class TestGateDecision:
    """Test the apply gate."""

    @pytest.mark.parametrize(
        ("bucket", "threshold"),
        [
            (ConfidenceBucket.INSUFFICIENT, 38),
            (ConfidenceBucket.MODERATE, 48),
            (ConfidenceBucket.GOOD, 52),
            (ConfidenceBucket.HIGH, 57),
        ],
    )
    def test_profile_a_thresholds(self, bucket: ConfidenceBucket, threshold: int) -> None:
        """Profile A passes at the threshold and blocks one below."""
        passed = evaluate_gate_decision(threshold, bucket, PROFILE_A)
        blocked = evaluate_gate_decision(threshold - 1, bucket, PROFILE_A)
        assert passed.passes is True
        assert passed.threshold_used == threshold
        assert blocked.passes is False
        assert blocked.recommend_review is False

    def test_profile_a_reasons(self) -> None:
        """Reasons state score, threshold and bucket."""
        passed = evaluate_gate_decision(52, "good", PROFILE_A)
        blocked = evaluate_gate_decision(51, "good", PROFILE_A)
        assert passed.reason == "Score 52 >= 52 (good confidence); gate passed"
        assert blocked.reason == "Score 51 < 52 (good confidence); gate blocked"
        assert passed.profile == ScoringProfile.AGENCY

    def test_profile_c_never_blocks(self) -> None:
        """Profile C always passes; review is recommended exactly below threshold."""
        for bucket in ConfidenceBucket:
            threshold = PROFILE_C.gate_thresholds.for_bucket(bucket)
            for score in range(101):
                decision = evaluate_gate_decision(score, bucket, PROFILE_C)
                assert decision.passes is True
                assert decision.recommend_review == (score < threshold)

    def test_profile_c_reasons(self) -> None:
        """Profile C reasons describe shortlist or human review."""
        below = evaluate_gate_decision(40, "moderate", PROFILE_C)
        above = evaluate_gate_decision(70, "high", PROFILE_C)
        assert "flagged for human review" in below.reason
        assert above.reason == (
            "Score 70 meets threshold 65 (high confidence); recommended for shortlist"
        )

    def test_override_threshold(self) -> None:
        """A job-level override replaces the bucket threshold."""
        decision = evaluate_gate_decision(60, ConfidenceBucket.HIGH, PROFILE_A, 70)
        assert decision.passes is False
        assert decision.threshold_used == 70

    def test_invalid_bucket_rejected(self) -> None:
        """Unknown bucket names raise."""
        with pytest.raises(ValueError):
            evaluate_gate_decision(50, "excellent", PROFILE_A)

    def test_meets_min_confidence(self) -> None:
        """Profile C needs good evidence for its normal gate; A needs moderate."""
        assert meets_min_confidence(ConfidenceBucket.MODERATE, PROFILE_A)
        assert not meets_min_confidence(ConfidenceBucket.MODERATE, PROFILE_C)
        assert meets_min_confidence(ConfidenceBucket.HIGH, PROFILE_C)


@pytest.mark.unit
class TestFairnessExclusions:
    """Test visa scrubbing under governance."""

    @pytest.mark.parametrize(
        ("raw", "scrubbed"),
        [
            ("Requires H1B sponsorship", "needs_sponsorship"),
            ("F-1 OPT", "needs_sponsorship"),
            ("TN visa", "needs_sponsorship"),
            ("US Citizen", "no_sponsorship_needed"),
            ("Green card holder", "no_sponsorship_needed"),
            ("needs_sponsorship", "needs_sponsorship"),
            ("no_sponsorship_needed", "no_sponsorship_needed"),
        ],
    )
    def test_scrub_visa_status(self, raw: str, scrubbed: str) -> None:
        """Free text collapses to a two-valued signal; tokens are fixed points."""
        assert scrub_visa_status(raw) == scrubbed

    @pytest.mark.parametrize(
        "raw", ["US Citizen, no sponsorship required", "Open to contract options"]
    )
    def test_substring_match_is_broad(self, raw: str) -> None:
        """Negated or incidental fragments still scrub to needs_sponsorship."""
        assert scrub_visa_status(raw) == "needs_sponsorship"

    def test_idempotent(self) -> None:
        """Scrubbing twice equals scrubbing once."""
        for raw in ("Requires H1B sponsorship", "US Citizen", ""):
            once = scrub_visa_status(raw)
            assert scrub_visa_status(once) == once

    def test_profile_c_scrubs_copy(self) -> None:
        """Profile C returns a scrubbed copy and leaves the input intact."""
        candidate = CandidateProfile(visa_status="Requires H1B sponsorship")
        scrubbed = apply_fairness_exclusions(candidate, PROFILE_C)
        assert scrubbed.visa_status == "needs_sponsorship"
        assert candidate.visa_status == "Requires H1B sponsorship"
        assert scrubbed is not candidate

    def test_profile_a_untouched(self) -> None:
        """Profile A returns the same object."""
        candidate = CandidateProfile(visa_status="Requires H1B sponsorship")
        assert apply_fairness_exclusions(candidate, PROFILE_A) is candidate

    def test_missing_visa_status(self) -> None:
        """A null visa status stays null under profile C."""
        scrubbed = apply_fairness_exclusions(CandidateProfile(), PROFILE_C)
        assert scrubbed.visa_status is None


@pytest.mark.unit
class TestKpisAndAutomation:
    """Test KPI metadata and automation permissions."""

    def test_profile_kpis(self) -> None:
        """Each profile lists its KPIs from the registry in order."""
        kpis_a = get_profile_kpis(PROFILE_A)
        kpis_c = get_profile_kpis(PROFILE_C)
        assert len(kpis_a) == 6
        assert len(kpis_c) == 5
        assert kpis_c[1].label == "Score to Outcome Correlation"
        assert kpis_c[1].unit == "r"
        assert len(KPI_REGISTRY) == 11

    def test_automation(self) -> None:
        """Agency profile allows outreach; enterprise allows nothing; nobody auto-applies."""
        assert is_automation_allowed(PROFILE_A, "outreach")
        assert is_automation_allowed(PROFILE_A, "follow_up_sequences")
        assert not is_automation_allowed(PROFILE_A, "auto_apply")
        assert not is_automation_allowed(PROFILE_C, "outreach")
        assert not is_automation_allowed(PROFILE_C, "teleport")
