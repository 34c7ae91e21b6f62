"""Tests for observability/cost_tracker.py."""

from __future__ import annotations

import asyncio
import types

import pytest

from ats_gate_core.exceptions import CostLimitExceededError
from ats_gate_scoring.observability.cost_tracker import (
    CostTracker,
    LLMCallMetrics,
    current_run_usage,
    estimate_cost_usd,
    extract_token_usage,
    track_run_usage,
)


def _make_metrics(
    model: str = "claude-haiku-4-5-20251001",
    input_tokens: int = 100,
    output_tokens: int = 50,
    duration_seconds: float = 0.5,
    call_type: str = "soft_fit",
) -> LLMCallMetrics:
    """Create a test LLMCallMetrics."""
    return LLMCallMetrics(
        model=model,
        input_tokens=input_tokens,
        output_tokens=output_tokens,
        duration_seconds=duration_seconds,
        call_type=call_type,
    )


def _tracker(max_cost: float = 10.0, warn: float = 5.0) -> CostTracker:
    return CostTracker(max_cost_usd=max_cost, warn_threshold_usd=warn)


@pytest.mark.unit
class TestCostTracker:
    """Tests for CostTracker."""

    def test_record_call_accumulates(self) -> None:
        """Record call increments tokens and cost."""
        tracker = _tracker()
        tracker.record_call(_make_metrics(input_tokens=1000, output_tokens=500))

        assert tracker.total_tokens == 1500
        # Haiku pricing: 1000 * 0.80/1M + 500 * 4.00/1M = 0.0008 + 0.002 = 0.0028
        assert abs(tracker.total_cost_usd - 0.0028) < 1e-6

    def test_record_call_raises_on_cost_limit(self) -> None:
        """Raises CostLimitExceededError when cost exceeds max."""
        tracker = _tracker(max_cost=0.001, warn=0.0001)
        metrics = _make_metrics(input_tokens=1_000_000, output_tokens=500_000)

        with pytest.raises(CostLimitExceededError):
            tracker.record_call(metrics)

    def test_limit_applies_across_calls(self) -> None:
        """Cost accumulates; the call that crosses the ceiling raises."""
        tracker = _tracker(max_cost=0.005, warn=0.004)
        tracker.record_call(_make_metrics(input_tokens=1000, output_tokens=500))
        with pytest.raises(CostLimitExceededError):
            tracker.record_call(_make_metrics(input_tokens=1000, output_tokens=500))
        assert len(tracker.calls) == 2

    def test_record_call_warns_on_threshold(self) -> None:
        """Crossing the warn threshold logs but does not raise."""
        tracker = _tracker(max_cost=100.0, warn=0.001)
        tracker.record_call(_make_metrics(input_tokens=100_000, output_tokens=50_000))
        assert len(tracker.calls) == 1

    def test_record_call_unknown_model(self) -> None:
        """Unknown model: tokens tracked, cost stays 0."""
        tracker = _tracker()
        tracker.record_call(
            _make_metrics(model="unknown-model-v1", input_tokens=500, output_tokens=200)
        )

        assert tracker.total_tokens == 700
        assert tracker.total_cost_usd == 0.0

    def test_summary_empty(self) -> None:
        """Empty tracker returns zeroed summary."""
        summary = _tracker().summary()

        assert summary["total_calls"] == 0
        assert summary["total_tokens"] == 0
        assert summary["total_cost_usd"] == 0.0
        assert summary["cost_by_model"] == {}

    def test_summary_with_calls(self) -> None:
        """Summary aggregates across models."""
        tracker = _tracker()
        tracker.record_call(_make_metrics(input_tokens=1000, output_tokens=500))
        tracker.record_call(
            _make_metrics(
                model="claude-sonnet-4-5-20250514", input_tokens=2000, output_tokens=1000
            )
        )
        summary = tracker.summary()

        assert summary["total_calls"] == 2
        assert summary["total_tokens"] == 4500
        assert isinstance(summary["cost_by_model"], dict)
        assert len(summary["cost_by_model"]) == 2
        assert summary["total_cost_usd"] == pytest.approx(0.0028 + 0.021)


@pytest.mark.unit
class TestCostHelpers:
    """Tests for pricing and usage extraction."""

    def test_estimate_cost_known_model(self) -> None:
        """Known models are priced per million tokens."""
        assert estimate_cost_usd("claude-sonnet-4-5-20250514", 1_000_000, 0) == pytest.approx(3.0)

    def test_estimate_cost_unknown_model(self) -> None:
        """Unknown models cost nothing."""
        assert estimate_cost_usd("mystery", 1_000_000, 1_000_000) == 0.0

    def test_metrics_cost_property(self) -> None:
        """LLMCallMetrics prices itself."""
        assert _make_metrics(input_tokens=1000, output_tokens=0).cost_usd == pytest.approx(0.0008)

    def test_extract_token_usage(self) -> None:
        """Usage is read from the raw response chain."""
        usage = types.SimpleNamespace(input_tokens=12, output_tokens=3)
        response = types.SimpleNamespace(_raw_response=types.SimpleNamespace(usage=usage))
        assert extract_token_usage(response) == (12, 3)

    @pytest.mark.parametrize(
        "response",
        [
            object(),
            types.SimpleNamespace(_raw_response=None),
            types.SimpleNamespace(_raw_response=types.SimpleNamespace(usage=None)),
        ],
    )
    def test_extract_token_usage_missing(self, response: object) -> None:
        """A broken attribute chain falls back to zero."""
        assert extract_token_usage(response) == (0, 0)


@pytest.mark.unit
class TestRunUsage:
    """Test per-run token attribution."""

    def test_outside_a_run(self) -> None:
        """No accumulator exists outside track_run_usage."""
        assert current_run_usage() is None

    def test_accumulates_and_resets(self) -> None:
        """Calls inside the block add up; the context is restored afterwards."""
        with track_run_usage(candidate_id="cand-1", job_id="job-1") as usage:
            assert current_run_usage() is usage
            usage.add(_make_metrics(input_tokens=1000, output_tokens=100))
            usage.add(_make_metrics(input_tokens=10, output_tokens=0))
        assert current_run_usage() is None
        assert usage.calls == 2
        assert usage.total_tokens == 1110
        assert usage.cost_usd == pytest.approx(0.001208)
        assert usage.ids == {"candidate_id": "cand-1", "job_id": "job-1"}

    async def test_child_tasks_share_the_run(self) -> None:
        """Work wrapped in wait_for still adds to the enclosing run."""

        async def _spend() -> None:
            current_run_usage().add(_make_metrics())  # type: ignore[union-attr]

        with track_run_usage(job_id="job-1") as usage:
            await asyncio.wait_for(_spend(), timeout=1)
        assert usage.total_tokens == 150

    async def test_concurrent_runs_isolated(self) -> None:
        """Runs gathered side by side each keep their own totals."""

        async def _run(job_id: str, calls: int) -> int:
            with track_run_usage(job_id=job_id) as usage:
                for _ in range(calls):
                    await asyncio.sleep(0)
                    current_run_usage().add(_make_metrics())  # type: ignore[union-attr]
            return usage.calls

        assert await asyncio.gather(_run("a", 1), _run("b", 3)) == [1, 3]
