"""Tests for bounded-concurrency batch scoring."""

from __future__ import annotations

import asyncio

import pytest

from ats_gate_core.config.settings import Settings
from ats_gate_core.models.score import DimensionScore
from ats_gate_scoring.batch import score_batch
from ats_gate_scoring.engine import ATSEngine
from ats_gate_scoring.pipeline import ScoringPipeline
from tests.mocks.mock_factories import make_candidate, make_request
from tests.mocks.mock_settings import make_real_settings


class _ConcurrencyProbeSoftFit:
    """Soft-fit provider that records how many calls overlap."""

    def __init__(self) -> None:
        self.in_flight = 0
        self.peak = 0

    async def score(
        self,
        job_title: str,
        job_description: str,
        candidate_title: str,
        resume_text: str,
        keyword: DimensionScore,
    ) -> DimensionScore:
        self.in_flight += 1
        self.peak = max(self.peak, self.in_flight)
        await asyncio.sleep(0.01)
        self.in_flight -= 1
        return DimensionScore(score=60, details="probe")


class _FailingForTitleSoftFit:
    """Soft-fit provider that breaks for one candidate title."""

    async def score(
        self,
        job_title: str,
        job_description: str,
        candidate_title: str,
        resume_text: str,
        keyword: DimensionScore,
    ) -> DimensionScore:
        if candidate_title == "Broken":
            raise RuntimeError("provider exploded")
        return DimensionScore(score=50, details="ok")


@pytest.mark.unit
class TestScoreBatch:
    """Test batch ordering, isolation and concurrency."""

    async def test_preserves_input_order(self, pipeline: ScoringPipeline) -> None:
        """Results come back in input order with identifiers attached."""
        requests = [
            make_request(job_id=f"job-{i}", candidate=make_candidate(candidate_id=f"c-{i}"))
            for i in range(5)
        ]
        results = await score_batch(pipeline, requests)
        assert [r.index for r in results] == [0, 1, 2, 3, 4]
        assert [r.job_id for r in results] == [f"job-{i}" for i in range(5)]
        assert [r.candidate_id for r in results] == [f"c-{i}" for i in range(5)]
        assert all(r.ok for r in results)

    async def test_failure_is_isolated(self, settings: Settings) -> None:
        """One failing pair is reported in its slot; the rest complete."""
        engine = ATSEngine(settings, soft_fit=_FailingForTitleSoftFit())
        pipeline = ScoringPipeline(settings, engine=engine)
        requests = [
            make_request(),
            make_request(candidate=make_candidate(primary_title="Broken")),
            make_request(),
        ]
        results = await score_batch(pipeline, requests)
        assert [r.ok for r in results] == [True, False, True]
        assert results[1].outcome is None
        assert results[1].error == "RuntimeError: provider exploded"

    async def test_concurrency_bound(self, settings: Settings) -> None:
        """No more than max_concurrency pairs are scored at once."""
        probe = _ConcurrencyProbeSoftFit()
        pipeline = ScoringPipeline(settings, engine=ATSEngine(settings, soft_fit=probe))
        results = await score_batch(pipeline, [make_request() for _ in range(6)], max_concurrency=2)
        assert len(results) == 6
        assert probe.peak <= 2
        assert probe.peak >= 1

    async def test_default_limit_from_settings(self) -> None:
        """Without an explicit limit the settings cap applies."""
        settings = make_real_settings(max_concurrent_llm_calls=1)
        probe = _ConcurrencyProbeSoftFit()
        pipeline = ScoringPipeline(settings, engine=ATSEngine(settings, soft_fit=probe))
        await score_batch(pipeline, [make_request() for _ in range(3)])
        assert probe.peak == 1

    async def test_empty_batch(self, pipeline: ScoringPipeline) -> None:
        """An empty batch returns no results."""
        assert await score_batch(pipeline, []) == []
