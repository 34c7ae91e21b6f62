"""Bounded-concurrency batch scoring."""

from __future__ import annotations

import asyncio
import time
from collections.abc import Sequence

import structlog
from pydantic import BaseModel

from ats_gate_core.models.run import ScoringOutcome, ScoringRequest
from ats_gate_scoring.pipeline import ScoringPipeline

logger = structlog.get_logger()


class BatchItemResult(BaseModel):
    """Outcome (or error) for one request in a batch, at its input position."""

    index: int
    candidate_id: str | None = None
    job_id: str | None = None
    outcome: ScoringOutcome | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.outcome is not None


async def score_batch(
    pipeline: ScoringPipeline,
    requests: Sequence[ScoringRequest],
    max_concurrency: int | None = None,
) -> list[BatchItemResult]:
    """Score many pairs with at most ``max_concurrency`` in flight.

    Results keep input order. A failing pair is logged and reported in its
    slot; the rest of the batch still completes.
    """
    limit = max_concurrency or pipeline.settings.max_concurrent_llm_calls
    semaphore = asyncio.Semaphore(max(1, limit))
    start = time.monotonic()

    async def _score_one(index: int, request: ScoringRequest) -> BatchItemResult:
        item = BatchItemResult(
            index=index,
            candidate_id=request.candidate.candidate_id,
            job_id=request.job_id,
        )
        async with semaphore:
            try:
                item.outcome = await pipeline.run(request)
            except Exception as e:
                logger.error(
                    "batch_item_failed",
                    index=index,
                    candidate_id=item.candidate_id,
                    job_id=item.job_id,
                    error=str(e),
                    error_type=type(e).__name__,
                )
                item.error = f"{type(e).__name__}: {e}"
        return item

    results = list(
        await asyncio.gather(*[_score_one(i, r) for i, r in enumerate(requests)])
    )

    logger.info(
        "batch_scored",
        total=len(results),
        failed=sum(1 for r in results if not r.ok),
        max_concurrency=limit,
        duration_seconds=round(time.monotonic() - start, 2),
    )
    return results
