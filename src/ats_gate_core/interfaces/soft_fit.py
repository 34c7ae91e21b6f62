"""Soft-fit scoring capability interface."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from ats_gate_core.models.score import DimensionScore


@runtime_checkable
class SoftFitProvider(Protocol):
    """Rates non-deterministic fit factors; must never raise."""

    async def score(
        self,
        job_title: str,
        job_description: str,
        candidate_title: str,
        resume_text: str,
        keyword: DimensionScore,
    ) -> DimensionScore:
        """Return a soft-fit dimension score, neutral on any failure."""
        ...
