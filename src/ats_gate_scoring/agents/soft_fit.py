"""AI soft-fit dimension: career trajectory, impact, growth potential."""

from __future__ import annotations

import asyncio

import structlog
from instructor.exceptions import InstructorRetryException
from pydantic import BaseModel, Field, ValidationError, field_validator

from ats_gate_core.constants import NEUTRAL_SOFT_SCORE
from ats_gate_core.exceptions import CostLimitExceededError
from ats_gate_core.models.score import DimensionScore
from ats_gate_scoring.agents.base import BaseLLMAgent
from ats_gate_scoring.prompts.soft_fit import build_soft_fit_prompt

logger = structlog.get_logger()

AI_UNAVAILABLE = "AI unavailable"
AI_TIMED_OUT = "AI evaluation timed out"
AI_FAILED = "AI evaluation failed"
AI_UNPARSEABLE = "AI response could not be parsed"


class SoftFitResponse(BaseModel):
    """Structured soft-fit verdict returned by the model."""

    score: int = Field(description="Soft-fit score from 0 to 100")
    details: str = Field(default="Evaluated", description="One-sentence explanation")

    @field_validator("score", mode="before")
    @classmethod
    def _coerce_score(cls, value: object) -> int:
        """Parse loosely typed scores, clamping to 0-100 and defaulting to neutral."""
        try:
            parsed = int(float(str(value).strip()))
        except (TypeError, ValueError):
            return NEUTRAL_SOFT_SCORE
        return max(0, min(100, parsed))

    @field_validator("details", mode="before")
    @classmethod
    def _default_details(cls, value: object) -> object:
        return value or "Evaluated"


def neutral_soft_score(reason: str) -> DimensionScore:
    """Neutral soft-fit score carrying a distinguishable rationale."""
    return DimensionScore(score=NEUTRAL_SOFT_SCORE, details=reason)


class SoftFitScorer(BaseLLMAgent):
    """Rate soft fit with a single time-bounded LLM call.

    Never raises: every failure mode maps to the neutral score with its own
    rationale, so the other five dimensions always complete.
    """

    agent_name = "soft_fit"

    async def score(
        self,
        job_title: str,
        job_description: str,
        candidate_title: str,
        resume_text: str,
        keyword: DimensionScore,
    ) -> DimensionScore:
        """Return the soft-fit dimension for one candidate/job pair."""
        if not self.available:
            return neutral_soft_score(AI_UNAVAILABLE)

        prompt = build_soft_fit_prompt(
            job_title=job_title,
            job_description=job_description,
            candidate_title=candidate_title,
            resume_text=resume_text,
            matched_count=len(keyword.matched),
            missing_count=len(keyword.missing),
        )

        try:
            response = await asyncio.wait_for(
                self._call_llm(
                    messages=[{"role": "user", "content": prompt}],
                    model=self.settings.soft_fit_model,
                    response_model=SoftFitResponse,
                    max_tokens=self.settings.soft_fit_max_tokens,
                ),
                timeout=self.settings.soft_fit_timeout_seconds,
            )
        except TimeoutError:
            logger.warning(
                "soft_fit_timeout", timeout_seconds=self.settings.soft_fit_timeout_seconds
            )
            return neutral_soft_score(AI_TIMED_OUT)
        except (InstructorRetryException, ValidationError) as e:
            logger.warning("soft_fit_unparseable", error=str(e))
            return neutral_soft_score(AI_UNPARSEABLE)
        except CostLimitExceededError as e:
            logger.warning("soft_fit_cost_limit", error=str(e))
            return neutral_soft_score(AI_UNAVAILABLE)
        except Exception as e:
            logger.warning("soft_fit_failed", error=str(e), error_type=type(e).__name__)
            return neutral_soft_score(AI_FAILED)

        return DimensionScore(score=response.score, details=response.details)


class FixedSoftFitScorer:
    """Deterministic provider returning the same soft score every time."""

    def __init__(self, score: int = NEUTRAL_SOFT_SCORE, details: str = "Fixed soft score") -> None:
        self._result = DimensionScore(score=score, details=details)
        self.calls = 0

    async def score(
        self,
        job_title: str,
        job_description: str,
        candidate_title: str,
        resume_text: str,
        keyword: DimensionScore,
    ) -> DimensionScore:
        self.calls += 1
        return self._result.model_copy()
