"""LLM cost tracking and token usage extraction."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field

import structlog

from ats_gate_core.constants import TOKEN_PRICES
from ats_gate_core.exceptions import CostLimitExceededError

logger = structlog.get_logger()


def estimate_cost_usd(model: str, input_tokens: int, output_tokens: int) -> float:
    """Price a call from the token table; unknown models cost 0."""
    prices = TOKEN_PRICES.get(model)
    if not prices:
        return 0.0
    return (
        input_tokens * prices["input"] / 1_000_000
        + output_tokens * prices["output"] / 1_000_000
    )


@dataclass
class LLMCallMetrics:
    """Metrics for a single LLM call."""

    model: str
    input_tokens: int
    output_tokens: int
    duration_seconds: float
    call_type: str

    @property
    def cost_usd(self) -> float:
        return estimate_cost_usd(self.model, self.input_tokens, self.output_tokens)


@dataclass
class CostTracker:
    """Accumulates LLM call metrics and enforces cost guardrails.

    One tracker is shared by every agent of a process, so the limit applies
    to the whole scoring run (or batch), not per call.
    """

    max_cost_usd: float
    warn_threshold_usd: float
    calls: list[LLMCallMetrics] = field(default_factory=list)
    total_tokens: int = 0
    total_cost_usd: float = 0.0

    def record_call(self, metrics: LLMCallMetrics) -> None:
        """Record a call and enforce cost limits.

        Raises CostLimitExceededError if accumulated cost exceeds the limit.
        """
        self.calls.append(metrics)
        self.total_tokens += metrics.input_tokens + metrics.output_tokens
        self.total_cost_usd += metrics.cost_usd

        if self.total_cost_usd > self.max_cost_usd:
            raise CostLimitExceededError(
                f"Run cost ${self.total_cost_usd:.4f} exceeds limit ${self.max_cost_usd:.2f}"
            )

        if self.total_cost_usd > self.warn_threshold_usd:
            logger.warning(
                "cost_warning",
                current_cost=round(self.total_cost_usd, 4),
                threshold=self.warn_threshold_usd,
                limit=self.max_cost_usd,
            )

    def summary(self) -> dict[str, object]:
        """Return aggregated cost summary for structured logging."""
        cost_by_model: dict[str, float] = {}
        for call in self.calls:
            cost_by_model[call.model] = cost_by_model.get(call.model, 0.0) + call.cost_usd

        return {
            "total_calls": len(self.calls),
            "total_tokens": self.total_tokens,
            "cost_by_model": cost_by_model,
            "total_cost_usd": round(self.total_cost_usd, 6),
        }


@dataclass
class RunUsage:
    """Token usage of the LLM calls made while scoring one request."""

    ids: dict[str, str | None] = field(default_factory=dict)
    calls: int = 0
    input_tokens: int = 0
    output_tokens: int = 0
    cost_usd: float = 0.0

    @property
    def total_tokens(self) -> int:
        return self.input_tokens + self.output_tokens

    def add(self, metrics: LLMCallMetrics) -> None:
        self.calls += 1
        self.input_tokens += metrics.input_tokens
        self.output_tokens += metrics.output_tokens
        self.cost_usd += metrics.cost_usd


_run_usage: ContextVar[RunUsage | None] = ContextVar("ats_gate_run_usage", default=None)


@contextmanager
def track_run_usage(**ids: str | None) -> Iterator[RunUsage]:
    """Attribute LLM calls made inside the block to one scoring run.

    ``ids`` (tenant, candidate, job, application) key the ledger rows of those
    calls. Tasks started inside the block copy the context and so add to the
    same accumulator; concurrent runs each see their own.
    """
    usage = RunUsage(ids=dict(ids))
    token = _run_usage.set(usage)
    try:
        yield usage
    finally:
        _run_usage.reset(token)


def current_run_usage() -> RunUsage | None:
    """The accumulator of the enclosing track_run_usage block, if any."""
    return _run_usage.get()


def extract_token_usage(response: object) -> tuple[int, int]:
    """Extract input/output token counts from an instructor response.

    Instructor wraps the raw Anthropic response in `_raw_response`.
    Falls back to (0, 0) if the attribute chain is missing.
    """
    raw = getattr(response, "_raw_response", None)
    if raw is None:
        return (0, 0)

    usage = getattr(raw, "usage", None)
    if usage is None:
        return (0, 0)

    input_tokens = getattr(usage, "input_tokens", 0)
    output_tokens = getattr(usage, "output_tokens", 0)
    return (int(input_tokens), int(output_tokens))
