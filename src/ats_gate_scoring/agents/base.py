"""Base LLM agent with structured output, retries and cost tracking."""

from __future__ import annotations

import time
from typing import TYPE_CHECKING, Any, TypeVar

import instructor
import structlog
from anthropic import AsyncAnthropic
from pydantic import BaseModel
from tenacity import retry, stop_after_attempt, wait_exponential

from ats_gate_core.models.events import AiCallRecord
from ats_gate_scoring.observability.cost_tracker import (
    CostTracker,
    LLMCallMetrics,
    current_run_usage,
    extract_token_usage,
)

if TYPE_CHECKING:
    from ats_gate_core.config.settings import Settings
    from ats_gate_scoring.observability.telemetry import TelemetryEmitter

T = TypeVar("T", bound=BaseModel)

logger = structlog.get_logger()


class BaseLLMAgent:
    """Shared plumbing for the LLM-backed scoring helpers.

    Without an API key the agent has no client and ``available`` is False;
    subclasses check it and fall back instead of calling out.
    """

    agent_name: str = "base"

    def __init__(
        self,
        settings: Settings,
        cost_tracker: CostTracker | None = None,
        telemetry: TelemetryEmitter | None = None,
        client: Any | None = None,
    ) -> None:
        """Initialize with settings; ``client`` injects an instructor client."""
        self.settings = settings
        self.cost_tracker = cost_tracker or CostTracker(
            max_cost_usd=settings.max_cost_per_run_usd,
            warn_threshold_usd=settings.warn_cost_threshold_usd,
        )
        self.telemetry = telemetry
        self._instructor = client
        api_key = settings.anthropic_api_key
        if self._instructor is None and api_key is not None and api_key.get_secret_value():
            anthropic_client = AsyncAnthropic(api_key=api_key.get_secret_value())
            self._instructor = instructor.from_anthropic(anthropic_client)

    @property
    def available(self) -> bool:
        """Whether an LLM client is configured."""
        return self._instructor is not None

    async def _call_llm(
        self,
        messages: list[dict[str, str]],
        model: str,
        response_model: type[T],
        max_tokens: int,
        system: str | None = None,
        ids: dict[str, str | None] | None = None,
    ) -> T:
        """Call the LLM with structured output via instructor.

        Retries transient failures, records token cost and, when a telemetry
        emitter is attached, appends the call to the AI cost ledger. Ledger
        rows take their ids from the enclosing scoring run; explicit ``ids``
        win over it.
        """
        if self._instructor is None:
            msg = f"{self.agent_name}: no LLM client configured"
            raise RuntimeError(msg)
        client = self._instructor
        extra: dict[str, Any] = {"system": system} if system else {}

        @retry(
            stop=stop_after_attempt(max(1, self.settings.llm_max_retries)),
            wait=wait_exponential(multiplier=1, min=1, max=10),
            reraise=True,
        )
        async def _do_call() -> T:
            response: T = await client.messages.create(
                model=model,
                max_tokens=max_tokens,
                messages=messages,
                response_model=response_model,
                **extra,
            )
            return response

        start = time.monotonic()
        result = await _do_call()
        elapsed = time.monotonic() - start

        input_tokens, output_tokens = extract_token_usage(result)
        metrics = LLMCallMetrics(
            model=model,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            duration_seconds=elapsed,
            call_type=self.agent_name,
        )

        logger.debug(
            "llm_call_complete",
            agent=self.agent_name,
            model=model,
            duration=round(elapsed, 2),
            input_tokens=input_tokens,
            output_tokens=output_tokens,
        )

        usage = current_run_usage()
        record_ids: dict[str, str | None] = dict(usage.ids) if usage is not None else {}
        record_ids.update({k: v for k, v in (ids or {}).items() if v is not None})
        if usage is not None:
            usage.add(metrics)

        if self.telemetry is not None:
            await self.telemetry.log_ai_call(
                AiCallRecord(
                    call_type=self.agent_name,
                    model=model,
                    input_tokens=input_tokens,
                    output_tokens=output_tokens,
                    cost_usd=metrics.cost_usd,
                    duration_ms=int(elapsed * 1000),
                    **record_ids,
                )
            )

        self.cost_tracker.record_call(metrics)
        return result
