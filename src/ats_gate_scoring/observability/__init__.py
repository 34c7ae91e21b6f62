"""Observability: structured logging, cost tracking, and telemetry."""

from ats_gate_scoring.observability.cost_tracker import (
    CostTracker,
    LLMCallMetrics,
    RunUsage,
    current_run_usage,
    estimate_cost_usd,
    extract_token_usage,
    track_run_usage,
)
from ats_gate_scoring.observability.logging import (
    bind_scoring_context,
    clear_scoring_context,
    configure_logging,
)
from ats_gate_scoring.observability.telemetry import (
    InMemoryEventSink,
    NullEventSink,
    TelemetryEmitter,
)

__all__ = [
    "CostTracker",
    "InMemoryEventSink",
    "LLMCallMetrics",
    "NullEventSink",
    "RunUsage",
    "TelemetryEmitter",
    "bind_scoring_context",
    "clear_scoring_context",
    "configure_logging",
    "current_run_usage",
    "estimate_cost_usd",
    "extract_token_usage",
    "track_run_usage",
]
