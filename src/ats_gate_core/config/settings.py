"""Application settings using pydantic-settings."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ats_gate_core.constants import ENGINE_MODEL_VERSION


class Settings(BaseSettings):
    """Central configuration for ats-gate."""

    model_config = SettingsConfigDict(env_prefix="ATS_", env_file=".env")

    # --- LLM ---
    anthropic_api_key: SecretStr | None = Field(
        default=None,
        description="Anthropic API key; soft-fit scoring degrades to neutral without it",
    )
    soft_fit_model: str = Field(
        default="claude-haiku-4-5-20251001",
        description="Model ID for soft-fit scoring",
    )
    extraction_model: str = Field(
        default="claude-haiku-4-5-20251001",
        description="Model ID for job requirement extraction",
    )
    soft_fit_timeout_seconds: float = Field(
        default=15.0,
        description="Upper bound on a single soft-fit LLM call",
    )
    soft_fit_max_tokens: int = Field(
        default=150,
        description="Max output tokens for soft-fit responses",
    )
    extraction_max_tokens: int = Field(
        default=800,
        description="Max output tokens for requirement extraction responses",
    )
    llm_max_retries: int = Field(
        default=2,
        description="Attempts per LLM call before giving up",
    )

    # --- Policy ---
    default_profile: Literal["A", "C"] = Field(
        default="A",
        description="Operating profile used when a request does not name one",
    )
    model_version: str = Field(
        default=ENGINE_MODEL_VERSION,
        description="Scoring engine version tag recorded with every run",
    )

    # --- Telemetry ---
    telemetry_enabled: bool = Field(
        default=False,
        description="Write score/gate events to the event sink",
    )
    database_url: str = Field(
        default="sqlite+aiosqlite:///./ats_gate.db",
        description="SQLAlchemy database URL for the telemetry sink",
    )
    always_write_scoring_run: bool = Field(
        default=False,
        description="Persist scoring-run snapshots even when the policy does not require it",
    )

    # --- Cache ---
    cache_dir: Path = Field(
        default=Path("./.cache/ats_gate"),
        description="Directory for diskcache persistent cache",
    )
    requirements_cache_ttl_hours: int = Field(
        default=24 * 30,
        description="TTL for cached job requirements in hours",
    )

    # --- Batch ---
    max_concurrent_llm_calls: int = Field(
        default=5,
        description="Concurrency limit for LLM-backed scoring in batch runs",
    )

    # --- Cost Guardrails ---
    max_cost_per_run_usd: float = Field(
        default=5.0,
        description="Hard stop if estimated cost exceeds this (USD)",
    )
    warn_cost_threshold_usd: float = Field(
        default=2.0,
        description="Log warning at this cost threshold (USD)",
    )

    # --- Logging ---
    log_level: str = Field(default="INFO", description="Root log level")
    log_format: Literal["json", "console"] = Field(
        default="console",
        description="structlog renderer",
    )

    @model_validator(mode="after")
    def validate_limits(self) -> Settings:
        """Reject non-positive timeouts and concurrency limits."""
        if self.soft_fit_timeout_seconds <= 0:
            msg = "soft_fit_timeout_seconds must be positive"
            raise ValueError(msg)
        if self.max_concurrent_llm_calls < 1:
            msg = "max_concurrent_llm_calls must be at least 1"
            raise ValueError(msg)
        return self

    @property
    def has_llm_credentials(self) -> bool:
        """Whether an Anthropic API key is configured."""
        return self.anthropic_api_key is not None and bool(
            self.anthropic_api_key.get_secret_value()
        )
