"""Shared pytest fixtures for unit tests."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from ats_gate_core.config.settings import Settings
from ats_gate_core.models.candidate import CandidateProfile
from ats_gate_core.models.requirements import JobRequirements
from ats_gate_scoring.agents.soft_fit import FixedSoftFitScorer
from ats_gate_scoring.engine import ATSEngine
from ats_gate_scoring.observability.telemetry import InMemoryEventSink, TelemetryEmitter
from ats_gate_scoring.pipeline import ScoringPipeline
from tests.mocks.mock_factories import make_candidate, make_requirements
from tests.mocks.mock_settings import make_real_settings, make_settings


@pytest.fixture
def mock_settings() -> MagicMock:
    """Return a MagicMock Settings with sensible defaults."""
    return make_settings()


@pytest.fixture
def settings() -> Settings:
    """Return real Settings without credentials or .env input."""
    return make_real_settings(anthropic_api_key=None, llm_max_retries=1)


@pytest.fixture
def sample_requirements() -> JobRequirements:
    """Return backend-role JobRequirements."""
    return make_requirements()


@pytest.fixture
def sample_candidate() -> CandidateProfile:
    """Return a strong backend CandidateProfile."""
    return make_candidate()


@pytest.fixture
def fixed_soft_fit() -> FixedSoftFitScorer:
    """Deterministic soft-fit provider returning 50."""
    return FixedSoftFitScorer(50)


@pytest.fixture
def engine(settings: Settings, fixed_soft_fit: FixedSoftFitScorer) -> ATSEngine:
    """Engine with a fixed soft-fit score."""
    return ATSEngine(settings, soft_fit=fixed_soft_fit)


@pytest.fixture
def event_sink() -> InMemoryEventSink:
    """Sink that keeps written rows in memory."""
    return InMemoryEventSink()


@pytest.fixture
def pipeline(
    settings: Settings, engine: ATSEngine, event_sink: InMemoryEventSink
) -> ScoringPipeline:
    """Pipeline wired to the fixed-soft-fit engine and in-memory sink."""
    return ScoringPipeline(settings, engine=engine, telemetry=TelemetryEmitter(event_sink))
