"""LLM-backed helpers: soft-fit scoring and requirement extraction."""

from ats_gate_scoring.agents.requirements_extractor import RequirementsExtractor
from ats_gate_scoring.agents.soft_fit import FixedSoftFitScorer, SoftFitScorer

__all__ = ["FixedSoftFitScorer", "RequirementsExtractor", "SoftFitScorer"]
