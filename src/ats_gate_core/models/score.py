"""Dimension and total score models."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, Field


class Dimension(StrEnum):
    """The six independent scoring axes, in reporting order."""

    KEYWORD = "keyword"
    EXPERIENCE = "experience"
    TITLE = "title"
    EDUCATION = "education"
    LOCATION = "location"
    SOFT = "soft"


class DimensionScore(BaseModel):
    """Score for one dimension with a short human-readable rationale."""

    score: int = Field(ge=0, le=100, description="Dimension score 0-100")
    details: str = Field(description="Short rationale")
    matched: list[str] = Field(
        default_factory=list, description="Matched canonical skills (keyword only)"
    )
    missing: list[str] = Field(
        default_factory=list, description="Missing must-have skills (keyword only)"
    )


class ATSScoreResult(BaseModel):
    """Weighted total plus the explainable six-dimension breakdown."""

    total_score: int = Field(ge=0, le=100, description="Weighted, capped total 0-100")
    dimensions: dict[Dimension, DimensionScore] = Field(
        description="Per-dimension scores keyed by dimension"
    )
    reason: str = Field(description="Overall explanation")
    matched_keywords: list[str] = Field(default_factory=list)
    missing_keywords: list[str] = Field(default_factory=list)
    weights_used: dict[Dimension, float] = Field(
        default_factory=dict, description="Normalized weights applied to each dimension"
    )
    model_version: str = Field(default="v1", description="Scoring engine version")

    def dimension(self, name: Dimension | str) -> DimensionScore:
        """Return a single dimension score by name."""
        return self.dimensions[Dimension(name)]
