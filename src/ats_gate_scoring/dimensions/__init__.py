"""Deterministic dimension scorers."""

from ats_gate_scoring.dimensions.education import score_education
from ats_gate_scoring.dimensions.experience import score_experience
from ats_gate_scoring.dimensions.keyword import score_keywords
from ats_gate_scoring.dimensions.location import score_location
from ats_gate_scoring.dimensions.title import score_title

__all__ = [
    "score_education",
    "score_experience",
    "score_keywords",
    "score_location",
    "score_title",
]
