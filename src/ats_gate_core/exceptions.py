"""Custom exception hierarchy for ats-gate."""

from __future__ import annotations


class AtsGateError(Exception):
    """Base exception for all ats-gate errors."""


class InvalidRequirementsError(AtsGateError):
    """Raised when the job requirements object is missing or malformed."""


class InvalidCandidateError(AtsGateError):
    """Raised when the candidate profile is missing or malformed."""


class CostLimitExceededError(AtsGateError):
    """Raised when estimated LLM cost exceeds the configured limit."""
