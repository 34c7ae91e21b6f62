"""Cache interface for extracted job requirements."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class RequirementsCache(Protocol):
    """Holds ``JobRequirements`` JSON between runs, keyed per job.

    Keys come from ``RequirementsExtractor.cache_key`` and embed the
    extraction prompt version.
    """

    async def load(self, key: str) -> str | None:
        """Cached requirements JSON, or None on a miss or expiry."""
        ...

    async def save(self, key: str, requirements_json: str, ttl_seconds: int) -> None:
        """Cache requirements JSON for ``ttl_seconds``."""
        ...
