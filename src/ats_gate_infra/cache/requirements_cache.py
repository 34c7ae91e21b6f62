"""diskcache store for extracted job requirements."""

from __future__ import annotations

import asyncio
from pathlib import Path

import diskcache
import structlog

from ats_gate_core.constants import REQUIREMENTS_CACHE_PREFIX, REQUIREMENTS_PROMPT_VERSION

logger = structlog.get_logger()


class DiskRequirementsCache:
    """Requirements JSON kept on disk between CLI runs.

    Keys embed the extraction prompt version, so entries written under an
    older prompt are never read again. ``prune`` deletes them together with
    expired entries.
    """

    def __init__(self, cache_dir: Path, prompt_version: str = REQUIREMENTS_PROMPT_VERSION) -> None:
        cache_dir.mkdir(parents=True, exist_ok=True)
        self.current_prefix = f"{REQUIREMENTS_CACHE_PREFIX}:{prompt_version}:"
        self._cache = diskcache.Cache(str(cache_dir))

    def __len__(self) -> int:
        return len(self._cache)

    async def load(self, key: str) -> str | None:
        value = await asyncio.to_thread(self._cache.get, key)
        return value if isinstance(value, str) else None

    async def save(self, key: str, requirements_json: str, ttl_seconds: int) -> None:
        await asyncio.to_thread(self._cache.set, key, requirements_json, expire=ttl_seconds)

    async def prune(self) -> int:
        """Delete expired and stale-version entries; return how many went."""
        removed = await asyncio.to_thread(self._prune)
        logger.info("requirements_cache_pruned", removed=removed, remaining=len(self))
        return removed

    def _prune(self) -> int:
        removed = int(self._cache.expire())
        stale = [
            key
            for key in self._cache.iterkeys()
            if isinstance(key, str)
            and key.startswith(f"{REQUIREMENTS_CACHE_PREFIX}:")
            and not key.startswith(self.current_prefix)
        ]
        for key in stale:
            if self._cache.delete(key):
                removed += 1
        return removed

    def close(self) -> None:
        self._cache.close()
