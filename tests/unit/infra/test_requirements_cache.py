"""Tests for DiskRequirementsCache."""

from __future__ import annotations

import time
from collections.abc import Iterator
from pathlib import Path

import pytest

from ats_gate_core.interfaces.requirements_cache import RequirementsCache
from ats_gate_infra.cache.requirements_cache import DiskRequirementsCache
from ats_gate_scoring.agents.requirements_extractor import RequirementsExtractor
from ats_gate_scoring.agents.soft_fit import FixedSoftFitScorer
from tests.mocks.mock_factories import make_requirements
from tests.mocks.mock_llm import FakeInstructorClient
from tests.mocks.mock_settings import make_real_settings

REQS_JSON = '{"domain": "backend"}'
DAY = 24 * 3600


@pytest.fixture
def requirements_cache(tmp_path: Path) -> Iterator[DiskRequirementsCache]:
    """Create a temporary DiskRequirementsCache."""
    cache = DiskRequirementsCache(tmp_path / "requirements")
    yield cache
    cache.close()


@pytest.mark.unit
class TestDiskRequirementsCache:
    """Test loading, saving and pruning cached requirements."""

    def test_satisfies_protocol(self, requirements_cache: DiskRequirementsCache) -> None:
        """The disk cache is usable wherever a RequirementsCache is expected."""
        assert isinstance(requirements_cache, RequirementsCache)
        assert not isinstance(FixedSoftFitScorer(), RequirementsCache)

    async def test_save_and_load(self, requirements_cache: DiskRequirementsCache) -> None:
        """Saved JSON is returned unchanged."""
        await requirements_cache.save("requirements:v1:job-1", REQS_JSON, ttl_seconds=DAY)
        assert await requirements_cache.load("requirements:v1:job-1") == REQS_JSON
        assert len(requirements_cache) == 1

    async def test_load_miss(self, requirements_cache: DiskRequirementsCache) -> None:
        """A missing key is None."""
        assert await requirements_cache.load("requirements:v1:nope") is None

    async def test_ttl_expiry(self, requirements_cache: DiskRequirementsCache) -> None:
        """Entries disappear once their TTL has passed."""
        await requirements_cache.save("requirements:v1:short", REQS_JSON, ttl_seconds=1)
        time.sleep(1.1)
        assert await requirements_cache.load("requirements:v1:short") is None

    async def test_prune_drops_other_prompt_versions(self, tmp_path: Path) -> None:
        """Entries keyed by an older prompt version are removed, current ones kept."""
        cache = DiskRequirementsCache(tmp_path / "versions", prompt_version="v2")
        await cache.save("requirements:v1:job-1", REQS_JSON, ttl_seconds=DAY)
        await cache.save("requirements:v2:job-1", REQS_JSON, ttl_seconds=DAY)
        assert await cache.prune() == 1
        assert await cache.load("requirements:v1:job-1") is None
        assert await cache.load("requirements:v2:job-1") == REQS_JSON
        cache.close()

    async def test_prune_drops_expired(self, requirements_cache: DiskRequirementsCache) -> None:
        """Expired entries count towards the pruned total."""
        await requirements_cache.save("requirements:v1:short", REQS_JSON, ttl_seconds=1)
        await requirements_cache.save("requirements:v1:long", REQS_JSON, ttl_seconds=DAY)
        time.sleep(1.1)
        assert await requirements_cache.prune() == 1
        assert len(requirements_cache) == 1

    async def test_persists_across_instances(self, tmp_path: Path) -> None:
        """A reopened cache directory still holds earlier values."""
        first = DiskRequirementsCache(tmp_path / "shared")
        await first.save("requirements:v1:job-1", REQS_JSON, ttl_seconds=DAY)
        first.close()
        second = DiskRequirementsCache(tmp_path / "shared")
        assert await second.load("requirements:v1:job-1") == REQS_JSON
        second.close()

    async def test_serves_the_extractor(
        self, requirements_cache: DiskRequirementsCache
    ) -> None:
        """Requirements extracted once are read back from disk on the next call."""
        expected = make_requirements()
        client = FakeInstructorClient(expected)
        extractor = RequirementsExtractor(
            make_real_settings(llm_max_retries=1), cache=requirements_cache, client=client
        )
        description = "Own the payments platform, Python services on AWS and PostgreSQL. " * 2
        first = await extractor.extract("Backend Engineer", description, job_id="job-5")
        second = await extractor.extract("Backend Engineer", description, job_id="job-5")
        assert first == second == expected
        assert len(client.calls) == 1
        assert await requirements_cache.load("requirements:v1:job-5") is not None

    def test_creates_directory(self, tmp_path: Path) -> None:
        """Missing parent directories are created."""
        target = tmp_path / "a" / "b"
        DiskRequirementsCache(target).close()
        assert target.is_dir()
