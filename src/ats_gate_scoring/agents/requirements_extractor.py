"""Requirement extractor agent: turns a job description into JobRequirements."""

from __future__ import annotations

import hashlib
import time
from typing import TYPE_CHECKING, Any

import structlog

from ats_gate_core.constants import (
    MIN_JD_LENGTH_FOR_EXTRACTION,
    REQUIREMENTS_CACHE_PREFIX,
    REQUIREMENTS_PROMPT_VERSION,
)
from ats_gate_core.decoding import DecodeOk, parse_requirements
from ats_gate_core.models.requirements import JobRequirements
from ats_gate_scoring.agents.base import BaseLLMAgent
from ats_gate_scoring.prompts.requirements import (
    REQUIREMENTS_SYSTEM,
    build_requirements_prompt,
)
from ats_gate_scoring.taxonomy import DomainClassifier, default_classifier

if TYPE_CHECKING:
    from ats_gate_core.config.settings import Settings
    from ats_gate_core.interfaces.requirements_cache import RequirementsCache

logger = structlog.get_logger()


class RequirementsExtractor(BaseLLMAgent):
    """Extract structured requirements once per job and cache them.

    Short descriptions, missing credentials and failed calls all yield a
    minimal requirements object whose domain comes from the title alone.
    """

    agent_name = "requirements_extractor"

    def __init__(
        self,
        settings: Settings,
        cache: RequirementsCache | None = None,
        classifier: DomainClassifier | None = None,
        **kwargs: Any,
    ) -> None:
        """Initialize with settings and an optional requirements cache."""
        super().__init__(settings, **kwargs)
        self.cache = cache
        self.classifier = classifier or default_classifier()

    def minimal_requirements(self, job_title: str) -> JobRequirements:
        """Requirements with nothing but a title-derived domain."""
        return JobRequirements(domain=self.classifier.classify(job_title))

    @staticmethod
    def cache_key(
        job_title: str, job_description: str, job_location: str | None, job_id: str | None
    ) -> str:
        """Cache key per job id, or per content hash when there is no id."""
        if job_id:
            ident = job_id
        else:
            content = f"{job_title}\n{job_location or ''}\n{job_description}"
            ident = hashlib.sha256(content.encode()).hexdigest()
        return f"{REQUIREMENTS_CACHE_PREFIX}:{REQUIREMENTS_PROMPT_VERSION}:{ident}"

    async def extract(
        self,
        job_title: str,
        job_description: str,
        job_location: str | None = None,
        job_id: str | None = None,
    ) -> JobRequirements:
        """Return requirements for a job; never raises."""
        description = (job_description or "").strip()
        if len(description) < MIN_JD_LENGTH_FOR_EXTRACTION:
            logger.info("requirements_jd_too_short", job_id=job_id, length=len(description))
            return self.minimal_requirements(job_title)

        key = self.cache_key(job_title, description, job_location, job_id)
        cached = await self._cache_get(key)
        if cached is not None:
            return cached

        if not self.available:
            logger.info("requirements_extraction_skipped", job_id=job_id, reason="no_credentials")
            return self.minimal_requirements(job_title)

        start = time.monotonic()
        try:
            requirements = await self._call_llm(
                messages=[
                    {
                        "role": "user",
                        "content": build_requirements_prompt(
                            job_title, description, job_location
                        ),
                    }
                ],
                model=self.settings.extraction_model,
                response_model=JobRequirements,
                max_tokens=self.settings.extraction_max_tokens,
                system=REQUIREMENTS_SYSTEM,
                ids={"job_id": job_id},
            )
        except Exception as e:
            logger.warning(
                "requirements_extraction_failed",
                job_id=job_id,
                error=str(e),
                error_type=type(e).__name__,
            )
            return self.minimal_requirements(job_title)

        logger.info(
            "requirements_extracted",
            job_id=job_id,
            must_have=len(requirements.must_have_skills),
            domain=requirements.domain,
            duration_seconds=round(time.monotonic() - start, 2),
        )
        await self._cache_set(key, requirements)
        return requirements

    async def _cache_get(self, key: str) -> JobRequirements | None:
        if self.cache is None:
            return None
        try:
            raw = await self.cache.load(key)
        except Exception as e:
            logger.warning("requirements_cache_read_failed", key=key, error=str(e))
            return None
        if raw is None:
            return None
        decoded = parse_requirements(raw)
        if isinstance(decoded, DecodeOk):
            logger.debug("requirements_cache_hit", key=key)
            return decoded.value
        logger.warning("requirements_cache_corrupt", key=key, reason=decoded.reason)
        return None

    async def _cache_set(self, key: str, requirements: JobRequirements) -> None:
        if self.cache is None:
            return
        ttl = self.settings.requirements_cache_ttl_hours * 3600
        try:
            await self.cache.save(key, requirements.model_dump_json(), ttl_seconds=ttl)
        except Exception as e:
            logger.warning("requirements_cache_write_failed", key=key, error=str(e))
