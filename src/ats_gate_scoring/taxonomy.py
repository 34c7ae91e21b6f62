"""Title-to-domain classification and seniority extraction."""

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from functools import lru_cache

from ats_gate_core.models.requirements import Domain


@dataclass(frozen=True)
class DomainRule:
    """Assigns ``domain`` to titles matching ``pattern`` (case-insensitive)."""

    domain: Domain
    pattern: str

    def matches(self, title: str) -> bool:
        """Whether the rule applies to a title."""
        return _compiled(self.pattern).search(title) is not None


@lru_cache(maxsize=256)
def _compiled(pattern: str) -> re.Pattern[str]:
    return re.compile(pattern, re.IGNORECASE)


# Order matters: first matching rule wins, so specific data/devops rules
# precede the generic engineering catch-all.
DEFAULT_DOMAIN_RULES: tuple[DomainRule, ...] = (
    DomainRule(
        Domain.DATA_ENGINEERING,
        r"data\s*(engineer|architect|platform|pipeline|warehouse)|etl|big\s*data",
    ),
    DomainRule(
        Domain.DATA_SCIENCE,
        r"data\s*(scien|analy)|machine\s*learn|\bml\b|\bai\b|deep\s*learn|\bnlp\b",
    ),
    DomainRule(
        Domain.DEVOPS,
        r"devops|\bsre\b|site\s*reliab|cloud\s*(eng|arch)|platform\s*eng|infrastructure",
    ),
    DomainRule(Domain.FULLSTACK, r"full[\s-]*stack"),
    DomainRule(
        Domain.FRONTEND,
        r"front[\s-]*end|ui\s*(dev|eng)|react\s*(dev|eng)|angular|vue",
    ),
    DomainRule(Domain.BACKEND, r"back[\s-]*end"),
    DomainRule(Domain.MOBILE, r"\bios\b|android|mobile|react\s*native|flutter"),
    DomainRule(Domain.QA, r"\bqa\b|quality|test\s*(auto|eng)|\bsdet\b"),
    DomainRule(Domain.SECURITY, r"secur|cyber|infosec"),
    DomainRule(
        Domain.MANAGEMENT,
        r"product\s*manag|program\s*manag|project\s*manag|engineering\s*manag|\bscrum\b",
    ),
    DomainRule(Domain.DESIGN, r"\bux\b|ui\s*design|product\s*design"),
    DomainRule(
        Domain.SOFTWARE_ENGINEERING,
        r"software|developer|engineer|programmer|java(?!script)|python|\.net|c#|ruby|php"
        r"|\bnode\b|spring|golang|\bgo\b",
    ),
)

# Job domain -> candidate domains considered adjacent. Deliberately asymmetric.
DEFAULT_DOMAIN_COMPATIBILITY: Mapping[Domain, tuple[Domain, ...]] = {
    Domain.SOFTWARE_ENGINEERING: (Domain.FULLSTACK, Domain.BACKEND, Domain.FRONTEND),
    Domain.FRONTEND: (Domain.FULLSTACK, Domain.SOFTWARE_ENGINEERING),
    Domain.BACKEND: (Domain.FULLSTACK, Domain.SOFTWARE_ENGINEERING),
    Domain.FULLSTACK: (Domain.FRONTEND, Domain.BACKEND, Domain.SOFTWARE_ENGINEERING),
    Domain.DATA_ENGINEERING: (Domain.DATA_SCIENCE, Domain.BACKEND),
    Domain.DATA_SCIENCE: (Domain.DATA_ENGINEERING,),
    Domain.DEVOPS: (Domain.SOFTWARE_ENGINEERING, Domain.BACKEND),
    Domain.MOBILE: (Domain.FRONTEND, Domain.FULLSTACK),
}

_SENIORITY_PATTERNS: tuple[tuple[str, re.Pattern[str]], ...] = (
    ("intern", re.compile(r"\b(intern|trainee)\b", re.IGNORECASE)),
    ("junior", re.compile(r"\bjunior\b|\bjr\b|\bentry\b|\bassociate\b", re.IGNORECASE)),
    ("senior", re.compile(r"\bsenior\b|\bsr\b", re.IGNORECASE)),
    ("staff", re.compile(r"\bstaff\b", re.IGNORECASE)),
    ("principal", re.compile(r"\bprincipal\b", re.IGNORECASE)),
    ("lead", re.compile(r"\blead\b|\btech lead\b", re.IGNORECASE)),
    ("manager", re.compile(r"\bmanager\b|\bdirector\b|\bvp\b|\bhead of\b", re.IGNORECASE)),
)


def extract_seniority(title: str) -> str:
    """Return a coarse seniority tag for a title; untagged titles are 'mid'."""
    for label, pattern in _SENIORITY_PATTERNS:
        if pattern.search(title):
            return label
    return "mid"


class DomainClassifier:
    """Ordered rule set mapping titles onto the domain taxonomy."""

    def __init__(
        self,
        rules: Sequence[DomainRule] = DEFAULT_DOMAIN_RULES,
        compatibility: Mapping[Domain, Sequence[Domain]] = DEFAULT_DOMAIN_COMPATIBILITY,
    ) -> None:
        """Initialize with rules and an adjacency table."""
        self._rules = tuple(rules)
        self._compatibility = {k: tuple(v) for k, v in compatibility.items()}

    def classify(self, title: str) -> Domain:
        """Classify a title; the first matching rule wins."""
        text = (title or "").strip().lower()
        if not text:
            return Domain.GENERAL
        for rule in self._rules:
            if rule.matches(text):
                return rule.domain
        return Domain.GENERAL

    def is_adjacent(self, job_domain: Domain, candidate_domain: Domain) -> bool:
        """Whether the candidate's domain is an accepted neighbour of the job's."""
        return candidate_domain in self._compatibility.get(job_domain, ())


@lru_cache(maxsize=1)
def default_classifier() -> DomainClassifier:
    """Shared classifier built from the default rules."""
    return DomainClassifier()
