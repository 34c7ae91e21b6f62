"""Shared constants for ats-gate."""

from __future__ import annotations

# Scoring engine version tag, persisted with every scoring run.
ENGINE_MODEL_VERSION = "v1"

# Requirements prompt version, part of the cache key; bump when the prompt changes
REQUIREMENTS_PROMPT_VERSION = "v1"
REQUIREMENTS_CACHE_PREFIX = "requirements"

# LLM token pricing (USD per 1M tokens)
TOKEN_PRICES: dict[str, dict[str, float]] = {
    "claude-haiku-4-5-20251001": {"input": 0.80, "output": 4.00},
    "claude-sonnet-4-5-20250514": {"input": 3.00, "output": 15.00},
    "claude-3-5-sonnet-20241022": {"input": 3.00, "output": 15.00},
}

# Engine default dimension weights (sum to 1.0)
DEFAULT_WEIGHTS: dict[str, float] = {
    "keyword": 0.35,
    "experience": 0.20,
    "title": 0.15,
    "education": 0.10,
    "location": 0.10,
    "soft": 0.10,
}

# Renormalize merged weights only when they drift further than this from 1.0
WEIGHT_SUM_EPSILON = 0.001

# Neutral scores used when a dimension has nothing to compare against
NEUTRAL_KEYWORD_SCORE = 70
NEUTRAL_EXPERIENCE_SCORE = 70
NEUTRAL_EDUCATION_SCORE = 75
NEUTRAL_SOFT_SCORE = 50
LOCATION_BASELINE_SCORE = 75

# Keyword must-have / nice-to-have split
MUST_HAVE_WEIGHT = 0.75
NICE_TO_HAVE_WEIGHT = 0.25

# Seniority label -> (min years, preferred years)
SENIORITY_YEARS: dict[str, tuple[int, int]] = {
    "junior": (0, 2),
    "mid": (2, 5),
    "senior": (5, 8),
    "staff": (8, 12),
    "principal": (12, 20),
    "lead": (5, 10),
    "manager": (6, 12),
    "director": (10, 20),
}

# Degree keyword -> rank; matched as substrings of the candidate's degree text
DEGREE_RANK: dict[str, int] = {
    "phd": 5,
    "doctorate": 5,
    "master": 4,
    "masters": 4,
    "mba": 4,
    "ms": 4,
    "ma": 4,
    "bachelor": 3,
    "bachelors": 3,
    "bs": 3,
    "ba": 3,
    "btech": 3,
    "be": 3,
    "associate": 2,
    "associates": 2,
    "aa": 2,
    "as": 2,
    "high_school": 1,
    "diploma": 1,
    "ged": 1,
}

# Domain-mismatch hard cap: (title score ceiling, total score cap)
DOMAIN_CAPS: tuple[tuple[int, int], ...] = ((25, 30), (45, 55))

# Overall reason bands
STRONG_MATCH_SCORE = 82
MODERATE_MATCH_SCORE = 75
BELOW_THRESHOLD_SCORE = 50

# Confidence bucket breakpoints (documented contract, mirrored by the
# ats_confidence_bucket CHECK constraint downstream)
CONFIDENCE_INSUFFICIENT_BELOW = 35
CONFIDENCE_MODERATE_BELOW = 65
CONFIDENCE_GOOD_BELOW = 85

# Visa text fragments that indicate a sponsorship need. Matched as unanchored
# substrings, so negated text ("no sponsorship required") and words such as
# "options" also collapse to needs_sponsorship.
VISA_SPONSORSHIP_PATTERN = r"h1b|opt|tn|visa|sponsorship"
VISA_LOCATION_MARKERS: tuple[str, ...] = ("h1b", "opt", "visa", "sponsorship")

# Scrubbed visa signal values
NEEDS_SPONSORSHIP = "needs_sponsorship"
NO_SPONSORSHIP_NEEDED = "no_sponsorship_needed"

# Prompt excerpt limits
SOFT_FIT_JD_EXCERPT = 800
SOFT_FIT_RESUME_EXCERPT = 1500
REQUIREMENTS_JD_EXCERPT = 3000
MIN_JD_LENGTH_FOR_EXTRACTION = 50

# Experience interval merger guards
MAX_ROLE_YEARS = 40
MAX_CAREER_YEARS = 50

# Years difference that triggers a candidate_years_discrepancy event
YEARS_DISCREPANCY_THRESHOLD = 2.0
