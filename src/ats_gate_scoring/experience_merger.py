"""Worked-experience duration from dated roles.

Self-declared years and "first start year to today" both over-count: they
include gaps, study and overlapping jobs. This module turns each role into a
half-open month interval, unions the overlaps and sums what is left.

Year-only dates resolve conservatively (January for a start, December for an
end). A role with a start but no usable end, that is not current, cannot be
measured and only lowers confidence.
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date

from pydantic import BaseModel, Field

from ats_gate_core.constants import MAX_CAREER_YEARS, MAX_ROLE_YEARS
from ats_gate_core.models.candidate import WorkExperience
from ats_gate_scoring.numeric import round_half_up

MIN_YEAR = 1950
MAX_YEAR = 2040

_PRESENT_RE = re.compile(r"^(present|current|now|ongoing|today)$")
_YEAR_MONTH_RE = re.compile(r"^(\d{4})[-/](\d{1,2})(?:[-/]\d{1,2})?$")
_YEAR_RE = re.compile(r"^(\d{4})$")
_MONTH_YEAR_RE = re.compile(r"^([a-z]+)[,.\s]+(\d{4})$")
_YEAR_MONTH_NAME_RE = re.compile(r"^(\d{4})[,.\s]+([a-z]+)$")
INTERN_RE = re.compile(r"\b(intern(ship)?|co[-\s]?op|cooperative\s+education)\b", re.IGNORECASE)

_MONTHS = {
    "jan": 0, "feb": 1, "mar": 2, "apr": 3, "may": 4, "jun": 5,
    "jul": 6, "aug": 7, "sep": 8, "oct": 9, "nov": 10, "dec": 11,
    "january": 0, "february": 1, "march": 2, "april": 3, "june": 5,
    "july": 6, "august": 7, "september": 8, "october": 9, "november": 10,
    "december": 11,
}  # fmt: skip


@dataclass
class MonthInterval:
    """Half-open ``[start, end)`` range of absolute month indexes."""

    start: int
    end: int
    title: str = ""
    parseable: bool = True


class ExperienceSummary(BaseModel):
    """Merged experience totals for one candidate."""

    total_months: int = Field(default=0, description="Worked months excluding internships")
    total_years: float = Field(default=0.0, description="total_months / 12, one decimal")
    internship_months: int = Field(default=0, description="Months spent in internships")
    merged_interval_count: int = Field(default=0)
    confidence: float = Field(
        default=0.3, description="1.0 all roles dated, 0.6 some, 0.3 none"
    )
    unparseable_count: int = Field(default=0)
    raw_role_count: int = Field(default=0)


def _month_index(year: int, month0: int) -> int:
    return year * 12 + month0


def _now_index(today: date | None) -> int:
    current = today or date.today()
    return _month_index(current.year, current.month - 1)


def parse_month_index(
    raw: str | None, is_start: bool, today: date | None = None
) -> int | None:
    """Parse a role date into an absolute month index, or None."""
    if not raw:
        return None
    text = str(raw).strip().lower()

    if _PRESENT_RE.match(text):
        return _now_index(today)

    match = _YEAR_MONTH_RE.match(text)
    if match:
        year, month = int(match.group(1)), int(match.group(2))
        if not MIN_YEAR <= year <= MAX_YEAR or not 1 <= month <= 12:
            return None
        return _month_index(year, month - 1)

    match = _YEAR_RE.match(text)
    if match:
        year = int(match.group(1))
        if not MIN_YEAR <= year <= MAX_YEAR:
            return None
        return _month_index(year, 0 if is_start else 11)

    match = _MONTH_YEAR_RE.match(text)
    if match:
        month_name, year_text = match.group(1), match.group(2)
    else:
        match = _YEAR_MONTH_NAME_RE.match(text)
        if not match:
            return None
        year_text, month_name = match.group(1), match.group(2)

    month0 = _MONTHS.get(month_name)
    year = int(year_text)
    if month0 is None or not MIN_YEAR <= year <= MAX_YEAR:
        return None
    return _month_index(year, month0)


def build_interval(role: WorkExperience, today: date | None = None) -> MonthInterval:
    """Turn one role into a month interval, flagging undatable roles."""
    title = (role.title or "").strip()
    start = parse_month_index(role.start_date, is_start=True, today=today)
    if start is None:
        return MonthInterval(start=0, end=0, title=title, parseable=False)

    if role.current or not role.end_date:
        end = _now_index(today) + 1
    else:
        parsed_end = parse_month_index(role.end_date, is_start=False, today=today)
        if parsed_end is None:
            return MonthInterval(start=start, end=start, title=title, parseable=False)
        end = parsed_end + 1

    end = max(end, start + 1)
    end = min(end, start + MAX_ROLE_YEARS * 12)
    return MonthInterval(start=start, end=end, title=title)


def merge_intervals(intervals: Sequence[MonthInterval]) -> list[MonthInterval]:
    """Union overlapping or touching intervals (sweep line over sorted starts)."""
    if not intervals:
        return []
    ordered = sorted(intervals, key=lambda iv: iv.start)
    merged = [MonthInterval(start=ordered[0].start, end=ordered[0].end)]
    for interval in ordered[1:]:
        last = merged[-1]
        if interval.start <= last.end:
            last.end = max(last.end, interval.end)
        else:
            merged.append(MonthInterval(start=interval.start, end=interval.end))
    return merged


def _total_months(intervals: Sequence[MonthInterval]) -> int:
    return sum(iv.end - iv.start for iv in intervals)


def compute_experience_duration(
    experience: Sequence[WorkExperience],
    exclude_internships: bool = True,
    today: date | None = None,
) -> ExperienceSummary:
    """Compute merged worked experience for a list of roles."""
    if not experience:
        return ExperienceSummary()

    intervals = [build_interval(role, today) for role in experience]
    parseable = [iv for iv in intervals if iv.parseable]

    def _is_internship(interval: MonthInterval) -> bool:
        return exclude_internships and INTERN_RE.search(interval.title) is not None

    substantive = merge_intervals([iv for iv in parseable if not _is_internship(iv)])
    internships = merge_intervals([iv for iv in parseable if _is_internship(iv)])

    total_months = min(_total_months(substantive), MAX_CAREER_YEARS * 12)

    if not parseable:
        confidence = 0.3
    elif len(parseable) < len(experience):
        confidence = 0.6
    else:
        confidence = 1.0

    return ExperienceSummary(
        total_months=total_months,
        total_years=round_half_up(total_months / 12 * 10) / 10,
        internship_months=_total_months(internships),
        merged_interval_count=len(substantive),
        confidence=confidence,
        unparseable_count=len(intervals) - len(parseable),
        raw_role_count=len(experience),
    )
