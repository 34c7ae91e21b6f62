"""Soft-fit scoring prompt template (v1)."""

from __future__ import annotations

from ats_gate_core.constants import SOFT_FIT_JD_EXCERPT, SOFT_FIT_RESUME_EXCERPT

SOFT_FIT_USER = """\
You are a senior recruiter evaluating candidate-job soft fit. Score 0-100 on these factors:
- Career trajectory: Is the candidate growing toward this role?
- Industry relevance: Has the candidate worked in similar industries/domains?
- Impact signals: Does the resume show measurable achievements (metrics, scale, outcomes)?
- Communication: Is the resume well-written and clear?
- Growth potential: Could this candidate grow into the role even if not a perfect fit today?

The candidate matched {matched_count} required keywords and is missing {missing_count}.

JOB: {job_title}
JD EXCERPT: {job_description}

CANDIDATE TITLE: {candidate_title}
RESUME EXCERPT: {resume_text}

Respond with a score from 0 to 100 and a one-sentence explanation.
"""


def build_soft_fit_prompt(
    job_title: str,
    job_description: str,
    candidate_title: str,
    resume_text: str,
    matched_count: int,
    missing_count: int,
) -> str:
    """Render the soft-fit prompt with excerpted JD and resume text."""
    return SOFT_FIT_USER.format(
        job_title=job_title,
        job_description=(job_description or "")[:SOFT_FIT_JD_EXCERPT],
        candidate_title=candidate_title or "Unknown",
        resume_text=(resume_text or "")[:SOFT_FIT_RESUME_EXCERPT],
        matched_count=matched_count,
        missing_count=missing_count,
    )
