"""Job requirement extraction prompt template (v1)."""

from __future__ import annotations

from ats_gate_core.constants import REQUIREMENTS_JD_EXCERPT

REQUIREMENTS_SYSTEM = """\
You are a senior technical recruiter. Extract structured requirements from a job description.

<rules>
- Extract skills as individual technologies/tools/frameworks, not vague categories
- Must-have = explicitly required or listed under "Requirements"
- Nice-to-have = "preferred", "bonus", "nice to have", "plus"
- Infer seniority from title and years if not explicit
- Return null for fields that cannot be determined
- Keep skill names lowercase and concise
- seniority_level is one of: junior, mid, senior, staff, principal, lead, manager, director
- required_education is one of: high_school, associate, bachelor, master, phd
- location_type is one of: remote, hybrid, onsite
- domain is one of: software-engineering, frontend, backend, fullstack, data-engineering, \
data-science, devops, mobile, qa, security, management, design, general
</rules>
"""

REQUIREMENTS_USER = """\
JOB TITLE: {job_title}
LOCATION: {job_location}

JOB DESCRIPTION:
{job_description}
"""


def build_requirements_prompt(
    job_title: str, job_description: str, job_location: str | None
) -> str:
    """Render the user turn with the JD cut to the excerpt limit."""
    return REQUIREMENTS_USER.format(
        job_title=job_title,
        job_location=job_location or "Not specified",
        job_description=(job_description or "")[:REQUIREMENTS_JD_EXCERPT],
    )
