"""Candidate profile models."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator


class WorkExperience(BaseModel):
    """A single role in the candidate's work history."""

    company: str = Field(default="", description="Employer name")
    title: str = Field(default="", description="Role title")
    start_date: str | None = Field(default=None, description="Start date (YYYY, YYYY-MM, ...)")
    end_date: str | None = Field(default=None, description="End date or 'present'")
    current: bool = Field(default=False, description="Whether this is the current role")


class EducationEntry(BaseModel):
    """Educational background entry."""

    institution: str | None = Field(default=None, description="University/college name")
    degree: str | None = Field(default=None, description="Degree type (BS, MS, PhD, etc.)")
    field: str | None = Field(default=None, description="Field of study")
    graduation_date: str | None = Field(default=None, description="Graduation date")


class Certification(BaseModel):
    """A professional certification."""

    name: str = Field(description="Certification name")
    issuer: str | None = Field(default=None, description="Issuing body")


class CandidateProfile(BaseModel):
    """Structured candidate data as loaded from storage.

    ``resume_text`` may be empty; scorers then rely on structured fields and
    only the confidence estimate drops.
    """

    candidate_id: str | None = Field(default=None, description="Storage identifier")
    primary_title: str = Field(default="", description="Current / primary job title")
    secondary_titles: list[str] = Field(
        default_factory=list, description="Other titles the candidate targets or held"
    )
    skills: list[str] = Field(default_factory=list, description="Skills")
    tools: list[str] = Field(default_factory=list, description="Tools and technologies")
    experience: list[WorkExperience] = Field(
        default_factory=list, description="Work experience entries"
    )
    education: list[EducationEntry] = Field(
        default_factory=list, description="Education entries"
    )
    certifications: list[Certification] = Field(
        default_factory=list, description="Certifications"
    )
    location: str | None = Field(default=None, description="Current location")
    visa_status: str | None = Field(default=None, description="Work authorization, free text")
    years_of_experience: float | None = Field(
        default=None, ge=0, description="Self-declared total years of experience"
    )
    open_to_remote: bool = Field(default=True, description="Willing to work remotely")
    open_to_relocation: bool = Field(default=False, description="Willing to relocate")
    target_locations: list[str] = Field(
        default_factory=list, description="Locations the candidate targets"
    )
    resume_text: str = Field(default="", description="Raw resume text")

    @field_validator("primary_title", "resume_text", mode="before")
    @classmethod
    def _none_to_blank(cls, value: object) -> object:
        """Null text fields from storage become empty strings."""
        return "" if value is None else value

    @field_validator("certifications", mode="before")
    @classmethod
    def _accept_plain_cert_names(cls, value: object) -> object:
        """Allow certifications stored as bare strings."""
        if isinstance(value, list):
            return [{"name": v} if isinstance(v, str) else v for v in value]
        return value
