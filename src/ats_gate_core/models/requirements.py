"""Structured job requirements consumed by the scoring engine."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, Field, field_validator


class Domain(StrEnum):
    """Role domain taxonomy shared by job classification and title scoring."""

    SOFTWARE_ENGINEERING = "software-engineering"
    FRONTEND = "frontend"
    BACKEND = "backend"
    FULLSTACK = "fullstack"
    DATA_ENGINEERING = "data-engineering"
    DATA_SCIENCE = "data-science"
    DEVOPS = "devops"
    MOBILE = "mobile"
    QA = "qa"
    SECURITY = "security"
    MANAGEMENT = "management"
    DESIGN = "design"
    GENERAL = "general"


class SeniorityLevel(StrEnum):
    """Seniority labels a job may carry."""

    JUNIOR = "junior"
    MID = "mid"
    SENIOR = "senior"
    STAFF = "staff"
    PRINCIPAL = "principal"
    LEAD = "lead"
    MANAGER = "manager"
    DIRECTOR = "director"


class EducationLevel(StrEnum):
    """Minimum education levels, lowest to highest."""

    HIGH_SCHOOL = "high_school"
    ASSOCIATE = "associate"
    BACHELOR = "bachelor"
    MASTER = "master"
    PHD = "phd"


class LocationType(StrEnum):
    """Work arrangement of a job."""

    REMOTE = "remote"
    HYBRID = "hybrid"
    ONSITE = "onsite"


def _coerce_enum(value: object, enum_cls: type[StrEnum]) -> object:
    """Map free-form model output onto an enum member, or None when unknown."""
    if value is None or isinstance(value, enum_cls):
        return value
    text = str(value).strip().lower()
    if not text or text in {"null", "none", "n/a"}:
        return None
    try:
        return enum_cls(text)
    except ValueError:
        return None


class JobRequirements(BaseModel):
    """Structured requirements for a single job, usually AI-extracted upstream.

    Only ``domain`` is guaranteed; every other field may be absent and the
    scorers fall back to neutral values instead of failing.
    """

    must_have_skills: list[str] = Field(
        default_factory=list, description="Explicitly required skills"
    )
    nice_to_have_skills: list[str] = Field(
        default_factory=list, description="Preferred / bonus skills"
    )
    min_years_experience: int | None = Field(
        default=None, ge=0, description="Minimum years of experience"
    )
    preferred_years_experience: int | None = Field(
        default=None, ge=0, description="Preferred years of experience"
    )
    seniority_level: SeniorityLevel | None = Field(
        default=None, description="Seniority label of the role"
    )
    required_education: EducationLevel | None = Field(
        default=None, description="Minimum required degree level"
    )
    preferred_education_fields: list[str] = Field(
        default_factory=list, description="Preferred fields of study"
    )
    certifications: list[str] = Field(
        default_factory=list, description="Required certifications"
    )
    location_type: LocationType | None = Field(
        default=None, description="Remote, hybrid or onsite"
    )
    location_city: str | None = Field(default=None, description="City of the role")
    visa_sponsorship: bool | None = Field(
        default=None, description="Whether the employer sponsors visas"
    )
    domain: Domain = Field(description="Domain classification of the role")

    @field_validator(
        "must_have_skills",
        "nice_to_have_skills",
        "preferred_education_fields",
        "certifications",
        mode="before",
    )
    @classmethod
    def _none_to_empty(cls, value: object) -> object:
        """Treat null lists from model output as empty."""
        if value is None:
            return []
        if isinstance(value, str):
            return [value]
        return value

    @field_validator("min_years_experience", "preferred_years_experience", mode="before")
    @classmethod
    def _round_years(cls, value: object) -> object:
        """Accept fractional years from model output by rounding."""
        if isinstance(value, float):
            return round(value)
        return value

    @field_validator("seniority_level", mode="before")
    @classmethod
    def _coerce_seniority(cls, value: object) -> object:
        """Unknown seniority labels become None."""
        return _coerce_enum(value, SeniorityLevel)

    @field_validator("required_education", mode="before")
    @classmethod
    def _coerce_education(cls, value: object) -> object:
        """Unknown education levels become None."""
        return _coerce_enum(value, EducationLevel)

    @field_validator("location_type", mode="before")
    @classmethod
    def _coerce_location_type(cls, value: object) -> object:
        """Unknown location types become None."""
        return _coerce_enum(value, LocationType)

    @field_validator("domain", mode="before")
    @classmethod
    def _coerce_domain(cls, value: object) -> object:
        """Unknown domains collapse to the general catch-all."""
        coerced = _coerce_enum(value, Domain)
        return Domain.GENERAL if coerced is None else coerced
