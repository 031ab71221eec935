"""Candidate search and application filter inputs."""

from typing import Optional

from pydantic import Field, field_validator

from api.schemas.common import CamelModel, blank_to_none
from database.models.applications import ApplicationStatus
from database.models.candidates import Availability, ExperienceLevel


class CandidateSearchParams(CamelModel):
    """Validated query string of ``GET /candidates``."""

    search: Optional[str] = Field(None, max_length=200)
    skills: list[str] = Field(default_factory=list)
    location: Optional[str] = Field(None, max_length=255)
    experience_level: Optional[ExperienceLevel] = None
    availability: Optional[Availability] = None

    @field_validator("search", "location", mode="before")
    @classmethod
    def strip_text(cls, v):
        v = blank_to_none(v)
        return v.strip() if isinstance(v, str) else v

    @field_validator("skills", mode="before")
    @classmethod
    def split_skills(cls, v):
        """Accept a comma separated string or a list of names."""
        if v is None:
            return []
        if isinstance(v, str):
            v = v.split(",")
        return [name.strip() for name in v if name and name.strip()]

    @field_validator("experience_level", mode="before")
    @classmethod
    def empty_level(cls, v):
        return blank_to_none(v)

    @field_validator("availability", mode="before")
    @classmethod
    def all_means_default(cls, v):
        """``all`` (or nothing) keeps the default open-to-work filter."""
        v = blank_to_none(v)
        if isinstance(v, str) and v.lower() == "all":
            return None
        return v


class ApplicationFilterParams(CamelModel):
    """Validated query string of ``GET /applications/company``."""

    limit: Optional[int] = Field(None, ge=1, le=200)
    application_id: Optional[str] = None
    job_id: Optional[str] = None
    status: Optional[ApplicationStatus] = None

    @field_validator("application_id", "job_id", "status", "limit", mode="before")
    @classmethod
    def empty_as_none(cls, v):
        return blank_to_none(v)
