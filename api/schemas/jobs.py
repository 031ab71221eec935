"""Job-related Pydantic schemas."""

from datetime import datetime
from typing import Optional

from pydantic import Field, field_validator

from api.schemas.common import CamelModel, CompanySummary, SkillResponse, TimestampMixin, blank_to_none
from database.models.candidates import ExperienceLevel, RemotePreference, SkillLevel
from database.models.jobs import EmploymentType, JobStatus


def parse_job_status(value) -> JobStatus:
    """Job statuses are accepted in any letter case."""
    if isinstance(value, JobStatus):
        return value
    if not isinstance(value, str):
        raise ValueError("status must be a string")
    try:
        return JobStatus(value.strip().upper())
    except ValueError:
        allowed = ", ".join(s.value for s in JobStatus)
        raise ValueError(f"status must be one of {allowed}")


class JobSkillInput(CamelModel):
    name: str = Field(min_length=1, max_length=100)
    level: Optional[SkillLevel] = None

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v):
        return v.strip() if isinstance(v, str) else v


class JobSkillResponse(CamelModel):
    id: str
    level: Optional[SkillLevel] = None
    required: bool
    skill: SkillResponse


class JobWrite(CamelModel):
    """Body for creating a job or replacing one wholesale."""

    title: str = Field(min_length=1, max_length=255)
    description: str = Field(min_length=1)
    location: str = Field(min_length=1, max_length=255)
    department: Optional[str] = Field(None, max_length=255)
    employment_type: Optional[EmploymentType] = None
    remote_type: Optional[RemotePreference] = None
    experience_level: Optional[ExperienceLevel] = None
    salary_min: Optional[int] = Field(None, ge=0)
    salary_max: Optional[int] = Field(None, ge=0)
    requirements: Optional[str] = None
    benefits: Optional[str] = None
    application_deadline: Optional[datetime] = None
    status: JobStatus = JobStatus.DRAFT
    skills: list[JobSkillInput] = Field(default_factory=list)

    @field_validator(
        "employment_type",
        "remote_type",
        "experience_level",
        "salary_min",
        "salary_max",
        "application_deadline",
        mode="before",
    )
    @classmethod
    def empty_as_none(cls, v):
        return blank_to_none(v)

    @field_validator("status", mode="before")
    @classmethod
    def normalize_status(cls, v):
        if v is None or v == "":
            return JobStatus.DRAFT
        return parse_job_status(v)


class JobStatusUpdate(CamelModel):
    status: JobStatus

    @field_validator("status", mode="before")
    @classmethod
    def normalize_status(cls, v):
        return parse_job_status(v)


class JobResponse(TimestampMixin):
    id: str
    company_id: str
    title: str
    description: str
    location: Optional[str] = None
    department: Optional[str] = None
    employment_type: Optional[EmploymentType] = None
    remote_type: Optional[RemotePreference] = None
    experience_level: Optional[ExperienceLevel] = None
    salary_min: Optional[int] = None
    salary_max: Optional[int] = None
    requirements: Optional[str] = None
    benefits: Optional[str] = None
    application_deadline: Optional[datetime] = None
    status: JobStatus
    skills: list[JobSkillResponse] = Field(default_factory=list)


class PublicJobResponse(JobResponse):
    """Listed job with the posting company."""

    company: CompanySummary


class CompanyJobResponse(JobResponse):
    """Company's own job with its applicant count."""

    application_count: int = 0


class JobSummary(CamelModel):
    id: str
    title: str
    location: Optional[str] = None
    salary_min: Optional[int] = None
    salary_max: Optional[int] = None
    employment_type: Optional[EmploymentType] = None
    application_deadline: Optional[datetime] = None
    status: JobStatus


class JobMatchResponse(CamelModel):
    job_id: str
    score: int = Field(ge=0, le=100, description="Percentage of required skills covered")
    required_skills: int = Field(ge=0)
    matched_skills: list[str]
    missing_skills: list[str]


class SweepResponse(CamelModel):
    success: bool = True
    updated_jobs: int = Field(ge=0)
