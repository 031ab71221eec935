"""Company and job seeker profile schemas."""

from datetime import datetime
from typing import Optional

from pydantic import Field, field_validator

from api.schemas.common import CamelModel, SkillResponse, TimestampMixin, UserSummary, blank_to_none
from database.models.candidates import (
    Availability,
    ExperienceLevel,
    JobSeeker,
    ProfileVisibility,
    RemotePreference,
    SkillLevel,
)


# ==================== Company ===================== #
class CompanyProfileUpdate(CamelModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    website: Optional[str] = Field(None, max_length=1024)
    industry: Optional[str] = Field(None, max_length=255)
    size: Optional[str] = Field(None, max_length=50)
    logo_url: Optional[str] = Field(None, max_length=1024)
    location: Optional[str] = Field(None, max_length=255)


class CompanyProfileResponse(TimestampMixin):
    id: str
    user_id: str
    name: str
    description: Optional[str] = None
    website: Optional[str] = None
    industry: Optional[str] = None
    size: Optional[str] = None
    logo_url: Optional[str] = None
    location: Optional[str] = None
    user: UserSummary


# ==================== Job Seeker ===================== #
class SeekerSkillResponse(CamelModel):
    id: str
    level: Optional[SkillLevel] = None
    skill: SkillResponse


class ExperienceResponse(CamelModel):
    id: str
    title: str
    company: str
    description: Optional[str] = None
    start_date: datetime
    end_date: Optional[datetime] = None
    current: bool = False


class EducationResponse(CamelModel):
    id: str
    institution: str
    degree: str
    field: Optional[str] = None
    start_date: datetime
    end_date: Optional[datetime] = None
    current: bool = False


class CandidateResponse(CamelModel):
    """Public job seeker card used by search and applicant lists."""

    id: str
    user_id: str
    title: Optional[str] = None
    bio: Optional[str] = None
    location: Optional[str] = None
    experience_level: Optional[ExperienceLevel] = None
    availability: Availability
    remote_preference: Optional[RemotePreference] = None
    salary_min: Optional[int] = None
    salary_max: Optional[int] = None
    resume_url: Optional[str] = None
    updated_at: datetime
    user: UserSummary
    skills: list[SeekerSkillResponse] = Field(default_factory=list)
    experiences: list[ExperienceResponse] = Field(default_factory=list)
    educations: list[EducationResponse] = Field(default_factory=list)


class SkillEntry(CamelModel):
    name: str = Field(min_length=1, max_length=100)
    level: Optional[SkillLevel] = None

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v):
        return v.strip() if isinstance(v, str) else v


class ExperienceEntry(CamelModel):
    """Experience row; an id that is missing or starts with ``new_`` creates a row."""

    id: Optional[str] = None
    title: str = Field(min_length=1, max_length=255)
    company: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None
    start_date: datetime
    end_date: Optional[datetime] = None
    current: bool = False

    @field_validator("end_date", mode="before")
    @classmethod
    def empty_end_date(cls, v):
        return blank_to_none(v)


class EducationEntry(CamelModel):
    id: Optional[str] = None
    institution: str = Field(min_length=1, max_length=255)
    degree: str = Field(min_length=1, max_length=255)
    field: Optional[str] = Field(None, max_length=255)
    start_date: datetime
    end_date: Optional[datetime] = None
    current: bool = False

    @field_validator("end_date", mode="before")
    @classmethod
    def empty_end_date(cls, v):
        return blank_to_none(v)


class JobSeekerProfileUpdate(CamelModel):
    """
    Profile form body. Skills, experience and education are replaced by
    the lists sent; omitted lists leave the stored rows untouched.
    """

    full_name: Optional[str] = Field(None, max_length=255)
    avatar: Optional[str] = Field(None, max_length=1024)
    headline: Optional[str] = Field(None, max_length=255)
    about: Optional[str] = None
    location: Optional[str] = Field(None, max_length=255)
    website: Optional[str] = Field(None, max_length=1024)
    phone: Optional[str] = Field(None, max_length=50)
    resume_url: Optional[str] = Field(None, max_length=1024)
    salary_min: Optional[int] = Field(None, ge=0)
    salary_max: Optional[int] = Field(None, ge=0)
    experience_level: Optional[ExperienceLevel] = None
    availability: Optional[Availability] = None
    notice_period: Optional[str] = Field(None, max_length=100)
    remote_preference: Optional[RemotePreference] = None
    profile_visibility: Optional[ProfileVisibility] = None
    skills: Optional[list[SkillEntry]] = None
    experience: Optional[list[ExperienceEntry]] = None
    education: Optional[list[EducationEntry]] = None

    @field_validator(
        "salary_min",
        "salary_max",
        "experience_level",
        "availability",
        "remote_preference",
        "profile_visibility",
        mode="before",
    )
    @classmethod
    def empty_as_none(cls, v):
        return blank_to_none(v)


class ProfileSkill(CamelModel):
    name: str
    level: Optional[SkillLevel] = None


class JobSeekerProfileResponse(CamelModel):
    """Flattened profile as edited on the job seeker profile page."""

    id: str
    avatar: Optional[str] = None
    full_name: Optional[str] = None
    email: Optional[str] = None
    headline: Optional[str] = None
    about: Optional[str] = None
    location: Optional[str] = None
    website: Optional[str] = None
    phone: Optional[str] = None
    resume_url: Optional[str] = None
    salary_min: Optional[int] = None
    salary_max: Optional[int] = None
    experience_level: Optional[ExperienceLevel] = None
    availability: Availability
    notice_period: Optional[str] = None
    remote_preference: Optional[RemotePreference] = None
    profile_visibility: ProfileVisibility
    skills: list[ProfileSkill] = Field(default_factory=list)
    experience: list[ExperienceResponse] = Field(default_factory=list)
    education: list[EducationResponse] = Field(default_factory=list)

    @classmethod
    def from_job_seeker(cls, job_seeker: JobSeeker) -> "JobSeekerProfileResponse":
        """Build from a JobSeeker with user, skills, experiences and educations loaded."""
        return cls(
            id=job_seeker.id,
            avatar=job_seeker.user.image,
            full_name=job_seeker.user.name,
            email=job_seeker.user.email,
            headline=job_seeker.title,
            about=job_seeker.bio,
            location=job_seeker.location,
            website=job_seeker.website,
            phone=job_seeker.phone,
            resume_url=job_seeker.resume_url,
            salary_min=job_seeker.salary_min,
            salary_max=job_seeker.salary_max,
            experience_level=job_seeker.experience_level,
            availability=job_seeker.availability,
            notice_period=job_seeker.notice_period,
            remote_preference=job_seeker.remote_preference,
            profile_visibility=job_seeker.profile_visibility,
            skills=[ProfileSkill(name=s.skill.name, level=s.level) for s in job_seeker.skills],
            experience=[ExperienceResponse.model_validate(e) for e in job_seeker.experiences],
            education=[EducationResponse.model_validate(e) for e in job_seeker.educations],
        )
