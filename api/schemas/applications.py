"""Application, invitation and interview schemas."""

from datetime import datetime
from typing import Optional

from pydantic import Field, field_validator

from api.schemas.common import CamelModel, CompanySummary, TimestampMixin, UserSummary, blank_to_none
from api.schemas.jobs import JobSummary, PublicJobResponse
from api.schemas.profiles import CandidateResponse
from database.models.applications import ApplicationStatus, InterviewStatus, InvitationStatus


# ==================== Applications ===================== #
class ApplicationCreate(CamelModel):
    job_id: str = Field(min_length=1)
    company_id: Optional[str] = None
    cover_letter: Optional[str] = None
    resume_url: Optional[str] = Field(None, max_length=1024)


class ApplicationStatusUpdate(CamelModel):
    status: ApplicationStatus


class ApplicationResponse(TimestampMixin):
    id: str
    job_seeker_id: str
    job_id: Optional[str] = None
    company_id: str
    status: ApplicationStatus
    cover_letter: Optional[str] = None
    resume_url: Optional[str] = None


class CompanyApplicationResponse(ApplicationResponse):
    """Application as seen by the hiring company."""

    job: Optional[JobSummary] = None
    job_seeker: CandidateResponse


class JobSeekerApplicationResponse(ApplicationResponse):
    """Application as seen by the applicant."""

    job: Optional[PublicJobResponse] = None
    company: CompanySummary


# ==================== Invitations ===================== #
class InvitationCreate(CamelModel):
    job_id: str = Field(min_length=1)
    job_seeker_id: str = Field(min_length=1)
    message: Optional[str] = None


class InvitationRespond(CamelModel):
    invitation_id: str = Field(min_length=1)
    status: InvitationStatus

    @field_validator("status")
    @classmethod
    def terminal_only(cls, v: InvitationStatus) -> InvitationStatus:
        if v == InvitationStatus.PENDING:
            raise ValueError("status must be ACCEPTED or DECLINED")
        return v


class InvitationResponse(TimestampMixin):
    id: str
    company_id: str
    job_id: str
    job_seeker_id: str
    message: Optional[str] = None
    status: InvitationStatus


class JobSeekerInvitationResponse(InvitationResponse):
    job: PublicJobResponse
    company: CompanySummary


class InvitedJob(CamelModel):
    job_id: str


class InvitationDecisionResponse(CamelModel):
    invitation: InvitationResponse
    application: Optional[ApplicationResponse] = None


# ==================== Interviews ===================== #
class InterviewWrite(CamelModel):
    title: str = Field(min_length=1, max_length=255)
    description: Optional[str] = None
    scheduled_at: datetime
    duration: int = Field(gt=0, le=24 * 60, description="Length in minutes")
    meeting_url: str = Field(min_length=1, max_length=1024)

    @field_validator("description", mode="before")
    @classmethod
    def empty_description(cls, v):
        return blank_to_none(v)


class InterviewCreate(InterviewWrite):
    application_id: str = Field(min_length=1)


class InterviewReschedule(InterviewWrite):
    interview_id: str = Field(min_length=1)


class InterviewResponse(TimestampMixin):
    id: str
    company_id: str
    job_seeker_id: str
    application_id: str
    title: str
    description: Optional[str] = None
    scheduled_at: datetime
    duration: int
    meeting_url: Optional[str] = None
    status: InterviewStatus


class InterviewApplication(CamelModel):
    id: str
    status: ApplicationStatus
    job: Optional[JobSummary] = None


class InterviewJobSeeker(CamelModel):
    id: str
    title: Optional[str] = None
    user: UserSummary


class CompanyInterviewResponse(InterviewResponse):
    job_seeker: InterviewJobSeeker
    application: InterviewApplication


class JobSeekerInterviewResponse(InterviewResponse):
    company: CompanySummary
    application: InterviewApplication
