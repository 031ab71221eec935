"""Message, conversation, notification and dashboard schemas."""

from datetime import datetime
from typing import Optional

from pydantic import Field, model_validator

from api.schemas.common import CamelModel, UserSummary
from api.schemas.profiles import JobSeekerProfileResponse
from database.models.communications import NotificationType
from database.models.jobs import JobStatus


# ==================== Messages ===================== #
class MessageCreate(CamelModel):
    content: str = Field(min_length=1, max_length=10_000)
    receiver_id: Optional[str] = None
    application_id: Optional[str] = None
    job_id: Optional[str] = None

    @model_validator(mode="after")
    def needs_recipient(self) -> "MessageCreate":
        if not self.receiver_id and not self.application_id:
            raise ValueError("receiverId or applicationId is required")
        return self


class MessageResponse(CamelModel):
    id: str
    sender_id: str
    receiver_id: str
    application_id: str
    content: str
    read: bool
    created_at: datetime


class ThreadMessageResponse(MessageResponse):
    sender: UserSummary
    receiver: UserSummary


class ConversationJob(CamelModel):
    id: str
    title: str
    application_deadline: Optional[datetime] = None
    status: JobStatus


class ConversationResponse(CamelModel):
    """One conversation per application, described from the caller's side."""

    id: str = Field(description="Application id anchoring the conversation")
    job_seeker_user_id: str
    name: Optional[str] = None
    logo_url: Optional[str] = None
    role: str = Field(description="Counterpart role, e.g. 'company' or 'job-seeker'")
    last_message: str
    timestamp: Optional[datetime] = None
    unread_count: int = 0
    job: Optional[ConversationJob] = None


class MarkReadResponse(CamelModel):
    success: bool = True
    messages_updated: int = 0
    notifications_updated: int = 0


# ==================== Notifications ===================== #
class NotificationResponse(CamelModel):
    id: str
    type: NotificationType
    message: str
    link: Optional[str] = None
    read: bool
    created_at: datetime


# ==================== Dashboards ===================== #
class CompanyDashboardResponse(CamelModel):
    active_jobs: int
    total_applications: int
    interviews_today: int
    unread_messages: int


class JobSeekerStats(CamelModel):
    applications: int
    interview_requests: int
    conversations: int
    profile_views: int = 0


class DashboardActivity(CamelModel):
    id: str
    type: NotificationType
    message: str
    link: Optional[str] = None
    read: bool
    created_at: datetime


class JobSeekerDashboardResponse(CamelModel):
    profile: JobSeekerProfileResponse
    stats: JobSeekerStats
    activities: list[DashboardActivity] = Field(default_factory=list)
