"""Model registry. Importing this package registers every table on Base.metadata."""

from database.models.users import User, UserRole
from database.models.candidates import (
    Availability,
    Education,
    Experience,
    ExperienceLevel,
    JobSeeker,
    JobSeekerSkill,
    ProfileVisibility,
    RemotePreference,
    Skill,
    SkillLevel,
)
from database.models.organizations import Company
from database.models.jobs import EmploymentType, Job, JobSkill, JobStatus
from database.models.applications import (
    Application,
    ApplicationStatus,
    Interview,
    InterviewStatus,
    InvitationStatus,
    JobInvitation,
)
from database.models.communications import Message, Notification, NotificationType

__all__ = [
    "Application",
    "ApplicationStatus",
    "Availability",
    "Company",
    "Education",
    "EmploymentType",
    "Experience",
    "ExperienceLevel",
    "Interview",
    "InterviewStatus",
    "InvitationStatus",
    "Job",
    "JobInvitation",
    "JobSeeker",
    "JobSeekerSkill",
    "JobSkill",
    "JobStatus",
    "Message",
    "Notification",
    "NotificationType",
    "ProfileVisibility",
    "RemotePreference",
    "Skill",
    "SkillLevel",
    "User",
    "UserRole",
]
