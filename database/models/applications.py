"""
Application Models

Applications, invitations and interviews: everything that ties a job seeker
to a company's posting.
"""

from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import (
    String,
    ForeignKey,
    Integer,
    DateTime,
    Text,
    Enum as SQLEnum,
    Index,
    UniqueConstraint,
)
from database.engine import Base
from database.models.base import generate_uuid, utcnow
from datetime import datetime
from enum import Enum as PyEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from database.models.candidates import JobSeeker
    from database.models.organizations import Company
    from database.models.jobs import Job
    from database.models.communications import Message


# ==================== Status Enums ===================== #
class ApplicationStatus(str, PyEnum):
    PENDING = "PENDING"
    REVIEWING = "REVIEWING"
    INTERVIEW = "INTERVIEW"
    OFFER = "OFFER"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"


class InvitationStatus(str, PyEnum):
    """PENDING moves to exactly one of the terminal states."""

    PENDING = "PENDING"
    ACCEPTED = "ACCEPTED"
    DECLINED = "DECLINED"


class InterviewStatus(str, PyEnum):
    SCHEDULED = "SCHEDULED"
    RESCHEDULED = "RESCHEDULED"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


# ==================== Application Model ===================== #
class Application(Base):
    """
    A job seeker's application to a job. Also anchors the message thread
    between the two parties, so a company may open one without a job.
    """

    __tablename__ = "applications"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    job_seeker_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("job_seekers.id", ondelete="CASCADE"), nullable=False, index=True
    )
    job_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("jobs.id", ondelete="CASCADE"), index=True
    )
    company_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("companies.id", ondelete="CASCADE"), nullable=False, index=True
    )

    status: Mapped[ApplicationStatus] = mapped_column(
        SQLEnum(ApplicationStatus, native_enum=False, length=20),
        nullable=False,
        default=ApplicationStatus.PENDING,
    )
    cover_letter: Mapped[str | None] = mapped_column(Text)
    resume_url: Mapped[str | None] = mapped_column(String(1024))

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )

    # Relationships
    job_seeker: Mapped["JobSeeker"] = relationship("JobSeeker", back_populates="applications")
    job: Mapped["Job | None"] = relationship("Job", back_populates="applications")
    company: Mapped["Company"] = relationship("Company")
    messages: Mapped[list["Message"]] = relationship(
        "Message",
        back_populates="application",
        cascade="all, delete-orphan",
        order_by="Message.created_at",
    )
    interviews: Mapped[list["Interview"]] = relationship(
        "Interview", back_populates="application", cascade="all, delete-orphan"
    )

    __table_args__ = (
        UniqueConstraint("job_seeker_id", "job_id", name="uq_application_job_seeker_job"),
        Index("idx_application_company_created", "company_id", "created_at"),
    )


# ==================== Invitation Model ===================== #
class JobInvitation(Base):
    """Company invitation for a job seeker to apply to a job."""

    __tablename__ = "job_invitations"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    company_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("companies.id", ondelete="CASCADE"), nullable=False, index=True
    )
    job_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False
    )
    job_seeker_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("job_seekers.id", ondelete="CASCADE"), nullable=False, index=True
    )
    message: Mapped[str | None] = mapped_column(Text)
    status: Mapped[InvitationStatus] = mapped_column(
        SQLEnum(InvitationStatus, native_enum=False, length=20),
        nullable=False,
        default=InvitationStatus.PENDING,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )

    company: Mapped["Company"] = relationship("Company")
    job: Mapped["Job"] = relationship("Job", back_populates="invitations")
    job_seeker: Mapped["JobSeeker"] = relationship("JobSeeker")

    __table_args__ = (
        UniqueConstraint("job_seeker_id", "job_id", name="uq_invitation_job_seeker_job"),
    )


# ==================== Interview Model ===================== #
class Interview(Base):
    """Interview scheduled by a company against an application."""

    __tablename__ = "interviews"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    company_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("companies.id", ondelete="CASCADE"), nullable=False, index=True
    )
    job_seeker_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("job_seekers.id", ondelete="CASCADE"), nullable=False, index=True
    )
    application_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("applications.id", ondelete="CASCADE"), nullable=False
    )

    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    scheduled_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    duration: Mapped[int] = mapped_column(Integer, nullable=False, default=60)  # minutes
    meeting_url: Mapped[str | None] = mapped_column(String(1024))
    status: Mapped[InterviewStatus] = mapped_column(
        SQLEnum(InterviewStatus, native_enum=False, length=20),
        nullable=False,
        default=InterviewStatus.SCHEDULED,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )

    company: Mapped["Company"] = relationship("Company")
    job_seeker: Mapped["JobSeeker"] = relationship("JobSeeker")
    application: Mapped["Application"] = relationship("Application", back_populates="interviews")

    __table_args__ = (Index("idx_interview_company_scheduled", "company_id", "scheduled_at"),)
