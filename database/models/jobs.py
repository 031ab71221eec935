"""
Job Models

Job postings owned by a company and the skills each posting asks for.
"""

from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy import (
    String,
    Boolean,
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
from database.models.candidates import ExperienceLevel, RemotePreference, SkillLevel
from datetime import datetime
from enum import Enum as PyEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from database.models.organizations import Company
    from database.models.candidates import Skill
    from database.models.applications import Application, JobInvitation


# ==================== Job Enums ===================== #
class JobStatus(str, PyEnum):
    """
    Posting lifecycle. Only ACTIVE jobs are listed publicly and accept
    invitations; the nightly sweep moves expired ACTIVE jobs to CLOSED.
    """

    DRAFT = "DRAFT"
    ACTIVE = "ACTIVE"
    PAUSED = "PAUSED"
    CLOSED = "CLOSED"


class EmploymentType(str, PyEnum):
    FULL_TIME = "FULL_TIME"
    PART_TIME = "PART_TIME"
    CONTRACT = "CONTRACT"
    INTERNSHIP = "INTERNSHIP"


# ==================== Job Model ===================== #
class Job(Base):
    """Job posting."""

    __tablename__ = "jobs"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    company_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("companies.id", ondelete="CASCADE"), nullable=False, index=True
    )

    # Posting
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    location: Mapped[str | None] = mapped_column(String(255))
    department: Mapped[str | None] = mapped_column(String(255))
    employment_type: Mapped[EmploymentType | None] = mapped_column(
        SQLEnum(EmploymentType, native_enum=False, length=20)
    )
    remote_type: Mapped[RemotePreference | None] = mapped_column(
        SQLEnum(RemotePreference, native_enum=False, length=20)
    )
    experience_level: Mapped[ExperienceLevel | None] = mapped_column(
        SQLEnum(ExperienceLevel, native_enum=False, length=20)
    )
    salary_min: Mapped[int | None] = mapped_column(Integer)
    salary_max: Mapped[int | None] = mapped_column(Integer)
    requirements: Mapped[str | None] = mapped_column(Text)
    benefits: Mapped[str | None] = mapped_column(Text)
    application_deadline: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))

    status: Mapped[JobStatus] = mapped_column(
        SQLEnum(JobStatus, native_enum=False, length=20),
        nullable=False,
        default=JobStatus.DRAFT,
    )

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )

    # Relationships
    company: Mapped["Company"] = relationship("Company", back_populates="jobs")
    skills: Mapped[list["JobSkill"]] = relationship(
        "JobSkill", back_populates="job", cascade="all, delete-orphan"
    )
    applications: Mapped[list["Application"]] = relationship(
        "Application", back_populates="job", cascade="all, delete"
    )
    invitations: Mapped[list["JobInvitation"]] = relationship(
        "JobInvitation", back_populates="job", cascade="all, delete"
    )

    __table_args__ = (
        Index("idx_job_status_created", "status", "created_at"),
        Index("idx_job_status_deadline", "status", "application_deadline"),
    )


class JobSkill(Base):
    """Skill requested by a job posting."""

    __tablename__ = "job_skills"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    job_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False, index=True
    )
    skill_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("skills.id", ondelete="CASCADE"), nullable=False
    )
    level: Mapped[SkillLevel | None] = mapped_column(
        SQLEnum(SkillLevel, native_enum=False, length=20)
    )
    required: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    job: Mapped["Job"] = relationship("Job", back_populates="skills")
    skill: Mapped["Skill"] = relationship("Skill", lazy="joined")

    __table_args__ = (UniqueConstraint("job_id", "skill_id", name="uq_job_skill"),)
