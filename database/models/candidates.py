"""
Candidate Models

Job seekers and their public profile: skills, work experience and
education. A job seeker profile extends exactly one User with the
JOB_SEEKER role and is created lazily the first time it is fetched.
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
from datetime import datetime
from enum import Enum as PyEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from database.models.users import User
    from database.models.applications import Application


# ==================== Candidate Enums ===================== #
class ExperienceLevel(str, PyEnum):
    ENTRY = "ENTRY"
    JUNIOR = "JUNIOR"
    MID = "MID"
    SENIOR = "SENIOR"
    LEAD = "LEAD"
    EXECUTIVE = "EXECUTIVE"


class Availability(str, PyEnum):
    """How open a job seeker is to new opportunities."""

    OPEN = "OPEN"
    ACTIVELY_SEARCHING = "ACTIVELY_SEARCHING"
    NOT_LOOKING = "NOT_LOOKING"  # hidden from candidate search


class ProfileVisibility(str, PyEnum):
    PUBLIC = "PUBLIC"
    PRIVATE = "PRIVATE"


class RemotePreference(str, PyEnum):
    REMOTE = "REMOTE"
    ONSITE = "ONSITE"
    HYBRID = "HYBRID"


class SkillLevel(str, PyEnum):
    BEGINNER = "BEGINNER"
    INTERMEDIATE = "INTERMEDIATE"
    ADVANCED = "ADVANCED"
    EXPERT = "EXPERT"


# ==================== Skill Model ===================== #
class Skill(Base):
    """Skill vocabulary shared by job postings and job seekers."""

    __tablename__ = "skills"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False, index=True)


# ==================== Job Seeker Model ===================== #
class JobSeeker(Base):
    """Job seeker profile, 1:1 with a JOB_SEEKER user."""

    __tablename__ = "job_seekers"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    user_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        unique=True,
        nullable=False,
    )

    # Profile
    title: Mapped[str | None] = mapped_column(String(255))
    bio: Mapped[str | None] = mapped_column(Text)
    location: Mapped[str | None] = mapped_column(String(255))
    website: Mapped[str | None] = mapped_column(String(1024))
    phone: Mapped[str | None] = mapped_column(String(50))
    resume_url: Mapped[str | None] = mapped_column(String(1024))

    # Preferences
    salary_min: Mapped[int | None] = mapped_column(Integer)
    salary_max: Mapped[int | None] = mapped_column(Integer)
    experience_level: Mapped[ExperienceLevel | None] = mapped_column(
        SQLEnum(ExperienceLevel, native_enum=False, length=20)
    )
    availability: Mapped[Availability] = mapped_column(
        SQLEnum(Availability, native_enum=False, length=30),
        nullable=False,
        default=Availability.OPEN,
    )
    notice_period: Mapped[str | None] = mapped_column(String(100))
    remote_preference: Mapped[RemotePreference | None] = mapped_column(
        SQLEnum(RemotePreference, native_enum=False, length=20)
    )
    profile_visibility: Mapped[ProfileVisibility] = mapped_column(
        SQLEnum(ProfileVisibility, native_enum=False, length=20),
        nullable=False,
        default=ProfileVisibility.PUBLIC,
    )

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )

    # Relationships
    user: Mapped["User"] = relationship("User")
    skills: Mapped[list["JobSeekerSkill"]] = relationship(
        "JobSeekerSkill", back_populates="job_seeker", cascade="all, delete-orphan"
    )
    experiences: Mapped[list["Experience"]] = relationship(
        "Experience",
        back_populates="job_seeker",
        cascade="all, delete-orphan",
        order_by="desc(Experience.start_date)",
    )
    educations: Mapped[list["Education"]] = relationship(
        "Education",
        back_populates="job_seeker",
        cascade="all, delete-orphan",
        order_by="desc(Education.end_date)",
    )
    applications: Mapped[list["Application"]] = relationship(
        "Application", back_populates="job_seeker", cascade="all, delete-orphan"
    )

    __table_args__ = (
        Index("idx_job_seeker_search", "profile_visibility", "availability"),
        Index("idx_job_seeker_updated_at", "updated_at"),
    )


class JobSeekerSkill(Base):
    """Skill claimed by a job seeker, with a self-assessed level."""

    __tablename__ = "job_seeker_skills"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    job_seeker_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("job_seekers.id", ondelete="CASCADE"), nullable=False, index=True
    )
    skill_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("skills.id", ondelete="CASCADE"), nullable=False
    )
    level: Mapped[SkillLevel | None] = mapped_column(
        SQLEnum(SkillLevel, native_enum=False, length=20)
    )

    job_seeker: Mapped["JobSeeker"] = relationship("JobSeeker", back_populates="skills")
    skill: Mapped["Skill"] = relationship("Skill", lazy="joined")

    __table_args__ = (
        UniqueConstraint("job_seeker_id", "skill_id", name="uq_job_seeker_skill"),
    )


# ==================== Experience & Education ===================== #
class Experience(Base):
    """Work history entry."""

    __tablename__ = "experiences"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    job_seeker_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("job_seekers.id", ondelete="CASCADE"), nullable=False, index=True
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    company: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    start_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    end_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    current: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    job_seeker: Mapped["JobSeeker"] = relationship("JobSeeker", back_populates="experiences")


class Education(Base):
    """Education history entry."""

    __tablename__ = "educations"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    job_seeker_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("job_seekers.id", ondelete="CASCADE"), nullable=False, index=True
    )
    institution: Mapped[str] = mapped_column(String(255), nullable=False)
    degree: Mapped[str] = mapped_column(String(255), nullable=False)
    field: Mapped[str | None] = mapped_column(String(255))
    start_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    end_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    current: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    job_seeker: Mapped["JobSeeker"] = relationship("JobSeeker", back_populates="educations")
