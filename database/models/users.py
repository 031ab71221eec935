"""
Users Module

Identity records owned by the external identity provider. The marketplace
only reads them, apart from the display fields a job seeker edits on their
profile.
"""

from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, DateTime, Enum as SQLEnum
from database.engine import Base
from database.models.base import generate_uuid, utcnow
from datetime import datetime
from enum import Enum as PyEnum


# ==================== User Role ===================== #
class UserRole(str, PyEnum):
    JOB_SEEKER = "JOB_SEEKER"  # browses and applies to jobs
    COMPANY = "COMPANY"  # posts jobs and reviews applicants


class User(Base):
    """Core user identity. Role is fixed at sign-up."""

    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=generate_uuid)
    name: Mapped[str | None] = mapped_column(String(255))
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    image: Mapped[str | None] = mapped_column(String(1024))
    role: Mapped[UserRole] = mapped_column(
        SQLEnum(UserRole, native_enum=False, length=20),
        nullable=False,
    )

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow
    )
