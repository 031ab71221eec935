"""Common Pydantic schemas shared across the API."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from database.models.users import UserRole


class CamelModel(BaseModel):
    """
    Base schema for the public API.

    Fields are written in camelCase on the wire; snake_case is accepted on
    input as well. ORM objects can be validated directly.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


def blank_to_none(value):
    """Treat empty form values as missing."""
    if isinstance(value, str) and not value.strip():
        return None
    return value


class TimestampMixin(CamelModel):
    """Mixin for timestamp fields."""

    created_at: datetime = Field(description="Timestamp when the resource was created")
    updated_at: datetime = Field(description="Timestamp when the resource was last updated")


class UserSummary(CamelModel):
    id: str
    name: Optional[str] = None
    email: Optional[str] = None
    image: Optional[str] = None
    role: Optional[UserRole] = None


class SkillResponse(CamelModel):
    id: str
    name: str


class CompanySummary(CamelModel):
    id: str
    name: str
    logo_url: Optional[str] = None
    location: Optional[str] = None
    industry: Optional[str] = None


class UpdatedCountResponse(CamelModel):
    """Result of a bulk update."""

    success: bool = True
    updated: int = Field(ge=0, description="Number of rows changed")
