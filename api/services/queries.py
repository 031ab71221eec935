"""
Query builders.

Filters for candidate search and the company application list are first
captured as frozen dataclasses by pure builder functions, then translated into
SQLAlchemy statements. The builders hold the filtering rules; the
translators only know how to express them in SQL.
"""

from dataclasses import dataclass
from typing import Optional

from sqlalchemy import Select, func, select
from sqlalchemy.orm import selectinload

from api.schemas.candidates import ApplicationFilterParams, CandidateSearchParams
from database.models.applications import Application, ApplicationStatus
from database.models.candidates import (
    Availability,
    ExperienceLevel,
    JobSeeker,
    JobSeekerSkill,
    ProfileVisibility,
    Skill,
)
from database.models.users import User

CANDIDATE_SEARCH_LIMIT = 20


def candidate_load_options():
    """Eager loads needed to render a CandidateResponse."""
    return (
        selectinload(JobSeeker.user),
        selectinload(JobSeeker.skills),
        selectinload(JobSeeker.experiences),
        selectinload(JobSeeker.educations),
    )


# ==================== Candidate Search ===================== #
@dataclass(frozen=True)
class CandidateQuery:
    """
    Candidate search filter.

    ``availability`` of None means "anyone open to work", i.e. everything
    except NOT_LOOKING. Only public profiles are ever returned.
    """

    search: Optional[str] = None
    skill_names: tuple[str, ...] = ()
    location: Optional[str] = None
    experience_level: Optional[ExperienceLevel] = None
    availability: Optional[Availability] = None
    visibility: ProfileVisibility = ProfileVisibility.PUBLIC
    limit: int = CANDIDATE_SEARCH_LIMIT


def build_candidate_query(params: CandidateSearchParams) -> CandidateQuery:
    # Skill names match case-insensitively, so duplicates collapse here
    seen: dict[str, None] = {}
    for name in params.skills:
        seen.setdefault(name.lower())

    return CandidateQuery(
        search=params.search or None,
        skill_names=tuple(seen),
        location=params.location or None,
        experience_level=params.experience_level,
        availability=params.availability,
    )


def candidate_statement(query: CandidateQuery) -> Select:
    stmt = select(JobSeeker).where(JobSeeker.profile_visibility == query.visibility)

    if query.availability is None:
        stmt = stmt.where(JobSeeker.availability != Availability.NOT_LOOKING)
    else:
        stmt = stmt.where(JobSeeker.availability == query.availability)

    if query.location:
        stmt = stmt.where(JobSeeker.location.icontains(query.location, autoescape=True))

    if query.experience_level is not None:
        stmt = stmt.where(JobSeeker.experience_level == query.experience_level)

    if query.search:
        term = query.search
        stmt = stmt.where(
            JobSeeker.title.icontains(term, autoescape=True)
            | JobSeeker.user.has(User.name.icontains(term, autoescape=True))
            | JobSeeker.location.icontains(term, autoescape=True)
            | JobSeeker.skills.any(
                JobSeekerSkill.skill.has(Skill.name.icontains(term, autoescape=True))
            )
        )

    if query.skill_names:
        stmt = stmt.where(
            JobSeeker.skills.any(
                JobSeekerSkill.skill.has(func.lower(Skill.name).in_(query.skill_names))
            )
        )

    return (
        stmt.options(*candidate_load_options())
        .order_by(JobSeeker.updated_at.desc())
        .limit(query.limit)
    )


# ==================== Company Applications ===================== #
@dataclass(frozen=True)
class CompanyApplicationQuery:
    company_id: str
    application_id: Optional[str] = None
    job_id: Optional[str] = None
    status: Optional[ApplicationStatus] = None
    limit: Optional[int] = None


def build_company_application_query(
    company_id: str, params: ApplicationFilterParams
) -> CompanyApplicationQuery:
    return CompanyApplicationQuery(
        company_id=company_id,
        application_id=params.application_id,
        job_id=params.job_id,
        status=params.status,
        limit=params.limit,
    )


def company_application_statement(query: CompanyApplicationQuery) -> Select:
    stmt = select(Application).where(Application.company_id == query.company_id)

    if query.application_id:
        stmt = stmt.where(Application.id == query.application_id)
    if query.job_id:
        stmt = stmt.where(Application.job_id == query.job_id)
    if query.status is not None:
        stmt = stmt.where(Application.status == query.status)

    stmt = stmt.options(
        selectinload(Application.job),
        selectinload(Application.job_seeker).options(*candidate_load_options()),
    ).order_by(Application.created_at.desc())

    if query.limit:
        stmt = stmt.limit(query.limit)
    return stmt
