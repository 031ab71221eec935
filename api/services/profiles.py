"""
Profile service functions.

Company and job seeker profiles are created lazily: the first call that
needs the caller's profile creates an empty one.
"""

import logging
from typing import Iterable, Optional

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from api.schemas.profiles import (
    CompanyProfileUpdate,
    EducationEntry,
    ExperienceEntry,
    JobSeekerProfileUpdate,
)
from core.exceptions import ResourceNotFound
from core.security import Identity
from database.models.candidates import Education, Experience, JobSeeker, JobSeekerSkill, Skill
from database.models.organizations import Company
from database.models.users import User
from database.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)

DEFAULT_COMPANY_NAME = "My Company"
NEW_ROW_PREFIX = "new_"


# ==================== Skills ===================== #
async def resolve_skills(db: AsyncSession, names: Iterable[str]) -> dict[str, Skill]:
    """
    Connect-or-create skills by name.

    Lookup is case-insensitive; new skills keep the spelling first given.

    Returns:
        Mapping of lower-cased name to Skill
    """
    wanted: dict[str, str] = {}
    for name in names:
        wanted.setdefault(name.strip().lower(), name.strip())
    if not wanted:
        return {}

    result = await db.execute(select(Skill).where(func.lower(Skill.name).in_(list(wanted))))
    skills = {skill.name.lower(): skill for skill in result.scalars().all()}

    for key, name in wanted.items():
        if key not in skills:
            skill = Skill(name=name)
            db.add(skill)
            skills[key] = skill

    await db.flush()
    return skills


# ==================== Company ===================== #
def _company_stmt(user_id: str):
    return (
        select(Company)
        .where(Company.user_id == user_id)
        .options(selectinload(Company.user))
    )


async def get_or_create_company(db: AsyncSession, identity: Identity) -> Company:
    """Fetch the caller's company profile, creating a basic one if absent."""
    result = await db.execute(_company_stmt(identity.user_id))
    company = result.scalar_one_or_none()
    if company:
        return company

    try:
        async with UnitOfWork(db):
            db.add(Company(user_id=identity.user_id, name=identity.name or DEFAULT_COMPANY_NAME))
        logger.info(f"Created company profile for user {identity.user_id}")
    except IntegrityError:
        result = await db.execute(_company_stmt(identity.user_id))
        company = result.scalar_one_or_none()
        if company is None:
            # Not a concurrent create, e.g. no user row
            raise
        logger.info(f"Company profile for user {identity.user_id} already exists")
        return company

    result = await db.execute(_company_stmt(identity.user_id))
    return result.scalar_one()


async def get_company_by_user(db: AsyncSession, user_id: str) -> Optional[Company]:
    result = await db.execute(_company_stmt(user_id))
    return result.scalar_one_or_none()


async def update_company(
    db: AsyncSession, identity: Identity, data: CompanyProfileUpdate
) -> Company:
    company = await get_or_create_company(db, identity)

    async with UnitOfWork(db):
        for field, value in data.model_dump(exclude_unset=True).items():
            if field == "name" and not value:
                continue
            setattr(company, field, value)

    logger.info(f"Updated company profile {company.id}")
    result = await db.execute(
        _company_stmt(identity.user_id).execution_options(populate_existing=True)
    )
    return result.scalar_one()


# ==================== Job Seeker ===================== #
def _job_seeker_stmt(user_id: str):
    return (
        select(JobSeeker)
        .where(JobSeeker.user_id == user_id)
        .options(
            selectinload(JobSeeker.user),
            selectinload(JobSeeker.skills),
            selectinload(JobSeeker.experiences),
            selectinload(JobSeeker.educations),
        )
    )


async def get_or_create_job_seeker(db: AsyncSession, identity: Identity) -> JobSeeker:
    """Fetch the caller's job seeker profile with skills and history loaded."""
    result = await db.execute(_job_seeker_stmt(identity.user_id))
    job_seeker = result.scalar_one_or_none()
    if job_seeker:
        return job_seeker

    try:
        async with UnitOfWork(db):
            db.add(JobSeeker(user_id=identity.user_id))
        logger.info(f"Created job seeker profile for user {identity.user_id}")
    except IntegrityError:
        result = await db.execute(_job_seeker_stmt(identity.user_id))
        job_seeker = result.scalar_one_or_none()
        if job_seeker is None:
            raise
        logger.info(f"Job seeker profile for user {identity.user_id} already exists")
        return job_seeker

    result = await db.execute(_job_seeker_stmt(identity.user_id))
    return result.scalar_one()


async def get_job_seeker_by_user(db: AsyncSession, user_id: str) -> Optional[JobSeeker]:
    result = await db.execute(_job_seeker_stmt(user_id))
    return result.scalar_one_or_none()


PROFILE_FIELDS = {
    "headline": "title",
    "about": "bio",
    "location": "location",
    "website": "website",
    "phone": "phone",
    "resume_url": "resume_url",
    "salary_min": "salary_min",
    "salary_max": "salary_max",
    "experience_level": "experience_level",
    "availability": "availability",
    "notice_period": "notice_period",
    "remote_preference": "remote_preference",
    "profile_visibility": "profile_visibility",
}

# Columns that must never be set to NULL
NON_NULLABLE_FIELDS = {"availability", "profile_visibility"}


def _is_new_row(entry_id: Optional[str]) -> bool:
    return not entry_id or entry_id.startswith(NEW_ROW_PREFIX)


def _sync_experiences(job_seeker: JobSeeker, entries: list[ExperienceEntry]) -> None:
    existing = {e.id: e for e in job_seeker.experiences}
    kept = {entry.id for entry in entries if not _is_new_row(entry.id) and entry.id in existing}

    for experience in list(job_seeker.experiences):
        if experience.id not in kept:
            job_seeker.experiences.remove(experience)

    for entry in entries:
        values = entry.model_dump(exclude={"id"})
        if entry.id in kept:
            for field, value in values.items():
                setattr(existing[entry.id], field, value)
        else:
            job_seeker.experiences.append(Experience(**values))


def _sync_educations(job_seeker: JobSeeker, entries: list[EducationEntry]) -> None:
    existing = {e.id: e for e in job_seeker.educations}
    kept = {entry.id for entry in entries if not _is_new_row(entry.id) and entry.id in existing}

    for education in list(job_seeker.educations):
        if education.id not in kept:
            job_seeker.educations.remove(education)

    for entry in entries:
        values = entry.model_dump(exclude={"id"})
        if entry.id in kept:
            for field, value in values.items():
                setattr(existing[entry.id], field, value)
        else:
            job_seeker.educations.append(Education(**values))


async def update_job_seeker(
    db: AsyncSession, identity: Identity, data: JobSeekerProfileUpdate
) -> JobSeeker:
    """
    Apply the profile form in one unit of work.

    Updates the display name and avatar on the user, the profile columns,
    and replaces skills, experience and education with the lists sent.
    """
    job_seeker = await get_or_create_job_seeker(db, identity)
    sent = data.model_dump(exclude_unset=True)

    async with UnitOfWork(db) as uow:
        user: User = job_seeker.user
        if "full_name" in sent:
            user.name = data.full_name
        if "avatar" in sent:
            user.image = data.avatar

        for field, column in PROFILE_FIELDS.items():
            if field not in sent:
                continue
            value = getattr(data, field)
            if value is None and column in NON_NULLABLE_FIELDS:
                continue
            setattr(job_seeker, column, value)

        if data.skills is not None:
            skills = await resolve_skills(db, (s.name for s in data.skills))
            job_seeker.skills.clear()
            await uow.flush()
            levels: dict[str, JobSeekerSkill] = {}
            for entry in data.skills:
                key = entry.name.lower()
                if key in levels:
                    continue
                levels[key] = JobSeekerSkill(skill=skills[key], level=entry.level)
            job_seeker.skills.extend(levels.values())

        if data.experience is not None:
            _sync_experiences(job_seeker, data.experience)
        if data.education is not None:
            _sync_educations(job_seeker, data.education)

    logger.info(f"Updated job seeker profile {job_seeker.id}")
    result = await db.execute(
        _job_seeker_stmt(identity.user_id).execution_options(populate_existing=True)
    )
    return result.scalar_one()


async def require_job_seeker_profile(db: AsyncSession, job_seeker_id: str) -> JobSeeker:
    """Look up another user's job seeker profile by profile id."""
    job_seeker = await db.get(JobSeeker, job_seeker_id, options=[selectinload(JobSeeker.user)])
    if job_seeker is None:
        raise ResourceNotFound("Job seeker not found")
    return job_seeker
