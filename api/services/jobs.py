"""Job service functions."""

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from api.schemas.jobs import JobWrite
from api.services.matching import MatchResult, compute_match
from api.services.profiles import get_or_create_job_seeker, resolve_skills
from api.services.queries import candidate_load_options
from core.exceptions import ResourceNotFound
from core.security import Identity
from core.utils.datetime import ensure_utc, now as utc_now, start_of_day
from database.models.applications import Application
from database.models.jobs import Job, JobSkill, JobStatus
from database.models.organizations import Company
from database.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


def job_load_options():
    return (selectinload(Job.skills), selectinload(Job.company))


# ==================== Public Listing ===================== #
async def list_active_jobs(db: AsyncSession) -> list[Job]:
    """ACTIVE jobs, newest first, with company and skills."""
    result = await db.execute(
        select(Job)
        .where(Job.status == JobStatus.ACTIVE)
        .options(*job_load_options())
        .order_by(Job.created_at.desc())
    )
    return list(result.scalars().all())


# ==================== Deadline Sweep ===================== #
async def sweep_expired_jobs(
    db: AsyncSession,
    company_id: Optional[str] = None,
    now: Optional[datetime] = None,
) -> int:
    """
    Close ACTIVE jobs whose application deadline fell before today (UTC).

    A deadline of today is still open. Running the sweep twice in a row
    changes nothing the second time.

    Args:
        db: Database session
        company_id: Limit the sweep to one company's jobs
        now: Reference time, defaults to the current UTC time

    Returns:
        Number of jobs closed
    """
    cutoff = start_of_day(now or utc_now())

    stmt = update(Job).where(
        Job.status == JobStatus.ACTIVE,
        Job.application_deadline.is_not(None),
        Job.application_deadline < cutoff,
    )
    if company_id:
        stmt = stmt.where(Job.company_id == company_id)

    async with UnitOfWork(db):
        result = await db.execute(
            stmt.values(status=JobStatus.CLOSED, updated_at=utc_now()).execution_options(
                synchronize_session=False
            )
        )

    if result.rowcount:
        logger.info(f"Closed {result.rowcount} expired jobs (deadline before {cutoff.date()})")
    return result.rowcount


# ==================== Company Jobs ===================== #
async def list_company_jobs(
    db: AsyncSession, company: Company, status: Optional[JobStatus] = None
) -> list[tuple[Job, int]]:
    """
    The company's jobs with their application counts, newest first.

    Expired jobs are closed before reading so the listing never shows a
    stale ACTIVE status.
    """
    await sweep_expired_jobs(db, company_id=company.id)

    application_count = (
        select(func.count(Application.id))
        .where(Application.job_id == Job.id)
        .correlate(Job)
        .scalar_subquery()
    )
    stmt = (
        select(Job, application_count.label("application_count"))
        .where(Job.company_id == company.id)
        .options(selectinload(Job.skills))
        .order_by(Job.created_at.desc())
        .execution_options(populate_existing=True)
    )
    if status is not None:
        stmt = stmt.where(Job.status == status)

    result = await db.execute(stmt)
    return [(job, count or 0) for job, count in result.all()]


async def count_job_applications(db: AsyncSession, job_id: str) -> int:
    result = await db.execute(
        select(func.count(Application.id)).where(Application.job_id == job_id)
    )
    return result.scalar() or 0


async def get_company_job(db: AsyncSession, company: Company, job_id: str) -> Job:
    """Load one of the company's jobs; other companies' jobs are not found."""
    result = await db.execute(
        select(Job)
        .where(Job.id == job_id, Job.company_id == company.id)
        .options(*job_load_options())
        .execution_options(populate_existing=True)
    )
    job = result.scalar_one_or_none()
    if job is None:
        raise ResourceNotFound("Job not found")
    return job


def _apply_job_fields(job: Job, data: JobWrite) -> None:
    fields = data.model_dump(exclude={"skills"})
    if fields["application_deadline"] is not None:
        fields["application_deadline"] = ensure_utc(fields["application_deadline"])
    for field, value in fields.items():
        setattr(job, field, value)


async def _replace_skills(db: AsyncSession, job: Job, data: JobWrite) -> None:
    skills = await resolve_skills(db, (s.name for s in data.skills))
    job.skills.clear()
    await db.flush()

    added: set[str] = set()
    for entry in data.skills:
        key = entry.name.lower()
        if key in added:
            continue
        added.add(key)
        job.skills.append(JobSkill(skill=skills[key], level=entry.level, required=True))


async def create_job(db: AsyncSession, company: Company, data: JobWrite) -> Job:
    job = Job(company_id=company.id, skills=[])
    _apply_job_fields(job, data)

    async with UnitOfWork(db) as uow:
        db.add(job)
        await uow.flush()
        await _replace_skills(db, job, data)

    logger.info(f"Company {company.id} created job {job.id} ({job.status.value})")
    return await get_company_job(db, company, job.id)


async def update_job(db: AsyncSession, company: Company, job_id: str, data: JobWrite) -> Job:
    """Replace every field and the skill list of an owned job."""
    job = await get_company_job(db, company, job_id)

    async with UnitOfWork(db):
        _apply_job_fields(job, data)
        await _replace_skills(db, job, data)

    logger.info(f"Company {company.id} updated job {job.id}")
    return await get_company_job(db, company, job.id)


async def delete_job(db: AsyncSession, company: Company, job_id: str) -> None:
    job = await get_company_job(db, company, job_id)

    async with UnitOfWork(db):
        await db.delete(job)

    logger.info(f"Company {company.id} deleted job {job_id}")


async def update_job_status(
    db: AsyncSession, company: Company, job_id: str, status: JobStatus
) -> Job:
    job = await get_company_job(db, company, job_id)
    previous = job.status

    async with UnitOfWork(db):
        job.status = status

    logger.info(f"Job {job.id} status: {previous.value} -> {status.value}")
    return job


async def list_job_applications(
    db: AsyncSession,
    company: Company,
    job_id: str,
    application_id: Optional[str] = None,
) -> list[Application]:
    """Applications to one of the company's jobs, newest first."""
    await get_company_job(db, company, job_id)

    stmt = (
        select(Application)
        .where(Application.job_id == job_id, Application.company_id == company.id)
        .options(
            selectinload(Application.job),
            selectinload(Application.job_seeker).options(*candidate_load_options()),
        )
        .order_by(Application.created_at.desc())
    )
    if application_id:
        stmt = stmt.where(Application.id == application_id)

    result = await db.execute(stmt)
    return list(result.scalars().all())


# ==================== Match Score ===================== #
async def get_job_match(db: AsyncSession, identity: Identity, job_id: str) -> MatchResult:
    """Score how well the calling job seeker's skills cover a job's required skills."""
    job = await db.get(Job, job_id, options=[selectinload(Job.skills)])
    if job is None:
        raise ResourceNotFound("Job not found")

    job_seeker = await get_or_create_job_seeker(db, identity)
    return compute_match(
        (js.skill.name for js in job.skills if js.required),
        (js.skill.name for js in job_seeker.skills),
    )
