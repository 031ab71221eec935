"""Application service functions."""

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from api.schemas.applications import ApplicationCreate
from api.schemas.candidates import ApplicationFilterParams
from api.services import notifications
from api.services.profiles import get_or_create_job_seeker
from api.services.queries import build_company_application_query, company_application_statement
from core.exceptions import DuplicateAction, InvalidInput, ResourceNotFound
from core.security import Identity
from database.models.applications import Application, ApplicationStatus
from database.models.candidates import JobSeeker
from database.models.jobs import Job, JobStatus
from database.models.organizations import Company
from database.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


async def list_for_job_seeker_user(
    db: AsyncSession, company: Company, job_seeker_user_id: str
) -> list[Application]:
    """The company's applications from one job seeker, identified by user id."""
    result = await db.execute(
        select(Application)
        .join(Application.job_seeker)
        .where(
            Application.company_id == company.id,
            JobSeeker.user_id == job_seeker_user_id,
        )
        .order_by(Application.created_at.desc())
    )
    return list(result.scalars().all())


async def apply_to_job(
    db: AsyncSession, identity: Identity, data: ApplicationCreate
) -> Application:
    """
    Create a PENDING application and notify the hiring company.

    Raises:
        ResourceNotFound: Job does not exist or is not accepting applications
        InvalidInput: companyId does not match the job's company
        DuplicateAction: The seeker already applied to this job
    """
    job_seeker = await get_or_create_job_seeker(db, identity)

    job = await db.get(Job, data.job_id, options=[selectinload(Job.company)])
    if job is None or job.status != JobStatus.ACTIVE:
        raise ResourceNotFound("Job not found")
    if data.company_id and data.company_id != job.company_id:
        raise InvalidInput("companyId does not match the job's company")

    # A rollback expires every loaded instance, so read what we need up front
    job_seeker_id, job_id = job_seeker.id, job.id
    company_user_id, job_title = job.company.user_id, job.title

    application = Application(
        job_seeker_id=job_seeker_id,
        job_id=job_id,
        company_id=job.company_id,
        status=ApplicationStatus.PENDING,
        cover_letter=data.cover_letter,
        resume_url=data.resume_url or job_seeker.resume_url,
    )
    try:
        async with UnitOfWork(db):
            db.add(application)
    except IntegrityError:
        logger.info(f"Duplicate application by job seeker {job_seeker_id} for job {job_id}")
        raise DuplicateAction("You have already applied for this job.")

    logger.info(f"Job seeker {job_seeker_id} applied to job {job_id} ({application.id})")

    await notifications.deliver(
        db,
        notifications.new_application_notice(
            company_user_id=company_user_id,
            applicant_name=identity.name,
            job_title=job_title,
            application_id=application.id,
        ),
    )
    return application


async def update_status(
    db: AsyncSession, company: Company, application_id: str, status: ApplicationStatus
) -> Application:
    """Move an application of the company to a new status and tell the applicant."""
    result = await db.execute(
        select(Application)
        .where(Application.id == application_id, Application.company_id == company.id)
        .options(selectinload(Application.job), selectinload(Application.job_seeker))
    )
    application = result.scalar_one_or_none()
    if application is None:
        raise ResourceNotFound("Application not found")

    previous = application.status
    async with UnitOfWork(db):
        application.status = status

    logger.info(f"Application {application.id} status: {previous.value} -> {status.value}")

    await notifications.deliver(
        db,
        notifications.status_update_notice(
            seeker_user_id=application.job_seeker.user_id,
            job_title=application.job.title if application.job else None,
            status=status,
            application_id=application.id,
        ),
    )
    return application


async def list_company_applications(
    db: AsyncSession, company: Company, params: ApplicationFilterParams
) -> list[Application]:
    query = build_company_application_query(company.id, params)
    result = await db.execute(company_application_statement(query))
    return list(result.scalars().all())


async def list_job_seeker_applications(db: AsyncSession, identity: Identity) -> list[Application]:
    """The caller's applications, most recently updated first."""
    job_seeker = await get_or_create_job_seeker(db, identity)
    result = await db.execute(
        select(Application)
        .where(Application.job_seeker_id == job_seeker.id)
        .options(
            selectinload(Application.job).options(
                selectinload(Job.company), selectinload(Job.skills)
            ),
            selectinload(Application.company),
        )
        .order_by(Application.updated_at.desc())
    )
    return list(result.scalars().all())
