"""Interview service functions."""

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from api.schemas.applications import InterviewCreate, InterviewReschedule, InterviewWrite
from api.services import notifications
from api.services.profiles import get_or_create_job_seeker
from core.exceptions import ResourceNotFound
from core.security import Identity
from core.utils.datetime import ensure_utc
from database.models.applications import (
    Application,
    ApplicationStatus,
    Interview,
    InterviewStatus,
)
from database.models.candidates import JobSeeker
from database.models.organizations import Company
from database.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


def _interview_fields(data: InterviewWrite) -> dict:
    return {
        "title": data.title,
        "description": data.description,
        "scheduled_at": ensure_utc(data.scheduled_at),
        "duration": data.duration,
        "meeting_url": data.meeting_url,
    }


def _company_interview_stmt(company: Company):
    return (
        select(Interview)
        .where(Interview.company_id == company.id)
        .options(
            selectinload(Interview.job_seeker).selectinload(JobSeeker.user),
            selectinload(Interview.application).selectinload(Application.job),
        )
    )


async def list_company_interviews(db: AsyncSession, company: Company) -> list[Interview]:
    result = await db.execute(
        _company_interview_stmt(company).order_by(Interview.scheduled_at.desc())
    )
    return list(result.scalars().all())


async def list_job_seeker_interviews(db: AsyncSession, identity: Identity) -> list[Interview]:
    """The caller's interviews, soonest first."""
    job_seeker = await get_or_create_job_seeker(db, identity)
    result = await db.execute(
        select(Interview)
        .where(Interview.job_seeker_id == job_seeker.id)
        .options(
            selectinload(Interview.company),
            selectinload(Interview.application).selectinload(Application.job),
        )
        .order_by(Interview.scheduled_at.asc())
    )
    return list(result.scalars().all())


async def _reload(db: AsyncSession, company: Company, interview_id: str) -> Interview:
    result = await db.execute(
        _company_interview_stmt(company)
        .where(Interview.id == interview_id)
        .execution_options(populate_existing=True)
    )
    return result.scalar_one()


async def schedule_interview(
    db: AsyncSession, company: Company, data: InterviewCreate
) -> Interview:
    """
    Schedule an interview on one of the company's applications.

    The application moves to INTERVIEW in the same unit of work, then the
    applicant is notified.
    """
    async with UnitOfWork(db) as uow:
        result = await db.execute(
            select(Application)
            .where(Application.id == data.application_id, Application.company_id == company.id)
            .options(selectinload(Application.job_seeker))
        )
        application = result.scalar_one_or_none()
        if application is None:
            raise ResourceNotFound("Application not found")

        interview = Interview(
            company_id=company.id,
            job_seeker_id=application.job_seeker_id,
            application_id=application.id,
            status=InterviewStatus.SCHEDULED,
            **_interview_fields(data),
        )
        db.add(interview)
        application.status = ApplicationStatus.INTERVIEW
        await uow.flush()

    logger.info(f"Company {company.id} scheduled interview {interview.id} for application {application.id}")

    await notifications.deliver(
        db,
        notifications.interview_scheduled_notice(application.job_seeker.user_id, interview.title),
    )
    return await _reload(db, company, interview.id)


async def reschedule_interview(
    db: AsyncSession, company: Company, data: InterviewReschedule
) -> Interview:
    result = await db.execute(
        select(Interview)
        .where(Interview.id == data.interview_id, Interview.company_id == company.id)
        .options(selectinload(Interview.job_seeker))
    )
    interview = result.scalar_one_or_none()
    if interview is None:
        raise ResourceNotFound("Interview not found")

    async with UnitOfWork(db):
        for field, value in _interview_fields(data).items():
            setattr(interview, field, value)
        interview.status = InterviewStatus.RESCHEDULED

    logger.info(f"Interview {interview.id} rescheduled to {interview.scheduled_at.isoformat()}")

    await notifications.deliver(
        db,
        notifications.interview_updated_notice(interview.job_seeker.user_id, interview.title),
    )
    return await _reload(db, company, interview.id)
