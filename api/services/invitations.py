"""
Invitation service functions.

A company invites a job seeker to one of its ACTIVE jobs. The seeker
answers once: PENDING moves to ACCEPTED or DECLINED and stays there.
Accepting also opens an application in REVIEWING, in the same unit of work
as the status change.
"""

import logging
from typing import Optional

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from api.schemas.applications import InvitationCreate, InvitationRespond
from api.services import notifications
from api.services.profiles import get_or_create_job_seeker, require_job_seeker_profile
from core.exceptions import DuplicateAction, ResourceNotFound
from core.security import Identity
from core.utils.datetime import now as utc_now
from database.models.applications import (
    Application,
    ApplicationStatus,
    InvitationStatus,
    JobInvitation,
)
from database.models.jobs import Job, JobStatus
from database.models.organizations import Company
from database.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)


async def list_invited_job_ids(
    db: AsyncSession, company: Company, job_seeker_id: str
) -> list[str]:
    """Jobs of this company the seeker has already been invited to."""
    result = await db.execute(
        select(JobInvitation.job_id).where(
            JobInvitation.company_id == company.id,
            JobInvitation.job_seeker_id == job_seeker_id,
        )
    )
    return list(result.scalars().all())


async def create_invitation(
    db: AsyncSession, company: Company, data: InvitationCreate
) -> JobInvitation:
    """
    Invite a job seeker to an ACTIVE job owned by the company.

    Raises:
        ResourceNotFound: Job is not the company's or not ACTIVE, or the seeker is unknown
        DuplicateAction: The seeker was already invited to this job
    """
    result = await db.execute(
        select(Job).where(
            Job.id == data.job_id,
            Job.company_id == company.id,
            Job.status == JobStatus.ACTIVE,
        )
    )
    job = result.scalar_one_or_none()
    if job is None:
        raise ResourceNotFound("Active job not found")

    job_seeker = await require_job_seeker_profile(db, data.job_seeker_id)

    existing = await db.execute(
        select(JobInvitation.id).where(
            JobInvitation.job_seeker_id == job_seeker.id,
            JobInvitation.job_id == job.id,
        )
    )
    if existing.scalar_one_or_none():
        raise DuplicateAction("An invitation for this job has already been sent to this candidate.")

    invitation = JobInvitation(
        company_id=company.id,
        job_id=job.id,
        job_seeker_id=job_seeker.id,
        message=data.message,
        status=InvitationStatus.PENDING,
    )
    try:
        async with UnitOfWork(db):
            db.add(invitation)
    except IntegrityError:
        raise DuplicateAction("An invitation for this job has already been sent to this candidate.")

    logger.info(f"Company {company.id} invited job seeker {job_seeker.id} to job {job.id}")

    await notifications.deliver(
        db, notifications.invitation_notice(job_seeker.user_id, job.title)
    )
    return invitation


async def list_pending_invitations(db: AsyncSession, identity: Identity) -> list[JobInvitation]:
    job_seeker = await get_or_create_job_seeker(db, identity)
    result = await db.execute(
        select(JobInvitation)
        .where(
            JobInvitation.job_seeker_id == job_seeker.id,
            JobInvitation.status == InvitationStatus.PENDING,
        )
        .options(
            selectinload(JobInvitation.job).options(
                selectinload(Job.company), selectinload(Job.skills)
            ),
            selectinload(JobInvitation.company),
        )
        .order_by(JobInvitation.created_at.desc())
    )
    return list(result.scalars().all())


async def respond_to_invitation(
    db: AsyncSession, identity: Identity, data: InvitationRespond
) -> tuple[JobInvitation, Optional[Application]]:
    """
    Accept or decline a pending invitation.

    Returns:
        The updated invitation and, when accepted, the new application

    Raises:
        ResourceNotFound: No PENDING invitation with this id for the caller
        DuplicateAction: Accepting while an application for the job already exists
    """
    job_seeker = await get_or_create_job_seeker(db, identity)
    # Still readable after a rollback expires the profile
    job_seeker_id = job_seeker.id
    application: Optional[Application] = None

    try:
        async with UnitOfWork(db) as uow:
            # Only one response can move the row off PENDING
            claimed = await db.execute(
                update(JobInvitation)
                .where(
                    JobInvitation.id == data.invitation_id,
                    JobInvitation.job_seeker_id == job_seeker_id,
                    JobInvitation.status == InvitationStatus.PENDING,
                )
                .values(status=data.status, updated_at=utc_now())
                .execution_options(synchronize_session=False)
            )
            if claimed.rowcount == 0:
                raise ResourceNotFound("Invitation not found or already actioned")

            result = await db.execute(
                select(JobInvitation)
                .where(JobInvitation.id == data.invitation_id)
                .execution_options(populate_existing=True)
            )
            invitation = result.scalar_one()
            if data.status == InvitationStatus.ACCEPTED:
                application = Application(
                    job_seeker_id=invitation.job_seeker_id,
                    job_id=invitation.job_id,
                    company_id=invitation.company_id,
                    status=ApplicationStatus.REVIEWING,
                )
                db.add(application)
            await uow.flush()
    except IntegrityError:
        logger.info(
            f"Invitation {data.invitation_id} accept rejected: job seeker {job_seeker_id} already applied"
        )
        raise DuplicateAction("You have already applied for this job.")

    logger.info(f"Invitation {invitation.id} {data.status.value.lower()} by job seeker {job_seeker_id}")
    return invitation, application
