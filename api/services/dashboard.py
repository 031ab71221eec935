"""Dashboard statistics."""

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from api.schemas.communications import (
    CompanyDashboardResponse,
    DashboardActivity,
    JobSeekerDashboardResponse,
    JobSeekerStats,
)
from api.schemas.profiles import JobSeekerProfileResponse
from api.services.profiles import get_or_create_company, get_or_create_job_seeker
from core.security import Identity
from core.utils.datetime import day_bounds, now as utc_now
from database.models.applications import Application, Interview
from database.models.communications import Message, Notification
from database.models.jobs import Job, JobStatus

logger = logging.getLogger(__name__)

RECENT_ACTIVITY_LIMIT = 5


async def _count(db: AsyncSession, stmt) -> int:
    result = await db.execute(stmt)
    return result.scalar() or 0


async def company_dashboard(
    db: AsyncSession, identity: Identity, now: Optional[datetime] = None
) -> CompanyDashboardResponse:
    """Headline counts for the company dashboard. "Today" is the current UTC day."""
    company = await get_or_create_company(db, identity)
    day_start, day_end = day_bounds(now or utc_now())

    return CompanyDashboardResponse(
        active_jobs=await _count(
            db,
            select(func.count(Job.id)).where(
                Job.company_id == company.id, Job.status == JobStatus.ACTIVE
            ),
        ),
        total_applications=await _count(
            db, select(func.count(Application.id)).where(Application.company_id == company.id)
        ),
        interviews_today=await _count(
            db,
            select(func.count(Interview.id)).where(
                Interview.company_id == company.id,
                Interview.scheduled_at >= day_start,
                Interview.scheduled_at < day_end,
            ),
        ),
        unread_messages=await _count(
            db,
            select(func.count(Message.id)).where(
                Message.receiver_id == identity.user_id, Message.read.is_(False)
            ),
        ),
    )


async def _conversation_partners(db: AsyncSession, user_id: str) -> int:
    """Distinct users the caller has exchanged messages with."""
    result = await db.execute(
        select(Message.sender_id, Message.receiver_id)
        .where((Message.sender_id == user_id) | (Message.receiver_id == user_id))
        .group_by(Message.sender_id, Message.receiver_id)
    )
    partners = {
        receiver if sender == user_id else sender for sender, receiver in result.all()
    }
    return len(partners)


async def job_seeker_dashboard(db: AsyncSession, identity: Identity) -> JobSeekerDashboardResponse:
    job_seeker = await get_or_create_job_seeker(db, identity)

    stats = JobSeekerStats(
        applications=await _count(
            db,
            select(func.count(Application.id)).where(Application.job_seeker_id == job_seeker.id),
        ),
        interview_requests=await _count(
            db,
            select(func.count(Interview.id)).where(Interview.job_seeker_id == job_seeker.id),
        ),
        conversations=await _conversation_partners(db, identity.user_id),
        # Profile views are not tracked
        profile_views=0,
    )

    result = await db.execute(
        select(Notification)
        .where(Notification.user_id == identity.user_id)
        .order_by(Notification.created_at.desc())
        .limit(RECENT_ACTIVITY_LIMIT)
    )
    activities = [DashboardActivity.model_validate(n) for n in result.scalars().all()]

    return JobSeekerDashboardResponse(
        profile=JobSeekerProfileResponse.from_job_seeker(job_seeker),
        stats=stats,
        activities=activities,
    )
