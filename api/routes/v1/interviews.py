"""
Interview endpoints.

Companies schedule and reschedule interviews on their applications; job
seekers see the interviews they are invited to.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import require_company, require_job_seeker
from api.schemas.applications import (
    CompanyInterviewResponse,
    InterviewCreate,
    InterviewReschedule,
    JobSeekerInterviewResponse,
)
from api.services import interviews as interview_service
from api.services.profiles import get_or_create_company
from core.security import Identity
from database.engine import get_db

router = APIRouter(prefix="/interviews", tags=["Interviews"])


@router.get(
    "/job-seeker",
    response_model=list[JobSeekerInterviewResponse],
    summary="List My Interviews",
)
async def list_job_seeker_interviews(
    identity: Identity = Depends(require_job_seeker),
    db: AsyncSession = Depends(get_db),
):
    return await interview_service.list_job_seeker_interviews(db, identity)


@router.get(
    "/company",
    response_model=list[CompanyInterviewResponse],
    summary="List Company Interviews",
)
async def list_company_interviews(
    identity: Identity = Depends(require_company),
    db: AsyncSession = Depends(get_db),
):
    company = await get_or_create_company(db, identity)
    return await interview_service.list_company_interviews(db, company)


@router.post(
    "/company",
    response_model=CompanyInterviewResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Schedule Interview",
    description="Schedule an interview for one of the company's applications. "
    "The application moves to INTERVIEW and the applicant is notified.",
)
async def schedule_interview(
    body: InterviewCreate,
    identity: Identity = Depends(require_company),
    db: AsyncSession = Depends(get_db),
):
    company = await get_or_create_company(db, identity)
    return await interview_service.schedule_interview(db, company, body)


@router.put(
    "/company",
    response_model=CompanyInterviewResponse,
    summary="Reschedule Interview",
)
async def reschedule_interview(
    body: InterviewReschedule,
    identity: Identity = Depends(require_company),
    db: AsyncSession = Depends(get_db),
):
    company = await get_or_create_company(db, identity)
    return await interview_service.reschedule_interview(db, company, body)
