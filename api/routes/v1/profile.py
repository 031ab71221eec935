"""
Profile endpoints.

Profiles are created on first read, so a freshly signed-up user always
gets one back.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import require_company, require_job_seeker
from api.schemas.profiles import (
    CompanyProfileResponse,
    CompanyProfileUpdate,
    JobSeekerProfileResponse,
    JobSeekerProfileUpdate,
)
from api.services import profiles as profile_service
from core.security import Identity
from database.engine import get_db

router = APIRouter(prefix="/profile", tags=["Profile"])


@router.get("/company", response_model=CompanyProfileResponse, summary="Get Company Profile")
async def get_company_profile(
    identity: Identity = Depends(require_company),
    db: AsyncSession = Depends(get_db),
):
    return await profile_service.get_or_create_company(db, identity)


@router.post("/company", response_model=CompanyProfileResponse, summary="Update Company Profile")
async def update_company_profile(
    body: CompanyProfileUpdate,
    identity: Identity = Depends(require_company),
    db: AsyncSession = Depends(get_db),
):
    return await profile_service.update_company(db, identity, body)


@router.get(
    "/job-seeker", response_model=JobSeekerProfileResponse, summary="Get Job Seeker Profile"
)
async def get_job_seeker_profile(
    identity: Identity = Depends(require_job_seeker),
    db: AsyncSession = Depends(get_db),
):
    job_seeker = await profile_service.get_or_create_job_seeker(db, identity)
    return JobSeekerProfileResponse.from_job_seeker(job_seeker)


@router.post(
    "/job-seeker", response_model=JobSeekerProfileResponse, summary="Update Job Seeker Profile"
)
async def update_job_seeker_profile(
    body: JobSeekerProfileUpdate,
    identity: Identity = Depends(require_job_seeker),
    db: AsyncSession = Depends(get_db),
):
    """Update the profile; sent skill, experience and education lists replace the stored ones."""
    job_seeker = await profile_service.update_job_seeker(db, identity, body)
    return JobSeekerProfileResponse.from_job_seeker(job_seeker)
