"""Dashboard statistics endpoints."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import require_company, require_job_seeker
from api.schemas.communications import CompanyDashboardResponse, JobSeekerDashboardResponse
from api.services import dashboard as dashboard_service
from core.security import Identity
from database.engine import get_db

router = APIRouter(prefix="/dashboard", tags=["Dashboard"])


@router.get("", response_model=CompanyDashboardResponse, summary="Company Dashboard")
async def company_dashboard(
    identity: Identity = Depends(require_company),
    db: AsyncSession = Depends(get_db),
):
    """Active jobs, applications received, today's interviews and unread messages."""
    return await dashboard_service.company_dashboard(db, identity)


@router.get("/job-seeker", response_model=JobSeekerDashboardResponse, summary="Job Seeker Dashboard")
async def job_seeker_dashboard(
    identity: Identity = Depends(require_job_seeker),
    db: AsyncSession = Depends(get_db),
):
    return await dashboard_service.job_seeker_dashboard(db, identity)
