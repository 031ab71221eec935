"""
Application endpoints.

Job seekers apply to ACTIVE jobs; companies review the applications made
to their postings and move them through statuses.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Path, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import require_company, require_job_seeker
from api.schemas.applications import (
    ApplicationCreate,
    ApplicationResponse,
    ApplicationStatusUpdate,
    CompanyApplicationResponse,
    JobSeekerApplicationResponse,
)
from api.schemas.candidates import ApplicationFilterParams
from api.services import applications as application_service
from api.services.profiles import get_or_create_company
from core.exceptions import InvalidInput
from core.security import Identity
from database.engine import get_db

router = APIRouter(prefix="/applications", tags=["Applications"])


@router.get(
    "",
    response_model=list[ApplicationResponse],
    summary="List Applications From A Job Seeker",
    description="Applications the calling company received from one job seeker (by user id).",
)
async def list_for_job_seeker(
    job_seeker_id: Optional[str] = Query(
        None, alias="jobSeekerId", description="User id of the job seeker"
    ),
    identity: Identity = Depends(require_company),
    db: AsyncSession = Depends(get_db),
):
    if not job_seeker_id:
        raise InvalidInput("jobSeekerId is required")
    company = await get_or_create_company(db, identity)
    return await application_service.list_for_job_seeker_user(db, company, job_seeker_id)


@router.post(
    "",
    response_model=ApplicationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Apply To A Job",
)
async def apply(
    body: ApplicationCreate,
    identity: Identity = Depends(require_job_seeker),
    db: AsyncSession = Depends(get_db),
):
    """Create a PENDING application. Applying twice to the same job is a conflict."""
    return await application_service.apply_to_job(db, identity, body)


@router.put(
    "/{application_id}/status",
    response_model=ApplicationResponse,
    summary="Update Application Status",
)
async def update_application_status(
    body: ApplicationStatusUpdate,
    application_id: str = Path(..., description="Application ID"),
    identity: Identity = Depends(require_company),
    db: AsyncSession = Depends(get_db),
):
    """Move an application of the calling company to a new status and notify the applicant."""
    company = await get_or_create_company(db, identity)
    return await application_service.update_status(db, company, application_id, body.status)


@router.get(
    "/company",
    response_model=list[CompanyApplicationResponse],
    summary="List Company Applications",
    description="Applications to the calling company's jobs, newest first.",
)
async def list_company_applications(
    limit: Optional[int] = Query(None, ge=1, le=200),
    application_id: Optional[str] = Query(None, alias="applicationId"),
    job_id: Optional[str] = Query(None, alias="jobId"),
    application_status: Optional[str] = Query(None, alias="status"),
    identity: Identity = Depends(require_company),
    db: AsyncSession = Depends(get_db),
):
    params = ApplicationFilterParams(
        limit=limit,
        application_id=application_id,
        job_id=job_id,
        status=application_status,
    )
    company = await get_or_create_company(db, identity)
    return await application_service.list_company_applications(db, company, params)


@router.get(
    "/job-seeker",
    response_model=list[JobSeekerApplicationResponse],
    summary="List My Applications",
)
async def list_my_applications(
    identity: Identity = Depends(require_job_seeker),
    db: AsyncSession = Depends(get_db),
):
    """The caller's applications, most recently updated first."""
    return await application_service.list_job_seeker_applications(db, identity)
