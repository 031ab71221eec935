"""
Job posting endpoints.

Public listing of ACTIVE jobs, per-job match scores for job seekers, and
the company's own job management.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Path, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import require_company, require_job_seeker
from api.schemas.applications import CompanyApplicationResponse
from api.schemas.jobs import (
    CompanyJobResponse,
    JobMatchResponse,
    JobResponse,
    JobStatusUpdate,
    JobWrite,
    PublicJobResponse,
    parse_job_status,
)
from api.services import jobs as job_service
from api.services.profiles import get_or_create_company
from core.exceptions import InvalidInput
from core.security import Identity
from database.engine import get_db
from database.models.jobs import Job

router = APIRouter(prefix="/jobs", tags=["Jobs"])


def company_job_response(job: Job, application_count: int) -> CompanyJobResponse:
    return CompanyJobResponse(
        **JobResponse.model_validate(job).model_dump(),
        application_count=application_count,
    )


@router.get(
    "",
    response_model=list[PublicJobResponse],
    summary="List Open Jobs",
    description="All ACTIVE jobs, newest first, with company and skills.",
)
async def list_jobs(db: AsyncSession = Depends(get_db)):
    return await job_service.list_active_jobs(db)


@router.get(
    "/company",
    response_model=list[CompanyJobResponse],
    summary="List Company Jobs",
    description="The calling company's jobs with application counts. "
    "Expired ACTIVE jobs are closed first.",
)
async def list_company_jobs(
    job_status: Optional[str] = Query(None, alias="status", description="Status, any case"),
    identity: Identity = Depends(require_company),
    db: AsyncSession = Depends(get_db),
):
    status_filter = None
    if job_status:
        try:
            status_filter = parse_job_status(job_status)
        except ValueError as e:
            raise InvalidInput(str(e))

    company = await get_or_create_company(db, identity)
    rows = await job_service.list_company_jobs(db, company, status_filter)
    return [company_job_response(job, count) for job, count in rows]


@router.post(
    "/company",
    response_model=CompanyJobResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create Job",
)
async def create_job(
    body: JobWrite,
    identity: Identity = Depends(require_company),
    db: AsyncSession = Depends(get_db),
):
    """Create a job for the calling company. Status defaults to DRAFT."""
    company = await get_or_create_company(db, identity)
    job = await job_service.create_job(db, company, body)
    return company_job_response(job, 0)


@router.get("/company/{job_id}", response_model=CompanyJobResponse, summary="Get Company Job")
async def get_company_job(
    job_id: str = Path(..., description="Job ID"),
    identity: Identity = Depends(require_company),
    db: AsyncSession = Depends(get_db),
):
    company = await get_or_create_company(db, identity)
    job = await job_service.get_company_job(db, company, job_id)
    count = await job_service.count_job_applications(db, job.id)
    return company_job_response(job, count)


@router.put("/company/{job_id}", response_model=CompanyJobResponse, summary="Replace Job")
async def update_company_job(
    body: JobWrite,
    job_id: str = Path(..., description="Job ID"),
    identity: Identity = Depends(require_company),
    db: AsyncSession = Depends(get_db),
):
    """Replace every field and the skill list of one of the company's jobs."""
    company = await get_or_create_company(db, identity)
    job = await job_service.update_job(db, company, job_id, body)
    count = await job_service.count_job_applications(db, job.id)
    return company_job_response(job, count)


@router.delete(
    "/company/{job_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Job",
)
async def delete_company_job(
    job_id: str = Path(..., description="Job ID"),
    identity: Identity = Depends(require_company),
    db: AsyncSession = Depends(get_db),
):
    company = await get_or_create_company(db, identity)
    await job_service.delete_job(db, company, job_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put(
    "/company/{job_id}/status",
    response_model=CompanyJobResponse,
    summary="Change Job Status",
)
async def update_company_job_status(
    body: JobStatusUpdate,
    job_id: str = Path(..., description="Job ID"),
    identity: Identity = Depends(require_company),
    db: AsyncSession = Depends(get_db),
):
    company = await get_or_create_company(db, identity)
    job = await job_service.update_job_status(db, company, job_id, body.status)
    count = await job_service.count_job_applications(db, job.id)
    return company_job_response(job, count)


@router.get(
    "/company/{job_id}/applications",
    response_model=list[CompanyApplicationResponse],
    summary="List Job Applications",
)
async def list_job_applications(
    job_id: str = Path(..., description="Job ID"),
    application_id: Optional[str] = Query(None, alias="applicationId"),
    identity: Identity = Depends(require_company),
    db: AsyncSession = Depends(get_db),
):
    company = await get_or_create_company(db, identity)
    return await job_service.list_job_applications(db, company, job_id, application_id)


@router.get("/{job_id}/match", response_model=JobMatchResponse, summary="Job Match Score")
async def job_match(
    job_id: str = Path(..., description="Job ID"),
    identity: Identity = Depends(require_job_seeker),
    db: AsyncSession = Depends(get_db),
):
    """
    Percentage of the job's required skills the caller has. Informational
    only; it never blocks applying.
    """
    match = await job_service.get_job_match(db, identity, job_id)
    return JobMatchResponse(
        job_id=job_id,
        score=match.score,
        required_skills=match.required,
        matched_skills=list(match.matched),
        missing_skills=list(match.missing),
    )
