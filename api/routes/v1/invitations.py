"""
Invitation endpoints.

Companies invite job seekers to apply to their ACTIVE jobs; job seekers
accept or decline once.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import require_company, require_job_seeker
from api.schemas.applications import (
    ApplicationResponse,
    InvitationCreate,
    InvitationDecisionResponse,
    InvitationRespond,
    InvitationResponse,
    InvitedJob,
    JobSeekerInvitationResponse,
)
from api.services import invitations as invitation_service
from api.services.profiles import get_or_create_company
from core.exceptions import InvalidInput
from core.security import Identity
from database.engine import get_db

router = APIRouter(prefix="/invitations", tags=["Invitations"])


@router.get(
    "",
    response_model=list[InvitedJob],
    summary="List Invited Jobs",
    description="Job ids of the calling company the job seeker was already invited to.",
)
async def list_invited_jobs(
    job_seeker_id: Optional[str] = Query(
        None, alias="jobSeekerId", description="Job seeker profile id"
    ),
    identity: Identity = Depends(require_company),
    db: AsyncSession = Depends(get_db),
):
    if not job_seeker_id:
        raise InvalidInput("jobSeekerId is required")
    company = await get_or_create_company(db, identity)
    job_ids = await invitation_service.list_invited_job_ids(db, company, job_seeker_id)
    return [InvitedJob(job_id=job_id) for job_id in job_ids]


@router.post(
    "",
    response_model=InvitationResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Invite Job Seeker",
)
async def create_invitation(
    body: InvitationCreate,
    identity: Identity = Depends(require_company),
    db: AsyncSession = Depends(get_db),
):
    """Invite a job seeker to one of the company's ACTIVE jobs."""
    company = await get_or_create_company(db, identity)
    return await invitation_service.create_invitation(db, company, body)


@router.get(
    "/job-seeker",
    response_model=list[JobSeekerInvitationResponse],
    summary="List My Pending Invitations",
)
async def list_my_invitations(
    identity: Identity = Depends(require_job_seeker),
    db: AsyncSession = Depends(get_db),
):
    return await invitation_service.list_pending_invitations(db, identity)


@router.put(
    "/job-seeker",
    response_model=InvitationDecisionResponse,
    summary="Respond To Invitation",
    description="Accept (which opens an application in REVIEWING) or decline a pending invitation.",
)
async def respond_to_invitation(
    body: InvitationRespond,
    identity: Identity = Depends(require_job_seeker),
    db: AsyncSession = Depends(get_db),
):
    invitation, application = await invitation_service.respond_to_invitation(db, identity, body)
    return InvitationDecisionResponse(
        invitation=InvitationResponse.model_validate(invitation),
        application=ApplicationResponse.model_validate(application) if application else None,
    )
