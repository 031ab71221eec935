"""
Candidate search endpoints.

Companies browse public job seeker profiles that are open to work.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import require_company
from api.schemas.candidates import CandidateSearchParams
from api.schemas.profiles import CandidateResponse
from api.services import candidates as candidate_service
from core.security import Identity
from database.engine import get_db

router = APIRouter(prefix="/candidates", tags=["Candidates"])


@router.get(
    "",
    response_model=list[CandidateResponse],
    summary="Search Candidates",
    description=(
        "Public job seekers who are open to work, filtered by free text, skills, "
        "location, experience level and availability. At most 20 results."
    ),
)
async def search_candidates(
    search: Optional[str] = Query(None, description="Matches title, name, location or a skill"),
    skills: Optional[str] = Query(None, description="Comma separated skill names (any match)"),
    location: Optional[str] = Query(None),
    experience_level: Optional[str] = Query(None, alias="experienceLevel"),
    availability: Optional[str] = Query(None, description="Availability, or 'all'"),
    identity: Identity = Depends(require_company),
    db: AsyncSession = Depends(get_db),
):
    params = CandidateSearchParams(
        search=search,
        skills=skills,
        location=location,
        experience_level=experience_level,
        availability=availability,
    )
    return await candidate_service.search_candidates(db, params)
