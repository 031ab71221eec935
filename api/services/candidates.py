"""Candidate search for companies."""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from api.schemas.candidates import CandidateSearchParams
from api.services.queries import build_candidate_query, candidate_statement
from database.models.candidates import JobSeeker

logger = logging.getLogger(__name__)


async def search_candidates(db: AsyncSession, params: CandidateSearchParams) -> list[JobSeeker]:
    """
    Public job seekers open to work that match the filters, most recently
    updated first.
    """
    query = build_candidate_query(params)
    result = await db.execute(candidate_statement(query))
    candidates = list(result.scalars().all())
    logger.debug(f"Candidate search {query} returned {len(candidates)} results")
    return candidates
