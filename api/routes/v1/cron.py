"""Scheduler-triggered maintenance endpoints."""

import logging

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import require_cron_secret
from api.schemas.jobs import SweepResponse
from api.services import jobs as job_service
from database.engine import get_db

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/cron", tags=["Cron"])


@router.post(
    "/update-job-status",
    response_model=SweepResponse,
    summary="Close Expired Jobs",
    description="Close every ACTIVE job whose application deadline is before today (UTC).",
    dependencies=[Depends(require_cron_secret)],
)
async def update_job_status(db: AsyncSession = Depends(get_db)):
    updated = await job_service.sweep_expired_jobs(db)
    logger.info(f"Job status sweep closed {updated} jobs")
    return SweepResponse(success=True, updated_jobs=updated)
