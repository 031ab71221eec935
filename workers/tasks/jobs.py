"""Scheduled job maintenance tasks."""

import logging
from typing import Optional

import httpx
from celery import Task

from core.config import settings
from workers.celery_app import celery_app

logger = logging.getLogger(__name__)

SWEEP_PATH = "/cron/update-job-status"


def sweep_url(base_url: Optional[str] = None) -> str:
    base = (base_url or settings.api_base_url).rstrip("/")
    return f"{base}{settings.api_v1_prefix}{SWEEP_PATH}"


@celery_app.task(name="workers.tasks.jobs.trigger_job_status_sweep", bind=True)
def trigger_job_status_sweep(self: Task, base_url: Optional[str] = None) -> dict:
    """Ask the API to close ACTIVE jobs whose application deadline has passed.

    Args:
        base_url: API base URL, defaults to API_BASE_URL

    Returns:
        Dictionary with the sweep status and the number of jobs closed
    """
    if not settings.cron_secret:
        logger.warning("CRON_SECRET is not configured; skipping job status sweep")
        return {"status": "skipped", "reason": "CRON_SECRET not configured"}

    url = sweep_url(base_url)
    try:
        with httpx.Client(timeout=30.0) as client:
            response = client.post(
                url,
                headers={"Authorization": f"Bearer {settings.cron_secret}"},
            )
    except httpx.TransportError as e:
        logger.error(f"Job status sweep request to {url} failed: {e}")
        # Retry with exponential backoff
        raise self.retry(
            exc=e,
            countdown=2 ** self.request.retries * 60,
            max_retries=3,
        )

    # Status errors are raised as-is, only transport failures retry
    response.raise_for_status()

    updated = response.json().get("updatedJobs", 0)
    logger.info(f"Job status sweep closed {updated} jobs")
    return {"status": "success", "updated_jobs": updated}
