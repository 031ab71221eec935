"""Integration tests for the expired-job sweep and health endpoints."""

from datetime import timedelta

from sqlalchemy import select

from core.utils.datetime import now, start_of_day
from database.models.jobs import Job, JobStatus
from tests.conftest import API, cron_headers

SWEEP = f"{API}/cron/update-job-status"


async def job_status(session_factory, job_id: str) -> JobStatus:
    async with session_factory() as session:
        return await session.scalar(select(Job.status).where(Job.id == job_id))


class TestExpiredJobSweep:
    async def test_closes_only_expired_active_jobs(self, client, seed, session_factory):
        _, company = await seed.company()
        today = start_of_day(now())
        expired = await seed.job(company, title="Expired", application_deadline=today - timedelta(days=1))
        due_today = await seed.job(company, title="Due today", application_deadline=today)
        future = await seed.job(company, title="Future", application_deadline=today + timedelta(days=3))
        open_ended = await seed.job(company, title="Open ended")
        draft = await seed.job(
            company,
            title="Old draft",
            status=JobStatus.DRAFT,
            application_deadline=today - timedelta(days=10),
        )

        response = await client.post(SWEEP, headers=cron_headers())

        assert response.status_code == 200
        assert response.json() == {"success": True, "updatedJobs": 1}
        assert await job_status(session_factory, expired.id) == JobStatus.CLOSED
        for job in (due_today, future, open_ended):
            assert await job_status(session_factory, job.id) == JobStatus.ACTIVE
        assert await job_status(session_factory, draft.id) == JobStatus.DRAFT

    async def test_second_run_changes_nothing(self, client, seed):
        _, company = await seed.company()
        await seed.job(company, application_deadline=start_of_day(now()) - timedelta(hours=1))

        first = await client.post(SWEEP, headers=cron_headers())
        second = await client.post(SWEEP, headers=cron_headers())

        assert first.json()["updatedJobs"] == 1
        assert second.json()["updatedJobs"] == 0

    async def test_wrong_secret_rejected(self, client, seed, session_factory):
        _, company = await seed.company()
        job = await seed.job(company, application_deadline=now() - timedelta(days=2))

        wrong = await client.post(SWEEP, headers=cron_headers("not-the-secret"))
        missing = await client.post(SWEEP)

        assert wrong.status_code == 401
        assert missing.status_code == 401
        assert await job_status(session_factory, job.id) == JobStatus.ACTIVE


class TestHealth:
    async def test_health(self, client):
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "version": "0.1.0"}

    async def test_ready(self, client):
        response = await client.get("/ready")

        assert response.status_code == 200
        assert response.json() == {"status": "ready"}
