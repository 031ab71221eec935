"""
Integration tests for application endpoints.

Tests:
- Applying to ACTIVE jobs, duplicates and ownership checks
- Company status changes and applicant notifications
- Company and job seeker application lists
"""

import asyncio
from datetime import timedelta
from unittest.mock import patch

from sqlalchemy import func, select

from api.services import notifications
from api.services.notifications import NotificationDraft
from core.utils.datetime import now
from database.models.applications import Application, ApplicationStatus
from database.models.communications import Notification, NotificationType
from database.models.jobs import JobStatus
from database.models.users import UserRole
from tests.conftest import API, auth_headers


async def notifications_for(session_factory, user_id: str) -> list[Notification]:
    async with session_factory() as session:
        result = await session.execute(select(Notification).where(Notification.user_id == user_id))
        return list(result.scalars().all())


class TestApply:
    async def test_apply_creates_pending_application(self, client, seed, session_factory):
        company_user, company = await seed.company()
        job = await seed.job(company, title="Data Engineer")
        user, seeker = await seed.job_seeker(name="Jane Doe")

        response = await client.post(
            f"{API}/applications",
            json={"jobId": job.id, "companyId": company.id, "coverLetter": "Hi there"},
            headers=auth_headers(user),
        )

        assert response.status_code == 201
        body = response.json()
        assert body["status"] == "PENDING"
        assert body["jobSeekerId"] == seeker.id
        assert body["companyId"] == company.id
        assert body["coverLetter"] == "Hi there"

        notices = await notifications_for(session_factory, company_user.id)
        assert len(notices) == 1
        assert notices[0].type == NotificationType.NEW_APPLICATION
        assert notices[0].message == "Jane Doe applied for the position: Data Engineer."
        assert body["id"] in notices[0].link

    async def test_duplicate_application_conflicts(self, client, seed, session_factory):
        _, company = await seed.company()
        job = await seed.job(company)
        user, _ = await seed.job_seeker()

        first = await client.post(f"{API}/applications", json={"jobId": job.id}, headers=auth_headers(user))
        second = await client.post(f"{API}/applications", json={"jobId": job.id}, headers=auth_headers(user))

        assert first.status_code == 201
        assert second.status_code == 409
        assert second.json()["error"]["message"] == "You have already applied for this job."
        async with session_factory() as session:
            assert await session.scalar(select(func.count(Application.id))) == 1

    async def test_concurrent_applications_accept_exactly_one(self, client, seed, session_factory):
        _, company = await seed.company()
        job = await seed.job(company)
        user, _ = await seed.job_seeker()

        responses = await asyncio.gather(*[
            client.post(f"{API}/applications", json={"jobId": job.id}, headers=auth_headers(user))
            for _ in range(5)
        ])

        assert sorted(r.status_code for r in responses) == [201, 409, 409, 409, 409]
        async with session_factory() as session:
            assert await session.scalar(select(func.count(Application.id))) == 1

    async def test_failed_notification_keeps_application(self, client, seed, session_factory):
        company_user, company = await seed.company()
        job = await seed.job(company)
        user, seeker = await seed.job_seeker()
        # message is NOT NULL, so this notification cannot be stored
        unwritable = NotificationDraft(
            user_id=company_user.id, type=NotificationType.NEW_APPLICATION, message=None
        )

        with patch.object(notifications, "new_application_notice", return_value=unwritable):
            response = await client.post(
                f"{API}/applications", json={"jobId": job.id}, headers=auth_headers(user)
            )

        assert response.status_code == 201
        assert response.json()["jobSeekerId"] == seeker.id
        assert await notifications_for(session_factory, company_user.id) == []
        async with session_factory() as session:
            stored = await session.get(Application, response.json()["id"])
        assert stored.status == ApplicationStatus.PENDING

    async def test_resume_defaults_to_profile(self, client, seed):
        _, company = await seed.company()
        job = await seed.job(company)
        user, _ = await seed.job_seeker(resume_url="https://cdn.example.com/cv.pdf")

        response = await client.post(f"{API}/applications", json={"jobId": job.id}, headers=auth_headers(user))

        assert response.json()["resumeUrl"] == "https://cdn.example.com/cv.pdf"

    async def test_profile_created_on_first_apply(self, client, seed):
        _, company = await seed.company()
        job = await seed.job(company)
        user = await seed.user(UserRole.JOB_SEEKER, name="New Seeker")

        response = await client.post(f"{API}/applications", json={"jobId": job.id}, headers=auth_headers(user))

        assert response.status_code == 201

    async def test_inactive_job_not_found(self, client, seed):
        _, company = await seed.company()
        job = await seed.job(company, status=JobStatus.DRAFT)
        user, _ = await seed.job_seeker()

        response = await client.post(f"{API}/applications", json={"jobId": job.id}, headers=auth_headers(user))

        assert response.status_code == 404

    async def test_unknown_job_not_found(self, client, seed):
        user, _ = await seed.job_seeker()

        response = await client.post(f"{API}/applications", json={"jobId": "nope"}, headers=auth_headers(user))

        assert response.status_code == 404

    async def test_company_mismatch_rejected(self, client, seed):
        _, company = await seed.company()
        _, other = await seed.company(name="Globex")
        job = await seed.job(company)
        user, _ = await seed.job_seeker()

        response = await client.post(
            f"{API}/applications",
            json={"jobId": job.id, "companyId": other.id},
            headers=auth_headers(user),
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_INPUT"

    async def test_company_cannot_apply(self, client, seed):
        user, company = await seed.company()
        job = await seed.job(company)

        response = await client.post(f"{API}/applications", json={"jobId": job.id}, headers=auth_headers(user))

        assert response.status_code == 403


class TestStatusUpdate:
    async def test_company_moves_application(self, client, seed, session_factory):
        company_user, company = await seed.company()
        job = await seed.job(company, title="QA Lead")
        seeker_user, seeker = await seed.job_seeker()
        application = await seed.application(seeker, company, job)

        response = await client.put(
            f"{API}/applications/{application.id}/status",
            json={"status": "REVIEWING"},
            headers=auth_headers(company_user),
        )

        assert response.status_code == 200
        assert response.json()["status"] == "REVIEWING"
        notices = await notifications_for(session_factory, seeker_user.id)
        assert [n.type for n in notices] == [NotificationType.APPLICATION_STATUS_UPDATE]
        assert notices[0].message == 'Your application for "QA Lead" was updated to reviewing.'

    async def test_failed_notification_keeps_status_change(self, client, seed, session_factory):
        company_user, company = await seed.company()
        job = await seed.job(company)
        seeker_user, seeker = await seed.job_seeker()
        application = await seed.application(seeker, company, job)
        unwritable = NotificationDraft(
            user_id=seeker_user.id, type=NotificationType.APPLICATION_STATUS_UPDATE, message=None
        )

        with patch.object(notifications, "status_update_notice", return_value=unwritable):
            response = await client.put(
                f"{API}/applications/{application.id}/status",
                json={"status": "REJECTED"},
                headers=auth_headers(company_user),
            )

        assert response.status_code == 200
        assert response.json()["status"] == "REJECTED"
        assert await notifications_for(session_factory, seeker_user.id) == []
        async with session_factory() as session:
            stored = await session.get(Application, application.id)
        assert stored.status == ApplicationStatus.REJECTED

    async def test_other_company_not_found(self, client, seed):
        _, company = await seed.company()
        intruder, _ = await seed.company(name="Globex")
        _, seeker = await seed.job_seeker()
        application = await seed.application(seeker, company, await seed.job(company))

        response = await client.put(
            f"{API}/applications/{application.id}/status",
            json={"status": "REJECTED"},
            headers=auth_headers(intruder),
        )

        assert response.status_code == 404

    async def test_unknown_status_rejected(self, client, seed):
        company_user, company = await seed.company()
        _, seeker = await seed.job_seeker()
        application = await seed.application(seeker, company, await seed.job(company))

        response = await client.put(
            f"{API}/applications/{application.id}/status",
            json={"status": "HIRED"},
            headers=auth_headers(company_user),
        )

        assert response.status_code == 400

    async def test_job_seeker_forbidden(self, client, seed):
        _, company = await seed.company()
        seeker_user, seeker = await seed.job_seeker()
        application = await seed.application(seeker, company, await seed.job(company))

        response = await client.put(
            f"{API}/applications/{application.id}/status",
            json={"status": "OFFER"},
            headers=auth_headers(seeker_user),
        )

        assert response.status_code == 403


class TestCompanyApplicationList:
    async def test_newest_first_with_candidate(self, client, seed):
        company_user, company = await seed.company()
        job = await seed.job(company)
        _, ann = await seed.job_seeker(name="Ann")
        _, bob = await seed.job_seeker(name="Bob")
        await seed.application(ann, company, job, created_at=now() - timedelta(hours=2))
        await seed.application(bob, company, job, created_at=now() - timedelta(hours=1))

        response = await client.get(f"{API}/applications/company", headers=auth_headers(company_user))

        assert response.status_code == 200
        assert [a["jobSeeker"]["user"]["name"] for a in response.json()] == ["Bob", "Ann"]
        assert response.json()[0]["job"]["id"] == job.id

    async def test_filters(self, client, seed):
        company_user, company = await seed.company()
        job = await seed.job(company)
        other_job = await seed.job(company, title="Other")
        _, ann = await seed.job_seeker(name="Ann")
        _, bob = await seed.job_seeker(name="Bob")
        await seed.application(ann, company, job, status=ApplicationStatus.REVIEWING)
        await seed.application(bob, company, job)
        await seed.application(bob, company, other_job, status=ApplicationStatus.REVIEWING)

        response = await client.get(
            f"{API}/applications/company",
            params={"jobId": job.id, "status": "REVIEWING"},
            headers=auth_headers(company_user),
        )

        assert [a["jobSeekerId"] for a in response.json()] == [ann.id]

    async def test_limit(self, client, seed):
        company_user, company = await seed.company()
        job = await seed.job(company)
        for name in ("Ann", "Bob", "Cid"):
            _, seeker = await seed.job_seeker(name=name)
            await seed.application(seeker, company, job)

        response = await client.get(
            f"{API}/applications/company", params={"limit": 2}, headers=auth_headers(company_user)
        )

        assert len(response.json()) == 2

    async def test_invalid_status_is_validation_error(self, client, seed):
        company_user, _ = await seed.company()

        response = await client.get(
            f"{API}/applications/company", params={"status": "bogus"}, headers=auth_headers(company_user)
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    async def test_only_own_applications(self, client, seed):
        company_user, _ = await seed.company()
        _, other = await seed.company(name="Globex")
        _, seeker = await seed.job_seeker()
        await seed.application(seeker, other, await seed.job(other))

        response = await client.get(f"{API}/applications/company", headers=auth_headers(company_user))

        assert response.json() == []


class TestApplicationsFromJobSeeker:
    async def test_by_job_seeker_user_id(self, client, seed):
        company_user, company = await seed.company()
        _, other = await seed.company(name="Globex")
        seeker_user, seeker = await seed.job_seeker()
        mine = await seed.application(seeker, company, await seed.job(company))
        await seed.application(seeker, other, await seed.job(other))

        response = await client.get(
            f"{API}/applications",
            params={"jobSeekerId": seeker_user.id},
            headers=auth_headers(company_user),
        )

        assert [a["id"] for a in response.json()] == [mine.id]

    async def test_job_seeker_id_required(self, client, seed):
        company_user, _ = await seed.company()

        response = await client.get(f"{API}/applications", headers=auth_headers(company_user))

        assert response.status_code == 400
        assert response.json()["error"]["message"] == "jobSeekerId is required"


class TestJobSeekerApplicationList:
    async def test_own_applications_with_job_and_company(self, client, seed):
        _, company = await seed.company(logo_url="https://cdn.example.com/acme.png")
        job = await seed.job(company, title="SRE", skills=["Kubernetes"])
        seeker_user, seeker = await seed.job_seeker()
        _, someone_else = await seed.job_seeker(name="Other")
        await seed.application(seeker, company, job)
        await seed.application(someone_else, company, job)

        response = await client.get(f"{API}/applications/job-seeker", headers=auth_headers(seeker_user))

        assert response.status_code == 200
        body = response.json()
        assert len(body) == 1
        assert body[0]["job"]["title"] == "SRE"
        assert body[0]["job"]["company"]["name"] == "Acme Corp"
        assert body[0]["company"]["logoUrl"] == "https://cdn.example.com/acme.png"

    async def test_most_recently_updated_first(self, client, seed):
        _, company = await seed.company()
        seeker_user, seeker = await seed.job_seeker()
        stale = await seed.application(
            seeker, company, await seed.job(company, title="Stale"), updated_at=now() - timedelta(days=3)
        )
        fresh = await seed.application(
            seeker, company, await seed.job(company, title="Fresh"), updated_at=now() - timedelta(days=1)
        )

        response = await client.get(f"{API}/applications/job-seeker", headers=auth_headers(seeker_user))

        assert [a["id"] for a in response.json()] == [fresh.id, stale.id]
