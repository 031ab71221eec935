"""
Integration tests for profile endpoints.

Tests:
- Company profiles created on first read and partially updated
- Job seeker profile form: user fields, profile fields, skill replacement
- Experience and education rows synced by id
"""

from sqlalchemy import func, select

from core.security import Identity, create_session_token
from database.models.candidates import Education, Experience, JobSeeker, Skill
from database.models.organizations import Company
from database.models.users import UserRole
from tests.conftest import API, auth_headers


class TestCompanyProfile:
    async def test_created_on_first_read(self, client, seed, session_factory):
        user = await seed.user(UserRole.COMPANY, name="Initech")

        first = await client.get(f"{API}/profile/company", headers=auth_headers(user))
        second = await client.get(f"{API}/profile/company", headers=auth_headers(user))

        assert first.status_code == 200
        assert first.json()["name"] == "Initech"
        assert first.json()["user"]["id"] == user.id
        assert second.json()["id"] == first.json()["id"]
        async with session_factory() as session:
            assert await session.scalar(select(func.count(Company.id))) == 1

    async def test_default_name_without_display_name(self, client, seed):
        user = await seed.user(UserRole.COMPANY)
        token = create_session_token(Identity(user_id=user.id, role=UserRole.COMPANY))

        response = await client.get(
            f"{API}/profile/company", headers={"Authorization": f"Bearer {token}"}
        )

        assert response.json()["name"] == "My Company"

    async def test_partial_update(self, client, seed):
        user, _ = await seed.company(industry="Retail")

        response = await client.post(
            f"{API}/profile/company",
            json={"website": "https://acme.example.com", "logoUrl": "https://cdn.example.com/l.png"},
            headers=auth_headers(user),
        )

        assert response.status_code == 200
        body = response.json()
        assert body["name"] == "Acme Corp"
        assert body["industry"] == "Retail"
        assert body["website"] == "https://acme.example.com"
        assert body["logoUrl"] == "https://cdn.example.com/l.png"

    async def test_job_seeker_forbidden(self, client, seed):
        user, _ = await seed.job_seeker()

        response = await client.get(f"{API}/profile/company", headers=auth_headers(user))

        assert response.status_code == 403


class TestJobSeekerProfile:
    async def test_created_on_first_read(self, client, seed):
        user = await seed.user(UserRole.JOB_SEEKER, name="Fresh Grad", email="grad@example.com")

        response = await client.get(f"{API}/profile/job-seeker", headers=auth_headers(user))

        assert response.status_code == 200
        body = response.json()
        assert body["fullName"] == "Fresh Grad"
        assert body["email"] == "grad@example.com"
        assert body["availability"] == "OPEN"
        assert body["profileVisibility"] == "PUBLIC"
        assert body["skills"] == []

    async def test_form_updates_user_and_profile(self, client, seed):
        user, _ = await seed.job_seeker(name="Jane Doe")

        response = await client.post(
            f"{API}/profile/job-seeker",
            json={
                "fullName": "Jane Q. Doe",
                "avatar": "https://cdn.example.com/jane.png",
                "headline": "Staff Engineer",
                "about": "Builds things",
                "salaryMin": "",
                "availability": "ACTIVELY_SEARCHING",
                "remotePreference": "REMOTE",
            },
            headers=auth_headers(user),
        )

        assert response.status_code == 200
        body = response.json()
        assert body["fullName"] == "Jane Q. Doe"
        assert body["avatar"] == "https://cdn.example.com/jane.png"
        assert body["headline"] == "Staff Engineer"
        assert body["about"] == "Builds things"
        assert body["salaryMin"] is None
        assert body["availability"] == "ACTIVELY_SEARCHING"
        assert body["remotePreference"] == "REMOTE"

    async def test_blank_availability_keeps_stored_value(self, client, seed):
        user, _ = await seed.job_seeker()

        response = await client.post(
            f"{API}/profile/job-seeker", json={"availability": ""}, headers=auth_headers(user)
        )

        assert response.json()["availability"] == "OPEN"

    async def test_skills_replaced(self, client, seed, session_factory):
        await seed.skills(["Python"])
        user, _ = await seed.job_seeker(skills=["Go", "Rust"])

        response = await client.post(
            f"{API}/profile/job-seeker",
            json={
                "skills": [
                    {"name": "python", "level": "EXPERT"},
                    {"name": "GraphQL"},
                    {"name": "Python"},
                ]
            },
            headers=auth_headers(user),
        )

        assert response.status_code == 200
        skills = {s["name"]: s["level"] for s in response.json()["skills"]}
        assert skills == {"Python": "EXPERT", "GraphQL": None}
        async with session_factory() as session:
            names = (await session.execute(select(Skill.name))).scalars().all()
        assert sorted(names) == ["Go", "GraphQL", "Python", "Rust"]

    async def test_omitted_lists_untouched(self, client, seed):
        user, _ = await seed.job_seeker(skills=["Go"])

        response = await client.post(
            f"{API}/profile/job-seeker", json={"headline": "Gopher"}, headers=auth_headers(user)
        )

        assert [s["name"] for s in response.json()["skills"]] == ["Go"]

    async def test_company_forbidden(self, client, seed):
        user, _ = await seed.company()

        response = await client.get(f"{API}/profile/job-seeker", headers=auth_headers(user))

        assert response.status_code == 403


class TestHistorySync:
    async def test_experience_rows_created_updated_and_removed(self, client, seed, session_factory):
        user, _ = await seed.job_seeker()
        headers = auth_headers(user)

        created = await client.post(
            f"{API}/profile/job-seeker",
            json={
                "experience": [
                    {"id": "new_1", "title": "Engineer", "company": "Initech", "startDate": "2018-01-01T00:00:00Z"},
                    {"title": "Intern", "company": "Globex", "startDate": "2016-06-01T00:00:00Z", "endDate": ""},
                ]
            },
            headers=headers,
        )
        rows = created.json()["experience"]
        assert [r["title"] for r in rows] == ["Engineer", "Intern"]
        engineer = rows[0]

        synced = await client.post(
            f"{API}/profile/job-seeker",
            json={
                "experience": [
                    {
                        "id": engineer["id"],
                        "title": "Senior Engineer",
                        "company": "Initech",
                        "startDate": "2018-01-01T00:00:00Z",
                        "current": True,
                    },
                    {"id": "new_2", "title": "Lead", "company": "Hooli", "startDate": "2022-03-01T00:00:00Z"},
                ]
            },
            headers=headers,
        )

        assert synced.status_code == 200
        rows = synced.json()["experience"]
        assert [r["title"] for r in rows] == ["Lead", "Senior Engineer"]
        assert rows[1]["id"] == engineer["id"]
        assert rows[1]["current"] is True
        async with session_factory() as session:
            assert await session.scalar(select(func.count(Experience.id))) == 2

    async def test_education_cleared_by_empty_list(self, client, seed, session_factory):
        user, _ = await seed.job_seeker()
        headers = auth_headers(user)
        await client.post(
            f"{API}/profile/job-seeker",
            json={
                "education": [
                    {
                        "institution": "State University",
                        "degree": "BSc",
                        "field": "Computer Science",
                        "startDate": "2012-09-01T00:00:00Z",
                        "endDate": "2016-06-01T00:00:00Z",
                    }
                ]
            },
            headers=headers,
        )

        response = await client.post(
            f"{API}/profile/job-seeker", json={"education": []}, headers=headers
        )

        assert response.json()["education"] == []
        async with session_factory() as session:
            assert await session.scalar(select(func.count(Education.id))) == 0

    async def test_unknown_existing_id_is_created(self, client, seed, session_factory):
        user, _ = await seed.job_seeker()

        response = await client.post(
            f"{API}/profile/job-seeker",
            json={
                "education": [
                    {
                        "id": "someone-elses-row",
                        "institution": "Tech Institute",
                        "degree": "MSc",
                        "startDate": "2017-09-01T00:00:00Z",
                    }
                ]
            },
            headers=auth_headers(user),
        )

        rows = response.json()["education"]
        assert len(rows) == 1
        assert rows[0]["id"] != "someone-elses-row"
        async with session_factory() as session:
            owner = await session.scalar(select(Education.job_seeker_id))
            profile_id = await session.scalar(
                select(JobSeeker.id).where(JobSeeker.user_id == user.id)
            )
        assert owner == profile_id
