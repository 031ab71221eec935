"""Shared fixtures and utilities for tests."""

import os

# Settings are read once at import time, so the test environment must be in
# place before anything from the application is imported.
os.environ["APP_ENV"] = "test"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["JWT_SECRET_KEY"] = "test-jwt-secret-key-min-32-chars-long-for-security"
os.environ["JWT_ALGORITHM"] = "HS256"
os.environ["CRON_SECRET"] = "test-cron-secret"
os.environ["JSON_LOGS"] = "false"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["API_BASE_URL"] = "http://api.test"

from datetime import datetime, timedelta
from typing import Iterable, Optional

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

import database.models  # noqa: F401  registers every table on Base.metadata
from api.main import app
from core.security import Identity, create_session_token
from core.utils.datetime import now
from database.engine import Base, get_db
from database.models.applications import (
    Application,
    ApplicationStatus,
    Interview,
    InterviewStatus,
    InvitationStatus,
    JobInvitation,
)
from database.models.candidates import (
    Availability,
    JobSeeker,
    JobSeekerSkill,
    ProfileVisibility,
    Skill,
)
from database.models.communications import Message, Notification, NotificationType
from database.models.jobs import Job, JobSkill, JobStatus
from database.models.organizations import Company
from database.models.users import User, UserRole

API = "/api/v1"


# ==================== Database ===================== #
@pytest_asyncio.fixture
async def engine(tmp_path):
    """A throwaway SQLite database per test."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_factory):
    """HTTP client bound to the app, with get_db pointed at the test database."""

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


# ==================== Auth ===================== #
def identity_for(user: User) -> Identity:
    return Identity(user_id=user.id, role=user.role, name=user.name, email=user.email)


def auth_headers(user: User) -> dict:
    return {"Authorization": f"Bearer {create_session_token(identity_for(user))}"}


def cron_headers(secret: str = "test-cron-secret") -> dict:
    return {"Authorization": f"Bearer {secret}"}


# ==================== Seed Data ===================== #
class Seeder:
    """Writes fixture rows, each call in its own committed session."""

    def __init__(self, session_factory):
        self.session_factory = session_factory
        self._counter = 0

    def _next(self) -> int:
        self._counter += 1
        return self._counter

    async def _save(self, *objects):
        async with self.session_factory() as session:
            session.add_all(objects)
            await session.commit()
        return objects[0] if len(objects) == 1 else objects

    async def user(self, role: UserRole, name: Optional[str] = None, **fields) -> User:
        n = self._next()
        return await self._save(
            User(
                name=name or f"{role.value.title()} {n}",
                email=fields.pop("email", f"user{n}@example.com"),
                role=role,
                **fields,
            )
        )

    async def company(self, name: str = "Acme Corp", **fields) -> tuple[User, Company]:
        user = await self.user(UserRole.COMPANY, name=f"{name} Recruiter")
        company = await self._save(Company(user_id=user.id, name=name, **fields))
        return user, company

    async def skills(self, names: Iterable[str]) -> list[Skill]:
        names = list(names)
        async with self.session_factory() as session:
            result = await session.execute(select(Skill).where(Skill.name.in_(names)))
            existing = {s.name: s for s in result.scalars().all()}
            for name in names:
                if name not in existing:
                    existing[name] = Skill(name=name)
                    session.add(existing[name])
            await session.commit()
        return [existing[name] for name in names]

    async def job_seeker(
        self,
        name: str = "Jane Doe",
        skills: Iterable[str] = (),
        availability: Availability = Availability.OPEN,
        visibility: ProfileVisibility = ProfileVisibility.PUBLIC,
        **fields,
    ) -> tuple[User, JobSeeker]:
        user = await self.user(UserRole.JOB_SEEKER, name=name)
        job_seeker = JobSeeker(
            user_id=user.id,
            availability=availability,
            profile_visibility=visibility,
            **fields,
        )
        skill_rows = await self.skills(list(skills))
        job_seeker.skills = [JobSeekerSkill(skill_id=s.id) for s in skill_rows]
        await self._save(job_seeker)
        return user, job_seeker

    async def job(
        self,
        company: Company,
        title: str = "Backend Engineer",
        status: JobStatus = JobStatus.ACTIVE,
        skills: Iterable[str] = (),
        optional_skills: Iterable[str] = (),
        **fields,
    ) -> Job:
        job = Job(
            company_id=company.id,
            title=title,
            description=fields.pop("description", f"{title} role"),
            location=fields.pop("location", "Remote"),
            status=status,
            **fields,
        )
        required_rows = await self.skills(list(skills))
        optional_rows = await self.skills(list(optional_skills))
        job.skills = [JobSkill(skill_id=s.id, required=True) for s in required_rows] + [
            JobSkill(skill_id=s.id, required=False) for s in optional_rows
        ]
        return await self._save(job)

    async def application(
        self,
        job_seeker: JobSeeker,
        company: Company,
        job: Optional[Job] = None,
        status: ApplicationStatus = ApplicationStatus.PENDING,
        **fields,
    ) -> Application:
        return await self._save(
            Application(
                job_seeker_id=job_seeker.id,
                company_id=company.id,
                job_id=job.id if job else None,
                status=status,
                **fields,
            )
        )

    async def invitation(
        self,
        company: Company,
        job: Job,
        job_seeker: JobSeeker,
        status: InvitationStatus = InvitationStatus.PENDING,
    ) -> JobInvitation:
        return await self._save(
            JobInvitation(
                company_id=company.id,
                job_id=job.id,
                job_seeker_id=job_seeker.id,
                status=status,
            )
        )

    async def interview(
        self,
        application: Application,
        scheduled_at: Optional[datetime] = None,
        title: str = "Technical interview",
    ) -> Interview:
        return await self._save(
            Interview(
                company_id=application.company_id,
                job_seeker_id=application.job_seeker_id,
                application_id=application.id,
                title=title,
                scheduled_at=scheduled_at or now() + timedelta(days=1),
                duration=60,
                meeting_url="https://meet.example.com/abc",
                status=InterviewStatus.SCHEDULED,
            )
        )

    async def message(
        self,
        application: Application,
        sender: User,
        receiver: User,
        content: str = "Hello",
        read: bool = False,
        created_at: Optional[datetime] = None,
    ) -> Message:
        fields = {"created_at": created_at} if created_at else {}
        return await self._save(
            Message(
                application_id=application.id,
                sender_id=sender.id,
                receiver_id=receiver.id,
                content=content,
                read=read,
                **fields,
            )
        )

    async def notification(
        self,
        user: User,
        type: NotificationType = NotificationType.NEW_MESSAGE,
        link: Optional[str] = None,
        read: bool = False,
        message: str = "Something happened",
        created_at: Optional[datetime] = None,
    ) -> Notification:
        fields = {"created_at": created_at} if created_at else {}
        return await self._save(
            Notification(user_id=user.id, type=type, message=message, link=link, read=read, **fields)
        )


@pytest.fixture
def seed(session_factory) -> Seeder:
    return Seeder(session_factory)
