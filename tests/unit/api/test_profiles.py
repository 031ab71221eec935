"""Tests for lazy profile creation when the insert hits a constraint."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import IntegrityError

from api.services.profiles import get_or_create_company, get_or_create_job_seeker
from core.security import Identity
from database.models.users import UserRole


def lookup(found):
    result = MagicMock()
    result.scalar_one_or_none.return_value = found
    return result


@pytest.fixture
def session():
    session = MagicMock()
    session.execute = AsyncMock()
    session.commit = AsyncMock(
        side_effect=IntegrityError("INSERT", {}, Exception("constraint failed"))
    )
    session.rollback = AsyncMock()
    return session


class TestGetOrCreateCompany:
    identity = Identity(user_id="user-1", role=UserRole.COMPANY, name="Acme")

    async def test_concurrent_create_returns_existing(self, session):
        existing = MagicMock(name="company")
        session.execute.side_effect = [lookup(None), lookup(existing)]

        company = await get_or_create_company(session, self.identity)

        assert company is existing
        session.rollback.assert_awaited_once()

    async def test_other_constraint_failure_is_raised(self, session):
        session.execute.side_effect = [lookup(None), lookup(None)]

        with pytest.raises(IntegrityError):
            await get_or_create_company(session, self.identity)

        session.rollback.assert_awaited_once()


class TestGetOrCreateJobSeeker:
    identity = Identity(user_id="user-2", role=UserRole.JOB_SEEKER, name="Jane Doe")

    async def test_concurrent_create_returns_existing(self, session):
        existing = MagicMock(name="job_seeker")
        session.execute.side_effect = [lookup(None), lookup(existing)]

        job_seeker = await get_or_create_job_seeker(session, self.identity)

        assert job_seeker is existing

    async def test_other_constraint_failure_is_raised(self, session):
        session.execute.side_effect = [lookup(None), lookup(None)]

        with pytest.raises(IntegrityError):
            await get_or_create_job_seeker(session, self.identity)
