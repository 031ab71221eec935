"""
Unit of work over an AsyncSession.

Writes made inside the block are committed together when it exits cleanly
and rolled back together when it raises.
"""

import logging
from types import TracebackType
from typing import Optional, Type

from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)


class UnitOfWork:
    """
    Commit/rollback boundary for handlers with dependent writes.

    Usage:
        async with UnitOfWork(session) as uow:
            uow.session.add(invitation)
            uow.session.add(application)
    """

    def __init__(self, session: AsyncSession):
        self.session = session
        self.committed = False

    async def __aenter__(self) -> "UnitOfWork":
        return self

    async def __aexit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        if exc_type is not None:
            await self.rollback()
            return
        try:
            await self.commit()
        except Exception:
            # A failed commit leaves the session unusable until rolled back
            await self.rollback()
            raise

    async def flush(self) -> None:
        """Send pending writes so generated keys and constraints surface early."""
        await self.session.flush()

    async def commit(self) -> None:
        await self.session.commit()
        self.committed = True

    async def rollback(self) -> None:
        logger.debug("Rolling back unit of work")
        await self.session.rollback()
