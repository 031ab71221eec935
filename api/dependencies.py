"""FastAPI dependencies for identity, role gating and scheduler auth."""

from typing import Callable, Optional

from fastapi import Depends, Request

from core.config import settings
from core.exceptions import AuthenticationRequired, PermissionDenied
from core.middleware.authentication import get_request_identity
from core.security import Identity, verify_cron_secret
from database.models.users import UserRole


async def get_identity(request: Request) -> Optional[Identity]:
    """
    Get the caller identity decoded by IdentityMiddleware.
    This is optional - returns None for anonymous calls.
    """
    return get_request_identity(request)


async def require_identity(
    identity: Optional[Identity] = Depends(get_identity),
) -> Identity:
    """Require a verified session."""
    if identity is None:
        raise AuthenticationRequired()
    return identity


def require_role(role: UserRole) -> Callable:
    """
    Build a dependency that requires a session with the given role.

    Usage:
        @router.get("/dashboard")
        async def dashboard(identity: Identity = Depends(require_role(UserRole.COMPANY))):
            ...
    """

    async def role_checker(identity: Identity = Depends(require_identity)) -> Identity:
        if identity.role != role:
            raise PermissionDenied(f"This action requires the {role.value} role")
        return identity

    return role_checker


require_company = require_role(UserRole.COMPANY)
require_job_seeker = require_role(UserRole.JOB_SEEKER)


async def require_cron_secret(request: Request) -> None:
    """Accept only scheduler calls carrying ``Bearer <CRON_SECRET>``."""
    if not verify_cron_secret(request.headers.get("authorization"), settings.cron_secret):
        raise AuthenticationRequired("Invalid or missing scheduler credentials")
