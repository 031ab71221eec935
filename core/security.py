"""
Session and shared-secret verification.

Sessions are issued by the external identity provider as HS256 JWTs that
carry the user id, role, display name and email. The API never stores
sessions; it only verifies the signature and turns the claims into an
Identity that is passed explicitly into every service call.
"""

import hmac
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt

from core.config import settings
from database.models.users import UserRole

logger = logging.getLogger(__name__)

BEARER_PREFIX = "bearer "


class InvalidSessionToken(Exception):
    """Raised when a session token cannot be verified."""


@dataclass(frozen=True)
class Identity:
    """Verified caller identity."""

    user_id: str
    role: UserRole
    name: Optional[str] = None
    email: Optional[str] = None

    @property
    def is_company(self) -> bool:
        return self.role == UserRole.COMPANY

    @property
    def is_job_seeker(self) -> bool:
        return self.role == UserRole.JOB_SEEKER


def create_session_token(
    identity: Identity,
    expires_in: timedelta = timedelta(hours=12),
    secret: Optional[str] = None,
) -> str:
    """
    Sign a session token for an identity.

    Used by tests and local tooling; production tokens come from the
    identity provider with the same claim layout.
    """
    issued_at = datetime.now(timezone.utc)
    payload = {
        "sub": identity.user_id,
        "role": identity.role.value,
        "name": identity.name,
        "email": identity.email,
        "iat": issued_at,
        "exp": issued_at + expires_in,
    }
    return jwt.encode(
        payload,
        secret or settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
    )


def decode_session_token(token: str, secret: Optional[str] = None) -> Identity:
    """
    Verify a session token and return the identity it carries.

    Raises:
        InvalidSessionToken: On a bad signature, expiry, or missing claims
    """
    try:
        payload = jwt.decode(
            token,
            secret or settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
            options={"require": ["sub", "exp"]},
        )
    except jwt.ExpiredSignatureError as e:
        raise InvalidSessionToken("Session token has expired") from e
    except jwt.InvalidTokenError as e:
        raise InvalidSessionToken(f"Invalid session token: {e}") from e

    try:
        role = UserRole(payload.get("role"))
    except ValueError as e:
        raise InvalidSessionToken("Session token carries an unknown role") from e

    return Identity(
        user_id=str(payload["sub"]),
        role=role,
        name=payload.get("name"),
        email=payload.get("email"),
    )


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Return the token from an ``Authorization: Bearer <token>`` header value."""
    if not authorization or not authorization.lower().startswith(BEARER_PREFIX):
        return None
    token = authorization[len(BEARER_PREFIX):].strip()
    return token or None


def verify_cron_secret(authorization: Optional[str], expected: Optional[str]) -> bool:
    """
    Check a scheduler request against the shared cron secret.

    An unset secret rejects everything.
    """
    if not expected:
        logger.warning("CRON_SECRET is not configured; rejecting scheduler call")
        return False
    provided = extract_bearer_token(authorization)
    if provided is None:
        return False
    return hmac.compare_digest(provided.encode(), expected.encode())
