"""
Session decoding middleware.

Reads the bearer token from the Authorization header, verifies it and stores
the resulting Identity on ``request.state.identity``. It never rejects a
request; the route dependencies decide whether an identity is required and
which role it must have.
"""

import logging
from typing import Callable, Optional

from fastapi import Request

from core.security import (
    Identity,
    InvalidSessionToken,
    decode_session_token,
    extract_bearer_token,
)

logger = logging.getLogger(__name__)


class IdentityMiddleware:
    """Raw ASGI middleware that attaches the caller identity to the scope."""

    def __init__(self, app: Callable, jwt_secret: Optional[str] = None):
        self.app = app
        self.jwt_secret = jwt_secret

    async def __call__(self, scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        scope.setdefault("state", {})
        scope["state"]["identity"] = self._resolve_identity(Request(scope))
        await self.app(scope, receive, send)

    def _resolve_identity(self, request: Request) -> Optional[Identity]:
        token = extract_bearer_token(request.headers.get("authorization"))
        if token is None:
            return None

        try:
            return decode_session_token(token, secret=self.jwt_secret)
        except InvalidSessionToken as e:
            # Scheduler calls carry the cron secret in the same header
            logger.debug(f"Ignoring unverifiable bearer token: {e}")
            return None


def get_request_identity(request: Request) -> Optional[Identity]:
    """Identity decoded by IdentityMiddleware, or None for anonymous calls."""
    return getattr(request.state, "identity", None)
