"""
Tests for session decoding middleware and the role dependencies built on it.
"""

from datetime import timedelta

import pytest
from fastapi import Depends, FastAPI, Request
from fastapi.testclient import TestClient

from api.dependencies import require_company, require_cron_secret, require_identity
from core.middleware.authentication import IdentityMiddleware, get_request_identity
from core.middleware.error_handling import setup_error_handlers
from core.security import Identity, create_session_token
from database.models.users import UserRole

COMPANY = Identity(user_id="company-user", role=UserRole.COMPANY, name="Acme")
SEEKER = Identity(user_id="seeker-user", role=UserRole.JOB_SEEKER, name="Jane")


def bearer(identity: Identity, **kwargs) -> dict:
    return {"Authorization": f"Bearer {create_session_token(identity, **kwargs)}"}


@pytest.fixture
def client():
    app = FastAPI()
    setup_error_handlers(app)
    app.add_middleware(IdentityMiddleware)

    @app.get("/whoami")
    async def whoami(request: Request):
        identity = get_request_identity(request)
        if identity is None:
            return {"anonymous": True}
        return {"userId": identity.user_id, "role": identity.role.value}

    @app.get("/private")
    async def private(identity: Identity = Depends(require_identity)):
        return {"userId": identity.user_id}

    @app.get("/company-only")
    async def company_only(identity: Identity = Depends(require_company)):
        return {"userId": identity.user_id}

    @app.post("/cron", dependencies=[Depends(require_cron_secret)])
    async def cron():
        return {"ok": True}

    return TestClient(app)


class TestIdentityMiddleware:
    """The middleware decodes sessions but never rejects a request."""

    def test_anonymous_request(self, client):
        assert client.get("/whoami").json() == {"anonymous": True}

    def test_valid_session(self, client):
        response = client.get("/whoami", headers=bearer(COMPANY))

        assert response.json() == {"userId": "company-user", "role": "COMPANY"}

    def test_expired_session_is_anonymous(self, client):
        response = client.get("/whoami", headers=bearer(COMPANY, expires_in=timedelta(seconds=-5)))

        assert response.status_code == 200
        assert response.json() == {"anonymous": True}

    def test_garbage_token_is_anonymous(self, client):
        response = client.get("/whoami", headers={"Authorization": "Bearer nonsense"})

        assert response.json() == {"anonymous": True}

    def test_non_bearer_scheme_is_anonymous(self, client):
        response = client.get("/whoami", headers={"Authorization": "Basic dXNlcjpwYXNz"})

        assert response.json() == {"anonymous": True}


class TestRoleDependencies:
    def test_require_identity_rejects_anonymous(self, client):
        response = client.get("/private")

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "UNAUTHENTICATED"

    def test_require_identity_accepts_any_role(self, client):
        assert client.get("/private", headers=bearer(SEEKER)).status_code == 200

    def test_wrong_role_forbidden(self, client):
        response = client.get("/company-only", headers=bearer(SEEKER))

        assert response.status_code == 403
        assert response.json()["error"]["code"] == "FORBIDDEN"

    def test_right_role_allowed(self, client):
        response = client.get("/company-only", headers=bearer(COMPANY))

        assert response.json() == {"userId": "company-user"}

    def test_anonymous_on_role_route_is_401(self, client):
        assert client.get("/company-only").status_code == 401


class TestCronSecretDependency:
    def test_valid_secret(self, client):
        response = client.post("/cron", headers={"Authorization": "Bearer test-cron-secret"})

        assert response.status_code == 200

    @pytest.mark.parametrize("headers", [
        {},
        {"Authorization": "Bearer wrong"},
        {"Authorization": "test-cron-secret"},
    ])
    def test_invalid_secret(self, client, headers):
        response = client.post("/cron", headers=headers)

        assert response.status_code == 401

    def test_user_session_is_not_a_cron_secret(self, client):
        response = client.post("/cron", headers=bearer(COMPANY))

        assert response.status_code == 401
