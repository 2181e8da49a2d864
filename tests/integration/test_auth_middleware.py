# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Integration tests for the authentication middleware and role gates.

Most tests run the middleware on a small app without a database. The rate
limit tests use the full application.
"""

from collections.abc import Generator

import pytest
from fastapi import Depends, FastAPI, Request
from fastapi.testclient import TestClient

from coursesched.api.app import create_app, service_error_handler
from coursesched.api.dependencies import RequireRole, require_auth
from coursesched.api.middleware.auth import (
    AuthMiddleware,
    CurrentUser,
    extract_bearer_token,
    get_current_user,
)
from coursesched.api.middleware.rate_limit import limiter
from coursesched.core.config import clear_settings_cache, get_settings
from coursesched.core.exceptions import ServiceError
from coursesched.domains.auth.jwt import TokenService
from coursesched.models.auth import PrincipalResponse
from coursesched.models.common import Role


def principal(role: Role) -> PrincipalResponse:
    return PrincipalResponse(id=f"{role.value}-1", email=f"{role.value}@example.edu", role=role)


@pytest.fixture
def app(token_service: TokenService) -> FastAPI:
    """A small app with the auth middleware and a few gated routes."""
    app = FastAPI()
    app.add_middleware(AuthMiddleware, token_service=token_service)
    app.add_exception_handler(ServiceError, service_error_handler)

    @app.get("/whoami")
    async def whoami(request: Request) -> dict:
        user = get_current_user(request)
        return {"id": user.id if user else None, "role": user.role.value if user else None}

    @app.get("/protected")
    async def protected(user: CurrentUser = Depends(require_auth)) -> dict:
        return {"email": user.email}

    @app.get("/admin")
    async def admin_only(
        user: CurrentUser = Depends(RequireRole(Role.ADMIN, message="Admin access required")),
    ) -> dict:
        return {"ok": True}

    @app.get("/health")
    async def health() -> dict:
        return {"status": "ok"}

    return app


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    return TestClient(app)


class TestExtractBearerToken:
    """Tests for header parsing."""

    @pytest.mark.parametrize(
        ("header", "expected"),
        [
            ("Bearer abc", "abc"),
            ("bearer abc", "abc"),
            ("Basic abc", None),
            ("Bearer", None),
            ("Bearer a b", None),
            ("", None),
            (None, None),
        ],
    )
    def test_extract(self, header: str | None, expected: str | None) -> None:
        assert extract_bearer_token(header) == expected


class TestAuthMiddleware:
    """Tests for AuthMiddleware."""

    def test_public_path_bypasses_auth(self, client: TestClient) -> None:
        response = client.get("/health")

        assert response.status_code == 200

    def test_valid_token_sets_user(self, client: TestClient, token_service: TokenService) -> None:
        token = token_service.issue(principal(Role.INSTRUCTOR))

        response = client.get("/whoami", headers={"Authorization": f"Bearer {token}"})

        assert response.json() == {"id": "instructor-1", "role": "instructor"}

    def test_invalid_token_leaves_user_unset(self, client: TestClient) -> None:
        response = client.get("/whoami", headers={"Authorization": "Bearer not-a-token"})

        assert response.status_code == 200
        assert response.json() == {"id": None, "role": None}


class TestRoleGates:
    """Tests for require_auth and RequireRole."""

    def test_missing_token_is_401(self, client: TestClient) -> None:
        response = client.get("/protected")

        assert response.status_code == 401
        assert response.json() == {
            "success": False,
            "message": "No token provided",
            "code": "unauthenticated",
        }

    def test_bad_token_is_401(self, client: TestClient) -> None:
        response = client.get("/protected", headers={"Authorization": "Bearer junk"})

        assert response.status_code == 401
        assert response.json()["message"] == "Invalid or expired token"

    def test_wrong_role_is_403(self, client: TestClient, token_service: TokenService) -> None:
        token = token_service.issue(principal(Role.STUDENT))

        response = client.get("/admin", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 403
        assert response.json()["message"] == "Admin access required"
        assert response.json()["code"] == "forbidden"

    def test_matching_role_passes(self, client: TestClient, token_service: TokenService) -> None:
        token = token_service.issue(principal(Role.ADMIN))

        response = client.get("/admin", headers={"Authorization": f"Bearer {token}"})

        assert response.status_code == 200

    def test_anonymous_on_admin_route_is_401(self, client: TestClient) -> None:
        assert client.get("/admin").status_code == 401


class TestRateLimit:
    """Tests for the per-IP limit on the auth endpoints."""

    @pytest.fixture
    def limited_client(self, monkeypatch: pytest.MonkeyPatch) -> Generator[TestClient, None, None]:
        monkeypatch.setenv("RATE_LIMIT_ENABLED", "true")
        monkeypatch.setenv("RATE_LIMIT_AUTH_PER_MINUTE", "2")
        clear_settings_cache()
        limiter.reset()
        try:
            with TestClient(create_app()) as client:
                yield client
        finally:
            limiter.reset()
            monkeypatch.undo()
            clear_settings_cache()
            limiter.enabled = get_settings().rate_limit.enabled

    def test_login_limited_per_ip(self, limited_client: TestClient) -> None:
        body = {"email": "nobody@example.edu", "password": "pw"}

        assert limited_client.post("/api/v1/auth/login", json=body).status_code == 404
        assert limited_client.post("/api/v1/auth/login", json=body).status_code == 404
        assert limited_client.post("/api/v1/auth/login", json=body).status_code == 429

    def test_other_routes_are_not_auth_limited(self, limited_client: TestClient) -> None:
        for _ in range(3):
            assert limited_client.get("/health").status_code == 200
