# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Integration tests for the authentication middleware.

Tests the middleware in isolation from the database.
"""

from unittest.mock import MagicMock, patch

import pytest
from fastapi import FastAPI, Request
from fastapi.testclient import TestClient

from learnhub.api.middleware.auth import AuthMiddleware, portal_for_path
from learnhub.domains.auth.jwt import JWTManager
from learnhub.domains.auth.service import Portal


@pytest.fixture
def jwt_manager(jwt_settings: MagicMock) -> JWTManager:
    return JWTManager(jwt_settings)


@pytest.fixture
def state_client(jwt_settings: MagicMock) -> TestClient:
    """App that echoes what the middleware stored on request.state."""
    with patch("learnhub.api.middleware.auth.get_settings") as mock_settings:
        mock_settings.return_value.jwt = jwt_settings
        app = FastAPI()
        app.add_middleware(AuthMiddleware)

        def state(request: Request) -> dict:
            payload = request.state.token_payload
            return {
                "user_id": request.state.user_id,
                "role": payload.role if payload else None,
                "token_error": request.state.token_error,
            }

        @app.get("/api/admin/state")
        async def admin_state(request: Request) -> dict:
            return state(request)

        @app.get("/api/student/state")
        async def student_state(request: Request) -> dict:
            return state(request)

        @app.get("/api/state")
        async def shared_state(request: Request) -> dict:
            return state(request)

        # Starlette builds the middleware stack on the first request
        client = TestClient(app)
        client.get("/api/state")
    return client


@pytest.mark.parametrize(
    ("path", "portal"),
    [
        ("/api/admin/courses", Portal.ADMIN),
        ("/api/admin", Portal.ADMIN),
        ("/api/student/enrollments", Portal.STUDENT),
        ("/api/categories", None),
        ("/health", None),
    ],
)
def test_portal_for_path(path: str, portal: Portal | None) -> None:
    assert portal_for_path(path) == portal


class TestAuthMiddleware:
    def test_no_token(self, state_client: TestClient) -> None:
        response = state_client.get("/api/admin/state")

        assert response.status_code == 200
        assert response.json() == {"user_id": None, "role": None, "token_error": False}

    def test_bearer_token(self, state_client: TestClient, jwt_manager: JWTManager) -> None:
        token = jwt_manager.create_access_token("user-1", "TUTOR")

        response = state_client.get("/api/admin/state", headers={"Authorization": f"Bearer {token}"})

        assert response.json() == {"user_id": "user-1", "role": "TUTOR", "token_error": False}

    def test_portal_cookie(self, state_client: TestClient, jwt_manager: JWTManager) -> None:
        token = jwt_manager.create_access_token("student-1", "STUDENT", session_token="sid")
        state_client.cookies.set(Portal.STUDENT.cookie_name, token)

        response = state_client.get("/api/student/state")

        assert response.json()["user_id"] == "student-1"

    def test_cookie_of_other_portal_ignored(self, state_client: TestClient, jwt_manager: JWTManager) -> None:
        token = jwt_manager.create_access_token("student-1", "STUDENT", session_token="sid")
        state_client.cookies.set(Portal.STUDENT.cookie_name, token)

        response = state_client.get("/api/admin/state")

        assert response.json()["user_id"] is None

    def test_shared_path_accepts_either_cookie(self, state_client: TestClient, jwt_manager: JWTManager) -> None:
        token = jwt_manager.create_access_token("admin-1", "ADMIN")
        state_client.cookies.set(Portal.ADMIN.cookie_name, token)

        response = state_client.get("/api/state")

        assert response.json()["user_id"] == "admin-1"

    def test_invalid_token_flagged(self, state_client: TestClient) -> None:
        response = state_client.get("/api/admin/state", headers={"Authorization": "Bearer not-a-jwt"})

        assert response.json() == {"user_id": None, "role": None, "token_error": True}

    def test_non_bearer_scheme_ignored(self, state_client: TestClient) -> None:
        response = state_client.get("/api/admin/state", headers={"Authorization": "Basic dXNlcjpwYXNz"})

        assert response.json()["token_error"] is False
