# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Integration tests for the HTTP surface.

Services are patched where a route would otherwise reach the database,
so these tests cover routing, dependencies and the response envelopes.
"""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, patch
from uuid import uuid4

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from learnhub.api.dependencies import require_admin, require_auth, require_staff, require_student
from learnhub.core.config import get_settings
from learnhub.domains.auth import AuthService, JWTManager
from learnhub.domains.category import CategoryService
from learnhub.domains.course import CourseNotFoundError, CourseService
from learnhub.domains.enrollment import AlreadyEnrolledError, EnrollmentService
from learnhub.domains.material import MaterialService
from learnhub.domains.student import StudentService
from learnhub.domains.user import UserService
from learnhub.models.category import CategoryResponse
from learnhub.models.material import MaterialWithProgress
from learnhub.models.user import TutorListItem


def _category(name: str = "Programming") -> CategoryResponse:
    now = datetime.now(timezone.utc)
    return CategoryResponse(id="cat-1", name=name, course_count=2, created_at=now, updated_at=now)


class TestRouting:
    def test_portal_routes_registered(self, app: FastAPI) -> None:
        paths = {route.path for route in app.routes}

        assert "/health" in paths
        assert "/api/categories" in paths
        assert "/api/admin/auth/login" in paths
        assert "/api/admin/courses/{course_id}" in paths
        assert "/api/student/auth/register" in paths
        assert "/api/student/materials/{material_id}/complete" in paths
        assert "/api/student/auth/reset-password" in paths
        assert "/api/admin/auth/forgot-password" in paths
        assert "/api/admin/tutors/{tutor_id}/status" in paths
        assert "/api/admin/students/registered" in paths

    def test_unknown_api_path(self, client: TestClient) -> None:
        response = client.get("/api/does-not-exist")

        assert response.status_code == 404
        assert response.json() == {
            "success": False,
            "error": {
                "message": "API endpoint not found",
                "path": "/api/does-not-exist",
                "method": "GET",
            },
        }


class TestHealth:
    def test_liveness(self, client: TestClient) -> None:
        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["environment"] == "development"

    @pytest.mark.parametrize(("reachable", "expected"), [(True, 200), (False, 503)])
    def test_readiness(self, client: TestClient, reachable: bool, expected: int) -> None:
        with patch(
            "learnhub.api.routes.health.check_database_connection",
            AsyncMock(return_value=reachable),
        ):
            response = client.get("/health/ready")

        assert response.status_code == expected
        assert response.json()["ready"] is reachable


class TestAuthentication:
    def test_missing_token(self, client: TestClient) -> None:
        response = client.get("/api/admin/courses")

        assert response.status_code == 401
        assert response.json()["error"]["message"] == "Access denied. No token provided."

    def test_malformed_token(self, client: TestClient) -> None:
        response = client.get("/api/admin/courses", headers={"Authorization": "Bearer garbage"})

        assert response.status_code == 401
        assert response.json()["error"]["message"] == "Invalid token."

    def test_student_portal_rejects_staff(self, app: FastAPI, client: TestClient, tutor_user) -> None:
        app.dependency_overrides[require_auth] = lambda: tutor_user

        response = client.get("/api/student/auth/me")

        assert response.status_code == 403
        assert response.json()["error"]["message"] == "Insufficient permissions."

    def test_admin_only_route_rejects_tutor(self, app: FastAPI, client: TestClient, tutor_user) -> None:
        app.dependency_overrides[require_auth] = lambda: tutor_user

        response = client.get("/api/admin/users")

        assert response.status_code == 403


class TestEnvelopes:
    def test_public_categories(self, client: TestClient) -> None:
        with patch.object(CategoryService, "list_categories", AsyncMock(return_value=[_category()])):
            response = client.get("/api/categories")

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["data"][0]["name"] == "Programming"
        assert body["data"][0]["course_count"] == 2

    def test_staff_categories(self, app: FastAPI, client: TestClient, tutor_user) -> None:
        app.dependency_overrides[require_staff] = lambda: tutor_user

        with patch.object(CategoryService, "list_categories", AsyncMock(return_value=[_category("Design")])):
            response = client.get("/api/admin/categories")

        assert response.status_code == 200
        assert response.json()["data"][0]["name"] == "Design"

    def test_service_error(self, app: FastAPI, client: TestClient, student_user) -> None:
        app.dependency_overrides[require_student] = lambda: student_user
        course_id = str(uuid4())

        with patch.object(EnrollmentService, "enroll", AsyncMock(side_effect=AlreadyEnrolledError(course_id))):
            response = client.post("/api/student/enrollments", json={"course_id": course_id})

        assert response.status_code == 400
        assert response.json() == {
            "success": False,
            "error": {"message": "Already enrolled in this course"},
        }

    def test_validation_error(self, client: TestClient) -> None:
        response = client.post("/api/student/auth/login", json={"email": "not-an-email"})

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["error"]["message"] == "Invalid data provided"
        fields = {d["field"] for d in body["error"]["details"]}
        assert {"email", "password"} <= fields


class TestUploadedFiles:
    def test_served_inline(self, client: TestClient) -> None:
        directory = get_settings().upload.directory
        directory.mkdir(parents=True, exist_ok=True)
        (directory / "notes.pdf").write_bytes(b"%PDF-1.4 test")
        (directory / "photo.png").write_bytes(b"\x89PNG\r\n\x1a\n")

        pdf = client.get("/uploads/notes.pdf")
        png = client.get("/uploads/photo.png")

        assert pdf.status_code == 200
        assert pdf.headers["content-disposition"] == "inline"
        assert pdf.headers["x-content-type-options"] == "nosniff"
        assert pdf.headers["cache-control"] == "public, max-age=3600"
        assert png.headers["cache-control"] == "no-cache"

    def test_missing_file(self, client: TestClient) -> None:
        response = client.get("/uploads/missing.png")

        assert response.status_code == 404
        assert "content-disposition" not in response.headers


class TestIdentifiers:
    def test_malformed_path_id_is_not_found(self, client: TestClient) -> None:
        get_course = AsyncMock()
        with patch.object(CourseService, "get_course", get_course):
            response = client.get("/api/student/courses/not-a-uuid")

        assert response.status_code == 404
        assert response.json() == {"success": False, "error": {"message": "Record not found"}}
        get_course.assert_not_called()

    def test_malformed_body_id_is_invalid(self, app: FastAPI, client: TestClient, student_user) -> None:
        app.dependency_overrides[require_student] = lambda: student_user

        response = client.post("/api/student/enrollments", json={"course_id": "c-1"})

        assert response.status_code == 400
        assert response.json()["error"]["details"][0]["field"] == "course_id"


class TestPublicRoutesWithStaleToken:
    def test_superseded_session_browses_anonymously(self, client: TestClient, mock_db, student_user) -> None:
        token = JWTManager(get_settings().jwt).create_access_token(
            student_user.id, student_user.role, session_token="session-from-an-earlier-login"
        )
        mock_db.get.return_value = student_user
        course_id = str(uuid4())
        get_course = AsyncMock(side_effect=CourseNotFoundError(course_id))

        with patch.object(CourseService, "get_course", get_course):
            response = client.get(
                f"/api/student/courses/{course_id}",
                headers={"Authorization": f"Bearer {token}"},
            )

        assert response.status_code == 404
        assert get_course.await_args.kwargs["viewer"] is None


class TestPasswords:
    def test_register_rejects_password_over_72_bytes(self, client: TestClient) -> None:
        response = client.post(
            "/api/student/auth/register",
            json={
                "email": "ana@example.com",
                "password": "é" * 40,
                "first_name": "Ana",
                "last_name": "Lopez",
            },
        )

        assert response.status_code == 400
        assert response.json()["error"]["details"][0]["field"] == "password"

    @pytest.mark.parametrize("portal", ["student", "admin"])
    def test_forgot_password_answer_does_not_reveal_account(self, client: TestClient, portal: str) -> None:
        request_reset = AsyncMock()
        with patch.object(AuthService, "request_password_reset", request_reset):
            response = client.post(f"/api/{portal}/auth/forgot-password", json={"email": "nobody@example.com"})

        assert response.status_code == 200
        assert response.json()["message"] == (
            "If an account exists with this email, you will receive a password reset code."
        )
        assert request_reset.await_args.args[1] == portal

    def test_reset_rejects_malformed_code(self, client: TestClient) -> None:
        response = client.post(
            "/api/student/auth/reset-password",
            json={"email": "ana@example.com", "otp": "12ab", "new_password": "brand-new-pass"},
        )

        assert response.status_code == 400


class TestDirectories:
    def test_tutor_status(self, app: FastAPI, client: TestClient, admin_user, tutor_user) -> None:
        app.dependency_overrides[require_admin] = lambda: admin_user
        tutor_user.is_active = False
        item = TutorListItem.model_validate(tutor_user)

        with patch.object(UserService, "set_tutor_status", AsyncMock(return_value=item)):
            response = client.patch(f"/api/admin/tutors/{tutor_user.id}/status", json={"is_active": False})

        assert response.status_code == 200
        assert response.json()["message"] == "Tutor deactivated successfully"
        assert response.json()["data"]["is_active"] is False

    def test_tutors_require_admin(self, app: FastAPI, client: TestClient, tutor_user) -> None:
        app.dependency_overrides[require_auth] = lambda: tutor_user

        response = client.get("/api/admin/tutors")

        assert response.status_code == 403

    def test_student_count(self, app: FastAPI, client: TestClient, tutor_user) -> None:
        app.dependency_overrides[require_staff] = lambda: tutor_user

        with patch.object(StudentService, "count", AsyncMock(return_value=7)):
            response = client.get("/api/admin/students/count")

        assert response.status_code == 200
        assert response.json()["data"] == {"students_count": 7}


class TestStudentMaterials:
    def test_stored_files_use_public_url(self, app: FastAPI, client: TestClient, student_user) -> None:
        app.dependency_overrides[require_student] = lambda: student_user
        now = datetime.now(timezone.utc)
        common = {
            "type": "PDF",
            "order_index": 0,
            "is_public": False,
            "course_id": str(uuid4()),
            "module_id": str(uuid4()),
            "created_at": now,
            "updated_at": now,
        }
        materials = [
            MaterialWithProgress(id=str(uuid4()), title="Notes", file_url="/uploads/notes.pdf", **common),
            MaterialWithProgress(id=str(uuid4()), title="Talk", file_url="https://video.example.com/1", **common),
        ]

        with patch.object(MaterialService, "list_course_materials", AsyncMock(return_value=materials)):
            response = client.get(f"/api/student/materials/course/{common['course_id']}")

        assert response.status_code == 200
        urls = [m["file_url"] for m in response.json()["data"]]
        assert urls == [
            f"{get_settings().api.backend_url}/uploads/notes.pdf",
            "https://video.example.com/1",
        ]
