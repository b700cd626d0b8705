# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Pytest configuration and shared fixtures.

This module provides fixtures used across all test types:
- Unit tests (services against a mocked AsyncSession)
- Integration tests (the FastAPI app with dependency overrides)
"""

import os
import tempfile
from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from typing import Any
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

# Settings are cached on first use, so the environment is fixed before
# any application module is imported.
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("LOG_LEVEL", "DEBUG")
os.environ.setdefault("JWT_SECRET", "test-secret-key-for-testing-only")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="learnhub-uploads-"))

import pytest  # noqa: E402
from pydantic import SecretStr  # noqa: E402

from learnhub.infrastructure.database.models import (  # noqa: E402
    Course,
    CourseStatus,
    Enrollment,
    EnrollmentStatus,
    User,
    UserRole,
)


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture
def mock_db() -> AsyncMock:
    """Create a mock AsyncSession.

    ``execute``, ``scalar`` and ``get`` are AsyncMocks; tests queue their
    results with ``side_effect`` in the order the service issues queries.
    """
    db = AsyncMock()
    db.add = MagicMock()
    db.delete = AsyncMock()
    db.flush = AsyncMock()
    db.commit = AsyncMock()
    db.rollback = AsyncMock()
    db.refresh = AsyncMock()
    db.execute = AsyncMock()
    db.scalar = AsyncMock()
    db.scalars = AsyncMock()
    db.get = AsyncMock()
    return db


def scalar_result(value: Any) -> MagicMock:
    """Mock ``Result`` whose ``scalar_one_or_none`` returns ``value``."""
    result = MagicMock()
    result.scalar_one_or_none.return_value = value
    result.scalar_one.return_value = value
    return result


def rows_result(rows: list[Any]) -> MagicMock:
    """Mock ``Result`` whose ``all`` and ``scalars().all()`` return ``rows``."""
    result = MagicMock()
    result.all.return_value = rows
    result.scalars.return_value.all.return_value = rows
    return result


@pytest.fixture
def make_scalar_result() -> Callable[[Any], MagicMock]:
    return scalar_result


@pytest.fixture
def make_rows_result() -> Callable[[list[Any]], MagicMock]:
    return rows_result


# =============================================================================
# Model Fixtures
# =============================================================================


def build_user(role: str = UserRole.STUDENT, **overrides: Any) -> User:
    """Build a detached User with every column populated."""
    now = datetime.now(timezone.utc)
    values: dict[str, Any] = {
        "id": str(uuid4()),
        "email": f"{role.lower()}-{uuid4().hex[:8]}@example.com",
        "password_hash": "not-a-real-hash",
        "first_name": "Test",
        "last_name": role.title(),
        "avatar": None,
        "role": role,
        "is_verified": True,
        "is_active": True,
        "active_session_token": str(uuid4()) if role == UserRole.STUDENT else None,
        "last_login_at": None,
        "password_reset_code_hash": None,
        "password_reset_expires_at": None,
        "password_reset_attempts": 0,
        "created_at": now,
        "updated_at": now,
    }
    values.update(overrides)
    return User(**values)


def build_course(creator: User, **overrides: Any) -> Course:
    """Build a detached published course owned by ``creator``."""
    now = datetime.now(timezone.utc)
    values: dict[str, Any] = {
        "id": str(uuid4()),
        "title": "Intro to Testing",
        "description": "Learn how to write tests",
        "category_id": str(uuid4()),
        "creator_id": creator.id,
        "price": 0,
        "level": "BEGINNER",
        "status": CourseStatus.PUBLISHED,
        "is_public": True,
        "tutor_name": creator.full_name,
        "thumbnail": None,
        "created_at": now,
        "updated_at": now,
    }
    values.update(overrides)
    return Course(**values)


def build_enrollment(user: User, course: Course, **overrides: Any) -> Enrollment:
    """Build a detached ACTIVE enrollment."""
    now = datetime.now(timezone.utc)
    values: dict[str, Any] = {
        "id": str(uuid4()),
        "user_id": user.id,
        "course_id": course.id,
        "status": EnrollmentStatus.ACTIVE,
        "progress_percentage": 0,
        "enrolled_at": now,
        "completed_at": None,
        "updated_at": now,
    }
    values.update(overrides)
    return Enrollment(**values)


@pytest.fixture
def admin_user() -> User:
    return build_user(UserRole.ADMIN)


@pytest.fixture
def tutor_user() -> User:
    return build_user(UserRole.TUTOR)


@pytest.fixture
def student_user() -> User:
    return build_user(UserRole.STUDENT)


@pytest.fixture
def published_course(tutor_user: User) -> Course:
    return build_course(tutor_user)


# =============================================================================
# Settings Fixtures
# =============================================================================


@pytest.fixture
def jwt_settings() -> MagicMock:
    """Create mock JWT settings."""
    settings = MagicMock()
    settings.secret_key = SecretStr("test-secret-key-for-jwt-testing")
    settings.algorithm = "HS256"
    settings.expires_delta = timedelta(days=7)
    return settings


@pytest.fixture
def make_user() -> Callable[..., User]:
    return build_user


@pytest.fixture
def make_course() -> Callable[..., Course]:
    return build_course


@pytest.fixture
def make_enrollment() -> Callable[..., Enrollment]:
    return build_enrollment
