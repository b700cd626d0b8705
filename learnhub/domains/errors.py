# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Base exception hierarchy shared by all domain services.

Every domain defines its own exceptions on top of these categories. The
category fixes the HTTP status the API layer responds with, so services
never import FastAPI.

Example:
    class CourseNotFoundError(CourseServiceError, NotFoundError):
        def __init__(self, course_id: str) -> None:
            super().__init__("Course not found")
            self.course_id = course_id
"""

from typing import Any


class ServiceError(Exception):
    """Base exception for domain service errors.

    Attributes:
        message: Client-facing error message.
        status_code: HTTP status code for the response.
        details: Optional structured details included in the response.
    """

    status_code: int = 400

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


class ValidationFailedError(ServiceError):
    """Input is well-formed but violates a business rule."""

    status_code = 400


class ConflictError(ServiceError):
    """The operation conflicts with existing state (duplicates, dependents)."""

    status_code = 400


class AuthenticationError(ServiceError):
    """Credentials or session are missing or invalid."""

    status_code = 401


class PermissionDeniedError(ServiceError):
    """The caller is authenticated but not allowed to do this."""

    status_code = 403


class NotFoundError(ServiceError):
    """The requested resource does not exist (or is hidden from the caller)."""

    status_code = 404
