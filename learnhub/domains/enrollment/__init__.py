# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Enrollment domain."""

from learnhub.domains.enrollment.service import (
    AlreadyEnrolledError,
    CourseNotAvailableError,
    EnrollmentAccessDeniedError,
    EnrollmentCourseNotFoundError,
    EnrollmentNotFoundError,
    EnrollmentService,
    EnrollmentServiceError,
)

__all__ = [
    "AlreadyEnrolledError",
    "CourseNotAvailableError",
    "EnrollmentAccessDeniedError",
    "EnrollmentCourseNotFoundError",
    "EnrollmentNotFoundError",
    "EnrollmentService",
    "EnrollmentServiceError",
]
