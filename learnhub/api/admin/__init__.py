# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Admin console routes.

Everything under ``/api/admin`` is for staff (ADMIN and TUTOR). Tutors
are limited to the courses they created; user and category management
is admin only.

Modules:
    auth: Staff login, logout and profile.
    users: User management.
    tutors: Tutor directory and activation.
    students: Student roster and directory.
    categories: Category management.
    courses: Course management.
    modules: Course module management and ordering.
    materials: Material management.
    enrollments: Enrolled students and enrollment status.
    assignments: Assignments and grading.
    uploads: File uploads.
    analytics: Tutor dashboard and completion reports.
"""

from fastapi import APIRouter

from learnhub.api.admin import (
    analytics,
    assignments,
    auth,
    categories,
    courses,
    enrollments,
    materials,
    modules,
    students,
    tutors,
    uploads,
    users,
)

router = APIRouter(prefix="/api/admin")

router.include_router(auth.router, prefix="/auth", tags=["Admin Authentication"])
router.include_router(users.router, prefix="/users", tags=["Admin Users"])
router.include_router(tutors.router, prefix="/tutors", tags=["Admin Tutors"])
router.include_router(students.router, prefix="/students", tags=["Admin Students"])
router.include_router(categories.router, prefix="/categories", tags=["Admin Categories"])
router.include_router(courses.router, prefix="/courses", tags=["Admin Courses"])
router.include_router(modules.router, prefix="/modules", tags=["Admin Modules"])
router.include_router(materials.router, prefix="/materials", tags=["Admin Materials"])
router.include_router(enrollments.router, prefix="/enrollments", tags=["Admin Enrollments"])
router.include_router(assignments.router, prefix="/assignments", tags=["Admin Assignments"])
router.include_router(uploads.router, prefix="/upload", tags=["Admin Uploads"])
router.include_router(analytics.router, prefix="/analytics", tags=["Admin Analytics"])

__all__ = ["router"]
