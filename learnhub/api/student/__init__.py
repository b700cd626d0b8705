# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Student portal routes.

Everything under ``/api/student``. The catalogue and course reviews are
public; all other endpoints need a STUDENT session.
"""

from fastapi import APIRouter

from learnhub.api.student import (
    assignments,
    auth,
    courses,
    enrollments,
    materials,
    reviews,
    uploads,
)

router = APIRouter(prefix="/api/student")

router.include_router(auth.router, prefix="/auth", tags=["Student Authentication"])
router.include_router(courses.router, prefix="/courses", tags=["Student Courses"])
router.include_router(materials.router, prefix="/materials", tags=["Student Materials"])
router.include_router(enrollments.router, prefix="/enrollments", tags=["Student Enrollments"])
router.include_router(assignments.router, prefix="/assignments", tags=["Student Assignments"])
router.include_router(reviews.router, prefix="/reviews", tags=["Student Reviews"])
router.include_router(uploads.router, prefix="/upload", tags=["Student Uploads"])

__all__ = ["router"]
