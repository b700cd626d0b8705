# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Enrollment endpoints for staff.

- GET /course/{course_id}/students - Students enrolled in a course
- PATCH /{enrollment_id}/status - Change an enrollment's status
- DELETE /{enrollment_id} - Remove an enrollment (admin)
"""

from fastapi import APIRouter

from learnhub.api.dependencies import DB, StaffUser
from learnhub.domains.enrollment import EnrollmentService
from learnhub.models.common import ApiResponse, EntityId, ok
from learnhub.models.enrollment import (
    CourseStudent,
    EnrollmentResponse,
    EnrollmentStatusUpdateRequest,
)

router = APIRouter()


@router.get(
    "/course/{course_id}/students",
    response_model=ApiResponse[list[CourseStudent]],
    summary="List course students",
)
async def course_students(
    course_id: EntityId,
    db: DB,
    current_user: StaffUser,
) -> ApiResponse[list[CourseStudent]]:
    return ok(await EnrollmentService(db).course_students(course_id, current_user))


@router.patch(
    "/{enrollment_id}/status",
    response_model=ApiResponse[EnrollmentResponse],
    summary="Update enrollment status",
)
async def update_status(
    enrollment_id: EntityId,
    data: EnrollmentStatusUpdateRequest,
    db: DB,
    current_user: StaffUser,
) -> ApiResponse[EnrollmentResponse]:
    enrollment = await EnrollmentService(db).update_status(enrollment_id, data, current_user)
    return ok(enrollment, "Enrollment status updated")


@router.delete(
    "/{enrollment_id}",
    response_model=ApiResponse[None],
    summary="Remove enrollment",
    description="Also deletes the student's progress records for the course.",
)
async def cancel_enrollment(enrollment_id: EntityId, db: DB, current_user: StaffUser) -> ApiResponse[None]:
    await EnrollmentService(db).cancel(enrollment_id, current_user)
    return ok(message="Enrollment cancelled successfully")
