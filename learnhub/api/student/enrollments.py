# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Student enrollment endpoints.

- POST / - Enroll in a published course
- GET /my-enrollments - The caller's enrollments
- GET /course/{course_id}/progress - Progress through one course
- PATCH /{enrollment_id}/status - Change status of an own enrollment
- DELETE /{enrollment_id} - Leave a course
"""

from fastapi import APIRouter, status

from learnhub.api.dependencies import DB, StudentUser
from learnhub.domains.enrollment import EnrollmentService
from learnhub.models.common import ApiResponse, EntityId, ok
from learnhub.models.enrollment import (
    CourseProgressResponse,
    EnrollmentResponse,
    EnrollmentStatusUpdateRequest,
    EnrollRequest,
    MyEnrollment,
)

router = APIRouter()


@router.post(
    "",
    response_model=ApiResponse[EnrollmentResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Enroll",
)
async def enroll(
    data: EnrollRequest,
    db: DB,
    current_user: StudentUser,
) -> ApiResponse[EnrollmentResponse]:
    enrollment = await EnrollmentService(db).enroll(current_user, data)
    return ok(enrollment, "Successfully enrolled in course")


@router.get(
    "/my-enrollments",
    response_model=ApiResponse[list[MyEnrollment]],
    summary="My enrollments",
)
async def my_enrollments(db: DB, current_user: StudentUser) -> ApiResponse[list[MyEnrollment]]:
    return ok(await EnrollmentService(db).my_enrollments(current_user))


@router.get(
    "/course/{course_id}/progress",
    response_model=ApiResponse[CourseProgressResponse],
    summary="Course progress",
)
async def course_progress(
    course_id: EntityId,
    db: DB,
    current_user: StudentUser,
) -> ApiResponse[CourseProgressResponse]:
    return ok(await EnrollmentService(db).course_progress(current_user, course_id))


@router.patch(
    "/{enrollment_id}/status",
    response_model=ApiResponse[EnrollmentResponse],
    summary="Update enrollment status",
)
async def update_status(
    enrollment_id: EntityId,
    data: EnrollmentStatusUpdateRequest,
    db: DB,
    current_user: StudentUser,
) -> ApiResponse[EnrollmentResponse]:
    enrollment = await EnrollmentService(db).update_status(enrollment_id, data, current_user)
    return ok(enrollment, "Enrollment status updated")


@router.delete("/{enrollment_id}", response_model=ApiResponse[None], summary="Leave course")
async def cancel_enrollment(enrollment_id: EntityId, db: DB, current_user: StudentUser) -> ApiResponse[None]:
    await EnrollmentService(db).cancel(enrollment_id, current_user)
    return ok(message="Enrollment cancelled successfully")
