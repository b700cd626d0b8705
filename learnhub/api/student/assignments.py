# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Student assignment endpoints.

- GET /course/{course_id} - Assignments of an enrolled course with own submission
- POST /{assignment_id}/submit - Submit text and/or a file
- GET /{assignment_id}/my-submission - Own submission, if any
"""

from fastapi import APIRouter, status

from learnhub.api.dependencies import DB, Storage, StudentUser
from learnhub.domains.assignment import AssignmentService
from learnhub.models.assignment import (
    StudentAssignment,
    SubmissionResponse,
    SubmitAssignmentRequest,
)
from learnhub.models.common import ApiResponse, EntityId, ok

router = APIRouter()


@router.get(
    "/course/{course_id}",
    response_model=ApiResponse[list[StudentAssignment]],
    summary="Course assignments",
)
async def list_for_course(
    course_id: EntityId,
    db: DB,
    storage: Storage,
    current_user: StudentUser,
) -> ApiResponse[list[StudentAssignment]]:
    return ok(await AssignmentService(db, storage).list_for_student(course_id, current_user))


@router.post(
    "/{assignment_id}/submit",
    response_model=ApiResponse[SubmissionResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Submit assignment",
    description="One submission per student. Refused after the due date.",
)
async def submit(
    assignment_id: EntityId,
    data: SubmitAssignmentRequest,
    db: DB,
    storage: Storage,
    current_user: StudentUser,
) -> ApiResponse[SubmissionResponse]:
    submission = await AssignmentService(db, storage).submit(assignment_id, data, current_user)
    return ok(submission, "Assignment submitted successfully")


@router.get(
    "/{assignment_id}/my-submission",
    response_model=ApiResponse[SubmissionResponse | None],
    summary="My submission",
)
async def my_submission(
    assignment_id: EntityId,
    db: DB,
    storage: Storage,
    current_user: StudentUser,
) -> ApiResponse[SubmissionResponse | None]:
    return ok(await AssignmentService(db, storage).get_my_submission(assignment_id, current_user))
