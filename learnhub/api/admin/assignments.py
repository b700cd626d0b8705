# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Assignment management and grading endpoints.

- POST / - Create an assignment
- GET /course/{course_id} - Assignments of a course
- GET /{assignment_id} - Assignment detail
- PUT /{assignment_id} - Update an assignment
- DELETE /{assignment_id} - Delete an assignment and its files
- GET /{assignment_id}/submissions - Submissions for an assignment
- PUT /submissions/{submission_id}/grade - Grade a submission
"""

from fastapi import APIRouter, status
from sqlalchemy.ext.asyncio import AsyncSession

from learnhub.api.dependencies import DB, StaffUser, Storage
from learnhub.domains.assignment import AssignmentService
from learnhub.domains.upload.storage import FileStorage
from learnhub.models.assignment import (
    AssignmentCreateRequest,
    AssignmentResponse,
    AssignmentUpdateRequest,
    GradeSubmissionRequest,
    SubmissionResponse,
)
from learnhub.models.common import ApiResponse, EntityId, ok

router = APIRouter()


def _get_service(db: AsyncSession, storage: FileStorage) -> AssignmentService:
    return AssignmentService(db, storage)


@router.post(
    "",
    response_model=ApiResponse[AssignmentResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create assignment",
)
async def create_assignment(
    data: AssignmentCreateRequest,
    db: DB,
    storage: Storage,
    current_user: StaffUser,
) -> ApiResponse[AssignmentResponse]:
    assignment = await _get_service(db, storage).create_assignment(data, current_user)
    return ok(assignment, "Assignment created successfully")


@router.get(
    "/course/{course_id}",
    response_model=ApiResponse[list[AssignmentResponse]],
    summary="List course assignments",
)
async def list_for_course(
    course_id: EntityId,
    db: DB,
    storage: Storage,
    current_user: StaffUser,
) -> ApiResponse[list[AssignmentResponse]]:
    return ok(await _get_service(db, storage).list_for_course(course_id, current_user))


@router.get(
    "/{assignment_id}",
    response_model=ApiResponse[AssignmentResponse],
    summary="Get assignment",
)
async def get_assignment(
    assignment_id: EntityId,
    db: DB,
    storage: Storage,
    current_user: StaffUser,
) -> ApiResponse[AssignmentResponse]:
    return ok(await _get_service(db, storage).get_assignment(assignment_id, current_user))


@router.put(
    "/{assignment_id}",
    response_model=ApiResponse[AssignmentResponse],
    summary="Update assignment",
)
async def update_assignment(
    assignment_id: EntityId,
    data: AssignmentUpdateRequest,
    db: DB,
    storage: Storage,
    current_user: StaffUser,
) -> ApiResponse[AssignmentResponse]:
    assignment = await _get_service(db, storage).update_assignment(assignment_id, data, current_user)
    return ok(assignment, "Assignment updated successfully")


@router.delete("/{assignment_id}", response_model=ApiResponse[None], summary="Delete assignment")
async def delete_assignment(
    assignment_id: EntityId,
    db: DB,
    storage: Storage,
    current_user: StaffUser,
) -> ApiResponse[None]:
    await _get_service(db, storage).delete_assignment(assignment_id, current_user)
    return ok(message="Assignment deleted successfully")


@router.get(
    "/{assignment_id}/submissions",
    response_model=ApiResponse[list[SubmissionResponse]],
    summary="List submissions",
)
async def list_submissions(
    assignment_id: EntityId,
    db: DB,
    storage: Storage,
    current_user: StaffUser,
) -> ApiResponse[list[SubmissionResponse]]:
    return ok(await _get_service(db, storage).list_submissions(assignment_id, current_user))


@router.put(
    "/submissions/{submission_id}/grade",
    response_model=ApiResponse[SubmissionResponse],
    summary="Grade submission",
    description="Score must be between 0 and the assignment's maximum score.",
)
async def grade_submission(
    submission_id: EntityId,
    data: GradeSubmissionRequest,
    db: DB,
    storage: Storage,
    current_user: StaffUser,
) -> ApiResponse[SubmissionResponse]:
    submission = await _get_service(db, storage).grade_submission(submission_id, data, current_user)
    return ok(submission, "Submission graded successfully")
