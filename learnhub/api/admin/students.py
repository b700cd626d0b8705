# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Student directory endpoints for staff.

- GET / - Students enrolled in the caller's courses, with summary figures
- GET /count - Number of student accounts
- GET /registered - Every student account, newest first
"""

from fastapi import APIRouter

from learnhub.api.dependencies import DB, StaffUser
from learnhub.domains.student import StudentService
from learnhub.models.common import ApiResponse, ok
from learnhub.models.student import RegisteredStudent, StudentCount, StudentRoster

router = APIRouter()


@router.get("", response_model=ApiResponse[StudentRoster], summary="Student roster")
async def roster(db: DB, current_user: StaffUser) -> ApiResponse[StudentRoster]:
    return ok(await StudentService(db).roster(current_user))


@router.get("/count", response_model=ApiResponse[StudentCount], summary="Student count")
async def count(db: DB, _: StaffUser) -> ApiResponse[StudentCount]:
    return ok(StudentCount(students_count=await StudentService(db).count()))


@router.get(
    "/registered",
    response_model=ApiResponse[list[RegisteredStudent]],
    summary="Registered students",
)
async def registered(db: DB, _: StaffUser) -> ApiResponse[list[RegisteredStudent]]:
    return ok(await StudentService(db).registered())
