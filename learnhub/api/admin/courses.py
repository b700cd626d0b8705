# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Course management endpoints for staff.

Tutors see and manage the courses they created; admins see all.

- GET / - List courses with filters
- GET /my-courses - Courses created by the current user
- GET /{course_id} - Course detail
- POST / - Create a draft course
- PUT /{course_id} - Update a course
- DELETE /{course_id} - Delete a course and its files
"""

from typing import Annotated

from fastapi import APIRouter, Query, status

from learnhub.api.dependencies import DB, StaffUser, Storage
from learnhub.domains.course import CourseFilters, CourseService
from learnhub.models.common import ApiResponse, EntityId, Page, ok
from learnhub.models.course import (
    CourseCreateRequest,
    CourseDeleteSummary,
    CourseDetail,
    CourseSummary,
    CourseUpdateRequest,
)

router = APIRouter()


@router.get("", response_model=ApiResponse[Page[CourseSummary]], summary="List courses")
async def list_courses(
    db: DB,
    storage: Storage,
    current_user: StaffUser,
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=100)] = 10,
    category: str | None = None,
    level: str | None = None,
    search: str | None = None,
    course_status: Annotated[str | None, Query(alias="status")] = None,
) -> ApiResponse[Page[CourseSummary]]:
    filters = CourseFilters(
        page=page,
        limit=limit,
        category_id=category,
        level=level,
        search=search,
        status=course_status,
    )
    service = CourseService(db, storage)
    return ok(await service.list_courses(filters, catalogue=False, viewer=current_user))


@router.get(
    "/my-courses",
    response_model=ApiResponse[list[CourseSummary]],
    summary="My courses",
)
async def my_courses(
    db: DB,
    storage: Storage,
    current_user: StaffUser,
) -> ApiResponse[list[CourseSummary]]:
    return ok(await CourseService(db, storage).list_my_courses(current_user))


@router.get("/{course_id}", response_model=ApiResponse[CourseDetail], summary="Get course")
async def get_course(
    course_id: EntityId,
    db: DB,
    storage: Storage,
    current_user: StaffUser,
) -> ApiResponse[CourseDetail]:
    return ok(await CourseService(db, storage).get_course(course_id, viewer=current_user))


@router.post(
    "",
    response_model=ApiResponse[CourseSummary],
    status_code=status.HTTP_201_CREATED,
    summary="Create course",
    description="New courses start as DRAFT and are owned by the caller.",
)
async def create_course(
    data: CourseCreateRequest,
    db: DB,
    storage: Storage,
    current_user: StaffUser,
) -> ApiResponse[CourseSummary]:
    course = await CourseService(db, storage).create_course(data, current_user)
    return ok(course, "Course created successfully")


@router.put("/{course_id}", response_model=ApiResponse[CourseSummary], summary="Update course")
async def update_course(
    course_id: EntityId,
    data: CourseUpdateRequest,
    db: DB,
    storage: Storage,
    current_user: StaffUser,
) -> ApiResponse[CourseSummary]:
    course = await CourseService(db, storage).update_course(course_id, data, current_user)
    return ok(course, "Course updated successfully")


@router.delete(
    "/{course_id}",
    response_model=ApiResponse[CourseDeleteSummary],
    summary="Delete course",
    description=(
        "Refused while students are still working through the course. "
        "Uploaded files are removed after the delete commits."
    ),
)
async def delete_course(
    course_id: EntityId,
    db: DB,
    storage: Storage,
    current_user: StaffUser,
) -> ApiResponse[CourseDeleteSummary]:
    summary = await CourseService(db, storage).delete_course(course_id, current_user)
    return ok(summary, "Course deleted successfully")
