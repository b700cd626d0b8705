# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Student course catalogue.

Only published public courses are listed. Signing in is optional; a
signed-in student also gets ``is_enrolled`` on the detail.

- GET / - Browse the catalogue
- GET /{course_id} - Course detail
"""

from typing import Annotated

from fastapi import APIRouter, Query

from learnhub.api.dependencies import DB, OptionalUser, Storage
from learnhub.domains.course import CourseFilters, CourseService
from learnhub.models.common import ApiResponse, EntityId, Page, ok
from learnhub.models.course import CourseDetail, CourseSummary

router = APIRouter()


@router.get("", response_model=ApiResponse[Page[CourseSummary]], summary="Browse courses")
async def list_courses(
    db: DB,
    storage: Storage,
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=100)] = 12,
    category: str | None = None,
    level: str | None = None,
    search: str | None = None,
) -> ApiResponse[Page[CourseSummary]]:
    filters = CourseFilters(page=page, limit=limit, category_id=category, level=level, search=search)
    return ok(await CourseService(db, storage).list_courses(filters, catalogue=True))


@router.get("/{course_id}", response_model=ApiResponse[CourseDetail], summary="Course detail")
async def get_course(
    course_id: EntityId,
    db: DB,
    storage: Storage,
    current_user: OptionalUser,
) -> ApiResponse[CourseDetail]:
    service = CourseService(db, storage)
    return ok(await service.get_course(course_id, viewer=current_user, catalogue=True))
