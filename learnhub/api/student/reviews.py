# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Course review endpoints.

- POST / - Create or replace the caller's review of an enrolled course
- GET /course/{course_id} - Reviews of a course (public)
- GET /course/{course_id}/mine - The caller's review of a course
"""

from typing import Annotated

from fastapi import APIRouter, Query

from learnhub.api.dependencies import DB, StudentUser
from learnhub.domains.review import ReviewService
from learnhub.models.common import ApiResponse, EntityId, ok
from learnhub.models.review import CourseReviewsResponse, ReviewResponse, ReviewSubmitRequest

router = APIRouter()


@router.post("", response_model=ApiResponse[ReviewResponse], summary="Submit review")
async def submit_review(
    data: ReviewSubmitRequest,
    db: DB,
    current_user: StudentUser,
) -> ApiResponse[ReviewResponse]:
    review = await ReviewService(db).submit_review(current_user, data)
    return ok(review, "Review submitted successfully")


@router.get(
    "/course/{course_id}",
    response_model=ApiResponse[CourseReviewsResponse],
    summary="Course reviews",
)
async def course_reviews(
    course_id: EntityId,
    db: DB,
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=50)] = 10,
) -> ApiResponse[CourseReviewsResponse]:
    return ok(await ReviewService(db).course_reviews(course_id, page=page, limit=limit))


@router.get(
    "/course/{course_id}/mine",
    response_model=ApiResponse[ReviewResponse | None],
    summary="My review",
)
async def my_review(
    course_id: EntityId,
    db: DB,
    current_user: StudentUser,
) -> ApiResponse[ReviewResponse | None]:
    return ok(await ReviewService(db).my_review(current_user, course_id))
