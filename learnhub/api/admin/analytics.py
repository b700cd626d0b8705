# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Analytics endpoints for the admin console.

- GET /tutor - Dashboard figures for the caller's courses (all courses for admins)
- GET /courses/{course_id}/completion - Per-student completion for one course
"""

from fastapi import APIRouter

from learnhub.api.dependencies import DB, StaffUser
from learnhub.domains.analytics import AnalyticsService
from learnhub.models.analytics import CourseCompletionReport, TutorAnalytics
from learnhub.models.common import ApiResponse, EntityId, ok

router = APIRouter()


@router.get("/tutor", response_model=ApiResponse[TutorAnalytics], summary="Tutor dashboard")
async def tutor_analytics(db: DB, current_user: StaffUser) -> ApiResponse[TutorAnalytics]:
    return ok(await AnalyticsService(db).tutor_analytics(current_user))


@router.get(
    "/courses/{course_id}/completion",
    response_model=ApiResponse[CourseCompletionReport],
    summary="Course completion report",
)
async def course_completion(
    course_id: EntityId,
    db: DB,
    current_user: StaffUser,
) -> ApiResponse[CourseCompletionReport]:
    return ok(await AnalyticsService(db).course_completion(course_id, current_user))
