# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Course domain: catalogue, course management and deletion."""

from learnhub.domains.course.service import (
    CourseAccessDeniedError,
    CourseFilters,
    CourseHasActiveEnrollmentsError,
    CourseNotFoundError,
    CourseService,
    CourseServiceError,
    InvalidCategoryError,
    course_summary_query,
    fetch_course_summaries,
    to_course_summary,
)

__all__ = [
    "CourseAccessDeniedError",
    "CourseFilters",
    "CourseHasActiveEnrollmentsError",
    "CourseNotFoundError",
    "CourseService",
    "CourseServiceError",
    "InvalidCategoryError",
    "course_summary_query",
    "fetch_course_summaries",
    "to_course_summary",
]
