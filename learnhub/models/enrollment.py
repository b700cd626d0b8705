# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Enrollment and course-progress models."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from learnhub.models.common import EntityId, ORMModel
from learnhub.models.course import CourseSummary
from learnhub.models.material import MaterialWithProgress, ProgressResponse
from learnhub.models.user import UserSummary

EnrollmentStatusLiteral = Literal["ACTIVE", "COMPLETED", "DROPPED"]


class EnrollRequest(BaseModel):
    course_id: EntityId


class EnrollmentStatusUpdateRequest(BaseModel):
    status: EnrollmentStatusLiteral


class EnrollmentResponse(ORMModel):
    id: str
    user_id: str
    course_id: str
    status: EnrollmentStatusLiteral
    progress_percentage: int
    enrolled_at: datetime
    completed_at: datetime | None = None
    updated_at: datetime


class MyEnrollment(EnrollmentResponse):
    """Enrollment as shown on the student's dashboard."""

    course: CourseSummary
    completed_materials: int = 0
    total_materials: int = 0
    total_time_spent: int = 0


class CourseStudent(EnrollmentResponse):
    """Enrollment as shown on the course owner's roster."""

    student: UserSummary
    last_accessed: datetime | None = None


class CourseProgressStats(BaseModel):
    total_materials: int
    completed_materials: int
    total_time_spent: int
    progress_percentage: int


class CourseProgressResponse(BaseModel):
    enrollment: EnrollmentResponse
    materials: list[MaterialWithProgress] = Field(default_factory=list)
    stats: CourseProgressStats


class MaterialCompletionResponse(BaseModel):
    progress: ProgressResponse
    enrollment: EnrollmentResponse
