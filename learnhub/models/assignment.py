# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Assignment and submission models."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from learnhub.models.common import EntityId, ORMModel
from learnhub.models.user import UserSummary


class AssignmentCreateRequest(BaseModel):
    course_id: EntityId
    title: str = Field(min_length=1, max_length=200)
    description: str = Field(min_length=1)
    due_date: datetime | None = None
    max_score: int = Field(default=100, gt=0)
    attachment_url: str | None = None


class AssignmentUpdateRequest(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = Field(default=None, min_length=1)
    due_date: datetime | None = None
    max_score: int | None = Field(default=None, gt=0)
    attachment_url: str | None = None


class AssignmentResponse(ORMModel):
    id: str
    course_id: str
    title: str
    description: str
    due_date: datetime | None = None
    max_score: int
    attachment_url: str | None = None
    creator_id: str | None = None
    created_at: datetime
    updated_at: datetime
    submission_count: int = 0
    ungraded_count: int = 0


class SubmissionResponse(ORMModel):
    id: str
    assignment_id: str
    student_id: str
    content: str | None = None
    file_url: str | None = None
    status: Literal["SUBMITTED", "GRADED"]
    score: int | None = None
    feedback: str | None = None
    submitted_at: datetime
    graded_at: datetime | None = None
    student: UserSummary | None = None


class StudentAssignment(AssignmentResponse):
    """Assignment as seen by a student, with their own submission."""

    my_submission: SubmissionResponse | None = None
    is_overdue: bool = False


class SubmitAssignmentRequest(BaseModel):
    content: str | None = Field(default=None, max_length=20000)
    file_url: str | None = None


class GradeSubmissionRequest(BaseModel):
    score: int
    feedback: str | None = Field(default=None, max_length=5000)
