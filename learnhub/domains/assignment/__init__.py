# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Assignment domain: assignments, submissions and grading."""

from learnhub.domains.assignment.service import (
    AlreadySubmittedError,
    AssignmentAccessDeniedError,
    AssignmentCourseNotFoundError,
    AssignmentNotFoundError,
    AssignmentService,
    AssignmentServiceError,
    DueDatePassedError,
    EmptySubmissionError,
    InvalidScoreError,
    NotEnrolledInCourseError,
    SubmissionNotFoundError,
)

__all__ = [
    "AlreadySubmittedError",
    "AssignmentAccessDeniedError",
    "AssignmentCourseNotFoundError",
    "AssignmentNotFoundError",
    "AssignmentService",
    "AssignmentServiceError",
    "DueDatePassedError",
    "EmptySubmissionError",
    "InvalidScoreError",
    "NotEnrolledInCourseError",
    "SubmissionNotFoundError",
]
