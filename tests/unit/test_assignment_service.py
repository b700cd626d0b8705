# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for the assignment service."""

from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock
from uuid import uuid4

import pytest

from learnhub.domains.assignment import (
    AlreadySubmittedError,
    AssignmentAccessDeniedError,
    AssignmentNotFoundError,
    AssignmentService,
    DueDatePassedError,
    EmptySubmissionError,
    InvalidScoreError,
    NotEnrolledInCourseError,
    SubmissionNotFoundError,
)
from learnhub.infrastructure.database.models import (
    Assignment,
    AssignmentSubmission,
    SubmissionStatus,
)
from learnhub.models.assignment import GradeSubmissionRequest, SubmitAssignmentRequest


@pytest.fixture
def assignment_service(mock_db) -> AssignmentService:
    return AssignmentService(mock_db, MagicMock())


@pytest.fixture
def make_assignment(published_course):
    def _make(**overrides) -> Assignment:
        now = datetime.now(timezone.utc)
        values = {
            "id": str(uuid4()),
            "course_id": published_course.id,
            "creator_id": published_course.creator_id,
            "title": "Essay",
            "description": "Write an essay",
            "due_date": None,
            "max_score": 100,
            "attachment_url": None,
            "created_at": now,
            "updated_at": now,
        }
        values.update(overrides)
        return Assignment(**values)

    return _make


class TestSubmit:
    @pytest.mark.asyncio
    async def test_assignment_not_found(self, assignment_service, mock_db, student_user) -> None:
        mock_db.get.return_value = None

        with pytest.raises(AssignmentNotFoundError):
            await assignment_service.submit("missing", SubmitAssignmentRequest(content="x"), student_user)

    @pytest.mark.asyncio
    async def test_not_enrolled(
        self, assignment_service, mock_db, student_user, make_assignment, make_scalar_result
    ) -> None:
        mock_db.get.return_value = make_assignment()
        mock_db.execute.side_effect = [make_scalar_result(None)]

        with pytest.raises(NotEnrolledInCourseError):
            await assignment_service.submit("a", SubmitAssignmentRequest(content="x"), student_user)

    @pytest.mark.asyncio
    async def test_already_submitted(
        self, assignment_service, mock_db, student_user, published_course, make_assignment, make_enrollment,
        make_scalar_result,
    ) -> None:
        assignment = make_assignment()
        mock_db.get.return_value = assignment
        mock_db.execute.side_effect = [
            make_scalar_result(make_enrollment(student_user, published_course)),
            make_scalar_result(MagicMock(spec=AssignmentSubmission)),
        ]

        with pytest.raises(AlreadySubmittedError):
            await assignment_service.submit(assignment.id, SubmitAssignmentRequest(content="x"), student_user)

    @pytest.mark.asyncio
    async def test_due_date_passed(
        self, assignment_service, mock_db, student_user, published_course, make_assignment, make_enrollment,
        make_scalar_result,
    ) -> None:
        assignment = make_assignment(due_date=datetime.now(timezone.utc) - timedelta(hours=1))
        mock_db.get.return_value = assignment
        mock_db.execute.side_effect = [
            make_scalar_result(make_enrollment(student_user, published_course)),
            make_scalar_result(None),
        ]

        with pytest.raises(DueDatePassedError):
            await assignment_service.submit(assignment.id, SubmitAssignmentRequest(content="x"), student_user)

    @pytest.mark.asyncio
    async def test_empty_submission(
        self, assignment_service, mock_db, student_user, published_course, make_assignment, make_enrollment,
        make_scalar_result,
    ) -> None:
        assignment = make_assignment()
        mock_db.get.return_value = assignment
        mock_db.execute.side_effect = [
            make_scalar_result(make_enrollment(student_user, published_course)),
            make_scalar_result(None),
        ]

        with pytest.raises(EmptySubmissionError):
            await assignment_service.submit(assignment.id, SubmitAssignmentRequest(content="   "), student_user)
        mock_db.add.assert_not_called()


class TestGrade:
    def _submission(self, assignment: Assignment, student) -> AssignmentSubmission:
        submission = AssignmentSubmission(
            id=str(uuid4()),
            assignment_id=assignment.id,
            student_id=student.id,
            content="My essay",
            status=SubmissionStatus.SUBMITTED,
            submitted_at=datetime.now(timezone.utc),
        )
        submission.assignment = assignment
        submission.student = student
        return submission

    @pytest.mark.asyncio
    async def test_submission_not_found(self, assignment_service, mock_db, tutor_user, make_scalar_result) -> None:
        mock_db.execute.side_effect = [make_scalar_result(None)]

        with pytest.raises(SubmissionNotFoundError):
            await assignment_service.grade_submission("missing", GradeSubmissionRequest(score=10), tutor_user)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("score", [-1, 101])
    async def test_invalid_score(
        self, assignment_service, mock_db, tutor_user, student_user, published_course, make_assignment,
        make_scalar_result, score,
    ) -> None:
        assignment = make_assignment()
        assignment.course = published_course
        mock_db.execute.side_effect = [make_scalar_result(self._submission(assignment, student_user))]

        with pytest.raises(InvalidScoreError) as exc_info:
            await assignment_service.grade_submission("s", GradeSubmissionRequest(score=score), tutor_user)

        assert exc_info.value.message == "Score must be between 0 and 100"

    @pytest.mark.asyncio
    async def test_other_tutor_denied(
        self, assignment_service, mock_db, student_user, published_course, make_assignment, make_user,
        make_scalar_result,
    ) -> None:
        assignment = make_assignment()
        assignment.course = published_course
        mock_db.execute.side_effect = [make_scalar_result(self._submission(assignment, student_user))]

        with pytest.raises(AssignmentAccessDeniedError):
            await assignment_service.grade_submission("s", GradeSubmissionRequest(score=50), make_user("TUTOR"))

    @pytest.mark.asyncio
    async def test_grade_success(
        self, assignment_service, mock_db, tutor_user, student_user, published_course, make_assignment,
        make_scalar_result,
    ) -> None:
        assignment = make_assignment()
        assignment.course = published_course
        submission = self._submission(assignment, student_user)
        mock_db.execute.side_effect = [make_scalar_result(submission)]

        result = await assignment_service.grade_submission(
            submission.id,
            GradeSubmissionRequest(score=100, feedback="Excellent"),
            tutor_user,
        )

        assert result.status == "GRADED"
        assert result.score == 100
        assert result.feedback == "Excellent"
        assert result.student.id == student_user.id
        assert submission.graded_by_id == tutor_user.id
        assert submission.graded_at is not None
        mock_db.commit.assert_awaited_once()
