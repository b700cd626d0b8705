# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Assignment service.

Course owners and admins create assignments, review submissions and grade
them. Enrolled students see the assignments of their courses and submit
once per assignment, before the due date.

Uploaded attachments and submission files are removed from storage only
after the deleting transaction has committed.
"""

import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from learnhub.domains.access import can_manage_course, get_enrollment
from learnhub.domains.errors import (
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    ServiceError,
    ValidationFailedError,
)
from learnhub.domains.upload.storage import FileStorage
from learnhub.infrastructure.database.models import (
    Assignment,
    AssignmentSubmission,
    Course,
    SubmissionStatus,
    User,
)
from learnhub.models.assignment import (
    AssignmentCreateRequest,
    AssignmentResponse,
    AssignmentUpdateRequest,
    GradeSubmissionRequest,
    StudentAssignment,
    SubmissionResponse,
    SubmitAssignmentRequest,
)
from learnhub.utils.datetime import ensure_utc, utc_now

logger = logging.getLogger(__name__)


class AssignmentServiceError(ServiceError):
    """Base exception for assignment service errors."""


class AssignmentNotFoundError(AssignmentServiceError, NotFoundError):
    def __init__(self, assignment_id: str) -> None:
        super().__init__("Assignment not found")
        self.assignment_id = assignment_id


class AssignmentCourseNotFoundError(AssignmentServiceError, NotFoundError):
    def __init__(self, course_id: str) -> None:
        super().__init__("Course not found or you do not have permission to add assignments")
        self.course_id = course_id


class SubmissionNotFoundError(AssignmentServiceError, NotFoundError):
    def __init__(self, submission_id: str) -> None:
        super().__init__("Submission not found")
        self.submission_id = submission_id


class AssignmentAccessDeniedError(AssignmentServiceError, PermissionDeniedError):
    def __init__(self) -> None:
        super().__init__("Not authorized to manage assignments of this course")


class NotEnrolledInCourseError(AssignmentServiceError, PermissionDeniedError):
    def __init__(self) -> None:
        super().__init__("You are not enrolled in this course")


class AlreadySubmittedError(AssignmentServiceError, ConflictError):
    def __init__(self, assignment_id: str) -> None:
        super().__init__("You have already submitted this assignment.")
        self.assignment_id = assignment_id


class DueDatePassedError(AssignmentServiceError, ValidationFailedError):
    def __init__(self) -> None:
        super().__init__("Assignment due date has passed.")


class EmptySubmissionError(AssignmentServiceError, ValidationFailedError):
    def __init__(self) -> None:
        super().__init__("Please provide content or a file for your submission.")


class InvalidScoreError(AssignmentServiceError, ValidationFailedError):
    def __init__(self, max_score: int) -> None:
        super().__init__(
            f"Score must be between 0 and {max_score}",
            details={"max_score": max_score},
        )


def _count_columns() -> list:
    return [
        select(func.count(AssignmentSubmission.id))
        .where(AssignmentSubmission.assignment_id == Assignment.id)
        .correlate(Assignment)
        .scalar_subquery()
        .label("submission_count"),
        select(func.count(AssignmentSubmission.id))
        .where(
            AssignmentSubmission.assignment_id == Assignment.id,
            AssignmentSubmission.status == SubmissionStatus.SUBMITTED,
        )
        .correlate(Assignment)
        .scalar_subquery()
        .label("ungraded_count"),
    ]


class AssignmentService:
    """Service for assignments and submissions.

    Attributes:
        db: Database session.
        storage: File storage used to clean up attachments.
    """

    def __init__(self, db: AsyncSession, storage: FileStorage) -> None:
        self.db = db
        self.storage = storage

    # =========================================================================
    # Course owner operations
    # =========================================================================

    async def create_assignment(
        self,
        request: AssignmentCreateRequest,
        actor: User,
    ) -> AssignmentResponse:
        """Create an assignment.

        Raises:
            AssignmentCourseNotFoundError: If the course does not exist or
                the actor may not manage it.
        """
        course = await self.db.get(Course, request.course_id)
        if course is None or not can_manage_course(course, actor):
            raise AssignmentCourseNotFoundError(request.course_id)

        assignment = Assignment(**request.model_dump(), creator_id=actor.id)
        self.db.add(assignment)
        await self.db.commit()
        await self.db.refresh(assignment)

        logger.info("Created assignment: assignment=%s, course=%s", assignment.id, course.id)
        return self._to_response(assignment)

    async def list_for_course(self, course_id: str, actor: User) -> list[AssignmentResponse]:
        """Assignments of a course with submission and ungraded counts."""
        course = await self.db.get(Course, course_id)
        if course is None:
            raise AssignmentCourseNotFoundError(course_id)
        if not can_manage_course(course, actor):
            raise AssignmentAccessDeniedError()

        result = await self.db.execute(
            select(Assignment, *_count_columns())
            .where(Assignment.course_id == course_id)
            .order_by(Assignment.created_at.desc())
        )
        return [self._to_response(a, submitted, ungraded) for a, submitted, ungraded in result.all()]

    async def get_assignment(self, assignment_id: str, actor: User) -> AssignmentResponse:
        await self._get_managed_assignment(assignment_id, actor)
        result = await self.db.execute(
            select(Assignment, *_count_columns()).where(Assignment.id == assignment_id)
        )
        return self._to_response(*result.one())

    async def update_assignment(
        self,
        assignment_id: str,
        request: AssignmentUpdateRequest,
        actor: User,
    ) -> AssignmentResponse:
        """Update an assignment. A replaced attachment is removed after commit."""
        assignment = await self._get_managed_assignment(assignment_id, actor)

        updates = request.model_dump(exclude_unset=True)
        old_attachment = assignment.attachment_url
        for field, value in updates.items():
            setattr(assignment, field, value)

        await self.db.commit()
        await self.db.refresh(assignment)

        if "attachment_url" in updates and old_attachment and old_attachment != assignment.attachment_url:
            self.storage.delete(old_attachment)

        logger.info("Updated assignment: %s", assignment_id)
        return await self.get_assignment(assignment_id, actor)

    async def delete_assignment(self, assignment_id: str, actor: User) -> None:
        """Delete an assignment with its submissions and their files."""
        assignment = await self._get_managed_assignment(assignment_id, actor)

        file_urls = list(
            (
                await self.db.scalars(
                    select(AssignmentSubmission.file_url).where(
                        AssignmentSubmission.assignment_id == assignment_id,
                        AssignmentSubmission.file_url.is_not(None),
                    )
                )
            ).all()
        )
        if assignment.attachment_url:
            file_urls.append(assignment.attachment_url)

        await self.db.delete(assignment)
        await self.db.commit()

        removed = self.storage.delete_many(file_urls)
        logger.info("Deleted assignment: assignment=%s, files=%d", assignment_id, removed)

    async def list_submissions(self, assignment_id: str, actor: User) -> list[SubmissionResponse]:
        """Submissions for an assignment, newest first."""
        await self._get_managed_assignment(assignment_id, actor)

        result = await self.db.execute(
            select(AssignmentSubmission)
            .options(selectinload(AssignmentSubmission.student))
            .where(AssignmentSubmission.assignment_id == assignment_id)
            .order_by(AssignmentSubmission.submitted_at.desc())
        )
        return [SubmissionResponse.model_validate(s) for s in result.scalars().all()]

    async def grade_submission(
        self,
        submission_id: str,
        request: GradeSubmissionRequest,
        actor: User,
    ) -> SubmissionResponse:
        """Grade a submission.

        Raises:
            SubmissionNotFoundError: If the submission does not exist.
            AssignmentAccessDeniedError: If the actor may not manage the course.
            InvalidScoreError: If the score is negative or above max_score.
        """
        result = await self.db.execute(
            select(AssignmentSubmission)
            .options(
                selectinload(AssignmentSubmission.assignment).selectinload(Assignment.course),
                selectinload(AssignmentSubmission.student),
            )
            .where(AssignmentSubmission.id == submission_id)
        )
        submission = result.scalar_one_or_none()
        if submission is None:
            raise SubmissionNotFoundError(submission_id)

        assignment = submission.assignment
        if not can_manage_course(assignment.course, actor):
            raise AssignmentAccessDeniedError()
        if request.score < 0 or request.score > assignment.max_score:
            raise InvalidScoreError(assignment.max_score)

        submission.score = request.score
        submission.feedback = request.feedback
        submission.status = SubmissionStatus.GRADED
        submission.graded_at = utc_now()
        submission.graded_by_id = actor.id
        await self.db.commit()

        logger.info(
            "Graded submission: submission=%s, score=%d/%d, by=%s",
            submission_id,
            request.score,
            assignment.max_score,
            actor.id,
        )
        return SubmissionResponse.model_validate(submission)

    # =========================================================================
    # Student operations
    # =========================================================================

    async def list_for_student(self, course_id: str, student: User) -> list[StudentAssignment]:
        """Assignments of a course with the student's own submissions.

        Raises:
            NotEnrolledInCourseError: If the student is not enrolled.
        """
        if await get_enrollment(self.db, student.id, course_id) is None:
            raise NotEnrolledInCourseError()

        result = await self.db.execute(
            select(Assignment)
            .where(Assignment.course_id == course_id)
            .order_by(Assignment.due_date.asc().nulls_last(), Assignment.created_at)
        )
        assignments = result.scalars().all()

        submissions_result = await self.db.execute(
            select(AssignmentSubmission)
            .options(selectinload(AssignmentSubmission.student))
            .where(
                AssignmentSubmission.student_id == student.id,
                AssignmentSubmission.assignment_id.in_([a.id for a in assignments]),
            )
        )
        mine = {s.assignment_id: s for s in submissions_result.scalars().all()}

        now = utc_now()
        items = []
        for assignment in assignments:
            item = StudentAssignment.model_validate(assignment)
            submission = mine.get(assignment.id)
            if submission is not None:
                item.my_submission = SubmissionResponse.model_validate(submission)
            item.is_overdue = (
                submission is None
                and assignment.due_date is not None
                and ensure_utc(assignment.due_date) < now
            )
            items.append(item)
        return items

    async def submit(
        self,
        assignment_id: str,
        request: SubmitAssignmentRequest,
        student: User,
    ) -> SubmissionResponse:
        """Submit work for an assignment.

        Raises:
            AssignmentNotFoundError: If the assignment does not exist.
            NotEnrolledInCourseError: If the student is not enrolled.
            AlreadySubmittedError: If the student has already submitted.
            DueDatePassedError: If the due date is in the past.
            EmptySubmissionError: If neither content nor a file is given.
        """
        assignment = await self.db.get(Assignment, assignment_id)
        if assignment is None:
            raise AssignmentNotFoundError(assignment_id)
        if await get_enrollment(self.db, student.id, assignment.course_id) is None:
            raise NotEnrolledInCourseError()
        if await self._get_submission(assignment_id, student.id) is not None:
            raise AlreadySubmittedError(assignment_id)
        if assignment.due_date is not None and ensure_utc(assignment.due_date) < utc_now():
            raise DueDatePassedError()

        content = (request.content or "").strip() or None
        if content is None and not request.file_url:
            raise EmptySubmissionError()

        submission = AssignmentSubmission(
            assignment_id=assignment_id,
            student_id=student.id,
            content=content,
            file_url=request.file_url,
            status=SubmissionStatus.SUBMITTED,
            student=student,
        )
        self.db.add(submission)
        await self.db.commit()

        logger.info("Assignment submitted: assignment=%s, student=%s", assignment_id, student.id)
        return SubmissionResponse.model_validate(submission)

    async def get_my_submission(
        self,
        assignment_id: str,
        student: User,
    ) -> SubmissionResponse | None:
        """The student's submission for an assignment, if any."""
        assignment = await self.db.get(Assignment, assignment_id)
        if assignment is None:
            raise AssignmentNotFoundError(assignment_id)

        submission = await self._get_submission(assignment_id, student.id)
        return SubmissionResponse.model_validate(submission) if submission else None

    # =========================================================================
    # Helpers
    # =========================================================================

    async def _get_managed_assignment(self, assignment_id: str, actor: User) -> Assignment:
        result = await self.db.execute(
            select(Assignment)
            .options(selectinload(Assignment.course))
            .where(Assignment.id == assignment_id)
        )
        assignment = result.scalar_one_or_none()
        if assignment is None:
            raise AssignmentNotFoundError(assignment_id)
        if not can_manage_course(assignment.course, actor):
            raise AssignmentAccessDeniedError()
        return assignment

    async def _get_submission(self, assignment_id: str, student_id: str) -> AssignmentSubmission | None:
        result = await self.db.execute(
            select(AssignmentSubmission)
            .options(selectinload(AssignmentSubmission.student))
            .where(
                AssignmentSubmission.assignment_id == assignment_id,
                AssignmentSubmission.student_id == student_id,
            )
        )
        return result.scalar_one_or_none()

    @staticmethod
    def _to_response(
        assignment: Assignment,
        submission_count: int | None = 0,
        ungraded_count: int | None = 0,
    ) -> AssignmentResponse:
        response = AssignmentResponse.model_validate(assignment)
        response.submission_count = submission_count or 0
        response.ungraded_count = ungraded_count or 0
        return response
