# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Enrollment service for managing student enrollments in courses.

This module provides the EnrollmentService that handles:
- Student self-enrollment in published public courses
- The student's enrollment dashboard with aggregated progress
- Course rosters for owners and admins
- Status changes and cancellation

Example:
    >>> service = EnrollmentService(db)
    >>> enrollment = await service.enroll(student, EnrollRequest(course_id=course_id))
"""

import logging

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from learnhub.domains.access import can_manage_course, get_enrollment
from learnhub.domains.course.service import course_summary_query, fetch_course_summaries
from learnhub.domains.errors import (
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    ServiceError,
    ValidationFailedError,
)
from learnhub.domains.progress import calculate_progress_from_counts
from learnhub.infrastructure.database.models import (
    Course,
    CourseModule,
    Enrollment,
    EnrollmentStatus,
    Material,
    Progress,
    User,
)
from learnhub.models.enrollment import (
    CourseProgressResponse,
    CourseProgressStats,
    CourseStudent,
    EnrollmentResponse,
    EnrollmentStatusUpdateRequest,
    EnrollRequest,
    MyEnrollment,
)
from learnhub.models.material import MaterialWithProgress, ProgressResponse
from learnhub.models.user import UserSummary
from learnhub.utils.datetime import utc_now

logger = logging.getLogger(__name__)


class EnrollmentServiceError(ServiceError):
    """Base exception for enrollment service errors."""


class EnrollmentCourseNotFoundError(EnrollmentServiceError, NotFoundError):
    def __init__(self, course_id: str) -> None:
        super().__init__("Course not found")
        self.course_id = course_id


class CourseNotAvailableError(EnrollmentServiceError, ValidationFailedError):
    def __init__(self, course_id: str) -> None:
        super().__init__("Course is not available for enrollment")
        self.course_id = course_id


class AlreadyEnrolledError(EnrollmentServiceError, ConflictError):
    def __init__(self, course_id: str) -> None:
        super().__init__("Already enrolled in this course")
        self.course_id = course_id


class EnrollmentNotFoundError(EnrollmentServiceError, NotFoundError):
    def __init__(self, message: str = "Enrollment not found") -> None:
        super().__init__(message)


class EnrollmentAccessDeniedError(EnrollmentServiceError, PermissionDeniedError):
    def __init__(self, message: str = "Not authorized to manage this enrollment") -> None:
        super().__init__(message)


class EnrollmentService:
    """Service for managing enrollments.

    Attributes:
        db: Database session.
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    # =========================================================================
    # Student operations
    # =========================================================================

    async def enroll(self, student: User, request: EnrollRequest) -> EnrollmentResponse:
        """Enroll a student in a course.

        Raises:
            EnrollmentCourseNotFoundError: If the course does not exist.
            CourseNotAvailableError: If the course is not published and public.
            AlreadyEnrolledError: If the student is already enrolled.
        """
        course = await self.db.get(Course, request.course_id)
        if course is None:
            raise EnrollmentCourseNotFoundError(request.course_id)
        if not course.is_available:
            raise CourseNotAvailableError(request.course_id)
        if await get_enrollment(self.db, student.id, course.id) is not None:
            raise AlreadyEnrolledError(course.id)

        enrollment = Enrollment(
            user_id=student.id,
            course_id=course.id,
            status=EnrollmentStatus.ACTIVE,
            progress_percentage=0,
        )
        self.db.add(enrollment)
        await self.db.commit()
        await self.db.refresh(enrollment)

        logger.info("Student enrolled: user=%s, course=%s", student.id, course.id)
        return EnrollmentResponse.model_validate(enrollment)

    async def my_enrollments(self, student: User) -> list[MyEnrollment]:
        """The student's enrollments with course info and aggregated progress."""
        result = await self.db.execute(
            select(Enrollment)
            .where(Enrollment.user_id == student.id)
            .order_by(Enrollment.enrolled_at.desc())
        )
        enrollments = result.scalars().all()
        if not enrollments:
            return []

        course_ids = [e.course_id for e in enrollments]
        summaries = await fetch_course_summaries(
            self.db,
            course_summary_query().where(Course.id.in_(course_ids)),
        )
        courses = {c.id: c for c in summaries}

        totals_result = await self.db.execute(
            select(Material.course_id, func.count(Material.id))
            .where(Material.course_id.in_(course_ids))
            .group_by(Material.course_id)
        )
        total_materials = dict(totals_result.all())

        progress_result = await self.db.execute(
            select(
                Progress.course_id,
                func.count(Progress.id).filter(Progress.is_completed.is_(True)),
                func.coalesce(func.sum(Progress.time_spent), 0),
            )
            .where(Progress.user_id == student.id, Progress.course_id.in_(course_ids))
            .group_by(Progress.course_id)
        )
        progress = {course_id: (done, spent) for course_id, done, spent in progress_result.all()}

        items = []
        for enrollment in enrollments:
            done, spent = progress.get(enrollment.course_id, (0, 0))
            items.append(
                MyEnrollment(
                    **EnrollmentResponse.model_validate(enrollment).model_dump(),
                    course=courses[enrollment.course_id],
                    completed_materials=done or 0,
                    total_materials=total_materials.get(enrollment.course_id, 0),
                    total_time_spent=spent or 0,
                )
            )
        return items

    async def course_progress(self, student: User, course_id: str) -> CourseProgressResponse:
        """The student's progress through one course, material by material.

        Raises:
            EnrollmentNotFoundError: If the student is not enrolled.
        """
        enrollment = await get_enrollment(self.db, student.id, course_id)
        if enrollment is None:
            raise EnrollmentNotFoundError("You are not enrolled in this course")

        materials_result = await self.db.execute(
            select(Material)
            .join(CourseModule, Material.module_id == CourseModule.id)
            .where(Material.course_id == course_id)
            .order_by(CourseModule.order_index, Material.order_index, Material.created_at)
        )
        materials = materials_result.scalars().all()

        progress_result = await self.db.execute(
            select(Progress).where(
                Progress.user_id == student.id,
                Progress.course_id == course_id,
            )
        )
        records = {p.material_id: p for p in progress_result.scalars().all()}

        items = []
        completed = 0
        time_spent = 0
        for material in materials:
            item = MaterialWithProgress.model_validate(material)
            record = records.get(material.id)
            if record is not None:
                item.progress = ProgressResponse.model_validate(record)
                completed += int(record.is_completed)
                time_spent += record.time_spent
            items.append(item)

        return CourseProgressResponse(
            enrollment=EnrollmentResponse.model_validate(enrollment),
            materials=items,
            stats=CourseProgressStats(
                total_materials=len(materials),
                completed_materials=completed,
                total_time_spent=time_spent,
                progress_percentage=calculate_progress_from_counts(completed, len(materials)),
            ),
        )

    # =========================================================================
    # Course owner operations
    # =========================================================================

    async def course_students(self, course_id: str, actor: User) -> list[CourseStudent]:
        """Roster of a course with each student's progress.

        Raises:
            EnrollmentCourseNotFoundError: If the course does not exist.
            EnrollmentAccessDeniedError: If the actor may not manage the course.
        """
        course = await self.db.get(Course, course_id)
        if course is None:
            raise EnrollmentCourseNotFoundError(course_id)
        if not can_manage_course(course, actor):
            raise EnrollmentAccessDeniedError("Not authorized to view students of this course")

        last_accessed = (
            select(func.max(Progress.last_accessed))
            .where(
                Progress.user_id == Enrollment.user_id,
                Progress.course_id == Enrollment.course_id,
            )
            .correlate(Enrollment)
            .scalar_subquery()
        )
        result = await self.db.execute(
            select(Enrollment, last_accessed)
            .options(selectinload(Enrollment.user))
            .where(Enrollment.course_id == course_id)
            .order_by(Enrollment.enrolled_at.desc())
        )

        return [
            CourseStudent(
                **EnrollmentResponse.model_validate(enrollment).model_dump(),
                student=UserSummary.model_validate(enrollment.user),
                last_accessed=accessed,
            )
            for enrollment, accessed in result.all()
        ]

    # =========================================================================
    # Shared operations
    # =========================================================================

    async def update_status(
        self,
        enrollment_id: str,
        request: EnrollmentStatusUpdateRequest,
        actor: User,
    ) -> EnrollmentResponse:
        """Change an enrollment's status.

        Allowed for the enrolled student, the course owner and admins.
        COMPLETED stamps ``completed_at``, any other status clears it.
        """
        enrollment = await self._get_enrollment(enrollment_id)
        if enrollment.user_id != actor.id and not can_manage_course(enrollment.course, actor):
            raise EnrollmentAccessDeniedError()

        enrollment.status = request.status
        if request.status == EnrollmentStatus.COMPLETED:
            enrollment.completed_at = enrollment.completed_at or utc_now()
        else:
            enrollment.completed_at = None

        await self.db.commit()
        await self.db.refresh(enrollment)

        logger.info(
            "Enrollment status changed: enrollment=%s, status=%s, by=%s",
            enrollment_id,
            request.status,
            actor.id,
        )
        return EnrollmentResponse.model_validate(enrollment)

    async def cancel(self, enrollment_id: str, actor: User) -> None:
        """Remove an enrollment together with the student's progress records.

        Allowed for the enrolled student and admins.
        """
        enrollment = await self._get_enrollment(enrollment_id)
        if enrollment.user_id != actor.id and not actor.is_admin:
            raise EnrollmentAccessDeniedError()

        await self.db.execute(
            delete(Progress).where(
                Progress.user_id == enrollment.user_id,
                Progress.course_id == enrollment.course_id,
            )
        )
        await self.db.delete(enrollment)
        await self.db.commit()

        logger.info(
            "Enrollment cancelled: enrollment=%s, user=%s, course=%s",
            enrollment_id,
            enrollment.user_id,
            enrollment.course_id,
        )

    async def _get_enrollment(self, enrollment_id: str) -> Enrollment:
        result = await self.db.execute(
            select(Enrollment)
            .options(selectinload(Enrollment.course))
            .where(Enrollment.id == enrollment_id)
        )
        enrollment = result.scalar_one_or_none()
        if enrollment is None:
            raise EnrollmentNotFoundError()
        return enrollment
