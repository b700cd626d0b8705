# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Student directory service.

The roster lists every student enrolled in the courses a staff member
manages, grouped by student, with summary figures. Tutors see their own
courses and admins see the whole platform. Revenue is reported as zero
until payments exist.
"""

import logging
from datetime import timedelta

from sqlalchemy import ColumnElement, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from learnhub.infrastructure.database.models import (
    Course,
    Enrollment,
    EnrollmentStatus,
    Progress,
    User,
    UserRole,
)
from learnhub.models.student import (
    RegisteredStudent,
    RosterEnrollment,
    RosterStats,
    RosterStudent,
    StudentRoster,
)
from learnhub.utils.datetime import ensure_utc, utc_now

logger = logging.getLogger(__name__)

NEW_STUDENT_WINDOW = timedelta(days=30)
TOP_PERFORMER_PROGRESS = 80


def _is_completed(enrollment: RosterEnrollment) -> bool:
    return enrollment.status == EnrollmentStatus.COMPLETED or enrollment.progress_percentage >= 100


def roster_stats(students: list[RosterStudent]) -> RosterStats:
    """Summary figures over a roster."""
    enrollments = [e for student in students for e in student.enrollments]
    new_since = utc_now() - NEW_STUDENT_WINDOW

    average = 0.0
    if enrollments:
        average = round(sum(e.progress_percentage for e in enrollments) / len(enrollments), 2)

    return RosterStats(
        total_students=len(students),
        active_students=sum(
            1 for s in students if any(e.status == EnrollmentStatus.ACTIVE for e in s.enrollments)
        ),
        new_this_month=sum(1 for s in students if ensure_utc(s.joined_at) > new_since),
        average_progress=average,
        top_performers=sum(
            1
            for s in students
            if any(e.progress_percentage > TOP_PERFORMER_PROGRESS for e in s.enrollments)
        ),
    )


class StudentService:
    """Service for the staff-facing student directory.

    Attributes:
        db: Database session.
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def roster(self, actor: User) -> StudentRoster:
        """Students enrolled in the actor's courses, most recent enrollment first."""
        scope = self._course_scope(actor)

        result = await self.db.execute(
            select(Enrollment, User, Course.title)
            .join(User, Enrollment.user_id == User.id)
            .join(Course, Enrollment.course_id == Course.id)
            .where(*scope)
            .order_by(Enrollment.enrolled_at.desc())
        )
        rows = result.all()
        if not rows:
            return StudentRoster()

        spent_rows = await self.db.execute(
            select(Progress.user_id, func.coalesce(func.sum(Progress.time_spent), 0))
            .join(Course, Progress.course_id == Course.id)
            .where(*scope)
            .group_by(Progress.user_id)
        )
        time_spent = dict(spent_rows.all())

        students: dict[str, RosterStudent] = {}
        for enrollment, user, course_title in rows:
            student = students.get(user.id)
            if student is None:
                student = students[user.id] = RosterStudent(
                    id=user.id,
                    first_name=user.first_name,
                    last_name=user.last_name,
                    email=user.email,
                    avatar=user.avatar,
                    joined_at=user.created_at,
                    last_active=user.last_login_at or user.updated_at or user.created_at,
                    total_time_spent=time_spent.get(user.id, 0),
                )
            student.enrollments.append(
                RosterEnrollment(
                    course_id=enrollment.course_id,
                    course_title=course_title,
                    enrolled_at=enrollment.enrolled_at,
                    status=enrollment.status,
                    progress_percentage=enrollment.progress_percentage,
                )
            )

        for student in students.values():
            student.total_courses = len(student.enrollments)
            student.completed_courses = sum(1 for e in student.enrollments if _is_completed(e))

        roster = list(students.values())
        return StudentRoster(students=roster, stats=roster_stats(roster))

    async def count(self) -> int:
        """Number of student accounts."""
        return await self.db.scalar(
            select(func.count(User.id)).where(User.role == UserRole.STUDENT)
        ) or 0

    async def registered(self) -> list[RegisteredStudent]:
        """Every student account, newest first."""
        result = await self.db.execute(
            select(User).where(User.role == UserRole.STUDENT).order_by(User.created_at.desc())
        )
        return [
            RegisteredStudent(
                id=user.id,
                first_name=user.first_name,
                last_name=user.last_name,
                email=user.email,
                avatar=user.avatar,
                registered_at=user.created_at,
                last_active=user.last_login_at or user.updated_at,
            )
            for user in result.scalars().all()
        ]

    @staticmethod
    def _course_scope(actor: User) -> list[ColumnElement[bool]]:
        if actor.role == UserRole.TUTOR:
            return [Course.creator_id == actor.id]
        return []
