# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Analytics service.

Dashboard figures for course staff and public platform counters. Every
figure is an SQL aggregate; no rows are loaded just to be counted.

Tutors see figures for the courses they created, admins for the whole
platform. Revenue is reported as zero until payments exist.
"""

import logging

from sqlalchemy import ColumnElement, distinct, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from learnhub.domains.access import can_manage_course
from learnhub.domains.errors import NotFoundError, PermissionDeniedError, ServiceError
from learnhub.infrastructure.database.models import (
    Category,
    Course,
    CourseStatus,
    Enrollment,
    EnrollmentStatus,
    Material,
    Progress,
    User,
    UserRole,
)
from learnhub.models.analytics import (
    CourseAnalytics,
    CourseCompletionReport,
    EngagementStats,
    PlatformStats,
    RecentEnrollment,
    RevenueStats,
    StudentCompletion,
    TutorAnalytics,
    TutorOverview,
)
from learnhub.utils.datetime import utc_month_start

logger = logging.getLogger(__name__)

RECENT_ENROLLMENTS_LIMIT = 5


class AnalyticsServiceError(ServiceError):
    """Base exception for analytics service errors."""


class AnalyticsCourseNotFoundError(AnalyticsServiceError, NotFoundError):
    def __init__(self, course_id: str) -> None:
        super().__init__("Course not found")
        self.course_id = course_id


class AnalyticsAccessDeniedError(AnalyticsServiceError, PermissionDeniedError):
    def __init__(self) -> None:
        super().__init__("Not authorized to view analytics for this course")


def completion_rate(completed_items: int, materials: int, students: int) -> float:
    """Share of completed material slots, as a percentage with 2 decimals."""
    slots = materials * students
    if slots <= 0:
        return 0.0
    return round(completed_items * 100 / slots, 2)


class AnalyticsService:
    """Service for dashboard analytics.

    Attributes:
        db: Database session.
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def tutor_analytics(self, actor: User) -> TutorAnalytics:
        """Dashboard for a staff member's courses."""
        scope = self._course_scope(actor)

        return TutorAnalytics(
            overview=await self._overview(scope),
            revenue=RevenueStats(),
            courses=await self._course_rows(scope),
            engagement=await self._engagement(scope),
            recent_enrollments=await self._recent_enrollments(scope),
        )

    async def course_completion(self, course_id: str, actor: User) -> CourseCompletionReport:
        """Per-student completion report for one course.

        Raises:
            AnalyticsCourseNotFoundError: If the course does not exist.
            AnalyticsAccessDeniedError: If the actor may not manage the course.
        """
        course = await self.db.get(Course, course_id)
        if course is None:
            raise AnalyticsCourseNotFoundError(course_id)
        if not can_manage_course(course, actor):
            raise AnalyticsAccessDeniedError()

        total_materials = await self.db.scalar(
            select(func.count(Material.id)).where(Material.course_id == course_id)
        ) or 0

        progress = (
            select(
                Progress.user_id.label("user_id"),
                func.count(Progress.id).filter(Progress.is_completed.is_(True)).label("completed"),
                func.coalesce(func.sum(Progress.time_spent), 0).label("time_spent"),
                func.max(Progress.last_accessed).label("last_accessed"),
            )
            .where(Progress.course_id == course_id)
            .group_by(Progress.user_id)
            .subquery()
        )
        result = await self.db.execute(
            select(
                Enrollment,
                User,
                func.coalesce(progress.c.completed, 0),
                func.coalesce(progress.c.time_spent, 0),
                progress.c.last_accessed,
            )
            .join(User, Enrollment.user_id == User.id)
            .outerjoin(progress, progress.c.user_id == Enrollment.user_id)
            .where(Enrollment.course_id == course_id)
            .order_by(Enrollment.enrolled_at)
        )

        students = [
            StudentCompletion(
                student_id=user.id,
                student_name=user.full_name,
                email=user.email,
                enrollment_status=enrollment.status,
                progress_percentage=enrollment.progress_percentage,
                completed_materials=completed,
                total_materials=total_materials,
                completion_percentage=completion_rate(completed, total_materials, 1),
                time_spent=time_spent,
                last_accessed=last_accessed,
            )
            for enrollment, user, completed, time_spent, last_accessed in result.all()
        ]

        return CourseCompletionReport(
            course_id=course.id,
            title=course.title,
            total_materials=total_materials,
            total_students=len(students),
            students=students,
        )

    async def platform_stats(self) -> PlatformStats:
        """Public counters shown on the landing page."""
        published = (Course.status == CourseStatus.PUBLISHED, Course.is_public.is_(True))

        return PlatformStats(
            total_courses=await self.db.scalar(select(func.count(Course.id)).where(*published)) or 0,
            total_students=await self.db.scalar(
                select(func.count(User.id)).where(User.role == UserRole.STUDENT, User.is_active.is_(True))
            ) or 0,
            total_categories=await self.db.scalar(select(func.count(Category.id))) or 0,
            total_tutors=await self.db.scalar(
                select(func.count(distinct(Course.creator_id))).where(*published)
            ) or 0,
        )

    # =========================================================================
    # Dashboard sections
    # =========================================================================

    @staticmethod
    def _course_scope(actor: User) -> list[ColumnElement[bool]]:
        if actor.role == UserRole.TUTOR:
            return [Course.creator_id == actor.id]
        return []

    async def _overview(self, scope: list[ColumnElement[bool]]) -> TutorOverview:
        status_rows = await self.db.execute(
            select(Course.status, func.count(Course.id)).where(*scope).group_by(Course.status)
        )
        by_status = dict(status_rows.all())

        enrollment_stats = await self.db.execute(
            select(
                func.count(Enrollment.id),
                func.count(distinct(Enrollment.user_id)),
                func.count(Enrollment.id).filter(Enrollment.status == EnrollmentStatus.COMPLETED),
                func.avg(Enrollment.progress_percentage),
            )
            .join(Course, Enrollment.course_id == Course.id)
            .where(*scope)
        )
        total, students, completed, average = enrollment_stats.one()

        return TutorOverview(
            total_courses=sum(by_status.values()),
            published_courses=by_status.get(CourseStatus.PUBLISHED, 0),
            draft_courses=by_status.get(CourseStatus.DRAFT, 0),
            archived_courses=by_status.get(CourseStatus.ARCHIVED, 0),
            total_students=students or 0,
            total_enrollments=total or 0,
            completed_enrollments=completed or 0,
            average_progress=round(float(average), 2) if average is not None else 0.0,
        )

    async def _course_rows(self, scope: list[ColumnElement[bool]]) -> list[CourseAnalytics]:
        def correlated(column):
            return column.correlate(Course).scalar_subquery()

        enrollments = correlated(
            select(func.count(Enrollment.id)).where(Enrollment.course_id == Course.id)
        )
        completed = correlated(
            select(func.count(Enrollment.id)).where(
                Enrollment.course_id == Course.id,
                Enrollment.status == EnrollmentStatus.COMPLETED,
            )
        )
        average = correlated(
            select(func.avg(Enrollment.progress_percentage)).where(Enrollment.course_id == Course.id)
        )
        materials = correlated(select(func.count(Material.id)).where(Material.course_id == Course.id))
        completed_items = correlated(
            select(func.count(Progress.id)).where(
                Progress.course_id == Course.id,
                Progress.is_completed.is_(True),
            )
        )

        result = await self.db.execute(
            select(
                Course.id,
                Course.title,
                Course.status,
                enrollments,
                completed,
                average,
                materials,
                completed_items,
            )
            .where(*scope)
            .order_by(Course.created_at.desc())
        )

        return [
            CourseAnalytics(
                course_id=course_id,
                title=title,
                status=status,
                enrollments=enrolled or 0,
                completed_enrollments=done or 0,
                average_progress=round(float(avg), 2) if avg is not None else 0.0,
                total_materials=material_count or 0,
                completion_rate=completion_rate(items or 0, material_count or 0, enrolled or 0),
            )
            for course_id, title, status, enrolled, done, avg, material_count, items in result.all()
        ]

    async def _engagement(self, scope: list[ColumnElement[bool]]) -> EngagementStats:
        result = await self.db.execute(
            select(
                func.coalesce(func.sum(Progress.time_spent), 0),
                func.count(Progress.id).filter(Progress.is_completed.is_(True)),
                func.count(distinct(Progress.user_id)).filter(
                    Progress.last_accessed >= utc_month_start()
                ),
            )
            .join(Course, Progress.course_id == Course.id)
            .where(*scope)
        )
        time_spent, completed, active = result.one()
        return EngagementStats(
            total_time_spent=time_spent or 0,
            materials_completed=completed or 0,
            active_students_this_month=active or 0,
        )

    async def _recent_enrollments(self, scope: list[ColumnElement[bool]]) -> list[RecentEnrollment]:
        result = await self.db.execute(
            select(Enrollment, Course.title, User)
            .join(Course, Enrollment.course_id == Course.id)
            .join(User, Enrollment.user_id == User.id)
            .where(*scope)
            .order_by(Enrollment.enrolled_at.desc())
            .limit(RECENT_ENROLLMENTS_LIMIT)
        )
        return [
            RecentEnrollment(
                enrollment_id=enrollment.id,
                course_id=enrollment.course_id,
                course_title=title,
                student_id=user.id,
                student_name=user.full_name,
                enrolled_at=enrollment.enrolled_at,
            )
            for enrollment, title, user in result.all()
        ]
