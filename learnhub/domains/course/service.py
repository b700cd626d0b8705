# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Course service for catalogue and course management.

This module provides the CourseService that handles:
- Catalogue listing with filters, search and pagination
- Course detail with ordered modules, materials and latest reviews
- Course creation and updates by staff
- Course deletion with cleanup of uploaded files

Listing statistics (enrollment, module and review counts and the average
rating) are computed by the database with correlated subqueries, one
row per course.

Deletion runs in a single transaction. Files referenced by the course
(thumbnail, material files, assignment attachments, submission files) are
removed only after the transaction has committed, so a failed delete
never leaves rows that point at missing files.

Example:
    >>> service = CourseService(db, storage)
    >>> page = await service.list_courses(CourseFilters(page=1, limit=12), catalogue=True)
"""

import logging
from dataclasses import dataclass
from typing import Any, Sequence

from sqlalchemy import Select, func, or_, select
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
    Category,
    Course,
    CourseModule,
    CourseStatus,
    Enrollment,
    EnrollmentStatus,
    Material,
    MaterialType,
    Review,
    User,
    UserRole,
)
from learnhub.models.common import Page, Pagination
from learnhub.models.course import (
    CourseCreateRequest,
    CourseDeleteSummary,
    CourseDetail,
    CourseSummary,
    CourseUpdateRequest,
)
from learnhub.models.module import ModuleWithMaterials
from learnhub.models.review import ReviewResponse

logger = logging.getLogger(__name__)

LATEST_REVIEWS_LIMIT = 10
MAX_PAGE_SIZE = 100


class CourseServiceError(ServiceError):
    """Base exception for course service errors."""


class CourseNotFoundError(CourseServiceError, NotFoundError):
    def __init__(self, course_id: str) -> None:
        super().__init__("Course not found")
        self.course_id = course_id


class InvalidCategoryError(CourseServiceError, ValidationFailedError):
    def __init__(self, category_id: str) -> None:
        super().__init__("Invalid category")
        self.category_id = category_id


class CourseAccessDeniedError(CourseServiceError, PermissionDeniedError):
    def __init__(self, action: str) -> None:
        super().__init__(f"Not authorized to {action} this course")


class CourseHasActiveEnrollmentsError(CourseServiceError, ConflictError):
    def __init__(self, count: int) -> None:
        super().__init__(
            f"Cannot delete course with {count} active enrollment(s). "
            "Please wait for students to complete the course or remove them first.",
            details={"active_enrollments": count},
        )
        self.count = count


@dataclass
class CourseFilters:
    """Catalogue query parameters."""

    page: int = 1
    limit: int = 12
    category_id: str | None = None
    level: str | None = None
    search: str | None = None
    status: str | None = None


def _stat_columns() -> list[Any]:
    """Correlated aggregate columns selected alongside each course."""
    return [
        select(func.count(Enrollment.id))
        .where(Enrollment.course_id == Course.id)
        .correlate(Course)
        .scalar_subquery()
        .label("enrollment_count"),
        select(func.count(CourseModule.id))
        .where(CourseModule.course_id == Course.id)
        .correlate(Course)
        .scalar_subquery()
        .label("module_count"),
        select(func.count(Review.id))
        .where(Review.course_id == Course.id)
        .correlate(Course)
        .scalar_subquery()
        .label("review_count"),
        select(func.avg(Review.rating))
        .where(Review.course_id == Course.id)
        .correlate(Course)
        .scalar_subquery()
        .label("average_rating"),
    ]


def to_course_summary(
    course: Course,
    enrollment_count: int = 0,
    module_count: int = 0,
    review_count: int = 0,
    average_rating: float | None = None,
) -> CourseSummary:
    """Build a CourseSummary from a course with category and creator loaded."""
    summary = CourseSummary.model_validate(course)
    summary.enrollment_count = enrollment_count or 0
    summary.module_count = module_count or 0
    summary.review_count = review_count or 0
    summary.average_rating = round(float(average_rating), 1) if average_rating is not None else None
    return summary


def course_summary_query() -> Select:
    """Select courses with their statistics, category and creator loaded."""
    return select(Course, *_stat_columns()).options(
        selectinload(Course.category),
        selectinload(Course.creator),
    )


async def fetch_course_summaries(db: AsyncSession, stmt: Select) -> list[CourseSummary]:
    """Run a query built on course_summary_query and map the rows."""
    result = await db.execute(stmt)
    return [to_course_summary(*row) for row in result.all()]


class CourseService:
    """Service for managing courses.

    Attributes:
        db: Database session.
        storage: File storage used to clean up course files.
    """

    def __init__(self, db: AsyncSession, storage: FileStorage) -> None:
        self.db = db
        self.storage = storage

    # =========================================================================
    # Queries
    # =========================================================================

    async def list_courses(
        self,
        filters: CourseFilters,
        catalogue: bool,
        viewer: User | None = None,
    ) -> Page[CourseSummary]:
        """List courses.

        Args:
            filters: Paging, category, level, status and search filters.
            catalogue: True for the student catalogue, which only shows
                published public courses.
            viewer: Staff member for the admin console view. Tutors only
                see courses they created.

        Returns:
            One page of course summaries, newest first.
        """
        page = max(filters.page, 1)
        limit = max(1, min(filters.limit, MAX_PAGE_SIZE))

        conditions = []
        if catalogue:
            conditions += [Course.status == CourseStatus.PUBLISHED, Course.is_public.is_(True)]
        elif filters.status:
            conditions.append(Course.status == filters.status)
        if viewer is not None and viewer.role == UserRole.TUTOR:
            conditions.append(Course.creator_id == viewer.id)
        if filters.category_id:
            conditions.append(Course.category_id == filters.category_id)
        if filters.level:
            conditions.append(Course.level == filters.level)
        if filters.search:
            pattern = f"%{filters.search.strip()}%"
            conditions.append(
                or_(
                    Course.title.ilike(pattern),
                    Course.description.ilike(pattern),
                    Course.tutor_name.ilike(pattern),
                )
            )

        total = await self.db.scalar(
            select(func.count(Course.id)).where(*conditions)
        ) or 0

        stmt = (
            course_summary_query()
            .where(*conditions)
            .order_by(Course.created_at.desc())
            .offset((page - 1) * limit)
            .limit(limit)
        )
        items = await fetch_course_summaries(self.db, stmt)

        return Page(items=items, pagination=Pagination.build(page, limit, total))

    async def list_my_courses(self, user: User) -> list[CourseSummary]:
        """List the courses a staff member created, newest first."""
        stmt = (
            course_summary_query()
            .where(Course.creator_id == user.id)
            .order_by(Course.created_at.desc())
        )
        return await fetch_course_summaries(self.db, stmt)

    async def get_course(
        self,
        course_id: str,
        viewer: User | None = None,
        catalogue: bool = False,
    ) -> CourseDetail:
        """Get a course with its modules, materials and latest reviews.

        Args:
            course_id: Course identifier.
            viewer: Current user, used for ``is_enrolled``.
            catalogue: Hide courses students cannot see.

        Raises:
            CourseNotFoundError: If the course does not exist or is hidden.
        """
        result = await self.db.execute(
            course_summary_query()
            .options(selectinload(Course.modules).selectinload(CourseModule.materials))
            .where(Course.id == course_id)
        )
        row = result.one_or_none()
        if row is None:
            raise CourseNotFoundError(course_id)

        course: Course = row[0]
        if catalogue and not course.is_available:
            raise CourseNotFoundError(course_id)

        reviews_result = await self.db.execute(
            select(Review)
            .options(selectinload(Review.user))
            .where(Review.course_id == course_id)
            .order_by(Review.created_at.desc())
            .limit(LATEST_REVIEWS_LIMIT)
        )
        reviews = [ReviewResponse.model_validate(r) for r in reviews_result.scalars().all()]

        modules = []
        for module in course.modules:
            item = ModuleWithMaterials.model_validate(module)
            item.material_count = len(module.materials)
            modules.append(item)

        is_enrolled = False
        if viewer is not None:
            is_enrolled = await get_enrollment(self.db, viewer.id, course_id) is not None

        summary = to_course_summary(*row)
        return CourseDetail(
            **summary.model_dump(),
            modules=modules,
            reviews=reviews,
            is_enrolled=is_enrolled,
        )

    # =========================================================================
    # Mutations
    # =========================================================================

    async def create_course(self, request: CourseCreateRequest, creator: User) -> CourseSummary:
        """Create a draft course owned by ``creator``.

        Raises:
            InvalidCategoryError: If the category does not exist.
        """
        await self._ensure_category(request.category_id)

        data = request.model_dump()
        data["tutor_name"] = data.get("tutor_name") or creator.full_name

        course = Course(**data, creator_id=creator.id, status=CourseStatus.DRAFT)
        self.db.add(course)
        await self.db.commit()

        logger.info("Created course: course=%s, by=%s", course.id, creator.id)
        return await self._get_summary(course.id)

    async def update_course(
        self,
        course_id: str,
        request: CourseUpdateRequest,
        actor: User,
    ) -> CourseSummary:
        """Update a course. Owner or admin only.

        A replaced thumbnail is removed from storage after the commit.

        Raises:
            CourseNotFoundError: If the course does not exist.
            CourseAccessDeniedError: If the actor may not manage the course.
            InvalidCategoryError: If a new category does not exist.
        """
        course = await self._get_course(course_id)
        if not can_manage_course(course, actor):
            raise CourseAccessDeniedError("update")

        updates = request.model_dump(exclude_unset=True)
        if updates.get("category_id") and updates["category_id"] != course.category_id:
            await self._ensure_category(updates["category_id"])

        old_thumbnail = course.thumbnail
        for field, value in updates.items():
            setattr(course, field, value)

        await self.db.commit()

        if "thumbnail" in updates and old_thumbnail and old_thumbnail != course.thumbnail:
            self.storage.delete(old_thumbnail)

        logger.info("Updated course: course=%s, fields=%s, by=%s", course_id, sorted(updates), actor.id)
        return await self._get_summary(course_id)

    async def delete_course(self, course_id: str, actor: User) -> CourseDeleteSummary:
        """Delete a course with all its modules, materials and enrollments.

        Refused while any student is still working through the course,
        that is an enrollment that is not COMPLETED and below 100%.

        Raises:
            CourseNotFoundError: If the course does not exist.
            CourseAccessDeniedError: If the actor may not manage the course.
            CourseHasActiveEnrollmentsError: If the course has active enrollments.
        """
        course = await self._get_course(course_id)
        if not can_manage_course(course, actor):
            raise CourseAccessDeniedError("delete")

        active = await self.db.scalar(
            select(func.count(Enrollment.id)).where(
                Enrollment.course_id == course_id,
                Enrollment.status != EnrollmentStatus.COMPLETED,
                Enrollment.progress_percentage < 100,
            )
        ) or 0
        if active:
            raise CourseHasActiveEnrollmentsError(active)

        counts = await self._dependent_counts(course_id)
        file_urls = await self._collect_file_urls(course)

        await self.db.delete(course)
        await self.db.commit()

        deleted_files = self.storage.delete_many(file_urls)
        logger.info(
            "Deleted course: course=%s, by=%s, files=%d/%d",
            course_id,
            actor.id,
            deleted_files,
            len(file_urls),
        )

        return CourseDeleteSummary(
            course_id=course_id,
            title=course.title,
            deleted_modules=counts["modules"],
            deleted_materials=counts["materials"],
            deleted_assignments=counts["assignments"],
            deleted_enrollments=counts["enrollments"],
            deleted_files=deleted_files,
        )

    # =========================================================================
    # Helpers
    # =========================================================================

    async def _get_summary(self, course_id: str) -> CourseSummary:
        result = await self.db.execute(course_summary_query().where(Course.id == course_id))
        row = result.one_or_none()
        if row is None:
            raise CourseNotFoundError(course_id)
        return to_course_summary(*row)

    async def _get_course(self, course_id: str) -> Course:
        result = await self.db.execute(select(Course).where(Course.id == course_id))
        course = result.scalar_one_or_none()
        if course is None:
            raise CourseNotFoundError(course_id)
        return course

    async def _ensure_category(self, category_id: str) -> None:
        if await self.db.get(Category, category_id) is None:
            raise InvalidCategoryError(category_id)

    async def _dependent_counts(self, course_id: str) -> dict[str, int]:
        counts = {}
        for name, model in (
            ("modules", CourseModule),
            ("materials", Material),
            ("assignments", Assignment),
            ("enrollments", Enrollment),
        ):
            counts[name] = await self.db.scalar(
                select(func.count(model.id)).where(model.course_id == course_id)
            ) or 0
        return counts

    async def _collect_file_urls(self, course: Course) -> list[str]:
        """All stored files referenced by a course and its dependents."""
        urls: list[str] = []
        if course.thumbnail:
            urls.append(course.thumbnail)

        material_urls = await self.db.scalars(
            select(Material.file_url).where(
                Material.course_id == course.id,
                Material.type != MaterialType.LINK,
                Material.file_url.is_not(None),
            )
        )
        urls.extend(material_urls.all())

        attachment_urls = await self.db.scalars(
            select(Assignment.attachment_url).where(
                Assignment.course_id == course.id,
                Assignment.attachment_url.is_not(None),
            )
        )
        urls.extend(attachment_urls.all())

        submission_urls = await self.db.scalars(
            select(AssignmentSubmission.file_url)
            .join(Assignment, AssignmentSubmission.assignment_id == Assignment.id)
            .where(
                Assignment.course_id == course.id,
                AssignmentSubmission.file_url.is_not(None),
            )
        )
        urls.extend(submission_urls.all())
        return _dedupe(urls)


def _dedupe(urls: Sequence[str]) -> list[str]:
    return list(dict.fromkeys(urls))
