# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Category service.

Categories group courses in the catalogue. Names are unique
(case-insensitively) and a category cannot be removed while courses
still reference it.
"""

import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from learnhub.domains.course.service import course_summary_query, fetch_course_summaries
from learnhub.domains.errors import ConflictError, NotFoundError, ServiceError
from learnhub.infrastructure.database.models import Category, Course, CourseStatus
from learnhub.models.category import (
    CategoryCreateRequest,
    CategoryDetail,
    CategoryResponse,
    CategoryUpdateRequest,
)

logger = logging.getLogger(__name__)


class CategoryServiceError(ServiceError):
    """Base exception for category service errors."""


class CategoryNotFoundError(CategoryServiceError, NotFoundError):
    def __init__(self, category_id: str) -> None:
        super().__init__("Category not found")
        self.category_id = category_id


class CategoryExistsError(CategoryServiceError, ConflictError):
    def __init__(self, name: str) -> None:
        super().__init__("Category with this name already exists")
        self.name = name


class CategoryInUseError(CategoryServiceError, ConflictError):
    def __init__(self, course_count: int) -> None:
        super().__init__(
            "Cannot delete category with existing courses",
            details={"course_count": course_count},
        )
        self.course_count = course_count


def _course_count_column():
    return (
        select(func.count(Course.id))
        .where(Course.category_id == Category.id)
        .correlate(Category)
        .scalar_subquery()
        .label("course_count")
    )


class CategoryService:
    """Service for managing course categories.

    Attributes:
        db: Database session.
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def list_categories(self) -> list[CategoryResponse]:
        """All categories ordered by name, with their course counts."""
        result = await self.db.execute(
            select(Category, _course_count_column()).order_by(Category.name)
        )
        return [self._to_response(category, count) for category, count in result.all()]

    async def get_category(self, category_id: str, published_only: bool = True) -> CategoryDetail:
        """Get a category with its courses.

        Args:
            category_id: Category identifier.
            published_only: Only include published public courses.

        Raises:
            CategoryNotFoundError: If the category does not exist.
        """
        result = await self.db.execute(
            select(Category, _course_count_column()).where(Category.id == category_id)
        )
        row = result.one_or_none()
        if row is None:
            raise CategoryNotFoundError(category_id)
        category, count = row

        stmt = course_summary_query().where(Course.category_id == category_id)
        if published_only:
            stmt = stmt.where(Course.status == CourseStatus.PUBLISHED, Course.is_public.is_(True))
        courses = await fetch_course_summaries(self.db, stmt.order_by(Course.created_at.desc()))

        return CategoryDetail(
            **self._to_response(category, count).model_dump(),
            courses=courses,
        )

    async def create_category(self, request: CategoryCreateRequest) -> CategoryResponse:
        """Create a category.

        Raises:
            CategoryExistsError: If the name is already used.
        """
        name = request.name.strip()
        await self._ensure_unique_name(name)

        category = Category(name=name, description=request.description)
        self.db.add(category)
        await self.db.commit()
        await self.db.refresh(category)

        logger.info("Created category: %s (%s)", category.name, category.id)
        return self._to_response(category, 0)

    async def update_category(
        self,
        category_id: str,
        request: CategoryUpdateRequest,
    ) -> CategoryResponse:
        """Update a category's name or description.

        Raises:
            CategoryNotFoundError: If the category does not exist.
            CategoryExistsError: If the new name is used by another category.
        """
        category = await self._get_category(category_id)
        updates = request.model_dump(exclude_unset=True)

        if updates.get("name"):
            updates["name"] = updates["name"].strip()
            if updates["name"].lower() != category.name.lower():
                await self._ensure_unique_name(updates["name"])

        for field, value in updates.items():
            setattr(category, field, value)

        await self.db.commit()
        await self.db.refresh(category)

        logger.info("Updated category: %s", category_id)
        return self._to_response(category, await self._count_courses(category_id))

    async def delete_category(self, category_id: str) -> None:
        """Delete an unused category.

        Raises:
            CategoryNotFoundError: If the category does not exist.
            CategoryInUseError: If any course references the category.
        """
        category = await self._get_category(category_id)

        course_count = await self._count_courses(category_id)
        if course_count:
            raise CategoryInUseError(course_count)

        await self.db.delete(category)
        await self.db.commit()
        logger.info("Deleted category: %s", category_id)

    # =========================================================================
    # Helpers
    # =========================================================================

    async def _get_category(self, category_id: str) -> Category:
        category = await self.db.get(Category, category_id)
        if category is None:
            raise CategoryNotFoundError(category_id)
        return category

    async def _count_courses(self, category_id: str) -> int:
        return await self.db.scalar(
            select(func.count(Course.id)).where(Course.category_id == category_id)
        ) or 0

    async def _ensure_unique_name(self, name: str) -> None:
        existing = await self.db.scalar(
            select(Category.id).where(func.lower(Category.name) == name.lower())
        )
        if existing is not None:
            raise CategoryExistsError(name)

    @staticmethod
    def _to_response(category: Category, course_count: int | None) -> CategoryResponse:
        response = CategoryResponse.model_validate(category)
        response.course_count = course_count or 0
        return response
