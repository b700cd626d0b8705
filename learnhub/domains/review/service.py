# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Course review service.

Each enrolled student holds at most one review per course; submitting
again replaces the rating and comment.
"""

import logging
from math import ceil

from sqlalchemy import func, select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from learnhub.domains.access import get_enrollment
from learnhub.domains.errors import (
    NotFoundError,
    PermissionDeniedError,
    ServiceError,
    ValidationFailedError,
)
from learnhub.infrastructure.database.models import Course, Review, User
from learnhub.models.review import (
    CourseReviewsResponse,
    ReviewPagination,
    ReviewResponse,
    ReviewSubmitRequest,
)
from learnhub.utils.datetime import utc_now

logger = logging.getLogger(__name__)

MIN_RATING = 1
MAX_RATING = 5


class ReviewServiceError(ServiceError):
    """Base exception for review service errors."""


class ReviewCourseNotFoundError(ReviewServiceError, NotFoundError):
    def __init__(self, course_id: str) -> None:
        super().__init__("Course not found")
        self.course_id = course_id


class InvalidRatingError(ReviewServiceError, ValidationFailedError):
    def __init__(self, rating: int) -> None:
        super().__init__(f"Rating must be between {MIN_RATING} and {MAX_RATING}")
        self.rating = rating


class ReviewNotEnrolledError(ReviewServiceError, PermissionDeniedError):
    def __init__(self) -> None:
        super().__init__("You must be enrolled in this course to review it")


class ReviewService:
    """Service for course reviews.

    Attributes:
        db: Database session.
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def submit_review(self, student: User, request: ReviewSubmitRequest) -> ReviewResponse:
        """Create or replace the student's review of a course.

        Raises:
            InvalidRatingError: If the rating is outside 1..5.
            ReviewCourseNotFoundError: If the course does not exist.
            ReviewNotEnrolledError: If the student is not enrolled.
        """
        if not MIN_RATING <= request.rating <= MAX_RATING:
            raise InvalidRatingError(request.rating)

        if await self.db.get(Course, request.course_id) is None:
            raise ReviewCourseNotFoundError(request.course_id)
        if await get_enrollment(self.db, student.id, request.course_id) is None:
            raise ReviewNotEnrolledError()

        now = utc_now()
        stmt = (
            insert(Review)
            .values(
                course_id=request.course_id,
                user_id=student.id,
                rating=request.rating,
                comment=request.comment,
            )
            .on_conflict_do_update(
                index_elements=[Review.course_id, Review.user_id],
                set_={"rating": request.rating, "comment": request.comment, "updated_at": now},
            )
        )
        await self.db.execute(stmt)
        await self.db.commit()

        logger.info(
            "Review submitted: course=%s, user=%s, rating=%d",
            request.course_id,
            student.id,
            request.rating,
        )
        review = await self._get_review(request.course_id, student.id)
        return ReviewResponse.model_validate(review)

    async def course_reviews(
        self,
        course_id: str,
        page: int = 1,
        limit: int = 10,
    ) -> CourseReviewsResponse:
        """Reviews of a course, newest first, with rating statistics.

        Raises:
            ReviewCourseNotFoundError: If the course does not exist.
        """
        if await self.db.get(Course, course_id) is None:
            raise ReviewCourseNotFoundError(course_id)

        page = max(page, 1)
        limit = max(limit, 1)

        stats = await self.db.execute(
            select(func.count(Review.id), func.avg(Review.rating)).where(Review.course_id == course_id)
        )
        total, average = stats.one()
        total = total or 0

        distribution_rows = await self.db.execute(
            select(Review.rating, func.count(Review.id))
            .where(Review.course_id == course_id)
            .group_by(Review.rating)
        )
        distribution = {rating: 0 for rating in range(MIN_RATING, MAX_RATING + 1)}
        for rating, count in distribution_rows.all():
            distribution[rating] = count

        result = await self.db.execute(
            select(Review)
            .options(selectinload(Review.user))
            .where(Review.course_id == course_id)
            .order_by(Review.created_at.desc())
            .offset((page - 1) * limit)
            .limit(limit)
        )
        reviews = [ReviewResponse.model_validate(r) for r in result.scalars().all()]

        total_pages = ceil(total / limit)
        return CourseReviewsResponse(
            reviews=reviews,
            average_rating=round(float(average), 1) if average is not None else 0.0,
            total_reviews=total,
            rating_distribution=distribution,
            pagination=ReviewPagination(
                page=page,
                limit=limit,
                total_pages=total_pages,
                has_more=page < total_pages,
            ),
        )

    async def my_review(self, student: User, course_id: str) -> ReviewResponse | None:
        review = await self._get_review(course_id, student.id)
        return ReviewResponse.model_validate(review) if review else None

    async def _get_review(self, course_id: str, user_id: str) -> Review | None:
        result = await self.db.execute(
            select(Review)
            .options(selectinload(Review.user))
            .where(Review.course_id == course_id, Review.user_id == user_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()
