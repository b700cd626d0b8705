# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for the review service."""

from datetime import datetime, timezone
from unittest.mock import MagicMock
from uuid import uuid4

import pytest
from sqlalchemy.dialects import postgresql

from learnhub.domains.review import (
    InvalidRatingError,
    ReviewCourseNotFoundError,
    ReviewNotEnrolledError,
    ReviewService,
)
from learnhub.infrastructure.database.models import Review
from learnhub.models.review import ReviewSubmitRequest


@pytest.fixture
def review_service(mock_db) -> ReviewService:
    return ReviewService(mock_db)


class TestSubmitReview:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("rating", [0, 6, -1])
    async def test_rating_out_of_range(self, review_service, mock_db, student_user, rating) -> None:
        with pytest.raises(InvalidRatingError) as exc_info:
            await review_service.submit_review(
                student_user,
                ReviewSubmitRequest(course_id=str(uuid4()), rating=rating),
            )

        assert exc_info.value.message == "Rating must be between 1 and 5"
        mock_db.execute.assert_not_called()

    @pytest.mark.asyncio
    async def test_course_not_found(self, review_service, mock_db, student_user) -> None:
        mock_db.get.return_value = None

        with pytest.raises(ReviewCourseNotFoundError):
            await review_service.submit_review(student_user, ReviewSubmitRequest(course_id=str(uuid4()), rating=4))

    @pytest.mark.asyncio
    async def test_not_enrolled(
        self, review_service, mock_db, student_user, published_course, make_scalar_result
    ) -> None:
        mock_db.get.return_value = published_course
        mock_db.execute.side_effect = [make_scalar_result(None)]

        with pytest.raises(ReviewNotEnrolledError) as exc_info:
            await review_service.submit_review(
                student_user,
                ReviewSubmitRequest(course_id=published_course.id, rating=5),
            )

        assert exc_info.value.status_code == 403
        mock_db.commit.assert_not_called()

    @pytest.mark.asyncio
    async def test_submit_upserts_and_returns_review(
        self, review_service, mock_db, student_user, published_course, make_enrollment, make_scalar_result
    ) -> None:
        now = datetime.now(timezone.utc)
        review = Review(
            id=str(uuid4()),
            course_id=published_course.id,
            user_id=student_user.id,
            rating=4,
            comment="Clear and practical",
            created_at=now,
            updated_at=now,
        )
        review.user = student_user
        mock_db.get.return_value = published_course
        mock_db.execute.side_effect = [
            make_scalar_result(make_enrollment(student_user, published_course)),
            MagicMock(),
            make_scalar_result(review),
        ]

        response = await review_service.submit_review(
            student_user,
            ReviewSubmitRequest(course_id=published_course.id, rating=4, comment="Clear and practical"),
        )

        upsert = mock_db.execute.await_args_list[1].args[0]
        sql = str(upsert.compile(dialect=postgresql.dialect()))
        assert sql.startswith("INSERT INTO reviews")
        assert "ON CONFLICT (course_id, user_id) DO UPDATE" in sql
        mock_db.commit.assert_awaited_once()
        assert response.rating == 4
        assert response.comment == "Clear and practical"
        assert response.user.id == student_user.id
