# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Course review models."""

from datetime import datetime

from pydantic import BaseModel, Field

from learnhub.models.common import EntityId, ORMModel
from learnhub.models.user import UserSummary


class ReviewSubmitRequest(BaseModel):
    course_id: EntityId
    rating: int
    comment: str | None = Field(default=None, max_length=2000)


class ReviewResponse(ORMModel):
    id: str
    course_id: str
    user_id: str
    rating: int
    comment: str | None = None
    created_at: datetime
    updated_at: datetime
    user: UserSummary | None = None


class ReviewPagination(BaseModel):
    page: int
    limit: int
    total_pages: int
    has_more: bool


class CourseReviewsResponse(BaseModel):
    reviews: list[ReviewResponse]
    average_rating: float
    total_reviews: int
    rating_distribution: dict[int, int]
    pagination: ReviewPagination
