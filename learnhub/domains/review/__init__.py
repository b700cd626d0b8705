# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Course review domain."""

from learnhub.domains.review.service import (
    InvalidRatingError,
    ReviewCourseNotFoundError,
    ReviewNotEnrolledError,
    ReviewService,
    ReviewServiceError,
)

__all__ = [
    "InvalidRatingError",
    "ReviewCourseNotFoundError",
    "ReviewNotEnrolledError",
    "ReviewService",
    "ReviewServiceError",
]
