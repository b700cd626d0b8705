# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Analytics domain."""

from learnhub.domains.analytics.service import (
    AnalyticsAccessDeniedError,
    AnalyticsCourseNotFoundError,
    AnalyticsService,
    AnalyticsServiceError,
    completion_rate,
)

__all__ = [
    "AnalyticsAccessDeniedError",
    "AnalyticsCourseNotFoundError",
    "AnalyticsService",
    "AnalyticsServiceError",
    "completion_rate",
]
