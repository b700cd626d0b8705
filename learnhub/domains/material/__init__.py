# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Material domain: course content and per-material progress."""

from learnhub.domains.material.service import (
    LinkUrlRequiredError,
    MaterialAccessDeniedError,
    MaterialCourseNotFoundError,
    MaterialModuleNotFoundError,
    MaterialNotFoundError,
    MaterialService,
    MaterialServiceError,
    NotEnrolledError,
)

__all__ = [
    "LinkUrlRequiredError",
    "MaterialAccessDeniedError",
    "MaterialCourseNotFoundError",
    "MaterialModuleNotFoundError",
    "MaterialNotFoundError",
    "MaterialService",
    "MaterialServiceError",
    "NotEnrolledError",
]
