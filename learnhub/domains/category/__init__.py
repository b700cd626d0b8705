# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Category domain."""

from learnhub.domains.category.service import (
    CategoryExistsError,
    CategoryInUseError,
    CategoryNotFoundError,
    CategoryService,
    CategoryServiceError,
)

__all__ = [
    "CategoryExistsError",
    "CategoryInUseError",
    "CategoryNotFoundError",
    "CategoryService",
    "CategoryServiceError",
]
