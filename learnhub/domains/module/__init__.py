# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Course module domain."""

from learnhub.domains.module.service import (
    ModuleAccessDeniedError,
    ModuleCourseNotFoundError,
    ModuleHasMaterialsError,
    CourseModuleNotFoundError,
    ModuleService,
    ModuleServiceError,
)

__all__ = [
    "ModuleAccessDeniedError",
    "ModuleCourseNotFoundError",
    "ModuleHasMaterialsError",
    "CourseModuleNotFoundError",
    "ModuleService",
    "ModuleServiceError",
]
