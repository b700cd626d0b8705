# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""SQLAlchemy ORM models.

Importing this package registers every table on ``Base.metadata``.
"""

from learnhub.infrastructure.database.models.assignment import (
    Assignment,
    AssignmentSubmission,
    SubmissionStatus,
)
from learnhub.infrastructure.database.models.base import Base, TimestampMixin, generate_uuid
from learnhub.infrastructure.database.models.course import (
    Category,
    Course,
    CourseLevel,
    CourseModule,
    CourseStatus,
    Material,
    MaterialType,
)
from learnhub.infrastructure.database.models.enrollment import (
    Enrollment,
    EnrollmentStatus,
    Progress,
)
from learnhub.infrastructure.database.models.review import Review
from learnhub.infrastructure.database.models.user import User, UserRole

__all__ = [
    "Base",
    "TimestampMixin",
    "generate_uuid",
    # Users
    "User",
    "UserRole",
    # Catalogue
    "Category",
    "Course",
    "CourseLevel",
    "CourseStatus",
    "CourseModule",
    "Material",
    "MaterialType",
    # Learning
    "Enrollment",
    "EnrollmentStatus",
    "Progress",
    "Review",
    "Assignment",
    "AssignmentSubmission",
    "SubmissionStatus",
]
