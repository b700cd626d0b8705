# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Ownership and enrollment checks shared by the course-scoped services."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from learnhub.infrastructure.database.models import Course, Enrollment, User, UserRole


def can_manage_course(course: Course, user: User) -> bool:
    """Admins manage every course, everyone else only the courses they created."""
    return user.role == UserRole.ADMIN or course.creator_id == user.id


async def get_enrollment(db: AsyncSession, user_id: str, course_id: str) -> Enrollment | None:
    result = await db.execute(
        select(Enrollment).where(
            Enrollment.user_id == user_id,
            Enrollment.course_id == course_id,
        )
    )
    return result.scalar_one_or_none()


async def is_enrolled(db: AsyncSession, user_id: str, course_id: str) -> bool:
    return await get_enrollment(db, user_id, course_id) is not None
