# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Course progress roll-up.

An enrollment's ``progress_percentage`` is derived, never edited
directly:

    progress = round(completed materials / total materials * 100)

It is 0 for a course without materials. Reaching 100 marks the
enrollment COMPLETED and stamps ``completed_at``; if materials are added
later and the percentage drops, a COMPLETED enrollment returns to ACTIVE.
A DROPPED enrollment keeps its status.

The calculator never commits. It runs inside the caller's transaction,
so the progress row and the enrollment roll-up are written together.
"""

import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from learnhub.infrastructure.database.models import (
    Enrollment,
    EnrollmentStatus,
    Material,
    Progress,
)
from learnhub.utils.datetime import utc_now

logger = logging.getLogger(__name__)


def calculate_progress_from_counts(completed: int, total: int) -> int:
    """Percentage of completed items, rounded half up and clamped to [0, 100]."""
    if total <= 0:
        return 0
    percentage = int(completed * 100 / total + 0.5)
    return max(0, min(100, percentage))


def apply_progress(enrollment: Enrollment, percentage: int) -> bool:
    """Write a percentage to an enrollment and update its status.

    Returns:
        True if the enrollment changed.
    """
    before = (enrollment.progress_percentage, enrollment.status, enrollment.completed_at)

    enrollment.progress_percentage = percentage
    if percentage >= 100:
        if enrollment.status != EnrollmentStatus.DROPPED:
            enrollment.status = EnrollmentStatus.COMPLETED
        if enrollment.completed_at is None:
            enrollment.completed_at = utc_now()
    elif enrollment.status == EnrollmentStatus.COMPLETED:
        enrollment.status = EnrollmentStatus.ACTIVE
        enrollment.completed_at = None

    return before != (enrollment.progress_percentage, enrollment.status, enrollment.completed_at)


class ProgressCalculator:
    """Recomputes enrollment progress from progress records.

    Attributes:
        db: Database session of the surrounding transaction.
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def count_materials(self, course_id: str) -> int:
        return await self.db.scalar(
            select(func.count(Material.id)).where(Material.course_id == course_id)
        ) or 0

    async def count_completed(self, user_id: str, course_id: str) -> int:
        return await self.db.scalar(
            select(func.count(Progress.id)).where(
                Progress.user_id == user_id,
                Progress.course_id == course_id,
                Progress.is_completed.is_(True),
            )
        ) or 0

    async def calculate(self, user_id: str, course_id: str) -> int:
        """Current progress percentage of one student in one course."""
        await self.db.flush()
        total = await self.count_materials(course_id)
        completed = await self.count_completed(user_id, course_id)
        return calculate_progress_from_counts(completed, total)

    async def update_enrollment(self, user_id: str, course_id: str) -> Enrollment | None:
        """Recompute and store one enrollment's progress.

        Returns:
            The updated enrollment, or None if the user is not enrolled.
        """
        result = await self.db.execute(
            select(Enrollment).where(
                Enrollment.user_id == user_id,
                Enrollment.course_id == course_id,
            )
        )
        enrollment = result.scalar_one_or_none()
        if enrollment is None:
            return None

        percentage = await self.calculate(user_id, course_id)
        if apply_progress(enrollment, percentage):
            logger.info(
                "Enrollment progress updated: enrollment=%s, progress=%d, status=%s",
                enrollment.id,
                percentage,
                enrollment.status,
            )
        return enrollment

    async def recalculate_course(self, course_id: str) -> int:
        """Recompute every enrollment of a course.

        Completed-material counts for all students come from a single
        grouped query.

        Returns:
            Number of enrollments whose progress changed.
        """
        await self.db.flush()
        total = await self.count_materials(course_id)

        completed_rows = await self.db.execute(
            select(Progress.user_id, func.count(Progress.id))
            .where(
                Progress.course_id == course_id,
                Progress.is_completed.is_(True),
            )
            .group_by(Progress.user_id)
        )
        completed_by_user = {user_id: count for user_id, count in completed_rows.all()}

        result = await self.db.execute(
            select(Enrollment).where(Enrollment.course_id == course_id)
        )
        changed = 0
        for enrollment in result.scalars().all():
            percentage = calculate_progress_from_counts(
                completed_by_user.get(enrollment.user_id, 0),
                total,
            )
            if apply_progress(enrollment, percentage):
                changed += 1

        if changed:
            logger.info("Recalculated course progress: course=%s, changed=%d", course_id, changed)
        return changed
