# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Enrollment and per-material progress models."""

from datetime import datetime
from enum import StrEnum
from typing import TYPE_CHECKING

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from learnhub.infrastructure.database.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin
from learnhub.utils.datetime import utc_now

if TYPE_CHECKING:
    from learnhub.infrastructure.database.models.course import Course, Material
    from learnhub.infrastructure.database.models.user import User


class EnrollmentStatus(StrEnum):
    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"
    DROPPED = "DROPPED"


class Enrollment(Base, UUIDPrimaryKeyMixin):
    """A student's enrollment in a course.

    ``progress_percentage`` is derived from the student's completed
    progress records and is only written by the progress calculator.
    """

    __tablename__ = "enrollments"
    __table_args__ = (
        UniqueConstraint("user_id", "course_id", name="uq_enrollments_user_course"),
        CheckConstraint(
            "status IN ('ACTIVE', 'COMPLETED', 'DROPPED')",
            name="valid_status",
        ),
        CheckConstraint(
            "progress_percentage BETWEEN 0 AND 100",
            name="valid_progress",
        ),
    )

    user_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    course_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("courses.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=EnrollmentStatus.ACTIVE)
    progress_percentage: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    enrolled_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utc_now)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
        onupdate=utc_now,
    )

    user: Mapped["User"] = relationship(back_populates="enrollments")
    course: Mapped["Course"] = relationship(back_populates="enrollments")

    @property
    def is_in_progress(self) -> bool:
        """Counts as an active enrollment blocking course deletion."""
        return self.status != EnrollmentStatus.COMPLETED and self.progress_percentage < 100


class Progress(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """Per-student, per-material completion and time tracking."""

    __tablename__ = "progress"
    __table_args__ = (
        UniqueConstraint(
            "user_id",
            "course_id",
            "material_id",
            name="uq_progress_user_course_material",
        ),
    )

    user_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    course_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("courses.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    material_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("materials.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    is_completed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    time_spent: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    last_accessed: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utc_now)

    user: Mapped["User"] = relationship(back_populates="progress_records")
    course: Mapped["Course"] = relationship(back_populates="progress_records")
    material: Mapped["Material"] = relationship()
