# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""User model.

Tutors/staff and students share one table and are told apart by
``role``. Students carry an ``active_session_token`` that is rotated on
every login; a token issued for an older session no longer matches and
is rejected.

A password reset stores only a hash of the emailed code together with
its expiry and the number of wrong guesses.
"""

from datetime import datetime
from enum import StrEnum
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, CheckConstraint, DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from learnhub.infrastructure.database.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin

if TYPE_CHECKING:
    from learnhub.infrastructure.database.models.assignment import AssignmentSubmission
    from learnhub.infrastructure.database.models.course import Course
    from learnhub.infrastructure.database.models.enrollment import Enrollment, Progress
    from learnhub.infrastructure.database.models.review import Review


class UserRole(StrEnum):
    """Platform roles.

    ADMIN and TUTOR are staff and use the admin console; TUTOR may only
    manage the courses they created. STUDENT uses the student portal.
    """

    ADMIN = "ADMIN"
    TUTOR = "TUTOR"
    STUDENT = "STUDENT"


class User(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """Platform user account."""

    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint("role IN ('ADMIN', 'TUTOR', 'STUDENT')", name="valid_role"),
    )

    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    avatar: Mapped[str | None] = mapped_column(Text, nullable=True)
    role: Mapped[str] = mapped_column(String(20), nullable=False, default=UserRole.STUDENT, index=True)
    is_verified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    active_session_token: Mapped[str | None] = mapped_column(String(64), nullable=True)
    last_login_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    # SHA-256 of the pending password reset code
    password_reset_code_hash: Mapped[str | None] = mapped_column(String(64), nullable=True)
    password_reset_expires_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    password_reset_attempts: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    created_courses: Mapped[list["Course"]] = relationship(back_populates="creator", passive_deletes=True)
    enrollments: Mapped[list["Enrollment"]] = relationship(
        back_populates="user",
        passive_deletes=True,
    )
    progress_records: Mapped[list["Progress"]] = relationship(
        back_populates="user",
        passive_deletes=True,
    )
    reviews: Mapped[list["Review"]] = relationship(back_populates="user", passive_deletes=True)
    submissions: Mapped[list["AssignmentSubmission"]] = relationship(
        back_populates="student",
        passive_deletes=True,
        foreign_keys="AssignmentSubmission.student_id",
    )

    @property
    def full_name(self) -> str:
        """First and last name joined with a space."""
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    @property
    def is_staff(self) -> bool:
        return self.role in (UserRole.ADMIN, UserRole.TUTOR)

    @property
    def is_student(self) -> bool:
        return self.role == UserRole.STUDENT

    def __repr__(self) -> str:
        return f"<User {self.email} ({self.role})>"
