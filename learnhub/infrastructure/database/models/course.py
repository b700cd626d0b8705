# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Catalogue models: categories, courses, modules and materials."""

from enum import StrEnum
from typing import TYPE_CHECKING

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from learnhub.infrastructure.database.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin

if TYPE_CHECKING:
    from learnhub.infrastructure.database.models.assignment import Assignment
    from learnhub.infrastructure.database.models.enrollment import Enrollment, Progress
    from learnhub.infrastructure.database.models.review import Review
    from learnhub.infrastructure.database.models.user import User


class CourseStatus(StrEnum):
    DRAFT = "DRAFT"
    PUBLISHED = "PUBLISHED"
    ARCHIVED = "ARCHIVED"


class CourseLevel(StrEnum):
    BEGINNER = "BEGINNER"
    INTERMEDIATE = "INTERMEDIATE"
    ADVANCED = "ADVANCED"


class MaterialType(StrEnum):
    PDF = "PDF"
    VIDEO = "VIDEO"
    AUDIO = "AUDIO"
    IMAGE = "IMAGE"
    DOCUMENT = "DOCUMENT"
    LINK = "LINK"


class Category(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """Course category."""

    __tablename__ = "categories"

    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    courses: Mapped[list["Course"]] = relationship(back_populates="category")


class Course(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """A course owned by its creator (a tutor)."""

    __tablename__ = "courses"
    __table_args__ = (
        CheckConstraint(
            "status IN ('DRAFT', 'PUBLISHED', 'ARCHIVED')",
            name="valid_status",
        ),
        CheckConstraint(
            "level IN ('BEGINNER', 'INTERMEDIATE', 'ADVANCED')",
            name="valid_level",
        ),
        CheckConstraint("price >= 0", name="non_negative_price"),
        Index("ix_courses_status_is_public", "status", "is_public"),
    )

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    thumbnail: Mapped[str | None] = mapped_column(Text, nullable=True)
    price: Mapped[float] = mapped_column(Numeric(10, 2, asdecimal=False), nullable=False, default=0)
    duration: Mapped[int | None] = mapped_column(Integer, nullable=True)
    level: Mapped[str] = mapped_column(String(20), nullable=False, default=CourseLevel.BEGINNER)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=CourseStatus.DRAFT)
    is_public: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    tutor_name: Mapped[str | None] = mapped_column(String(200), nullable=True)

    category_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("categories.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    creator_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("users.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )

    category: Mapped["Category"] = relationship(back_populates="courses")
    creator: Mapped["User"] = relationship(back_populates="created_courses")
    modules: Mapped[list["CourseModule"]] = relationship(
        back_populates="course",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="CourseModule.order_index",
    )
    materials: Mapped[list["Material"]] = relationship(
        back_populates="course",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Material.order_index",
    )
    enrollments: Mapped[list["Enrollment"]] = relationship(
        back_populates="course",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    progress_records: Mapped[list["Progress"]] = relationship(
        back_populates="course",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    reviews: Mapped[list["Review"]] = relationship(
        back_populates="course",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    assignments: Mapped[list["Assignment"]] = relationship(
        back_populates="course",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    @property
    def is_available(self) -> bool:
        """Whether students can see and enroll in the course."""
        return self.is_public and self.status == CourseStatus.PUBLISHED

    def is_owned_by(self, user_id: str) -> bool:
        return self.creator_id == user_id


class CourseModule(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """An ordered chapter within a course."""

    __tablename__ = "course_modules"
    __table_args__ = (
        CheckConstraint("order_index >= 0", name="non_negative_order"),
        Index("ix_course_modules_course_order", "course_id", "order_index"),
    )

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    order_index: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    course_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("courses.id", ondelete="CASCADE"),
        nullable=False,
    )

    course: Mapped["Course"] = relationship(back_populates="modules")
    materials: Mapped[list["Material"]] = relationship(
        back_populates="module",
        passive_deletes=True,
        order_by="Material.order_index",
    )


class Material(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """A single content item inside a module."""

    __tablename__ = "materials"
    __table_args__ = (
        CheckConstraint(
            "type IN ('PDF', 'VIDEO', 'AUDIO', 'IMAGE', 'DOCUMENT', 'LINK')",
            name="valid_type",
        ),
        Index("ix_materials_module_order", "module_id", "order_index"),
    )

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    type: Mapped[str] = mapped_column(String(20), nullable=False)
    file_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    file_size: Mapped[int | None] = mapped_column(Integer, nullable=True)
    duration: Mapped[int | None] = mapped_column(Integer, nullable=True)
    order_index: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_public: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    course_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("courses.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    module_id: Mapped[str] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("course_modules.id", ondelete="CASCADE"),
        nullable=False,
    )
    author_id: Mapped[str | None] = mapped_column(
        UUID(as_uuid=False),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )

    course: Mapped["Course"] = relationship(back_populates="materials")
    module: Mapped["CourseModule"] = relationship(back_populates="materials")
    author: Mapped["User | None"] = relationship()

    @property
    def has_stored_file(self) -> bool:
        """Whether ``file_url`` points at an uploaded file (not an external link)."""
        return self.type != MaterialType.LINK and bool(self.file_url)
