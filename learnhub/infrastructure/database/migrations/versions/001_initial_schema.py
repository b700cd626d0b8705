# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Initial LearnHub schema.

Revision ID: 001_initial
Revises: None
Create Date: 2025-01-15
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision: str = "001_initial"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _id_column() -> sa.Column:
    return sa.Column(
        "id",
        postgresql.UUID(as_uuid=False),
        server_default=sa.text("gen_random_uuid()"),
        primary_key=True,
    )


def _timestamp_columns() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
    ]


def _fk(column: str, target: str, ondelete: str, nullable: bool = False) -> sa.Column:
    return sa.Column(
        column,
        postgresql.UUID(as_uuid=False),
        sa.ForeignKey(target, ondelete=ondelete),
        nullable=nullable,
    )


def upgrade() -> None:
    """Create LearnHub tables."""
    op.execute('CREATE EXTENSION IF NOT EXISTS "pgcrypto"')

    # =========================================================================
    # USERS
    # =========================================================================

    op.create_table(
        "users",
        _id_column(),
        sa.Column("email", sa.String(255), unique=True, nullable=False),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("last_name", sa.String(100), nullable=False),
        sa.Column("avatar", sa.Text, nullable=True),
        sa.Column("role", sa.String(20), nullable=False, server_default="STUDENT"),
        sa.Column("is_verified", sa.Boolean, nullable=False, server_default="false"),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default="true"),
        sa.Column("active_session_token", sa.String(64), nullable=True),
        sa.Column("last_login_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamp_columns(),
        sa.CheckConstraint("role IN ('ADMIN', 'TUTOR', 'STUDENT')", name="ck_users_valid_role"),
    )
    op.create_index("ix_users_email", "users", ["email"])
    op.create_index("ix_users_role", "users", ["role"])

    # =========================================================================
    # CATALOGUE
    # =========================================================================

    op.create_table(
        "categories",
        _id_column(),
        sa.Column("name", sa.String(100), unique=True, nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        *_timestamp_columns(),
    )

    op.create_table(
        "courses",
        _id_column(),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.Text, nullable=False),
        sa.Column("thumbnail", sa.Text, nullable=True),
        sa.Column("price", sa.Numeric(10, 2), nullable=False, server_default="0"),
        sa.Column("duration", sa.Integer, nullable=True),
        sa.Column("level", sa.String(20), nullable=False, server_default="BEGINNER"),
        sa.Column("status", sa.String(20), nullable=False, server_default="DRAFT"),
        sa.Column("is_public", sa.Boolean, nullable=False, server_default="false"),
        sa.Column("tutor_name", sa.String(200), nullable=True),
        _fk("category_id", "categories.id", "RESTRICT"),
        _fk("creator_id", "users.id", "RESTRICT"),
        *_timestamp_columns(),
        sa.CheckConstraint(
            "status IN ('DRAFT', 'PUBLISHED', 'ARCHIVED')",
            name="ck_courses_valid_status",
        ),
        sa.CheckConstraint(
            "level IN ('BEGINNER', 'INTERMEDIATE', 'ADVANCED')",
            name="ck_courses_valid_level",
        ),
        sa.CheckConstraint("price >= 0", name="ck_courses_non_negative_price"),
    )
    op.create_index("ix_courses_category_id", "courses", ["category_id"])
    op.create_index("ix_courses_creator_id", "courses", ["creator_id"])
    op.create_index("ix_courses_status_is_public", "courses", ["status", "is_public"])

    op.create_table(
        "course_modules",
        _id_column(),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("order_index", sa.Integer, nullable=False, server_default="0"),
        _fk("course_id", "courses.id", "CASCADE"),
        *_timestamp_columns(),
        sa.CheckConstraint("order_index >= 0", name="ck_course_modules_non_negative_order"),
    )
    op.create_index("ix_course_modules_course_order", "course_modules", ["course_id", "order_index"])

    op.create_table(
        "materials",
        _id_column(),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("type", sa.String(20), nullable=False),
        sa.Column("file_url", sa.Text, nullable=True),
        sa.Column("file_size", sa.Integer, nullable=True),
        sa.Column("duration", sa.Integer, nullable=True),
        sa.Column("order_index", sa.Integer, nullable=False, server_default="0"),
        sa.Column("is_public", sa.Boolean, nullable=False, server_default="false"),
        _fk("course_id", "courses.id", "CASCADE"),
        _fk("module_id", "course_modules.id", "CASCADE"),
        _fk("author_id", "users.id", "SET NULL", nullable=True),
        *_timestamp_columns(),
        sa.CheckConstraint(
            "type IN ('PDF', 'VIDEO', 'AUDIO', 'IMAGE', 'DOCUMENT', 'LINK')",
            name="ck_materials_valid_type",
        ),
    )
    op.create_index("ix_materials_course_id", "materials", ["course_id"])
    op.create_index("ix_materials_module_order", "materials", ["module_id", "order_index"])

    # =========================================================================
    # LEARNING
    # =========================================================================

    op.create_table(
        "enrollments",
        _id_column(),
        _fk("user_id", "users.id", "CASCADE"),
        _fk("course_id", "courses.id", "CASCADE"),
        sa.Column("status", sa.String(20), nullable=False, server_default="ACTIVE"),
        sa.Column("progress_percentage", sa.Integer, nullable=False, server_default="0"),
        sa.Column(
            "enrolled_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.UniqueConstraint("user_id", "course_id", name="uq_enrollments_user_course"),
        sa.CheckConstraint(
            "status IN ('ACTIVE', 'COMPLETED', 'DROPPED')",
            name="ck_enrollments_valid_status",
        ),
        sa.CheckConstraint(
            "progress_percentage BETWEEN 0 AND 100",
            name="ck_enrollments_valid_progress",
        ),
    )
    op.create_index("ix_enrollments_user_id", "enrollments", ["user_id"])
    op.create_index("ix_enrollments_course_id", "enrollments", ["course_id"])

    op.create_table(
        "progress",
        _id_column(),
        _fk("user_id", "users.id", "CASCADE"),
        _fk("course_id", "courses.id", "CASCADE"),
        _fk("material_id", "materials.id", "CASCADE"),
        sa.Column("is_completed", sa.Boolean, nullable=False, server_default="false"),
        sa.Column("completed_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("time_spent", sa.Integer, nullable=False, server_default="0"),
        sa.Column(
            "last_accessed",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        *_timestamp_columns(),
        sa.UniqueConstraint(
            "user_id",
            "course_id",
            "material_id",
            name="uq_progress_user_course_material",
        ),
    )
    op.create_index("ix_progress_user_id", "progress", ["user_id"])
    op.create_index("ix_progress_course_id", "progress", ["course_id"])
    op.create_index("ix_progress_material_id", "progress", ["material_id"])

    op.create_table(
        "reviews",
        _id_column(),
        _fk("course_id", "courses.id", "CASCADE"),
        _fk("user_id", "users.id", "CASCADE"),
        sa.Column("rating", sa.Integer, nullable=False),
        sa.Column("comment", sa.Text, nullable=True),
        *_timestamp_columns(),
        sa.UniqueConstraint("course_id", "user_id", name="uq_reviews_course_user"),
        sa.CheckConstraint("rating BETWEEN 1 AND 5", name="ck_reviews_valid_rating"),
    )
    op.create_index("ix_reviews_course_id", "reviews", ["course_id"])

    # =========================================================================
    # ASSIGNMENTS
    # =========================================================================

    op.create_table(
        "assignments",
        _id_column(),
        _fk("course_id", "courses.id", "CASCADE"),
        _fk("creator_id", "users.id", "SET NULL", nullable=True),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.Text, nullable=False),
        sa.Column("due_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("max_score", sa.Integer, nullable=False, server_default="100"),
        sa.Column("attachment_url", sa.Text, nullable=True),
        *_timestamp_columns(),
        sa.CheckConstraint("max_score > 0", name="ck_assignments_positive_max_score"),
    )
    op.create_index("ix_assignments_course_id", "assignments", ["course_id"])

    op.create_table(
        "assignment_submissions",
        _id_column(),
        _fk("assignment_id", "assignments.id", "CASCADE"),
        _fk("student_id", "users.id", "CASCADE"),
        sa.Column("content", sa.Text, nullable=True),
        sa.Column("file_url", sa.Text, nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="SUBMITTED"),
        sa.Column("score", sa.Integer, nullable=True),
        sa.Column("feedback", sa.Text, nullable=True),
        sa.Column(
            "submitted_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("now()"),
        ),
        sa.Column("graded_at", sa.DateTime(timezone=True), nullable=True),
        _fk("graded_by_id", "users.id", "SET NULL", nullable=True),
        sa.UniqueConstraint(
            "assignment_id",
            "student_id",
            name="uq_assignment_submissions_assignment_student",
        ),
        sa.CheckConstraint(
            "status IN ('SUBMITTED', 'GRADED')",
            name="ck_assignment_submissions_valid_status",
        ),
    )
    op.create_index("ix_assignment_submissions_assignment_id", "assignment_submissions", ["assignment_id"])
    op.create_index("ix_assignment_submissions_student_id", "assignment_submissions", ["student_id"])


def downgrade() -> None:
    """Drop LearnHub tables."""
    op.drop_table("assignment_submissions")
    op.drop_table("assignments")
    op.drop_table("reviews")
    op.drop_table("progress")
    op.drop_table("enrollments")
    op.drop_table("materials")
    op.drop_table("course_modules")
    op.drop_table("courses")
    op.drop_table("categories")
    op.drop_table("users")
