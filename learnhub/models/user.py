# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""User models."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, EmailStr, Field

from learnhub.models.common import ORMModel, Password

RoleLiteral = Literal["ADMIN", "TUTOR", "STUDENT"]


class UserSummary(ORMModel):
    """Compact user representation embedded in other resources."""

    id: str
    email: str
    first_name: str
    last_name: str
    avatar: str | None = None


class UserResponse(ORMModel):
    """Full user representation (never includes the password hash)."""

    id: str
    email: str
    first_name: str
    last_name: str
    avatar: str | None = None
    role: RoleLiteral
    is_verified: bool
    is_active: bool
    last_login_at: datetime | None = None
    created_at: datetime
    updated_at: datetime


class UserListItem(UserResponse):
    created_courses_count: int = 0
    enrollments_count: int = 0


class UserCourseBrief(ORMModel):
    id: str
    title: str
    status: str
    created_at: datetime


class UserEnrollmentBrief(ORMModel):
    id: str
    course_id: str
    course_title: str
    status: str
    progress_percentage: int
    enrolled_at: datetime


class UserDetail(UserResponse):
    """User with the courses they created and their enrollments."""

    created_courses: list[UserCourseBrief] = Field(default_factory=list)
    enrollments: list[UserEnrollmentBrief] = Field(default_factory=list)


class UserCreateRequest(BaseModel):
    email: EmailStr
    password: Password
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    role: RoleLiteral = "STUDENT"
    is_verified: bool = False


class UserUpdateRequest(BaseModel):
    first_name: str | None = Field(default=None, min_length=1, max_length=100)
    last_name: str | None = Field(default=None, min_length=1, max_length=100)
    role: RoleLiteral | None = None
    is_active: bool | None = None
    is_verified: bool | None = None


class UserStatsOverview(BaseModel):
    total_users: int
    total_admins: int
    total_tutors: int
    total_students: int
    total_courses: int
    total_enrollments: int
    recent_users: list[UserResponse]


class TutorListItem(ORMModel):
    id: str
    email: str
    first_name: str
    last_name: str
    avatar: str | None = None
    is_active: bool
    created_at: datetime
    course_count: int = 0


class TutorStatusRequest(BaseModel):
    is_active: bool
