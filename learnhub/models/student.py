# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Student directory models for the admin console."""

from datetime import datetime

from pydantic import BaseModel, Field


class RosterEnrollment(BaseModel):
    course_id: str
    course_title: str
    enrolled_at: datetime
    status: str
    progress_percentage: int


class RosterStudent(BaseModel):
    """A student with their enrollments in the courses the viewer manages."""

    id: str
    first_name: str
    last_name: str
    email: str
    avatar: str | None = None
    joined_at: datetime
    last_active: datetime
    enrollments: list[RosterEnrollment] = Field(default_factory=list)
    total_courses: int = 0
    completed_courses: int = 0
    total_time_spent: int = 0


class RosterStats(BaseModel):
    total_students: int = 0
    active_students: int = 0
    new_this_month: int = 0
    average_progress: float = 0
    top_performers: int = 0
    total_revenue: float = 0


class StudentRoster(BaseModel):
    students: list[RosterStudent] = Field(default_factory=list)
    stats: RosterStats = Field(default_factory=RosterStats)


class StudentCount(BaseModel):
    students_count: int


class RegisteredStudent(BaseModel):
    id: str
    first_name: str
    last_name: str
    email: str
    avatar: str | None = None
    registered_at: datetime
    last_active: datetime
