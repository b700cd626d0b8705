# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Analytics models."""

from datetime import datetime

from pydantic import BaseModel


class TutorOverview(BaseModel):
    total_courses: int
    published_courses: int
    draft_courses: int
    archived_courses: int
    total_students: int
    total_enrollments: int
    completed_enrollments: int
    average_progress: float


class RevenueStats(BaseModel):
    """Placeholder until payments exist; always zero."""

    total_revenue: float = 0
    monthly_revenue: float = 0
    revenue_growth: float = 0


class CourseAnalytics(BaseModel):
    course_id: str
    title: str
    status: str
    enrollments: int
    completed_enrollments: int
    average_progress: float
    total_materials: int
    completion_rate: float


class EngagementStats(BaseModel):
    total_time_spent: int
    materials_completed: int
    active_students_this_month: int


class RecentEnrollment(BaseModel):
    enrollment_id: str
    course_id: str
    course_title: str
    student_id: str
    student_name: str
    enrolled_at: datetime


class TutorAnalytics(BaseModel):
    overview: TutorOverview
    revenue: RevenueStats
    courses: list[CourseAnalytics]
    engagement: EngagementStats
    recent_enrollments: list[RecentEnrollment]


class StudentCompletion(BaseModel):
    student_id: str
    student_name: str
    email: str
    enrollment_status: str
    progress_percentage: int
    completed_materials: int
    total_materials: int
    completion_percentage: float
    time_spent: int
    last_accessed: datetime | None = None


class CourseCompletionReport(BaseModel):
    course_id: str
    title: str
    total_materials: int
    total_students: int
    students: list[StudentCompletion]


class PlatformStats(BaseModel):
    total_courses: int
    total_students: int
    total_categories: int
    total_tutors: int
