# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Category models."""

from datetime import datetime

from pydantic import BaseModel, Field

from learnhub.models.common import ORMModel
from learnhub.models.course import CourseSummary


class CategoryCreateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=500)


class CategoryUpdateRequest(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=500)


class CategoryResponse(ORMModel):
    id: str
    name: str
    description: str | None = None
    course_count: int = 0
    created_at: datetime
    updated_at: datetime


class CategoryDetail(CategoryResponse):
    courses: list[CourseSummary] = Field(default_factory=list)
