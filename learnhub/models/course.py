# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Course models."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from learnhub.models.common import EntityId, ORMModel
from learnhub.models.module import ModuleWithMaterials
from learnhub.models.review import ReviewResponse
from learnhub.models.user import UserSummary

CourseStatusLiteral = Literal["DRAFT", "PUBLISHED", "ARCHIVED"]
CourseLevelLiteral = Literal["BEGINNER", "INTERMEDIATE", "ADVANCED"]


class CourseCreateRequest(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    description: str = Field(min_length=10)
    category_id: EntityId
    price: float = Field(default=0, ge=0)
    duration: int | None = Field(default=None, ge=0)
    level: CourseLevelLiteral = "BEGINNER"
    thumbnail: str | None = None
    tutor_name: str | None = Field(default=None, max_length=200)
    is_public: bool = False


class CourseUpdateRequest(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = Field(default=None, min_length=10)
    category_id: EntityId | None = None
    price: float | None = Field(default=None, ge=0)
    duration: int | None = Field(default=None, ge=0)
    level: CourseLevelLiteral | None = None
    thumbnail: str | None = None
    tutor_name: str | None = Field(default=None, max_length=200)
    status: CourseStatusLiteral | None = None
    is_public: bool | None = None


class CategoryBrief(ORMModel):
    id: str
    name: str


class CourseSummary(ORMModel):
    """Course as listed in catalogues."""

    id: str
    title: str
    description: str
    thumbnail: str | None = None
    price: float
    duration: int | None = None
    level: CourseLevelLiteral
    status: CourseStatusLiteral
    is_public: bool
    tutor_name: str | None = None
    category_id: str
    creator_id: str
    created_at: datetime
    updated_at: datetime
    category: CategoryBrief | None = None
    creator: UserSummary | None = None
    enrollment_count: int = 0
    module_count: int = 0
    review_count: int = 0
    average_rating: float | None = None


class CourseDetail(CourseSummary):
    """Course with its ordered modules, materials and latest reviews."""

    modules: list[ModuleWithMaterials] = Field(default_factory=list)
    reviews: list[ReviewResponse] = Field(default_factory=list)
    is_enrolled: bool = False


class CourseDeleteSummary(BaseModel):
    course_id: str
    title: str
    deleted_modules: int
    deleted_materials: int
    deleted_assignments: int
    deleted_enrollments: int
    deleted_files: int
