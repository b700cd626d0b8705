# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Material and per-material progress models."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

from learnhub.models.common import EntityId, ORMModel

MaterialTypeLiteral = Literal["PDF", "VIDEO", "AUDIO", "IMAGE", "DOCUMENT", "LINK"]

# Absolute http(s) URL or a site-relative path such as /uploads/x.pdf
FILE_URL_PATTERN = r"^(https?://.+|/[^/].*)$"


class MaterialCreateRequest(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    description: str | None = Field(default=None, max_length=2000)
    type: MaterialTypeLiteral
    file_url: str | None = Field(default=None, pattern=FILE_URL_PATTERN)
    file_size: int | None = Field(default=None, ge=0)
    duration: int | None = Field(default=None, ge=0)
    order_index: int = Field(default=0, ge=0)
    module_id: EntityId
    is_public: bool = False


class MaterialUpdateRequest(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = Field(default=None, max_length=2000)
    type: MaterialTypeLiteral | None = None
    file_url: str | None = Field(default=None, pattern=FILE_URL_PATTERN)
    file_size: int | None = Field(default=None, ge=0)
    duration: int | None = Field(default=None, ge=0)
    order_index: int | None = Field(default=None, ge=0)
    is_public: bool | None = None


class MaterialResponse(ORMModel):
    id: str
    title: str
    description: str | None = None
    type: MaterialTypeLiteral
    file_url: str | None = None
    file_size: int | None = None
    duration: int | None = None
    order_index: int
    is_public: bool
    course_id: str
    module_id: str
    author_id: str | None = None
    created_at: datetime
    updated_at: datetime


class ProgressResponse(ORMModel):
    id: str
    user_id: str
    course_id: str
    material_id: str
    is_completed: bool
    completed_at: datetime | None = None
    time_spent: int
    last_accessed: datetime


class MaterialWithProgress(MaterialResponse):
    progress: ProgressResponse | None = None
