# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Course module models."""

from datetime import datetime

from pydantic import BaseModel, Field

from learnhub.models.common import EntityId, ORMModel
from learnhub.models.material import MaterialResponse


class ModuleCreateRequest(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    description: str | None = Field(default=None, max_length=1000)
    order_index: int | None = Field(default=None, ge=0)
    course_id: EntityId


class ModuleUpdateRequest(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = Field(default=None, max_length=1000)
    order_index: int | None = Field(default=None, ge=0)


class ModuleReorderRequest(BaseModel):
    new_order_index: int = Field(ge=0)


class ModuleResponse(ORMModel):
    id: str
    title: str
    description: str | None = None
    order_index: int
    course_id: str
    material_count: int = 0
    created_at: datetime
    updated_at: datetime


class ModuleWithMaterials(ModuleResponse):
    materials: list[MaterialResponse] = Field(default_factory=list)
