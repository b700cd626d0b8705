# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Material management endpoints for staff.

- GET /course/{course_id} - Materials of a course
- GET /{material_id} - Material detail
- POST / - Create a material in a module
- PUT /{material_id} - Update a material
- DELETE /{material_id} - Delete a material and its file
"""

from fastapi import APIRouter, status

from learnhub.api.dependencies import DB, StaffUser, Storage
from learnhub.domains.material import MaterialService
from learnhub.models.common import ApiResponse, EntityId, ok
from learnhub.models.material import (
    MaterialCreateRequest,
    MaterialResponse,
    MaterialUpdateRequest,
    MaterialWithProgress,
)

router = APIRouter()


@router.get(
    "/course/{course_id}",
    response_model=ApiResponse[list[MaterialWithProgress]],
    summary="List course materials",
)
async def list_course_materials(
    course_id: EntityId,
    db: DB,
    storage: Storage,
    current_user: StaffUser,
) -> ApiResponse[list[MaterialWithProgress]]:
    return ok(await MaterialService(db, storage).list_course_materials(course_id, current_user))


@router.get(
    "/{material_id}",
    response_model=ApiResponse[MaterialWithProgress],
    summary="Get material",
)
async def get_material(
    material_id: EntityId,
    db: DB,
    storage: Storage,
    current_user: StaffUser,
) -> ApiResponse[MaterialWithProgress]:
    return ok(await MaterialService(db, storage).get_material(material_id, current_user))


@router.post(
    "",
    response_model=ApiResponse[MaterialResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create material",
    description="Adding a material recalculates progress for every enrolled student.",
)
async def create_material(
    data: MaterialCreateRequest,
    db: DB,
    storage: Storage,
    current_user: StaffUser,
) -> ApiResponse[MaterialResponse]:
    material = await MaterialService(db, storage).create_material(data, current_user)
    return ok(material, "Material created successfully")


@router.put(
    "/{material_id}",
    response_model=ApiResponse[MaterialResponse],
    summary="Update material",
)
async def update_material(
    material_id: EntityId,
    data: MaterialUpdateRequest,
    db: DB,
    storage: Storage,
    current_user: StaffUser,
) -> ApiResponse[MaterialResponse]:
    material = await MaterialService(db, storage).update_material(material_id, data, current_user)
    return ok(material, "Material updated successfully")


@router.delete("/{material_id}", response_model=ApiResponse[None], summary="Delete material")
async def delete_material(
    material_id: EntityId,
    db: DB,
    storage: Storage,
    current_user: StaffUser,
) -> ApiResponse[None]:
    await MaterialService(db, storage).delete_material(material_id, current_user)
    return ok(message="Material deleted successfully")
