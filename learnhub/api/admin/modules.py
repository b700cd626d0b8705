# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Course module endpoints.

- GET /course/{course_id} - Modules of a course in order
- GET /{module_id} - Module with its materials
- POST / - Append a module to a course
- PUT /{module_id} - Update a module
- DELETE /{module_id} - Delete an empty module
- PATCH /{module_id}/reorder - Move a module to a new position
"""

from fastapi import APIRouter, status

from learnhub.api.dependencies import DB, StaffUser
from learnhub.domains.module import ModuleService
from learnhub.models.common import ApiResponse, EntityId, ok
from learnhub.models.module import (
    ModuleCreateRequest,
    ModuleReorderRequest,
    ModuleResponse,
    ModuleUpdateRequest,
    ModuleWithMaterials,
)

router = APIRouter()


@router.get(
    "/course/{course_id}",
    response_model=ApiResponse[list[ModuleResponse]],
    summary="List course modules",
)
async def list_modules(
    course_id: EntityId,
    db: DB,
    current_user: StaffUser,
) -> ApiResponse[list[ModuleResponse]]:
    return ok(await ModuleService(db).list_modules(course_id, current_user))


@router.get("/{module_id}", response_model=ApiResponse[ModuleWithMaterials], summary="Get module")
async def get_module(
    module_id: EntityId,
    db: DB,
    current_user: StaffUser,
) -> ApiResponse[ModuleWithMaterials]:
    return ok(await ModuleService(db).get_module(module_id, current_user))


@router.post(
    "",
    response_model=ApiResponse[ModuleResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create module",
)
async def create_module(
    data: ModuleCreateRequest,
    db: DB,
    current_user: StaffUser,
) -> ApiResponse[ModuleResponse]:
    return ok(await ModuleService(db).create_module(data, current_user), "Module created successfully")


@router.put("/{module_id}", response_model=ApiResponse[ModuleResponse], summary="Update module")
async def update_module(
    module_id: EntityId,
    data: ModuleUpdateRequest,
    db: DB,
    current_user: StaffUser,
) -> ApiResponse[ModuleResponse]:
    module = await ModuleService(db).update_module(module_id, data, current_user)
    return ok(module, "Module updated successfully")


@router.delete("/{module_id}", response_model=ApiResponse[None], summary="Delete module")
async def delete_module(module_id: EntityId, db: DB, current_user: StaffUser) -> ApiResponse[None]:
    await ModuleService(db).delete_module(module_id, current_user)
    return ok(message="Module deleted successfully")


@router.patch(
    "/{module_id}/reorder",
    response_model=ApiResponse[list[ModuleResponse]],
    summary="Reorder module",
    description="Shifts the modules between the old and new position and returns the new order.",
)
async def reorder_module(
    module_id: EntityId,
    data: ModuleReorderRequest,
    db: DB,
    current_user: StaffUser,
) -> ApiResponse[list[ModuleResponse]]:
    modules = await ModuleService(db).reorder_module(module_id, data.new_order_index, current_user)
    return ok(modules, "Module reordered successfully")
