# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Category management endpoints.

Staff can read every category; only admins change them.

- GET / - List categories with course counts
- GET /{category_id} - Category with all its courses
- POST / - Create category
- PUT /{category_id} - Update category
- DELETE /{category_id} - Delete an unused category
"""

from fastapi import APIRouter, status

from learnhub.api.dependencies import DB, AdminUser, StaffUser
from learnhub.domains.category import CategoryService
from learnhub.models.category import (
    CategoryCreateRequest,
    CategoryDetail,
    CategoryResponse,
    CategoryUpdateRequest,
)
from learnhub.models.common import ApiResponse, EntityId, ok

router = APIRouter()


@router.get("", response_model=ApiResponse[list[CategoryResponse]], summary="List categories")
async def list_categories(db: DB, _: StaffUser) -> ApiResponse[list[CategoryResponse]]:
    return ok(await CategoryService(db).list_categories())


@router.get("/{category_id}", response_model=ApiResponse[CategoryDetail], summary="Get category")
async def get_category(category_id: EntityId, db: DB, _: StaffUser) -> ApiResponse[CategoryDetail]:
    return ok(await CategoryService(db).get_category(category_id, published_only=False))


@router.post(
    "",
    response_model=ApiResponse[CategoryResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create category",
)
async def create_category(
    data: CategoryCreateRequest,
    db: DB,
    _: AdminUser,
) -> ApiResponse[CategoryResponse]:
    return ok(await CategoryService(db).create_category(data), "Category created successfully")


@router.put(
    "/{category_id}",
    response_model=ApiResponse[CategoryResponse],
    summary="Update category",
)
async def update_category(
    category_id: EntityId,
    data: CategoryUpdateRequest,
    db: DB,
    _: AdminUser,
) -> ApiResponse[CategoryResponse]:
    return ok(
        await CategoryService(db).update_category(category_id, data),
        "Category updated successfully",
    )


@router.delete("/{category_id}", response_model=ApiResponse[None], summary="Delete category")
async def delete_category(category_id: EntityId, db: DB, _: AdminUser) -> ApiResponse[None]:
    await CategoryService(db).delete_category(category_id)
    return ok(message="Category deleted successfully")
