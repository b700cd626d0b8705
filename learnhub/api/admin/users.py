# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""User management endpoints. Admin only.

- GET / - List users with role and search filters
- GET /stats/overview - User counters
- GET /{user_id} - User detail with courses and enrollments
- POST / - Create a user of any role
- PUT /{user_id} - Update a user
- DELETE /{user_id} - Delete a user
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from learnhub.api.dependencies import DB, AdminUser, Hasher, Storage
from learnhub.domains.auth.password import PasswordHasher
from learnhub.domains.upload.storage import FileStorage
from learnhub.domains.user import UserService
from learnhub.infrastructure.database.models import UserRole
from learnhub.models.common import ApiResponse, EntityId, Page, ok
from learnhub.models.user import (
    UserCreateRequest,
    UserDetail,
    UserListItem,
    UserResponse,
    UserStatsOverview,
    UserUpdateRequest,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_service(db: AsyncSession, hasher: PasswordHasher, storage: FileStorage) -> UserService:
    return UserService(db, hasher, storage)


@router.get("", response_model=ApiResponse[Page[UserListItem]], summary="List users")
async def list_users(
    db: DB,
    hasher: Hasher,
    storage: Storage,
    _: AdminUser,
    page: Annotated[int, Query(ge=1)] = 1,
    limit: Annotated[int, Query(ge=1, le=100)] = 10,
    role: UserRole | None = None,
    search: str | None = None,
) -> ApiResponse[Page[UserListItem]]:
    service = _get_service(db, hasher, storage)
    return ok(await service.list_users(page=page, limit=limit, role=role, search=search))


@router.get(
    "/stats/overview",
    response_model=ApiResponse[UserStatsOverview],
    summary="User statistics",
)
async def stats_overview(
    db: DB,
    hasher: Hasher,
    storage: Storage,
    _: AdminUser,
) -> ApiResponse[UserStatsOverview]:
    return ok(await _get_service(db, hasher, storage).stats_overview())


@router.get("/{user_id}", response_model=ApiResponse[UserDetail], summary="Get user")
async def get_user(
    user_id: EntityId,
    db: DB,
    hasher: Hasher,
    storage: Storage,
    _: AdminUser,
) -> ApiResponse[UserDetail]:
    return ok(await _get_service(db, hasher, storage).get_user(user_id))


@router.post(
    "",
    response_model=ApiResponse[UserResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create user",
)
async def create_user(
    data: UserCreateRequest,
    db: DB,
    hasher: Hasher,
    storage: Storage,
    current_user: AdminUser,
) -> ApiResponse[UserResponse]:
    user = await _get_service(db, hasher, storage).create_user(data)
    logger.info("User created by admin: user=%s, by=%s", user.id, current_user.id)
    return ok(user, "User created successfully")


@router.put("/{user_id}", response_model=ApiResponse[UserResponse], summary="Update user")
async def update_user(
    user_id: EntityId,
    data: UserUpdateRequest,
    db: DB,
    hasher: Hasher,
    storage: Storage,
    _: AdminUser,
) -> ApiResponse[UserResponse]:
    return ok(
        await _get_service(db, hasher, storage).update_user(user_id, data),
        "User updated successfully",
    )


@router.delete("/{user_id}", response_model=ApiResponse[None], summary="Delete user")
async def delete_user(
    user_id: EntityId,
    db: DB,
    hasher: Hasher,
    storage: Storage,
    current_user: AdminUser,
) -> ApiResponse[None]:
    await _get_service(db, hasher, storage).delete_user(user_id, current_user)
    return ok(message="User deleted successfully")
