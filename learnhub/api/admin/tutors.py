# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Tutor directory endpoints. Admin only.

- GET / - Tutors with their course counts
- PATCH /{tutor_id}/status - Activate or deactivate a tutor
"""

from typing import Annotated

from fastapi import APIRouter, Query

from learnhub.api.dependencies import DB, AdminUser, Hasher, Storage
from learnhub.domains.user import UserService
from learnhub.models.common import ApiResponse, EntityId, ok
from learnhub.models.user import TutorListItem, TutorStatusRequest

router = APIRouter()


@router.get("", response_model=ApiResponse[list[TutorListItem]], summary="List tutors")
async def list_tutors(
    db: DB,
    hasher: Hasher,
    storage: Storage,
    _: AdminUser,
    active_only: Annotated[bool, Query(alias="activeOnly")] = False,
) -> ApiResponse[list[TutorListItem]]:
    return ok(await UserService(db, hasher, storage).list_tutors(active_only=active_only))


@router.patch(
    "/{tutor_id}/status",
    response_model=ApiResponse[TutorListItem],
    summary="Activate or deactivate tutor",
)
async def set_tutor_status(
    tutor_id: EntityId,
    data: TutorStatusRequest,
    db: DB,
    hasher: Hasher,
    storage: Storage,
    _: AdminUser,
) -> ApiResponse[TutorListItem]:
    tutor = await UserService(db, hasher, storage).set_tutor_status(tutor_id, data.is_active)
    action = "activated" if data.is_active else "deactivated"
    return ok(tutor, f"Tutor {action} successfully")
