# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Public endpoints outside the two portals.

- POST /auth/bootstrap-admin - Create the first admin account
- GET /categories - List categories
- GET /categories/{category_id} - Category with its published courses
- GET /stats - Platform counters
"""

import logging

from fastapi import APIRouter, Request, Response, status

from learnhub.api.cookies import set_auth_cookie
from learnhub.api.dependencies import DB, Auth
from learnhub.api.middleware.rate_limit import RATE_LIMIT_AUTH, limiter
from learnhub.domains.analytics import AnalyticsService
from learnhub.domains.auth.service import Portal
from learnhub.domains.category import CategoryService
from learnhub.models.analytics import PlatformStats
from learnhub.models.auth import AuthResponse, RegisterRequest
from learnhub.models.category import CategoryDetail, CategoryResponse
from learnhub.models.common import ApiResponse, EntityId, ok

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/auth/bootstrap-admin",
    response_model=ApiResponse[AuthResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create the first admin",
    description="Only succeeds while no admin account exists.",
)
@limiter.limit(RATE_LIMIT_AUTH)
async def bootstrap_admin(
    request: Request,
    response: Response,
    data: RegisterRequest,
    auth_service: Auth,
) -> ApiResponse[AuthResponse]:
    auth = await auth_service.bootstrap_admin(data)
    set_auth_cookie(response, Portal.ADMIN, auth.token)
    return ok(auth, "Admin account created")


@router.get("/categories", response_model=ApiResponse[list[CategoryResponse]], summary="List categories")
async def list_categories(db: DB) -> ApiResponse[list[CategoryResponse]]:
    return ok(await CategoryService(db).list_categories())


@router.get(
    "/categories/{category_id}",
    response_model=ApiResponse[CategoryDetail],
    summary="Get category",
)
async def get_category(category_id: EntityId, db: DB) -> ApiResponse[CategoryDetail]:
    return ok(await CategoryService(db).get_category(category_id, published_only=True))


@router.get("/stats", response_model=ApiResponse[PlatformStats], summary="Platform statistics")
async def platform_stats(db: DB) -> ApiResponse[PlatformStats]:
    return ok(await AnalyticsService(db).platform_stats())
