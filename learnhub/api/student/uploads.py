# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Student upload endpoints.

- POST /avatar - Replace the caller's avatar
- POST /assignment-file - Upload a file to attach to a submission
"""

from typing import Annotated

from fastapi import APIRouter, File, Request, UploadFile

from learnhub.api.dependencies import DB, AppSettings, Storage, StudentUser
from learnhub.api.middleware.rate_limit import RATE_LIMIT_UPLOAD, limiter
from learnhub.domains.upload import UploadService
from learnhub.models.common import ApiResponse, ok
from learnhub.models.upload import AvatarUploadResponse, UploadedFileResponse

router = APIRouter()


@router.post("/avatar", response_model=ApiResponse[AvatarUploadResponse], summary="Upload avatar")
@limiter.limit(RATE_LIMIT_UPLOAD)
async def upload_avatar(
    request: Request,
    db: DB,
    storage: Storage,
    settings: AppSettings,
    current_user: StudentUser,
    file: Annotated[UploadFile | None, File()] = None,
) -> ApiResponse[AvatarUploadResponse]:
    service = UploadService(db, storage, max_files=settings.upload.max_files)
    return ok(await service.upload_avatar(current_user, file), "Avatar uploaded successfully")


@router.post(
    "/assignment-file",
    response_model=ApiResponse[UploadedFileResponse],
    summary="Upload assignment file",
)
@limiter.limit(RATE_LIMIT_UPLOAD)
async def upload_assignment_file(
    request: Request,
    db: DB,
    storage: Storage,
    settings: AppSettings,
    _: StudentUser,
    file: Annotated[UploadFile | None, File()] = None,
) -> ApiResponse[UploadedFileResponse]:
    service = UploadService(db, storage, max_files=settings.upload.max_files)
    return ok(await service.upload_file(file), "File uploaded successfully")
