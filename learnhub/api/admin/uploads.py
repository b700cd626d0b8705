# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""File upload endpoints for staff.

- POST /single - Upload one file
- POST /multiple - Upload several files at once
- POST /avatar - Replace the caller's avatar
- POST /course-thumbnail/{course_id} - Replace a course thumbnail
- POST /material - Upload a material file
- DELETE /file/{filename} - Delete a stored file
- GET /file-info/{filename} - Size and timestamps of a stored file

All endpoints share the upload rate limit.
"""

from typing import Annotated

from fastapi import APIRouter, File, Request, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from learnhub.api.dependencies import DB, AppSettings, StaffUser, Storage
from learnhub.api.middleware.rate_limit import RATE_LIMIT_UPLOAD, limiter
from learnhub.core.config import Settings
from learnhub.domains.upload import FileStorage, UploadService
from learnhub.models.common import ApiResponse, EntityId, ok
from learnhub.models.upload import (
    AvatarUploadResponse,
    FileInfoResponse,
    ThumbnailUploadResponse,
    UploadedFileResponse,
)

router = APIRouter()

OptionalFile = Annotated[UploadFile | None, File()]


def _get_service(db: AsyncSession, storage: FileStorage, settings: Settings) -> UploadService:
    return UploadService(db, storage, max_files=settings.upload.max_files)


@router.post("/single", response_model=ApiResponse[UploadedFileResponse], summary="Upload file")
@limiter.limit(RATE_LIMIT_UPLOAD)
async def upload_single(
    request: Request,
    db: DB,
    storage: Storage,
    settings: AppSettings,
    _: StaffUser,
    file: OptionalFile = None,
) -> ApiResponse[UploadedFileResponse]:
    stored = await _get_service(db, storage, settings).upload_file(file)
    return ok(stored, "File uploaded successfully")


@router.post(
    "/multiple",
    response_model=ApiResponse[list[UploadedFileResponse]],
    summary="Upload files",
)
@limiter.limit(RATE_LIMIT_UPLOAD)
async def upload_multiple(
    request: Request,
    db: DB,
    storage: Storage,
    settings: AppSettings,
    _: StaffUser,
    files: Annotated[list[UploadFile] | None, File()] = None,
) -> ApiResponse[list[UploadedFileResponse]]:
    stored = await _get_service(db, storage, settings).upload_files(files or [])
    return ok(stored, f"{len(stored)} file(s) uploaded successfully")


@router.post("/avatar", response_model=ApiResponse[AvatarUploadResponse], summary="Upload avatar")
@limiter.limit(RATE_LIMIT_UPLOAD)
async def upload_avatar(
    request: Request,
    db: DB,
    storage: Storage,
    settings: AppSettings,
    current_user: StaffUser,
    file: OptionalFile = None,
) -> ApiResponse[AvatarUploadResponse]:
    result = await _get_service(db, storage, settings).upload_avatar(current_user, file)
    return ok(result, "Avatar uploaded successfully")


@router.post(
    "/course-thumbnail/{course_id}",
    response_model=ApiResponse[ThumbnailUploadResponse],
    summary="Upload course thumbnail",
)
@limiter.limit(RATE_LIMIT_UPLOAD)
async def upload_course_thumbnail(
    request: Request,
    course_id: EntityId,
    db: DB,
    storage: Storage,
    settings: AppSettings,
    current_user: StaffUser,
    file: OptionalFile = None,
) -> ApiResponse[ThumbnailUploadResponse]:
    service = _get_service(db, storage, settings)
    result = await service.upload_course_thumbnail(course_id, file, current_user)
    return ok(result, "Course thumbnail uploaded successfully")


@router.post(
    "/material",
    response_model=ApiResponse[UploadedFileResponse],
    summary="Upload material file",
)
@limiter.limit(RATE_LIMIT_UPLOAD)
async def upload_material(
    request: Request,
    db: DB,
    storage: Storage,
    settings: AppSettings,
    _: StaffUser,
    file: OptionalFile = None,
) -> ApiResponse[UploadedFileResponse]:
    stored = await _get_service(db, storage, settings).upload_file(file)
    return ok(stored, "Material file uploaded successfully")


@router.delete("/file/{filename}", response_model=ApiResponse[None], summary="Delete file")
@limiter.limit(RATE_LIMIT_UPLOAD)
async def delete_file(
    request: Request,
    filename: str,
    db: DB,
    storage: Storage,
    settings: AppSettings,
    _: StaffUser,
) -> ApiResponse[None]:
    _get_service(db, storage, settings).delete_file(filename)
    return ok(message="File deleted successfully")


@router.get(
    "/file-info/{filename}",
    response_model=ApiResponse[FileInfoResponse],
    summary="File info",
)
@limiter.limit(RATE_LIMIT_UPLOAD)
async def file_info(
    request: Request,
    filename: str,
    db: DB,
    storage: Storage,
    settings: AppSettings,
    _: StaffUser,
) -> ApiResponse[FileInfoResponse]:
    return ok(_get_service(db, storage, settings).file_info(filename))
