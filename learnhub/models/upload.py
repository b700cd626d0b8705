# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Upload models."""

from datetime import datetime

from pydantic import BaseModel

from learnhub.models.user import UserResponse


class UploadedFileResponse(BaseModel):
    filename: str
    original_name: str
    url: str
    size: int
    mime_type: str


class FileInfoResponse(BaseModel):
    filename: str
    url: str
    size: int
    created_at: datetime
    modified_at: datetime


class AvatarUploadResponse(BaseModel):
    file: UploadedFileResponse
    user: UserResponse


class ThumbnailUploadResponse(BaseModel):
    file: UploadedFileResponse
    course_id: str
