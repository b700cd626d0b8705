# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Upload workflows on top of FileStorage.

Plain uploads only write files and return their URLs. Avatar and course
thumbnail uploads also point a row at the new file; the previous file is
removed once that change has committed, and the new file is removed
again if the commit fails.
"""

import logging
from typing import Sequence

from fastapi import UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from learnhub.domains.access import can_manage_course
from learnhub.domains.errors import NotFoundError, PermissionDeniedError, ValidationFailedError
from learnhub.domains.upload.storage import IMAGE_MIME_TYPES, FileStorage, StoredFile
from learnhub.infrastructure.database.models import Course, User
from learnhub.models.upload import (
    AvatarUploadResponse,
    FileInfoResponse,
    ThumbnailUploadResponse,
    UploadedFileResponse,
)
from learnhub.models.user import UserResponse

logger = logging.getLogger(__name__)


class NoFileUploadedError(ValidationFailedError):
    def __init__(self) -> None:
        super().__init__("No file uploaded")


class TooManyFilesError(ValidationFailedError):
    def __init__(self, max_files: int) -> None:
        super().__init__(f"Too many files. Maximum is {max_files}")
        self.max_files = max_files


class UploadCourseNotFoundError(NotFoundError):
    def __init__(self, course_id: str) -> None:
        super().__init__("Course not found")
        self.course_id = course_id


class ThumbnailAccessDeniedError(PermissionDeniedError):
    def __init__(self) -> None:
        super().__init__("Not authorized to update this course")


def _to_response(stored: StoredFile) -> UploadedFileResponse:
    return UploadedFileResponse(
        filename=stored.filename,
        original_name=stored.original_name,
        url=stored.url,
        size=stored.size,
        mime_type=stored.mime_type,
    )


class UploadService:
    """Upload operations for both portals.

    Attributes:
        db: Database session.
        storage: File storage.
        max_files: Limit for multi-file uploads.
    """

    def __init__(self, db: AsyncSession, storage: FileStorage, max_files: int = 5) -> None:
        self.db = db
        self.storage = storage
        self.max_files = max_files

    async def upload_file(self, upload: UploadFile | None) -> UploadedFileResponse:
        """Store one file of any supported type."""
        if upload is None or not upload.filename:
            raise NoFileUploadedError()
        return _to_response(await self.storage.save(upload))

    async def upload_files(self, uploads: Sequence[UploadFile]) -> list[UploadedFileResponse]:
        """Store several files. Already written files are removed if one fails."""
        if not uploads:
            raise NoFileUploadedError()
        if len(uploads) > self.max_files:
            raise TooManyFilesError(self.max_files)

        stored: list[StoredFile] = []
        try:
            for upload in uploads:
                stored.append(await self.storage.save(upload))
        except Exception:
            self.storage.delete_many(f.url for f in stored)
            raise
        return [_to_response(f) for f in stored]

    async def upload_avatar(self, user: User, upload: UploadFile | None) -> AvatarUploadResponse:
        """Replace the user's avatar with an uploaded image."""
        if upload is None or not upload.filename:
            raise NoFileUploadedError()

        stored = await self.storage.save(upload, allowed_types=IMAGE_MIME_TYPES)
        old_avatar = user.avatar
        user.avatar = stored.url
        await self._commit_or_discard(stored)

        if old_avatar and old_avatar != stored.url:
            self.storage.delete(old_avatar)

        logger.info("Avatar updated: user=%s, file=%s", user.id, stored.filename)
        return AvatarUploadResponse(file=_to_response(stored), user=UserResponse.model_validate(user))

    async def upload_course_thumbnail(
        self,
        course_id: str,
        upload: UploadFile | None,
        actor: User,
    ) -> ThumbnailUploadResponse:
        """Replace a course thumbnail. Owner or admin only."""
        if upload is None or not upload.filename:
            raise NoFileUploadedError()

        course = await self.db.get(Course, course_id)
        if course is None:
            raise UploadCourseNotFoundError(course_id)
        if not can_manage_course(course, actor):
            raise ThumbnailAccessDeniedError()

        stored = await self.storage.save(upload, allowed_types=IMAGE_MIME_TYPES)
        old_thumbnail = course.thumbnail
        course.thumbnail = stored.url
        await self._commit_or_discard(stored)

        if old_thumbnail and old_thumbnail != stored.url:
            self.storage.delete(old_thumbnail)

        logger.info("Course thumbnail updated: course=%s, file=%s", course_id, stored.filename)
        return ThumbnailUploadResponse(file=_to_response(stored), course_id=course_id)

    def delete_file(self, filename: str) -> None:
        self.storage.delete_by_name(filename)

    def file_info(self, filename: str) -> FileInfoResponse:
        return self.storage.info(filename)

    async def _commit_or_discard(self, stored: StoredFile) -> None:
        try:
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            self.storage.delete(stored.url)
            raise
