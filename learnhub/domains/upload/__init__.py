# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""File uploads: disk storage and upload workflows."""

from learnhub.domains.upload.service import (
    NoFileUploadedError,
    ThumbnailAccessDeniedError,
    TooManyFilesError,
    UploadCourseNotFoundError,
    UploadService,
)
from learnhub.domains.upload.storage import (
    ALLOWED_MIME_TYPES,
    IMAGE_MIME_TYPES,
    FileStorage,
    FileTooLargeError,
    InvalidFilenameError,
    StoredFile,
    StoredFileNotFoundError,
    UnsupportedFileTypeError,
    build_filename,
)

__all__ = [
    "ALLOWED_MIME_TYPES",
    "IMAGE_MIME_TYPES",
    "FileStorage",
    "FileTooLargeError",
    "InvalidFilenameError",
    "NoFileUploadedError",
    "StoredFile",
    "StoredFileNotFoundError",
    "ThumbnailAccessDeniedError",
    "TooManyFilesError",
    "UnsupportedFileTypeError",
    "UploadCourseNotFoundError",
    "UploadService",
    "build_filename",
]
