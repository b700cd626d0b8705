# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Local disk storage for uploaded files.

Files live flat in one directory (``UPLOAD_DIR``) and are referenced
from database rows by their public URL, ``/uploads/<filename>``. Stored
names never collide and never contain path components:

    <sanitized original stem, max 50 chars>-<ms timestamp>-<random><ext>

Removal is best effort. A missing file or an OS error is logged and
reported as ``False`` instead of failing the surrounding operation.
"""

import asyncio
import logging
import re
import secrets
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path, PurePosixPath
from typing import Iterable

from fastapi import UploadFile

from learnhub.domains.errors import NotFoundError, ValidationFailedError
from learnhub.models.upload import FileInfoResponse

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024

IMAGE_MIME_TYPES: frozenset[str] = frozenset(
    {"image/jpeg", "image/png", "image/gif", "image/webp"}
)

ALLOWED_MIME_TYPES: dict[str, str] = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/gif": ".gif",
    "image/webp": ".webp",
    "application/pdf": ".pdf",
    "application/msword": ".doc",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document": ".docx",
    "application/vnd.ms-powerpoint": ".ppt",
    "application/vnd.openxmlformats-officedocument.presentationml.presentation": ".pptx",
    "video/mp4": ".mp4",
    "video/mpeg": ".mpeg",
    "video/webm": ".webm",
    "audio/mpeg": ".mp3",
    "audio/wav": ".wav",
    "audio/ogg": ".ogg",
    "text/plain": ".txt",
    "application/json": ".json",
}

_UNSAFE_CHARS = re.compile(r"[^a-zA-Z0-9_-]")
MAX_STEM_LENGTH = 50


class UnsupportedFileTypeError(ValidationFailedError):
    def __init__(self, mime_type: str | None) -> None:
        super().__init__(f"Invalid file type: {mime_type or 'unknown'}")
        self.mime_type = mime_type


class FileTooLargeError(ValidationFailedError):
    def __init__(self, max_size: int) -> None:
        super().__init__(f"File too large. Maximum size is {max_size // (1024 * 1024)}MB")
        self.max_size = max_size


class InvalidFilenameError(ValidationFailedError):
    def __init__(self) -> None:
        super().__init__("Invalid filename")


class StoredFileNotFoundError(NotFoundError):
    def __init__(self, filename: str) -> None:
        super().__init__("File not found")
        self.filename = filename


@dataclass(frozen=True)
class StoredFile:
    """A file written to storage."""

    filename: str
    original_name: str
    url: str
    size: int
    mime_type: str


def build_filename(original_name: str, mime_type: str | None = None) -> str:
    """Build a unique, path-free filename from an uploaded file's name.

    Args:
        original_name: Client-supplied filename.
        mime_type: Content type, used for the extension when the name has none.

    Returns:
        Filename of the form ``<stem>-<ms timestamp>-<random><ext>``.
    """
    name = PurePosixPath(original_name.replace("\\", "/")).name
    suffix = PurePosixPath(name).suffix.lower()
    stem = name[: -len(suffix)] if suffix else name

    safe_stem = _UNSAFE_CHARS.sub("_", stem)[:MAX_STEM_LENGTH] or "file"
    if not re.fullmatch(r"\.[a-z0-9]{1,10}", suffix):
        suffix = ALLOWED_MIME_TYPES.get(mime_type or "", "")

    timestamp = int(time.time() * 1000)
    return f"{safe_stem}-{timestamp}-{secrets.randbelow(10**9)}{suffix}"


class FileStorage:
    """Flat-directory file storage.

    Attributes:
        directory: Directory files are written to.
        url_prefix: Public URL prefix the directory is served under.
        max_file_size: Maximum accepted size in bytes.
    """

    def __init__(self, directory: Path, url_prefix: str = "/uploads", max_file_size: int = 50 * 1024 * 1024) -> None:
        self.directory = Path(directory)
        self.url_prefix = url_prefix.rstrip("/")
        self.max_file_size = max_file_size

    def ensure_directory(self) -> None:
        """Create the storage directory if it does not exist."""
        self.directory.mkdir(parents=True, exist_ok=True)

    def url_for(self, filename: str) -> str:
        return f"{self.url_prefix}/{filename}"

    def resolve(self, filename: str) -> Path:
        """Map a bare filename to its path inside the storage directory.

        Raises:
            InvalidFilenameError: If the name contains path components.
        """
        if (
            not filename
            or filename in {".", ".."}
            or "/" in filename
            or "\\" in filename
            or "\x00" in filename
        ):
            raise InvalidFilenameError()
        return self.directory / filename

    def path_for_url(self, url: str | None) -> Path | None:
        """Map a stored-file URL back to its path.

        URLs outside the upload prefix (external links) map to ``None``.
        """
        if not url:
            return None
        prefix = f"{self.url_prefix}/"
        if not url.startswith(prefix):
            return None
        try:
            return self.resolve(url[len(prefix):])
        except InvalidFilenameError:
            return None

    async def save(
        self,
        upload: UploadFile,
        allowed_types: Iterable[str] | None = None,
    ) -> StoredFile:
        """Validate and write an uploaded file.

        Args:
            upload: File received by the endpoint.
            allowed_types: MIME types to accept, defaults to all supported types.

        Returns:
            Description of the stored file.

        Raises:
            UnsupportedFileTypeError: If the MIME type is not allowed.
            FileTooLargeError: If the file exceeds the size limit.
        """
        allowed = frozenset(allowed_types) if allowed_types is not None else frozenset(ALLOWED_MIME_TYPES)
        mime_type = upload.content_type
        if mime_type not in allowed:
            raise UnsupportedFileTypeError(mime_type)

        original_name = upload.filename or "file"
        filename = build_filename(original_name, mime_type)
        path = self.resolve(filename)
        self.ensure_directory()

        size = 0
        try:
            with path.open("wb") as out:
                while chunk := await upload.read(CHUNK_SIZE):
                    size += len(chunk)
                    if size > self.max_file_size:
                        raise FileTooLargeError(self.max_file_size)
                    await asyncio.to_thread(out.write, chunk)
        except BaseException:
            # Cancellation from a dropped connection is a BaseException
            path.unlink(missing_ok=True)
            raise

        logger.info("Stored upload: %s (%d bytes, %s)", filename, size, mime_type)
        return StoredFile(
            filename=filename,
            original_name=original_name,
            url=self.url_for(filename),
            size=size,
            mime_type=mime_type,
        )

    def delete(self, url: str | None) -> bool:
        """Remove the file a URL points at.

        Returns:
            True if a file was removed, False otherwise.
        """
        path = self.path_for_url(url)
        if path is None:
            return False
        try:
            path.unlink()
        except FileNotFoundError:
            logger.debug("File already absent: %s", path)
            return False
        except OSError as e:
            logger.warning("Failed to delete file %s: %s", path, e)
            return False
        logger.info("Deleted file: %s", path.name)
        return True

    def delete_many(self, urls: Iterable[str | None]) -> int:
        """Remove several files. Returns how many were removed."""
        return sum(1 for url in urls if self.delete(url))

    def delete_by_name(self, filename: str) -> None:
        """Remove a file by name.

        Raises:
            InvalidFilenameError: If the name contains path components.
            StoredFileNotFoundError: If the file does not exist.
        """
        path = self.resolve(filename)
        if not path.is_file():
            raise StoredFileNotFoundError(filename)
        path.unlink()
        logger.info("Deleted file: %s", filename)

    def info(self, filename: str) -> FileInfoResponse:
        """Describe a stored file.

        Raises:
            InvalidFilenameError: If the name contains path components.
            StoredFileNotFoundError: If the file does not exist.
        """
        path = self.resolve(filename)
        if not path.is_file():
            raise StoredFileNotFoundError(filename)
        stat = path.stat()
        return FileInfoResponse(
            filename=filename,
            url=self.url_for(filename),
            size=stat.st_size,
            created_at=datetime.fromtimestamp(stat.st_ctime, tz=timezone.utc),
            modified_at=datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc),
        )
