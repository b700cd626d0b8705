# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""FastAPI dependency injection definitions.

This module provides dependency functions for FastAPI endpoints.
Dependencies are used to:
- Get the request's database session
- Resolve the authenticated user and enforce roles
- Get shared helpers (JWT manager, password hasher, file storage)

Every request runs in one session. The authenticated user is loaded in
that same session, so services can modify it directly.

Example:
    @router.get("/my-courses")
    async def my_courses(db: DB, current_user: StaffUser):
        ...
"""

import logging
from typing import Annotated, AsyncGenerator

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from learnhub.core.config import Settings, get_settings
from learnhub.domains.auth.jwt import JWTManager
from learnhub.domains.auth.password import PasswordHasher
from learnhub.domains.auth.service import (
    AuthService,
    InsufficientPermissionsError,
    InvalidSessionError,
)
from learnhub.domains.errors import AuthenticationError, PermissionDeniedError
from learnhub.domains.upload.storage import FileStorage
from learnhub.infrastructure.database import get_session
from learnhub.infrastructure.database.models import User

logger = logging.getLogger(__name__)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Get a database session for the request.

    Yields:
        AsyncSession, committed when the request succeeds.
    """
    async with get_session() as session:
        yield session


# =========================================================================
# Service Dependencies
# =========================================================================


def get_jwt_manager() -> JWTManager:
    return JWTManager(get_settings().jwt)


def get_password_hasher() -> PasswordHasher:
    return PasswordHasher()


def get_file_storage() -> FileStorage:
    """Get file storage configured from the upload settings."""
    upload = get_settings().upload
    return FileStorage(
        directory=upload.directory,
        url_prefix=upload.url_prefix,
        max_file_size=upload.max_file_size,
    )


async def get_auth_service(
    db: AsyncSession = Depends(get_db),
    jwt_manager: JWTManager = Depends(get_jwt_manager),
    password_hasher: PasswordHasher = Depends(get_password_hasher),
) -> AuthService:
    return AuthService(db, jwt_manager, password_hasher)


# =========================================================================
# Authentication Dependencies
# =========================================================================


async def get_optional_user(
    request: Request,
    auth_service: AuthService = Depends(get_auth_service),
) -> User | None:
    """Get the current user if a valid token was sent, None otherwise.

    A stale session or a deactivated account is treated as anonymous.
    """
    payload = getattr(request.state, "token_payload", None)
    if payload is None:
        return None
    try:
        return await auth_service.authenticate(payload)
    except (AuthenticationError, PermissionDeniedError) as e:
        logger.debug("Ignoring token on public route: %s", e.message)
        return None


async def require_auth(
    request: Request,
    auth_service: AuthService = Depends(get_auth_service),
) -> User:
    """Require an authenticated user.

    Raises:
        HTTPException: 401 if no token was sent.
        InvalidSessionError: If the token is invalid or expired.
        AccountDeactivatedError: If the account is deactivated.
        SessionExpiredError: If a student session was superseded.
    """
    payload = getattr(request.state, "token_payload", None)
    if payload is None:
        if getattr(request.state, "token_error", False):
            raise InvalidSessionError()
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Access denied. No token provided.",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user = await auth_service.authenticate(payload)
    request.state.user = user
    return user


async def require_staff(user: User = Depends(require_auth)) -> User:
    """Require an admin or tutor."""
    if not user.is_staff:
        raise InsufficientPermissionsError()
    return user


async def require_admin(user: User = Depends(require_auth)) -> User:
    """Require an admin."""
    if not user.is_admin:
        raise InsufficientPermissionsError()
    return user


async def require_student(user: User = Depends(require_auth)) -> User:
    """Require a student."""
    if not user.is_student:
        raise InsufficientPermissionsError()
    return user


# =========================================================================
# Type Aliases for Dependency Injection
# =========================================================================

DB = Annotated[AsyncSession, Depends(get_db)]
AppSettings = Annotated[Settings, Depends(get_settings)]
Storage = Annotated[FileStorage, Depends(get_file_storage)]
Hasher = Annotated[PasswordHasher, Depends(get_password_hasher)]
Auth = Annotated[AuthService, Depends(get_auth_service)]
OptionalUser = Annotated[User | None, Depends(get_optional_user)]
StaffUser = Annotated[User, Depends(require_staff)]
AdminUser = Annotated[User, Depends(require_admin)]
StudentUser = Annotated[User, Depends(require_student)]
