# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Authentication domain: tokens, password hashing and account sessions."""

from learnhub.domains.auth.jwt import (
    InvalidTokenError,
    JWTError,
    JWTManager,
    TokenExpiredError,
    TokenPayload,
)
from learnhub.domains.auth.password import PasswordHasher, hash_password, verify_password
from learnhub.domains.auth.service import (
    AccountDeactivatedError,
    AdminAlreadyExistsError,
    AuthService,
    EmailAlreadyRegisteredError,
    IncorrectPasswordError,
    InsufficientPermissionsError,
    InvalidCredentialsError,
    InvalidResetCodeError,
    InvalidSessionError,
    Portal,
    ResetCodeExpiredError,
    ResetCodeNotFoundError,
    SessionExpiredError,
    TooManyResetAttemptsError,
)

__all__ = [
    "JWTManager",
    "TokenPayload",
    "JWTError",
    "TokenExpiredError",
    "InvalidTokenError",
    "PasswordHasher",
    "hash_password",
    "verify_password",
    "AuthService",
    "Portal",
    "AccountDeactivatedError",
    "AdminAlreadyExistsError",
    "EmailAlreadyRegisteredError",
    "IncorrectPasswordError",
    "InsufficientPermissionsError",
    "InvalidCredentialsError",
    "InvalidSessionError",
    "SessionExpiredError",
    "ResetCodeNotFoundError",
    "ResetCodeExpiredError",
    "InvalidResetCodeError",
    "TooManyResetAttemptsError",
]
