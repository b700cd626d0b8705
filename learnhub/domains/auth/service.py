# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Authentication service.

Handles the account lifecycle for both portals:
- Bootstrapping the first admin account
- Student self-registration
- Login for the admin (tutor) console and the student portal
- Single-session enforcement for students
- Profile and password changes
- Password reset with a short-lived one-time code

Students hold one session at a time. Every student login rotates
``User.active_session_token`` and embeds the new value in the JWT, so a
token issued for an earlier login stops matching and is rejected.

Example:
    >>> service = AuthService(db, JWTManager(settings.jwt), PasswordHasher())
    >>> auth = await service.login(LoginRequest(email=..., password=...), Portal.STUDENT)
"""

import asyncio
import hashlib
import hmac
import logging
import secrets
from datetime import timedelta
from enum import StrEnum
from uuid import uuid4

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from learnhub.domains.auth.jwt import JWTManager, TokenPayload
from learnhub.domains.auth.password import PasswordHasher
from learnhub.domains.errors import (
    AuthenticationError,
    ConflictError,
    PermissionDeniedError,
    ValidationFailedError,
)
from learnhub.infrastructure.database.models import User, UserRole
from learnhub.models.auth import (
    AuthResponse,
    ChangePasswordRequest,
    LoginRequest,
    ProfileUpdateRequest,
    RegisterRequest,
    ResetPasswordRequest,
    VerifyResetCodeRequest,
)
from learnhub.models.user import UserResponse
from learnhub.utils.datetime import ensure_utc, utc_now

logger = logging.getLogger(__name__)

RESET_CODE_TTL = timedelta(minutes=10)
MAX_RESET_ATTEMPTS = 5


def _hash_reset_code(code: str) -> str:
    return hashlib.sha256(code.encode("utf-8")).hexdigest()


class Portal(StrEnum):
    """Frontend a session belongs to. Each portal has its own auth cookie."""

    ADMIN = "admin"
    STUDENT = "student"

    @property
    def cookie_name(self) -> str:
        return f"{self.value}_token"

    def allows(self, role: str) -> bool:
        """Whether users with ``role`` may sign in to this portal."""
        if self is Portal.ADMIN:
            return role in (UserRole.ADMIN, UserRole.TUTOR)
        return role == UserRole.STUDENT


class InvalidCredentialsError(AuthenticationError):
    """Raised when email or password do not match."""

    def __init__(self) -> None:
        super().__init__("Invalid email or password")


class InvalidSessionError(AuthenticationError):
    """Raised when a token does not resolve to a usable user."""

    def __init__(self) -> None:
        super().__init__("Invalid token.")


class SessionExpiredError(AuthenticationError):
    """Raised when a student token belongs to a superseded session."""

    def __init__(self) -> None:
        super().__init__("Session expired. You have been logged in from another device.")


class IncorrectPasswordError(AuthenticationError):
    """Raised when the current password given for a change is wrong."""

    def __init__(self) -> None:
        super().__init__("Current password is incorrect")


class AccountDeactivatedError(PermissionDeniedError):
    """Raised when the account has been deactivated by an admin."""

    def __init__(self, message: str = "Account is deactivated") -> None:
        super().__init__(message)


class InsufficientPermissionsError(PermissionDeniedError):
    """Raised when the user's role does not match the portal or endpoint."""

    def __init__(self) -> None:
        super().__init__("Insufficient permissions.")


class EmailAlreadyRegisteredError(ConflictError):
    def __init__(self, email: str) -> None:
        super().__init__("User with this email already exists")
        self.email = email


class AdminAlreadyExistsError(ConflictError):
    def __init__(self) -> None:
        super().__init__("Admin already exists. Use the login endpoint.")


class ResetCodeNotFoundError(ValidationFailedError):
    def __init__(self) -> None:
        super().__init__("No OTP found. Please request a new password reset.")


class ResetCodeExpiredError(ValidationFailedError):
    def __init__(self) -> None:
        super().__init__("OTP has expired. Please request a new password reset.")


class InvalidResetCodeError(ValidationFailedError):
    def __init__(self) -> None:
        super().__init__("Invalid OTP. Please try again.")


class TooManyResetAttemptsError(ValidationFailedError):
    def __init__(self) -> None:
        super().__init__("Too many invalid attempts. Please request a new password reset.")


class AuthService:
    """Authentication and account service.

    Attributes:
        db: Database session.
        jwt: JWT manager used to issue tokens.
        hasher: Password hasher.
    """

    def __init__(
        self,
        db: AsyncSession,
        jwt_manager: JWTManager,
        password_hasher: PasswordHasher,
    ) -> None:
        self.db = db
        self.jwt = jwt_manager
        self.hasher = password_hasher

    # =========================================================================
    # Registration
    # =========================================================================

    async def bootstrap_admin(self, request: RegisterRequest) -> AuthResponse:
        """Create the first admin account.

        Only allowed while no admin exists.

        Raises:
            AdminAlreadyExistsError: If any admin account exists.
            EmailAlreadyRegisteredError: If the email is taken.
        """
        admin_count = await self.db.scalar(
            select(func.count(User.id)).where(User.role == UserRole.ADMIN)
        )
        if admin_count:
            raise AdminAlreadyExistsError()

        user = await self._create_user(request, UserRole.ADMIN, is_verified=True)
        logger.info("Bootstrapped admin account: %s", user.email)
        return self._issue(user)

    async def register_student(self, request: RegisterRequest) -> AuthResponse:
        """Register a student account and start its first session.

        Raises:
            EmailAlreadyRegisteredError: If the email is taken.
        """
        user = await self._create_user(
            request,
            UserRole.STUDENT,
            session_token=self._new_session_token(),
        )
        logger.info("Registered student: %s", user.email)
        return self._issue(user)

    # =========================================================================
    # Sessions
    # =========================================================================

    async def login(self, request: LoginRequest, portal: Portal) -> AuthResponse:
        """Authenticate against one portal.

        Args:
            request: Login credentials.
            portal: Portal being signed in to.

        Returns:
            The issued token and user.

        Raises:
            InvalidCredentialsError: Unknown email or wrong password.
            AccountDeactivatedError: Correct credentials but inactive account.
            InsufficientPermissionsError: Account role does not match the portal.
        """
        user = await self._get_by_email(request.email)
        if user is None:
            raise InvalidCredentialsError()

        valid = await asyncio.to_thread(self.hasher.verify, request.password, user.password_hash)
        if not valid:
            logger.info("Failed login attempt: %s", request.email)
            raise InvalidCredentialsError()

        if not user.is_active:
            raise AccountDeactivatedError()

        if not portal.allows(user.role):
            raise InsufficientPermissionsError()

        user.last_login_at = utc_now()
        if user.is_student:
            user.active_session_token = self._new_session_token()

        await self.db.commit()

        logger.info("User logged in: user=%s, role=%s", user.id, user.role)
        return self._issue(user)

    async def logout(self, user: User) -> None:
        """End the user's session.

        For students the active session token is cleared so the token
        cannot be reused even before it expires.
        """
        if user.is_student and user.active_session_token is not None:
            user.active_session_token = None
            await self.db.commit()
        logger.info("User logged out: %s", user.id)

    async def authenticate(self, payload: TokenPayload) -> User:
        """Resolve a decoded token to its user.

        Raises:
            InvalidSessionError: Unknown user or role changed since issue.
            AccountDeactivatedError: The account has been deactivated.
            SessionExpiredError: A student token from a superseded session.
        """
        user = await self.db.get(User, payload.sub)
        if user is None or user.role != payload.role:
            raise InvalidSessionError()

        if not user.is_active:
            raise AccountDeactivatedError("Account is deactivated.")

        if user.is_student and (
            not payload.sid or payload.sid != user.active_session_token
        ):
            raise SessionExpiredError()

        return user

    # =========================================================================
    # Profile
    # =========================================================================

    async def update_profile(self, user: User, request: ProfileUpdateRequest) -> UserResponse:
        """Update the caller's own name and avatar."""
        for field, value in request.model_dump(exclude_unset=True).items():
            setattr(user, field, value)

        await self.db.commit()
        await self.db.refresh(user)
        return UserResponse.model_validate(user)

    async def change_password(self, user: User, request: ChangePasswordRequest) -> None:
        """Change the caller's password after verifying the current one.

        Raises:
            IncorrectPasswordError: If the current password is wrong.
        """
        valid = await asyncio.to_thread(
            self.hasher.verify, request.current_password, user.password_hash
        )
        if not valid:
            raise IncorrectPasswordError()

        user.password_hash = await asyncio.to_thread(self.hasher.hash, request.new_password)
        await self.db.commit()
        logger.info("Password changed: %s", user.id)

    # =========================================================================
    # Password Reset
    # =========================================================================

    async def request_password_reset(self, email: str, portal: Portal) -> None:
        """Issue a six digit reset code valid for ten minutes.

        Unknown, inactive and other-portal accounts are ignored silently so
        the response does not reveal which emails are registered. The code
        is logged instead of emailed.
        """
        user = await self._get_by_email(email)
        if user is None or not user.is_active or not portal.allows(user.role):
            logger.info("Password reset requested for unknown account: %s", email)
            return

        code = f"{secrets.randbelow(1_000_000):06d}"
        user.password_reset_code_hash = _hash_reset_code(code)
        user.password_reset_expires_at = utc_now() + RESET_CODE_TTL
        user.password_reset_attempts = 0
        await self.db.commit()

        logger.info("Password reset code issued: user=%s, portal=%s", user.id, portal.value)
        logger.debug("Password reset code for %s: %s", user.email, code)

    async def verify_password_reset(self, request: VerifyResetCodeRequest, portal: Portal) -> None:
        """Check a reset code without consuming it."""
        await self._check_reset_code(request.email, request.otp, portal)

    async def reset_password(self, request: ResetPasswordRequest, portal: Portal) -> None:
        """Set a new password using a valid reset code.

        The code is consumed. A student's active session is ended.

        Raises:
            ResetCodeNotFoundError: No code is pending for the email.
            ResetCodeExpiredError: The code is older than ten minutes.
            InvalidResetCodeError: The code does not match.
            TooManyResetAttemptsError: Too many wrong codes were tried.
        """
        user = await self._check_reset_code(request.email, request.otp, portal)

        user.password_hash = await asyncio.to_thread(self.hasher.hash, request.new_password)
        self._clear_reset_code(user)
        if user.is_student:
            user.active_session_token = None
        await self.db.commit()
        logger.info("Password reset: %s", user.id)

    async def _check_reset_code(self, email: str, code: str, portal: Portal) -> User:
        user = await self._get_by_email(email)
        if user is None or not portal.allows(user.role) or user.password_reset_code_hash is None:
            raise ResetCodeNotFoundError()

        expires_at = user.password_reset_expires_at
        if expires_at is None or ensure_utc(expires_at) <= utc_now():
            self._clear_reset_code(user)
            await self.db.commit()
            raise ResetCodeExpiredError()

        if not hmac.compare_digest(user.password_reset_code_hash, _hash_reset_code(code)):
            user.password_reset_attempts = (user.password_reset_attempts or 0) + 1
            exhausted = user.password_reset_attempts >= MAX_RESET_ATTEMPTS
            if exhausted:
                self._clear_reset_code(user)
            await self.db.commit()
            logger.info("Wrong password reset code: user=%s", user.id)
            if exhausted:
                raise TooManyResetAttemptsError()
            raise InvalidResetCodeError()

        return user

    @staticmethod
    def _clear_reset_code(user: User) -> None:
        user.password_reset_code_hash = None
        user.password_reset_expires_at = None
        user.password_reset_attempts = 0

    # =========================================================================
    # Helpers
    # =========================================================================

    def token_for(self, user: User) -> str:
        """Issue a token for an existing session of ``user``."""
        return self.jwt.create_access_token(
            user_id=user.id,
            role=user.role,
            session_token=user.active_session_token if user.is_student else None,
        )

    def _issue(self, user: User) -> AuthResponse:
        return AuthResponse(
            user=UserResponse.model_validate(user),
            token=self.token_for(user),
            expires_in=self.jwt.expires_in_seconds,
        )

    async def _get_by_email(self, email: str) -> User | None:
        result = await self.db.execute(
            select(User).where(func.lower(User.email) == email.lower())
        )
        return result.scalar_one_or_none()

    async def _create_user(
        self,
        request: RegisterRequest,
        role: UserRole,
        is_verified: bool = False,
        session_token: str | None = None,
    ) -> User:
        if await self._get_by_email(request.email) is not None:
            raise EmailAlreadyRegisteredError(request.email)

        password_hash = await asyncio.to_thread(self.hasher.hash, request.password)
        user = User(
            email=request.email.lower(),
            password_hash=password_hash,
            first_name=request.first_name,
            last_name=request.last_name,
            role=role,
            is_verified=is_verified,
            is_active=True,
            active_session_token=session_token,
            last_login_at=utc_now() if session_token else None,
        )

        self.db.add(user)
        await self.db.commit()
        await self.db.refresh(user)
        return user

    @staticmethod
    def _new_session_token() -> str:
        return str(uuid4())
