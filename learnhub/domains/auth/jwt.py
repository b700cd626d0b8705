# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""JWT token management utilities.

Tokens are signed with python-jose. A token carries the user id, the
role it was issued for and, for students, the session token that must
match the user's ``active_session_token``.

Example:
    >>> from learnhub.core.config import get_settings
    >>> jwt_manager = JWTManager(get_settings().jwt)
    >>> token = jwt_manager.create_access_token(user_id="user-123", role="STUDENT")
    >>> claims = jwt_manager.decode_token(token)
"""

import logging
import secrets
from datetime import datetime, timezone
from uuid import UUID

from jose import ExpiredSignatureError, JWTError as JoseJWTError, jwt
from pydantic import BaseModel, ValidationError

from learnhub.core.config.settings import JWTSettings

logger = logging.getLogger(__name__)


class TokenPayload(BaseModel):
    """JWT token payload structure.

    Attributes:
        sub: Subject (user ID).
        role: Role the token was issued for (ADMIN or STUDENT).
        sid: Student session token, absent for admin tokens.
        exp: Expiration timestamp.
        iat: Issued at timestamp.
        jti: JWT ID for token tracking.
    """

    sub: str
    role: str
    sid: str | None = None
    exp: int
    iat: int
    jti: str


class JWTError(Exception):
    """Base exception for JWT operations."""

    pass


class TokenExpiredError(JWTError):
    """Raised when a token has expired."""

    pass


class InvalidTokenError(JWTError):
    """Raised when a token is invalid."""

    pass


class JWTManager:
    """JWT token creation and validation manager.

    Attributes:
        _settings: JWT configuration settings.
    """

    def __init__(self, settings: JWTSettings) -> None:
        self._settings = settings

    @property
    def expires_in_seconds(self) -> int:
        """Token lifetime in seconds."""
        return int(self._settings.expires_delta.total_seconds())

    def create_access_token(
        self,
        user_id: str | UUID,
        role: str,
        session_token: str | None = None,
    ) -> str:
        """Create an access token.

        Args:
            user_id: User identifier.
            role: Role of the user.
            session_token: Student session token to embed.

        Returns:
            JWT access token string.
        """
        now = datetime.now(timezone.utc)
        exp = now + self._settings.expires_delta

        payload = {
            "sub": str(user_id),
            "role": role,
            "exp": int(exp.timestamp()),
            "iat": int(now.timestamp()),
            "jti": secrets.token_urlsafe(16),
        }
        if session_token:
            payload["sid"] = session_token

        return jwt.encode(
            payload,
            self._settings.secret_key.get_secret_value(),
            algorithm=self._settings.algorithm,
        )

    def decode_token(self, token: str) -> TokenPayload:
        """Decode and validate a JWT token.

        Args:
            token: JWT token string.

        Returns:
            TokenPayload with decoded claims.

        Raises:
            TokenExpiredError: If the token has expired.
            InvalidTokenError: If the token is invalid.
        """
        try:
            payload = jwt.decode(
                token,
                self._settings.secret_key.get_secret_value(),
                algorithms=[self._settings.algorithm],
            )
        except ExpiredSignatureError as e:
            raise TokenExpiredError("Token has expired") from e
        except JoseJWTError as e:
            logger.debug("Token decode failed: %s", e)
            raise InvalidTokenError(f"Invalid token: {e}") from e

        try:
            return TokenPayload.model_validate(payload)
        except ValidationError as e:
            raise InvalidTokenError("Token is missing required claims") from e

    def verify_token(self, token: str) -> bool:
        """Check whether a token is valid without raising."""
        try:
            self.decode_token(token)
            return True
        except JWTError:
            return False
