# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for JWT token management."""

from datetime import timedelta
from unittest.mock import MagicMock

import pytest
from pydantic import SecretStr

from learnhub.domains.auth.jwt import (
    InvalidTokenError,
    JWTManager,
    TokenExpiredError,
)


@pytest.fixture
def jwt_manager(jwt_settings: MagicMock) -> JWTManager:
    return JWTManager(jwt_settings)


class TestJWTManager:
    """Tests for JWTManager."""

    def test_create_and_decode_admin_token(self, jwt_manager: JWTManager) -> None:
        token = jwt_manager.create_access_token(user_id="user-1", role="ADMIN")

        payload = jwt_manager.decode_token(token)

        assert payload.sub == "user-1"
        assert payload.role == "ADMIN"
        assert payload.sid is None
        assert payload.exp > payload.iat

    def test_student_token_carries_session(self, jwt_manager: JWTManager) -> None:
        token = jwt_manager.create_access_token(
            user_id="student-1",
            role="STUDENT",
            session_token="session-abc",
        )

        assert jwt_manager.decode_token(token).sid == "session-abc"

    def test_tokens_have_unique_ids(self, jwt_manager: JWTManager) -> None:
        first = jwt_manager.decode_token(jwt_manager.create_access_token("u", "ADMIN"))
        second = jwt_manager.decode_token(jwt_manager.create_access_token("u", "ADMIN"))

        assert first.jti != second.jti

    def test_expired_token(self, jwt_settings: MagicMock) -> None:
        jwt_settings.expires_delta = timedelta(seconds=-10)
        manager = JWTManager(jwt_settings)
        token = manager.create_access_token(user_id="user-1", role="ADMIN")

        with pytest.raises(TokenExpiredError):
            manager.decode_token(token)

    def test_wrong_secret_is_invalid(self, jwt_manager: JWTManager, jwt_settings: MagicMock) -> None:
        token = jwt_manager.create_access_token(user_id="user-1", role="ADMIN")

        other = MagicMock()
        other.secret_key = SecretStr("another-secret")
        other.algorithm = "HS256"
        other.expires_delta = jwt_settings.expires_delta

        with pytest.raises(InvalidTokenError):
            JWTManager(other).decode_token(token)

    def test_garbage_token_is_invalid(self, jwt_manager: JWTManager) -> None:
        with pytest.raises(InvalidTokenError):
            jwt_manager.decode_token("not.a.token")

    def test_verify_token(self, jwt_manager: JWTManager) -> None:
        token = jwt_manager.create_access_token(user_id="user-1", role="TUTOR")

        assert jwt_manager.verify_token(token) is True
        assert jwt_manager.verify_token(token + "x") is False

    def test_expires_in_seconds(self, jwt_manager: JWTManager) -> None:
        assert jwt_manager.expires_in_seconds == 7 * 24 * 60 * 60
