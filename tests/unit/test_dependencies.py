# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for the authentication dependencies."""

from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from learnhub.api.dependencies import get_optional_user
from learnhub.domains.auth.jwt import JWTManager, TokenPayload
from learnhub.domains.auth.password import PasswordHasher
from learnhub.domains.auth.service import AuthService


@pytest.fixture
def auth_service(mock_db, jwt_settings) -> AuthService:
    return AuthService(mock_db, JWTManager(jwt_settings), PasswordHasher(rounds=4))


def request_with(payload: TokenPayload | None) -> MagicMock:
    request = MagicMock()
    request.state = SimpleNamespace(token_payload=payload)
    return request


def payload_for(user, sid: str | None = None) -> TokenPayload:
    return TokenPayload(sub=user.id, role=user.role, sid=sid, exp=2_000_000_000, iat=1_700_000_000, jti="t-1")


class TestGetOptionalUser:
    @pytest.mark.asyncio
    async def test_no_token(self, auth_service, mock_db) -> None:
        assert await get_optional_user(request_with(None), auth_service) is None
        mock_db.get.assert_not_called()

    @pytest.mark.asyncio
    async def test_valid_session(self, auth_service, mock_db, student_user) -> None:
        mock_db.get.return_value = student_user
        payload = payload_for(student_user, sid=student_user.active_session_token)

        assert await get_optional_user(request_with(payload), auth_service) is student_user

    @pytest.mark.asyncio
    async def test_superseded_session_is_anonymous(self, auth_service, mock_db, student_user) -> None:
        mock_db.get.return_value = student_user
        payload = payload_for(student_user, sid="session-from-an-earlier-login")

        assert await get_optional_user(request_with(payload), auth_service) is None

    @pytest.mark.asyncio
    async def test_deactivated_account_is_anonymous(self, auth_service, mock_db, make_user) -> None:
        user = make_user("STUDENT", is_active=False)
        mock_db.get.return_value = user

        assert await get_optional_user(request_with(payload_for(user, user.active_session_token)), auth_service) is None

    @pytest.mark.asyncio
    async def test_deleted_user_is_anonymous(self, auth_service, mock_db, tutor_user) -> None:
        mock_db.get.return_value = None

        assert await get_optional_user(request_with(payload_for(tutor_user)), auth_service) is None
