# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for the authentication service."""

import hashlib
from datetime import timedelta
from unittest.mock import AsyncMock, MagicMock

import pytest

from learnhub.domains.auth.jwt import JWTManager
from learnhub.domains.auth.password import PasswordHasher
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
from learnhub.models.auth import (
    ChangePasswordRequest,
    LoginRequest,
    RegisterRequest,
    ResetPasswordRequest,
    VerifyResetCodeRequest,
)
from learnhub.utils.datetime import utc_now

PASSWORD = "s3cret-pass"


@pytest.fixture
def hasher() -> PasswordHasher:
    return PasswordHasher(rounds=4)


@pytest.fixture
def jwt_manager(jwt_settings: MagicMock) -> JWTManager:
    return JWTManager(jwt_settings)


@pytest.fixture
def auth_service(mock_db: AsyncMock, jwt_manager: JWTManager, hasher: PasswordHasher) -> AuthService:
    return AuthService(mock_db, jwt_manager, hasher)


class TestPortal:
    def test_cookie_names(self) -> None:
        assert Portal.ADMIN.cookie_name == "admin_token"
        assert Portal.STUDENT.cookie_name == "student_token"

    def test_allows(self) -> None:
        assert Portal.ADMIN.allows("ADMIN")
        assert Portal.ADMIN.allows("TUTOR")
        assert not Portal.ADMIN.allows("STUDENT")
        assert Portal.STUDENT.allows("STUDENT")
        assert not Portal.STUDENT.allows("TUTOR")


class TestLogin:
    @pytest.mark.asyncio
    async def test_unknown_email(self, auth_service, mock_db, make_scalar_result) -> None:
        mock_db.execute.side_effect = [make_scalar_result(None)]

        with pytest.raises(InvalidCredentialsError):
            await auth_service.login(LoginRequest(email="nobody@example.com", password="x"), Portal.STUDENT)

    @pytest.mark.asyncio
    async def test_wrong_password(self, auth_service, mock_db, hasher, make_user, make_scalar_result) -> None:
        user = make_user(password_hash=hasher.hash(PASSWORD))
        mock_db.execute.side_effect = [make_scalar_result(user)]

        with pytest.raises(InvalidCredentialsError):
            await auth_service.login(LoginRequest(email=user.email, password="wrong"), Portal.STUDENT)

    @pytest.mark.asyncio
    async def test_deactivated_account(self, auth_service, mock_db, hasher, make_user, make_scalar_result) -> None:
        user = make_user(password_hash=hasher.hash(PASSWORD), is_active=False)
        mock_db.execute.side_effect = [make_scalar_result(user)]

        with pytest.raises(AccountDeactivatedError):
            await auth_service.login(LoginRequest(email=user.email, password=PASSWORD), Portal.STUDENT)

    @pytest.mark.asyncio
    async def test_student_cannot_use_admin_portal(
        self, auth_service, mock_db, hasher, make_user, make_scalar_result
    ) -> None:
        user = make_user(password_hash=hasher.hash(PASSWORD))
        mock_db.execute.side_effect = [make_scalar_result(user)]

        with pytest.raises(InsufficientPermissionsError):
            await auth_service.login(LoginRequest(email=user.email, password=PASSWORD), Portal.ADMIN)

    @pytest.mark.asyncio
    async def test_student_login_rotates_session(
        self, auth_service, mock_db, hasher, jwt_manager, make_user, make_scalar_result
    ) -> None:
        user = make_user(password_hash=hasher.hash(PASSWORD))
        previous_session = user.active_session_token
        mock_db.execute.side_effect = [make_scalar_result(user)]

        auth = await auth_service.login(LoginRequest(email=user.email, password=PASSWORD), Portal.STUDENT)

        assert user.active_session_token != previous_session
        assert user.last_login_at is not None
        assert jwt_manager.decode_token(auth.token).sid == user.active_session_token
        assert auth.user.id == user.id
        mock_db.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_tutor_login_has_no_session(
        self, auth_service, mock_db, hasher, jwt_manager, make_user, make_scalar_result
    ) -> None:
        user = make_user("TUTOR", password_hash=hasher.hash(PASSWORD))
        mock_db.execute.side_effect = [make_scalar_result(user)]

        auth = await auth_service.login(LoginRequest(email=user.email, password=PASSWORD), Portal.ADMIN)

        payload = jwt_manager.decode_token(auth.token)
        assert payload.role == "TUTOR"
        assert payload.sid is None


class TestAuthenticate:
    @pytest.mark.asyncio
    async def test_superseded_student_session(self, auth_service, mock_db, jwt_manager, make_user) -> None:
        user = make_user()
        token = jwt_manager.create_access_token(user.id, user.role, session_token="old-session")
        mock_db.get.return_value = user

        with pytest.raises(SessionExpiredError):
            await auth_service.authenticate(jwt_manager.decode_token(token))

    @pytest.mark.asyncio
    async def test_current_student_session(self, auth_service, mock_db, jwt_manager, make_user) -> None:
        user = make_user()
        token = jwt_manager.create_access_token(user.id, user.role, session_token=user.active_session_token)
        mock_db.get.return_value = user

        assert await auth_service.authenticate(jwt_manager.decode_token(token)) is user

    @pytest.mark.asyncio
    async def test_role_changed(self, auth_service, mock_db, jwt_manager, make_user) -> None:
        user = make_user("TUTOR")
        token = jwt_manager.create_access_token(user.id, "ADMIN")
        mock_db.get.return_value = user

        with pytest.raises(InvalidSessionError):
            await auth_service.authenticate(jwt_manager.decode_token(token))

    @pytest.mark.asyncio
    async def test_deactivated(self, auth_service, mock_db, jwt_manager, make_user) -> None:
        user = make_user("ADMIN", is_active=False)
        token = jwt_manager.create_access_token(user.id, user.role)
        mock_db.get.return_value = user

        with pytest.raises(AccountDeactivatedError):
            await auth_service.authenticate(jwt_manager.decode_token(token))

    @pytest.mark.asyncio
    async def test_logout_clears_student_session(self, auth_service, mock_db, make_user) -> None:
        user = make_user()

        await auth_service.logout(user)

        assert user.active_session_token is None
        mock_db.commit.assert_awaited_once()


class TestRegistration:
    @pytest.mark.asyncio
    async def test_bootstrap_refused_when_admin_exists(self, auth_service, mock_db) -> None:
        mock_db.scalar.return_value = 1

        with pytest.raises(AdminAlreadyExistsError):
            await auth_service.bootstrap_admin(
                RegisterRequest(email="a@example.com", password="secret1", first_name="A", last_name="B")
            )

    @pytest.mark.asyncio
    async def test_register_duplicate_email(self, auth_service, mock_db, make_user, make_scalar_result) -> None:
        mock_db.execute.side_effect = [make_scalar_result(make_user())]

        with pytest.raises(EmailAlreadyRegisteredError):
            await auth_service.register_student(
                RegisterRequest(email="taken@example.com", password="secret1", first_name="A", last_name="B")
            )
        mock_db.add.assert_not_called()


class TestChangePassword:
    @pytest.mark.asyncio
    async def test_wrong_current_password(self, auth_service, hasher, make_user) -> None:
        user = make_user(password_hash=hasher.hash(PASSWORD))

        with pytest.raises(IncorrectPasswordError):
            await auth_service.change_password(
                user,
                ChangePasswordRequest(current_password="wrong", new_password="new-secret"),
            )

    @pytest.mark.asyncio
    async def test_changes_hash(self, auth_service, mock_db, hasher, make_user) -> None:
        user = make_user(password_hash=hasher.hash(PASSWORD))

        await auth_service.change_password(
            user,
            ChangePasswordRequest(current_password=PASSWORD, new_password="new-secret"),
        )

        assert hasher.verify("new-secret", user.password_hash)
        mock_db.commit.assert_awaited_once()


def with_reset_code(user, code: str = "123456", expires_in: timedelta = timedelta(minutes=10), attempts: int = 0):
    user.password_reset_code_hash = hashlib.sha256(code.encode()).hexdigest()
    user.password_reset_expires_at = utc_now() + expires_in
    user.password_reset_attempts = attempts
    return user


class TestPasswordReset:
    @pytest.mark.asyncio
    async def test_request_issues_code(self, auth_service, mock_db, make_user, make_scalar_result) -> None:
        user = make_user()
        mock_db.execute.side_effect = [make_scalar_result(user)]

        await auth_service.request_password_reset(user.email, Portal.STUDENT)

        assert len(user.password_reset_code_hash) == 64
        assert user.password_reset_expires_at - utc_now() <= timedelta(minutes=10)
        assert user.password_reset_attempts == 0
        mock_db.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_request_for_unknown_email_is_silent(self, auth_service, mock_db, make_scalar_result) -> None:
        mock_db.execute.side_effect = [make_scalar_result(None)]

        await auth_service.request_password_reset("nobody@example.com", Portal.STUDENT)

        mock_db.commit.assert_not_called()

    @pytest.mark.asyncio
    async def test_request_from_other_portal_is_silent(
        self, auth_service, mock_db, make_user, make_scalar_result
    ) -> None:
        tutor = make_user("TUTOR")
        mock_db.execute.side_effect = [make_scalar_result(tutor)]

        await auth_service.request_password_reset(tutor.email, Portal.STUDENT)

        assert tutor.password_reset_code_hash is None
        mock_db.commit.assert_not_called()

    @pytest.mark.asyncio
    async def test_verify_keeps_code(self, auth_service, mock_db, make_user, make_scalar_result) -> None:
        user = with_reset_code(make_user("TUTOR"))
        mock_db.execute.side_effect = [make_scalar_result(user)]

        await auth_service.verify_password_reset(
            VerifyResetCodeRequest(email=user.email, otp="123456"), Portal.ADMIN
        )

        assert user.password_reset_code_hash is not None

    @pytest.mark.asyncio
    async def test_no_pending_code(self, auth_service, mock_db, make_user, make_scalar_result) -> None:
        user = make_user()
        mock_db.execute.side_effect = [make_scalar_result(user)]

        with pytest.raises(ResetCodeNotFoundError):
            await auth_service.verify_password_reset(
                VerifyResetCodeRequest(email=user.email, otp="123456"), Portal.STUDENT
            )

    @pytest.mark.asyncio
    async def test_expired_code_is_cleared(self, auth_service, mock_db, make_user, make_scalar_result) -> None:
        user = with_reset_code(make_user(), expires_in=timedelta(seconds=-1))
        mock_db.execute.side_effect = [make_scalar_result(user)]

        with pytest.raises(ResetCodeExpiredError):
            await auth_service.verify_password_reset(
                VerifyResetCodeRequest(email=user.email, otp="123456"), Portal.STUDENT
            )

        assert user.password_reset_code_hash is None

    @pytest.mark.asyncio
    async def test_wrong_code_counts_attempt(self, auth_service, mock_db, make_user, make_scalar_result) -> None:
        user = with_reset_code(make_user())
        mock_db.execute.side_effect = [make_scalar_result(user)]

        with pytest.raises(InvalidResetCodeError) as exc_info:
            await auth_service.verify_password_reset(
                VerifyResetCodeRequest(email=user.email, otp="654321"), Portal.STUDENT
            )

        assert exc_info.value.status_code == 400
        assert user.password_reset_attempts == 1
        mock_db.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_last_wrong_attempt_clears_code(
        self, auth_service, mock_db, make_user, make_scalar_result
    ) -> None:
        user = with_reset_code(make_user(), attempts=4)
        mock_db.execute.side_effect = [make_scalar_result(user)]

        with pytest.raises(TooManyResetAttemptsError):
            await auth_service.verify_password_reset(
                VerifyResetCodeRequest(email=user.email, otp="654321"), Portal.STUDENT
            )

        assert user.password_reset_code_hash is None

    @pytest.mark.asyncio
    async def test_reset_sets_password_and_ends_session(
        self, auth_service, mock_db, hasher, make_user, make_scalar_result
    ) -> None:
        user = with_reset_code(make_user(password_hash=hasher.hash(PASSWORD)))
        mock_db.execute.side_effect = [make_scalar_result(user)]

        await auth_service.reset_password(
            ResetPasswordRequest(email=user.email, otp="123456", new_password="brand-new-pass"),
            Portal.STUDENT,
        )

        assert hasher.verify("brand-new-pass", user.password_hash)
        assert user.password_reset_code_hash is None
        assert user.active_session_token is None
        mock_db.commit.assert_awaited_once()
