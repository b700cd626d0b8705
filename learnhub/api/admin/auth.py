# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Admin console authentication endpoints.

- POST /login - Sign in as admin or tutor, sets the admin_token cookie
- POST /logout - Clear the cookie
- GET /me - Current staff user
- PUT /profile - Update name and avatar
- PUT /change-password - Change password
- POST /forgot-password - Request a password reset code
- POST /verify-forgot-password-otp - Check a reset code
- POST /reset-password - Set a new password with a reset code
"""

import logging

from fastapi import APIRouter, Request, Response

from learnhub.api.cookies import clear_auth_cookie, set_auth_cookie
from learnhub.api.dependencies import Auth, StaffUser
from learnhub.api.middleware.rate_limit import RATE_LIMIT_AUTH, limiter
from learnhub.domains.auth.service import Portal
from learnhub.models.auth import (
    AuthResponse,
    ChangePasswordRequest,
    ForgotPasswordRequest,
    LoginRequest,
    ProfileUpdateRequest,
    ResetPasswordRequest,
    VerifyResetCodeRequest,
)
from learnhub.models.common import ApiResponse, ok
from learnhub.models.user import UserResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/login", response_model=ApiResponse[AuthResponse], summary="Staff login")
@limiter.limit(RATE_LIMIT_AUTH)
async def login(
    request: Request,
    response: Response,
    data: LoginRequest,
    auth_service: Auth,
) -> ApiResponse[AuthResponse]:
    """Sign in to the admin console.

    Only ADMIN and TUTOR accounts are accepted. The token is returned in
    the body and also set as the ``admin_token`` cookie.
    """
    auth = await auth_service.login(data, Portal.ADMIN)
    set_auth_cookie(response, Portal.ADMIN, auth.token)
    return ok(auth, "Login successful")


@router.post("/logout", response_model=ApiResponse[None], summary="Staff logout")
async def logout(response: Response, auth_service: Auth, current_user: StaffUser) -> ApiResponse[None]:
    await auth_service.logout(current_user)
    clear_auth_cookie(response, Portal.ADMIN)
    return ok(message="Logout successful")


@router.get("/me", response_model=ApiResponse[UserResponse], summary="Current staff user")
async def me(current_user: StaffUser) -> ApiResponse[UserResponse]:
    return ok(UserResponse.model_validate(current_user))


@router.put("/profile", response_model=ApiResponse[UserResponse], summary="Update profile")
async def update_profile(
    data: ProfileUpdateRequest,
    auth_service: Auth,
    current_user: StaffUser,
) -> ApiResponse[UserResponse]:
    return ok(await auth_service.update_profile(current_user, data), "Profile updated successfully")


@router.put("/change-password", response_model=ApiResponse[None], summary="Change password")
@limiter.limit(RATE_LIMIT_AUTH)
async def change_password(
    request: Request,
    data: ChangePasswordRequest,
    auth_service: Auth,
    current_user: StaffUser,
) -> ApiResponse[None]:
    await auth_service.change_password(current_user, data)
    return ok(message="Password changed successfully")


@router.post("/forgot-password", response_model=ApiResponse[None], summary="Request password reset")
@limiter.limit(RATE_LIMIT_AUTH)
async def forgot_password(
    request: Request,
    data: ForgotPasswordRequest,
    auth_service: Auth,
) -> ApiResponse[None]:
    """Send a reset code to a staff account.

    The answer is the same whether or not the email belongs to a staff
    account.
    """
    await auth_service.request_password_reset(data.email, Portal.ADMIN)
    return ok(message="If an account exists with this email, you will receive a password reset code.")


@router.post("/verify-forgot-password-otp", response_model=ApiResponse[None], summary="Verify reset code")
@limiter.limit(RATE_LIMIT_AUTH)
async def verify_reset_code(
    request: Request,
    data: VerifyResetCodeRequest,
    auth_service: Auth,
) -> ApiResponse[None]:
    await auth_service.verify_password_reset(data, Portal.ADMIN)
    return ok(message="OTP verified successfully! You can now reset your password.")


@router.post("/reset-password", response_model=ApiResponse[None], summary="Reset password")
@limiter.limit(RATE_LIMIT_AUTH)
async def reset_password(
    request: Request,
    data: ResetPasswordRequest,
    auth_service: Auth,
) -> ApiResponse[None]:
    await auth_service.reset_password(data, Portal.ADMIN)
    return ok(message="Password reset successfully! You can now login with your new password.")
