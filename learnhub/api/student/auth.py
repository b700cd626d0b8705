# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Student portal authentication endpoints.

- POST /register - Create a student account and sign in
- POST /login - Sign in, starting a new single session
- POST /logout - End the session and clear the cookie
- GET /me - Current student
- PUT /profile - Update name and avatar
- PUT /change-password - Change password
- POST /forgot-password - Request a password reset code
- POST /verify-forgot-password-otp - Check a reset code
- POST /reset-password - Set a new password with a reset code

Each login replaces the student's active session, so a token issued to
another device stops working.
"""

import logging

from fastapi import APIRouter, Request, Response, status

from learnhub.api.cookies import clear_auth_cookie, set_auth_cookie
from learnhub.api.dependencies import Auth, StudentUser
from learnhub.api.middleware.rate_limit import RATE_LIMIT_AUTH, limiter
from learnhub.domains.auth.service import Portal
from learnhub.models.auth import (
    AuthResponse,
    ChangePasswordRequest,
    ForgotPasswordRequest,
    LoginRequest,
    ProfileUpdateRequest,
    RegisterRequest,
    ResetPasswordRequest,
    VerifyResetCodeRequest,
)
from learnhub.models.common import ApiResponse, ok
from learnhub.models.user import UserResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/register",
    response_model=ApiResponse[AuthResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Register",
)
@limiter.limit(RATE_LIMIT_AUTH)
async def register(
    request: Request,
    response: Response,
    data: RegisterRequest,
    auth_service: Auth,
) -> ApiResponse[AuthResponse]:
    auth = await auth_service.register_student(data)
    set_auth_cookie(response, Portal.STUDENT, auth.token)
    return ok(auth, "Registration successful")


@router.post("/login", response_model=ApiResponse[AuthResponse], summary="Student login")
@limiter.limit(RATE_LIMIT_AUTH)
async def login(
    request: Request,
    response: Response,
    data: LoginRequest,
    auth_service: Auth,
) -> ApiResponse[AuthResponse]:
    auth = await auth_service.login(data, Portal.STUDENT)
    set_auth_cookie(response, Portal.STUDENT, auth.token)
    return ok(auth, "Login successful")


@router.post("/logout", response_model=ApiResponse[None], summary="Student logout")
async def logout(response: Response, auth_service: Auth, current_user: StudentUser) -> ApiResponse[None]:
    await auth_service.logout(current_user)
    clear_auth_cookie(response, Portal.STUDENT)
    return ok(message="Logout successful")


@router.get("/me", response_model=ApiResponse[UserResponse], summary="Current student")
async def me(current_user: StudentUser) -> ApiResponse[UserResponse]:
    return ok(UserResponse.model_validate(current_user))


@router.put("/profile", response_model=ApiResponse[UserResponse], summary="Update profile")
async def update_profile(
    data: ProfileUpdateRequest,
    auth_service: Auth,
    current_user: StudentUser,
) -> ApiResponse[UserResponse]:
    return ok(await auth_service.update_profile(current_user, data), "Profile updated successfully")


@router.put("/change-password", response_model=ApiResponse[None], summary="Change password")
@limiter.limit(RATE_LIMIT_AUTH)
async def change_password(
    request: Request,
    data: ChangePasswordRequest,
    auth_service: Auth,
    current_user: StudentUser,
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
    await auth_service.request_password_reset(data.email, Portal.STUDENT)
    return ok(message="If an account exists with this email, you will receive a password reset code.")


@router.post("/verify-forgot-password-otp", response_model=ApiResponse[None], summary="Verify reset code")
@limiter.limit(RATE_LIMIT_AUTH)
async def verify_reset_code(
    request: Request,
    data: VerifyResetCodeRequest,
    auth_service: Auth,
) -> ApiResponse[None]:
    await auth_service.verify_password_reset(data, Portal.STUDENT)
    return ok(message="OTP verified successfully! You can now reset your password.")


@router.post("/reset-password", response_model=ApiResponse[None], summary="Reset password")
@limiter.limit(RATE_LIMIT_AUTH)
async def reset_password(
    request: Request,
    response: Response,
    data: ResetPasswordRequest,
    auth_service: Auth,
) -> ApiResponse[None]:
    await auth_service.reset_password(data, Portal.STUDENT)
    clear_auth_cookie(response, Portal.STUDENT)
    return ok(message="Password reset successfully! You can now login with your new password.")
