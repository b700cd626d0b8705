# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Authentication request and response models."""

from pydantic import BaseModel, EmailStr, Field

from learnhub.models.common import Password
from learnhub.models.user import UserResponse


class RegisterRequest(BaseModel):
    email: EmailStr
    password: Password
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)


class ProfileUpdateRequest(BaseModel):
    first_name: str | None = Field(default=None, min_length=1, max_length=100)
    last_name: str | None = Field(default=None, min_length=1, max_length=100)
    avatar: str | None = None


class ChangePasswordRequest(BaseModel):
    current_password: str = Field(min_length=1)
    new_password: Password


class ForgotPasswordRequest(BaseModel):
    email: EmailStr


class VerifyResetCodeRequest(BaseModel):
    email: EmailStr
    otp: str = Field(pattern=r"^\d{6}$")


class ResetPasswordRequest(VerifyResetCodeRequest):
    new_password: Password


class AuthResponse(BaseModel):
    """Issued token together with the authenticated user."""

    user: UserResponse
    token: str
    token_type: str = "Bearer"
    expires_in: int
