# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""User administration domain."""

from learnhub.domains.user.service import (
    CannotDeleteSelfError,
    TutorNotFoundError,
    UserEmailExistsError,
    UserNotFoundError,
    UserOwnsCoursesError,
    UserService,
    UserServiceError,
)

__all__ = [
    "CannotDeleteSelfError",
    "TutorNotFoundError",
    "UserEmailExistsError",
    "UserNotFoundError",
    "UserOwnsCoursesError",
    "UserService",
    "UserServiceError",
]
