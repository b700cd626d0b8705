# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Auth cookie helpers shared by the portal routers."""

from fastapi import Response

from learnhub.core.config import get_settings
from learnhub.domains.auth.service import Portal


def set_auth_cookie(response: Response, portal: Portal, token: str) -> None:
    """Store the token in the portal's httpOnly cookie."""
    cookie = get_settings().cookie
    response.set_cookie(
        key=portal.cookie_name,
        value=token,
        max_age=cookie.max_age_seconds,
        httponly=True,
        secure=cookie.secure,
        samesite=cookie.samesite,
        path="/",
    )


def clear_auth_cookie(response: Response, portal: Portal) -> None:
    cookie = get_settings().cookie
    response.delete_cookie(
        key=portal.cookie_name,
        path="/",
        httponly=True,
        secure=cookie.secure,
        samesite=cookie.samesite,
    )
