# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Configuration package for LearnHub.

Settings are Pydantic-based and loaded from environment variables.

Example:
    >>> from learnhub.core.config import get_settings
    >>> settings = get_settings()
    >>> print(settings.upload.directory)
    uploads
"""

from learnhub.core.config.settings import (
    APISettings,
    CookieSettings,
    CORSSettings,
    DatabaseSettings,
    JWTSettings,
    RateLimitSettings,
    Settings,
    UploadSettings,
    clear_settings_cache,
    get_settings,
    parse_duration,
)

__all__ = [
    # Settings
    "Settings",
    "get_settings",
    "clear_settings_cache",
    "parse_duration",
    # Subsettings
    "DatabaseSettings",
    "JWTSettings",
    "CookieSettings",
    "UploadSettings",
    "RateLimitSettings",
    "CORSSettings",
    "APISettings",
]
