# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""API middleware components."""

from learnhub.api.middleware.auth import AuthMiddleware, portal_for_path
from learnhub.api.middleware.rate_limit import (
    RATE_LIMIT_AUTH,
    RATE_LIMIT_UPLOAD,
    get_client_identifier,
    limiter,
    rate_limit_exceeded_handler,
)
from learnhub.api.middleware.request_context import RequestContextMiddleware

__all__ = [
    "AuthMiddleware",
    "RequestContextMiddleware",
    "RATE_LIMIT_AUTH",
    "RATE_LIMIT_UPLOAD",
    "get_client_identifier",
    "limiter",
    "portal_for_path",
    "rate_limit_exceeded_handler",
]
