# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Exception handlers rendering the error envelope.

Every failed request answers with::

    {"success": false, "error": {"message": "...", "details": ...}}

Domain errors carry their own status code. Database constraint
violations are translated into client errors, and anything unexpected
becomes a 500 whose stack trace is only included in development.
"""

import logging
import traceback
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from sqlalchemy.exc import DataError, IntegrityError, NoResultFound
from starlette.exceptions import HTTPException as StarletteHTTPException

from learnhub.api.middleware.rate_limit import rate_limit_exceeded_handler
from learnhub.core.config import get_settings
from learnhub.domains.errors import ServiceError
from learnhub.infrastructure.database import DatabaseError
from learnhub.models.common import ErrorDetail

logger = logging.getLogger(__name__)

UNIQUE_VIOLATION = "23505"
FOREIGN_KEY_VIOLATION = "23503"


def error_response(
    status_code: int,
    message: str,
    details: Any | None = None,
    headers: dict[str, str] | None = None,
    **extra: Any,
) -> JSONResponse:
    """Build a JSON response in the error envelope."""
    error = ErrorDetail(message=message, details=details, **extra)
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": error.model_dump(mode="json", exclude_none=True)},
        headers=headers,
    )


def _integrity_response(exc: IntegrityError) -> JSONResponse:
    orig = exc.orig
    code = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    text = str(orig).lower()

    if code == UNIQUE_VIOLATION or "unique" in text or "duplicate key" in text:
        return error_response(status.HTTP_400_BAD_REQUEST, "Record already exists")
    if code == FOREIGN_KEY_VIOLATION or "foreign key" in text:
        return error_response(status.HTTP_400_BAD_REQUEST, "Foreign key constraint failed")
    return error_response(status.HTTP_400_BAD_REQUEST, "Invalid data provided")


async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("Service error on %s %s: %s", request.method, request.url.path, exc.message)
    return error_response(exc.status_code, exc.message, exc.details)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == status.HTTP_404_NOT_FOUND and exc.detail == "Not Found":
        if request.url.path.startswith("/api"):
            return error_response(
                status.HTTP_404_NOT_FOUND,
                "API endpoint not found",
                path=request.url.path,
                method=request.method,
            )

    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    details = None if isinstance(exc.detail, str) else exc.detail
    return error_response(exc.status_code, message, details, headers=getattr(exc, "headers", None))


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    # A malformed id in the URL cannot name an existing record
    if any(error["loc"][0] == "path" for error in errors):
        return error_response(status.HTTP_404_NOT_FOUND, "Record not found")

    details = [
        {
            "field": ".".join(str(part) for part in error["loc"][1:]) or str(error["loc"][0]),
            "message": error["msg"],
        }
        for error in errors
    ]
    return error_response(status.HTTP_400_BAD_REQUEST, "Invalid data provided", details)


async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    logger.info("Integrity error on %s %s: %s", request.method, request.url.path, exc.orig)
    return _integrity_response(exc)


async def no_result_handler(request: Request, exc: NoResultFound) -> JSONResponse:
    return error_response(status.HTTP_404_NOT_FOUND, "Record not found")


async def data_error_handler(request: Request, exc: DataError) -> JSONResponse:
    logger.info("Data error on %s %s: %s", request.method, request.url.path, exc.orig)
    return error_response(status.HTTP_400_BAD_REQUEST, "Invalid data provided")


async def database_error_handler(request: Request, exc: DatabaseError) -> JSONResponse:
    original = exc.original_error
    if isinstance(original, IntegrityError):
        return await integrity_error_handler(request, original)
    if isinstance(original, NoResultFound):
        return await no_result_handler(request, original)
    if isinstance(original, DataError):
        return await data_error_handler(request, original)
    return await unhandled_exception_handler(request, exc)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)

    stack = None
    if get_settings().is_development:
        stack = traceback.format_exception(type(exc), exc, exc.__traceback__)
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error", stack=stack)


def register_exception_handlers(app: FastAPI) -> None:
    """Attach every envelope-rendering handler to the app."""
    app.add_exception_handler(ServiceError, service_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)
    app.add_exception_handler(NoResultFound, no_result_handler)
    app.add_exception_handler(DataError, data_error_handler)
    app.add_exception_handler(DatabaseError, database_error_handler)
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
