# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Shared API models: the response envelope and pagination.

Every endpoint answers with the same envelope::

    {"success": true, "data": {...}}
    {"success": false, "error": {"message": "..."}}
"""

from math import ceil
from typing import Annotated, Any, Generic, TypeVar
from uuid import UUID

from pydantic import AfterValidator, BaseModel, ConfigDict, Field

T = TypeVar("T")

# bcrypt only reads the first 72 bytes of a password
PASSWORD_MAX_BYTES = 72


def _check_password_bytes(value: str) -> str:
    if len(value.encode("utf-8")) > PASSWORD_MAX_BYTES:
        raise ValueError(f"Password cannot exceed {PASSWORD_MAX_BYTES} bytes")
    return value


def _canonical_uuid(value: str) -> str:
    try:
        return str(UUID(value))
    except ValueError:
        raise ValueError("Invalid identifier") from None


Password = Annotated[
    str,
    Field(min_length=6, max_length=PASSWORD_MAX_BYTES),
    AfterValidator(_check_password_bytes),
]
"""New password: 6 characters at least and at most 72 bytes once encoded."""

EntityId = Annotated[str, AfterValidator(_canonical_uuid)]
"""Record identifier. Anything that is not a UUID is rejected before a query runs."""


class ORMModel(BaseModel):
    """Base for response models built from ORM objects."""

    model_config = ConfigDict(from_attributes=True)


class ErrorDetail(BaseModel):
    """Error body of a failed response."""

    message: str
    details: Any | None = None
    path: str | None = None
    method: str | None = None
    stack: list[str] | None = None


class ApiResponse(BaseModel, Generic[T]):
    """Success envelope."""

    success: bool = True
    data: T | None = None
    message: str | None = None


class ErrorResponse(BaseModel):
    """Failure envelope."""

    success: bool = False
    error: ErrorDetail


class Pagination(BaseModel):
    """Offset pagination metadata."""

    page: int
    limit: int
    total: int
    pages: int

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "Pagination":
        return cls(page=page, limit=limit, total=total, pages=ceil(total / limit) if limit else 0)


class Page(BaseModel, Generic[T]):
    """A page of items with pagination metadata."""

    items: list[T] = Field(default_factory=list)
    pagination: Pagination


def ok(data: Any = None, message: str | None = None) -> ApiResponse:
    """Wrap a payload in the success envelope."""
    return ApiResponse(data=data, message=message)
