# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""DateTime utilities.

All timestamps are stored as PostgreSQL TIMESTAMPTZ and every Python
datetime handled by the application is timezone-aware UTC.

Usage:
    from learnhub.utils.datetime import utc_now

    created_at: Mapped[datetime] = mapped_column(default=utc_now)
"""

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Get current UTC time as timezone-aware datetime."""
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime) -> datetime:
    """Make a datetime timezone-aware in UTC.

    Naive datetimes are assumed to already be in UTC.

    Args:
        dt: Datetime to normalize.

    Returns:
        Timezone-aware UTC datetime.
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def utc_month_start(dt: datetime | None = None) -> datetime:
    """Get the first instant of the month containing ``dt`` (default now)."""
    current = ensure_utc(dt) if dt else utc_now()
    return current.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
