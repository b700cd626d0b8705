# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Server entry point.

Run with ``python -m learnhub.main`` or the ``learnhub`` console script.
"""

import uvicorn

from learnhub.core.config import get_settings


def main() -> None:
    """Start uvicorn with the API_ settings."""
    settings = get_settings()
    uvicorn.run(
        "learnhub.api.app:create_app",
        factory=True,
        host=settings.api.host,
        port=settings.api.port,
        workers=None if settings.api.reload else settings.api.workers,
        reload=settings.api.reload,
        log_level=settings.log_level.lower(),
        proxy_headers=True,
    )


if __name__ == "__main__":
    main()
