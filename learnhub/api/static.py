# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Static serving of uploaded files."""

from starlette.responses import Response
from starlette.staticfiles import StaticFiles
from starlette.types import Scope

PDF_CACHE_CONTROL = "public, max-age=3600"


class UploadStaticFiles(StaticFiles):
    """StaticFiles that asks browsers to display uploads inline.

    Content type comes from the file extension. Responses are not
    content-sniffed and, except for PDFs, not cached.
    """

    async def get_response(self, path: str, scope: Scope) -> Response:
        response = await super().get_response(path, scope)
        if response.status_code >= 400:
            return response

        response.headers["Content-Disposition"] = "inline"
        response.headers["X-Content-Type-Options"] = "nosniff"
        if path.lower().endswith(".pdf"):
            response.headers["Cache-Control"] = PDF_CACHE_CONTROL
        else:
            response.headers["Cache-Control"] = "no-cache"
        return response
