# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Routes outside the admin and student portals."""

from learnhub.api.routes import general, health

__all__ = ["general", "health"]
