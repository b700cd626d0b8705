# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Domain services.

Each subpackage owns one resource: its service class, its exceptions and
any helpers. Services take an ``AsyncSession`` and raise ``ServiceError``
subclasses that the API layer renders as error responses.
"""
