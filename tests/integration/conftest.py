# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Fixtures for API tests.

The client is created without entering the lifespan, so no database
engine is opened. Tests override ``get_db`` and the user dependencies
they need.
"""

from collections.abc import AsyncGenerator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from learnhub.api.app import create_app
from learnhub.api.dependencies import get_db


@pytest.fixture
def app(mock_db) -> FastAPI:
    application = create_app()

    async def override_get_db() -> AsyncGenerator:
        yield mock_db

    application.dependency_overrides[get_db] = override_get_db
    return application


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    return TestClient(app, raise_server_exceptions=False)
