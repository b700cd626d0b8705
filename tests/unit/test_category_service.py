# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for the category service."""

from unittest.mock import MagicMock

import pytest

from learnhub.domains.category import (
    CategoryExistsError,
    CategoryInUseError,
    CategoryNotFoundError,
    CategoryService,
)
from learnhub.models.category import CategoryCreateRequest


@pytest.fixture
def category_service(mock_db) -> CategoryService:
    return CategoryService(mock_db)


class TestCreateCategory:
    @pytest.mark.asyncio
    async def test_duplicate_name(self, category_service, mock_db) -> None:
        mock_db.scalar.return_value = "existing-id"

        with pytest.raises(CategoryExistsError) as exc_info:
            await category_service.create_category(CategoryCreateRequest(name="  Programming "))

        assert exc_info.value.name == "Programming"
        mock_db.add.assert_not_called()


class TestDeleteCategory:
    @pytest.mark.asyncio
    async def test_not_found(self, category_service, mock_db) -> None:
        mock_db.get.return_value = None

        with pytest.raises(CategoryNotFoundError):
            await category_service.delete_category("missing")

    @pytest.mark.asyncio
    async def test_in_use(self, category_service, mock_db) -> None:
        mock_db.get.return_value = MagicMock()
        mock_db.scalar.return_value = 4

        with pytest.raises(CategoryInUseError) as exc_info:
            await category_service.delete_category("cat-1")

        assert exc_info.value.details == {"course_count": 4}
        mock_db.delete.assert_not_called()

    @pytest.mark.asyncio
    async def test_unused_category_deleted(self, category_service, mock_db) -> None:
        category = MagicMock()
        mock_db.get.return_value = category
        mock_db.scalar.return_value = 0

        await category_service.delete_category("cat-1")

        mock_db.delete.assert_awaited_once_with(category)
        mock_db.commit.assert_awaited_once()
