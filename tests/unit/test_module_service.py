# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for the module service."""

from datetime import datetime, timezone
from unittest.mock import MagicMock
from uuid import uuid4

import pytest

from learnhub.domains.module import (
    CourseModuleNotFoundError,
    ModuleAccessDeniedError,
    ModuleHasMaterialsError,
    ModuleService,
)
from learnhub.infrastructure.database.models import CourseModule
from learnhub.models.module import ModuleCreateRequest, ModuleUpdateRequest


def executed_sql(mock_db, index: int) -> str:
    return str(mock_db.execute.await_args_list[index].args[0])


def build_module(course, order_index: int) -> CourseModule:
    now = datetime.now(timezone.utc)
    module = CourseModule(
        id=str(uuid4()),
        title=f"Module {order_index}",
        description=None,
        order_index=order_index,
        course_id=course.id,
        created_at=now,
        updated_at=now,
    )
    module.course = course
    return module


@pytest.fixture
def module_service(mock_db) -> ModuleService:
    return ModuleService(mock_db)


@pytest.fixture
def course_module(published_course) -> MagicMock:
    module = MagicMock()
    module.id = "module-1"
    module.course_id = published_course.id
    module.course = published_course
    module.order_index = 0
    return module


class TestDeleteModule:
    @pytest.mark.asyncio
    async def test_not_found(self, module_service, mock_db, tutor_user, make_scalar_result) -> None:
        mock_db.execute.side_effect = [make_scalar_result(None)]

        with pytest.raises(CourseModuleNotFoundError):
            await module_service.delete_module("missing", tutor_user)

    @pytest.mark.asyncio
    async def test_other_tutor_denied(
        self, module_service, mock_db, course_module, make_user, make_scalar_result
    ) -> None:
        mock_db.execute.side_effect = [make_scalar_result(course_module)]

        with pytest.raises(ModuleAccessDeniedError):
            await module_service.delete_module(course_module.id, make_user("TUTOR"))
        mock_db.delete.assert_not_called()

    @pytest.mark.asyncio
    async def test_module_with_materials_is_kept(
        self, module_service, mock_db, tutor_user, course_module, make_scalar_result
    ) -> None:
        mock_db.execute.side_effect = [make_scalar_result(course_module)]
        mock_db.scalar.return_value = 3

        with pytest.raises(ModuleHasMaterialsError) as exc_info:
            await module_service.delete_module(course_module.id, tutor_user)

        assert exc_info.value.status_code == 400
        assert exc_info.value.details == {"material_count": 3}
        mock_db.delete.assert_not_called()

    @pytest.mark.asyncio
    async def test_empty_module_deleted_and_gap_closed(
        self, module_service, mock_db, admin_user, course_module, make_scalar_result
    ) -> None:
        mock_db.execute.side_effect = [make_scalar_result(course_module), MagicMock()]
        mock_db.scalar.return_value = 0

        await module_service.delete_module(course_module.id, admin_user)

        mock_db.delete.assert_awaited_once_with(course_module)
        mock_db.commit.assert_awaited_once()
        sql = executed_sql(mock_db, 1)
        assert sql.startswith("UPDATE course_modules")
        assert "course_modules.order_index - " in sql


class TestCreateModule:
    @pytest.fixture(autouse=True)
    def _refresh_assigns_identity(self, mock_db) -> None:
        def assign(module) -> None:
            now = datetime.now(timezone.utc)
            module.id = str(uuid4())
            module.created_at = module.updated_at = now

        mock_db.refresh.side_effect = assign

    @pytest.mark.asyncio
    async def test_appended_without_index(
        self, module_service, mock_db, tutor_user, published_course
    ) -> None:
        mock_db.get.return_value = published_course
        mock_db.scalar.return_value = 3

        module = await module_service.create_module(
            ModuleCreateRequest(title="Wrap up", course_id=published_course.id), tutor_user
        )

        assert module.order_index == 3
        mock_db.execute.assert_not_called()

    @pytest.mark.asyncio
    async def test_index_past_end_is_clamped(
        self, module_service, mock_db, tutor_user, published_course
    ) -> None:
        mock_db.get.return_value = published_course
        mock_db.scalar.return_value = 2

        module = await module_service.create_module(
            ModuleCreateRequest(title="Later", course_id=published_course.id, order_index=10),
            tutor_user,
        )

        assert module.order_index == 2
        mock_db.execute.assert_not_called()

    @pytest.mark.asyncio
    async def test_insert_shifts_following_modules(
        self, module_service, mock_db, tutor_user, published_course
    ) -> None:
        mock_db.get.return_value = published_course
        mock_db.scalar.return_value = 3

        module = await module_service.create_module(
            ModuleCreateRequest(title="Setup", course_id=published_course.id, order_index=1),
            tutor_user,
        )

        assert module.order_index == 1
        sql = executed_sql(mock_db, 0)
        assert sql.startswith("UPDATE course_modules")
        assert "course_modules.order_index + " in sql
        mock_db.commit.assert_awaited_once()


class TestMoveModule:
    @pytest.mark.asyncio
    async def test_update_moves_module_down(
        self, module_service, mock_db, tutor_user, published_course, make_scalar_result
    ) -> None:
        module = build_module(published_course, 0)
        mock_db.execute.side_effect = [make_scalar_result(module), MagicMock()]
        mock_db.scalar.side_effect = [3, 0]

        response = await module_service.update_module(
            module.id, ModuleUpdateRequest(title="Renamed", order_index=2), tutor_user
        )

        assert response.order_index == 2
        assert response.title == "Renamed"
        assert "course_modules.order_index - " in executed_sql(mock_db, 1)
        mock_db.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_reorder_up_shifts_siblings_down(
        self, module_service, mock_db, tutor_user, published_course, make_scalar_result, make_rows_result
    ) -> None:
        module = build_module(published_course, 2)
        mock_db.execute.side_effect = [make_scalar_result(module), MagicMock(), make_rows_result([])]
        mock_db.scalar.return_value = 3
        mock_db.get.return_value = published_course

        await module_service.reorder_module(module.id, 0, tutor_user)

        assert module.order_index == 0
        assert "course_modules.order_index + " in executed_sql(mock_db, 1)
        mock_db.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_reorder_past_end_is_clamped(
        self, module_service, mock_db, tutor_user, published_course, make_scalar_result, make_rows_result
    ) -> None:
        module = build_module(published_course, 0)
        mock_db.execute.side_effect = [make_scalar_result(module), MagicMock(), make_rows_result([])]
        mock_db.scalar.return_value = 3
        mock_db.get.return_value = published_course

        await module_service.reorder_module(module.id, 9, tutor_user)

        assert module.order_index == 2

    @pytest.mark.asyncio
    async def test_reorder_to_same_position_is_noop(
        self, module_service, mock_db, tutor_user, published_course, make_scalar_result, make_rows_result
    ) -> None:
        module = build_module(published_course, 1)
        mock_db.execute.side_effect = [make_scalar_result(module), make_rows_result([])]
        mock_db.scalar.return_value = 3
        mock_db.get.return_value = published_course

        await module_service.reorder_module(module.id, 1, tutor_user)

        mock_db.commit.assert_not_called()
