# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for the course service."""

from unittest.mock import MagicMock
from uuid import uuid4

import pytest

from learnhub.domains.course import (
    CourseAccessDeniedError,
    CourseHasActiveEnrollmentsError,
    CourseNotFoundError,
    CourseService,
    InvalidCategoryError,
)
from learnhub.models.course import CourseCreateRequest, CourseUpdateRequest


@pytest.fixture
def storage() -> MagicMock:
    storage = MagicMock()
    storage.delete_many.side_effect = lambda urls: len(list(urls))
    return storage


@pytest.fixture
def course_service(mock_db, storage) -> CourseService:
    return CourseService(mock_db, storage)


def scalars_of(values: list) -> MagicMock:
    result = MagicMock()
    result.all.return_value = values
    return result


class TestDeleteCourse:
    @pytest.mark.asyncio
    async def test_not_found(self, course_service, mock_db, admin_user, make_scalar_result) -> None:
        mock_db.execute.side_effect = [make_scalar_result(None)]

        with pytest.raises(CourseNotFoundError):
            await course_service.delete_course("missing", admin_user)

    @pytest.mark.asyncio
    async def test_other_tutor_denied(
        self, course_service, mock_db, published_course, make_user, make_scalar_result
    ) -> None:
        mock_db.execute.side_effect = [make_scalar_result(published_course)]

        with pytest.raises(CourseAccessDeniedError) as exc_info:
            await course_service.delete_course(published_course.id, make_user("TUTOR"))

        assert exc_info.value.status_code == 403
        mock_db.delete.assert_not_called()

    @pytest.mark.asyncio
    async def test_active_enrollments_block_delete(
        self, course_service, mock_db, storage, tutor_user, published_course, make_scalar_result
    ) -> None:
        mock_db.execute.side_effect = [make_scalar_result(published_course)]
        mock_db.scalar.side_effect = [2]

        with pytest.raises(CourseHasActiveEnrollmentsError) as exc_info:
            await course_service.delete_course(published_course.id, tutor_user)

        assert exc_info.value.status_code == 400
        assert exc_info.value.details == {"active_enrollments": 2}
        assert "2 active enrollment(s)" in exc_info.value.message
        mock_db.delete.assert_not_called()
        storage.delete_many.assert_not_called()

    @pytest.mark.asyncio
    async def test_delete_removes_files_after_commit(
        self, course_service, mock_db, storage, tutor_user, published_course, make_scalar_result
    ) -> None:
        published_course.thumbnail = "/uploads/thumb.png"
        mock_db.execute.side_effect = [make_scalar_result(published_course)]
        # active enrollments, then modules, materials, assignments, enrollments
        mock_db.scalar.side_effect = [0, 2, 5, 1, 3]
        mock_db.scalars.side_effect = [
            scalars_of(["/uploads/lecture.pdf", "/uploads/thumb.png"]),
            scalars_of(["/uploads/brief.docx"]),
            scalars_of(["/uploads/answer.pdf"]),
        ]

        calls: list[str] = []
        mock_db.commit.side_effect = lambda: calls.append("commit")
        storage.delete_many.side_effect = lambda urls: calls.append("files") or len(list(urls))

        summary = await course_service.delete_course(published_course.id, tutor_user)

        assert calls == ["commit", "files"]
        mock_db.delete.assert_awaited_once_with(published_course)
        deleted_urls = list(storage.delete_many.call_args.args[0])
        assert deleted_urls == [
            "/uploads/thumb.png",
            "/uploads/lecture.pdf",
            "/uploads/brief.docx",
            "/uploads/answer.pdf",
        ]
        assert summary.deleted_modules == 2
        assert summary.deleted_materials == 5
        assert summary.deleted_assignments == 1
        assert summary.deleted_enrollments == 3

    @pytest.mark.asyncio
    async def test_admin_may_delete_any_course(
        self, course_service, mock_db, admin_user, published_course, make_scalar_result
    ) -> None:
        mock_db.execute.side_effect = [make_scalar_result(published_course)]
        mock_db.scalar.side_effect = [0, 0, 0, 0, 0]
        mock_db.scalars.side_effect = [scalars_of([]), scalars_of([]), scalars_of([])]

        summary = await course_service.delete_course(published_course.id, admin_user)

        assert summary.course_id == published_course.id
        mock_db.commit.assert_awaited_once()


class TestCreateAndUpdate:
    @pytest.mark.asyncio
    async def test_create_with_unknown_category(self, course_service, mock_db, tutor_user) -> None:
        mock_db.get.return_value = None

        with pytest.raises(InvalidCategoryError):
            await course_service.create_course(
                CourseCreateRequest(
                    title="New course",
                    description="A long enough description",
                    category_id=str(uuid4()),
                ),
                tutor_user,
            )
        mock_db.add.assert_not_called()

    @pytest.mark.asyncio
    async def test_update_by_other_tutor_denied(
        self, course_service, mock_db, published_course, make_user, make_scalar_result
    ) -> None:
        mock_db.execute.side_effect = [make_scalar_result(published_course)]

        with pytest.raises(CourseAccessDeniedError):
            await course_service.update_course(
                published_course.id,
                CourseUpdateRequest(title="Hijacked"),
                make_user("TUTOR"),
            )
        assert published_course.title != "Hijacked"
