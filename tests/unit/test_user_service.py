# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for admin user management."""

from unittest.mock import MagicMock

import pytest

from learnhub.domains.user import (
    CannotDeleteSelfError,
    TutorNotFoundError,
    UserNotFoundError,
    UserOwnsCoursesError,
    UserService,
)


@pytest.fixture
def storage() -> MagicMock:
    return MagicMock()


@pytest.fixture
def user_service(mock_db, storage) -> UserService:
    return UserService(mock_db, MagicMock(), storage)


class TestDeleteUser:
    @pytest.mark.asyncio
    async def test_cannot_delete_self(self, user_service, mock_db, admin_user) -> None:
        with pytest.raises(CannotDeleteSelfError):
            await user_service.delete_user(admin_user.id, admin_user)
        mock_db.get.assert_not_called()

    @pytest.mark.asyncio
    async def test_not_found(self, user_service, mock_db, admin_user) -> None:
        mock_db.get.return_value = None

        with pytest.raises(UserNotFoundError):
            await user_service.delete_user("missing", admin_user)

    @pytest.mark.asyncio
    async def test_owner_of_courses_is_kept(self, user_service, mock_db, admin_user, tutor_user) -> None:
        mock_db.get.return_value = tutor_user
        mock_db.scalar.return_value = 2

        with pytest.raises(UserOwnsCoursesError) as exc_info:
            await user_service.delete_user(tutor_user.id, admin_user)

        assert exc_info.value.details == {"course_count": 2}
        mock_db.delete.assert_not_called()

    @pytest.mark.asyncio
    async def test_avatar_removed_after_commit(
        self, user_service, mock_db, storage, admin_user, make_user
    ) -> None:
        student = make_user("STUDENT", avatar="/uploads/avatar.png")
        mock_db.get.return_value = student
        mock_db.scalar.return_value = 0
        calls: list[str] = []
        mock_db.commit.side_effect = lambda: calls.append("commit")
        storage.delete.side_effect = lambda url: calls.append(url)

        await user_service.delete_user(student.id, admin_user)

        mock_db.delete.assert_awaited_once_with(student)
        assert calls == ["commit", "/uploads/avatar.png"]


class TestTutorDirectory:
    @pytest.mark.asyncio
    async def test_list_with_course_counts(self, user_service, mock_db, make_user, make_rows_result) -> None:
        active, inactive = make_user("TUTOR"), make_user("TUTOR", is_active=False)
        mock_db.execute.side_effect = [make_rows_result([(active, 3), (inactive, None)])]

        tutors = await user_service.list_tutors()

        assert [(t.id, t.course_count) for t in tutors] == [(active.id, 3), (inactive.id, 0)]
        assert tutors[1].is_active is False

    @pytest.mark.asyncio
    async def test_list_active_only_filters(self, user_service, mock_db, make_rows_result) -> None:
        mock_db.execute.side_effect = [make_rows_result([])]

        await user_service.list_tutors(active_only=True)

        sql = str(mock_db.execute.await_args.args[0])
        assert "users.is_active" in sql

    @pytest.mark.asyncio
    @pytest.mark.parametrize("role", ["STUDENT", "ADMIN"])
    async def test_status_of_non_tutor(self, user_service, mock_db, make_user, role) -> None:
        mock_db.get.return_value = make_user(role)

        with pytest.raises(TutorNotFoundError) as exc_info:
            await user_service.set_tutor_status("some-id", False)

        assert exc_info.value.message == "Tutor not found"
        mock_db.commit.assert_not_called()

    @pytest.mark.asyncio
    async def test_deactivate(self, user_service, mock_db, tutor_user) -> None:
        mock_db.get.return_value = tutor_user
        mock_db.scalar.return_value = 2

        item = await user_service.set_tutor_status(tutor_user.id, False)

        assert tutor_user.is_active is False
        assert item.is_active is False
        assert item.course_count == 2
        mock_db.commit.assert_awaited_once()
