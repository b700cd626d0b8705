# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for the student directory."""

from datetime import datetime, timedelta, timezone

import pytest

from learnhub.domains.student import StudentService
from learnhub.infrastructure.database.models import EnrollmentStatus


@pytest.fixture
def student_service(mock_db) -> StudentService:
    return StudentService(mock_db)


class TestRoster:
    @pytest.mark.asyncio
    async def test_empty(self, student_service, mock_db, tutor_user, make_rows_result) -> None:
        mock_db.execute.side_effect = [make_rows_result([])]

        roster = await student_service.roster(tutor_user)

        assert roster.students == []
        assert roster.stats.total_students == 0
        assert roster.stats.total_revenue == 0
        assert mock_db.execute.await_count == 1

    @pytest.mark.asyncio
    async def test_groups_enrollments_by_student(
        self,
        student_service,
        mock_db,
        tutor_user,
        make_user,
        make_course,
        make_enrollment,
        make_rows_result,
    ) -> None:
        old_joiner = make_user("STUDENT", created_at=datetime.now(timezone.utc) - timedelta(days=90))
        new_joiner = make_user("STUDENT")
        python, sql = make_course(tutor_user, title="Python"), make_course(tutor_user, title="SQL")
        rows = [
            (make_enrollment(old_joiner, python, progress_percentage=90), old_joiner, "Python"),
            (
                make_enrollment(
                    old_joiner, sql, status=EnrollmentStatus.COMPLETED, progress_percentage=100
                ),
                old_joiner,
                "SQL",
            ),
            (make_enrollment(new_joiner, python, status=EnrollmentStatus.DROPPED), new_joiner, "Python"),
        ]
        mock_db.execute.side_effect = [
            make_rows_result(rows),
            make_rows_result([(old_joiner.id, 42)]),
        ]

        roster = await student_service.roster(tutor_user)

        first, second = roster.students
        assert first.id == old_joiner.id
        assert [e.course_title for e in first.enrollments] == ["Python", "SQL"]
        assert first.total_courses == 2
        assert first.completed_courses == 1
        assert first.total_time_spent == 42
        assert second.total_time_spent == 0
        assert roster.stats.total_students == 2
        assert roster.stats.active_students == 1
        assert roster.stats.new_this_month == 1
        assert roster.stats.top_performers == 1
        assert roster.stats.average_progress == 63.33

    @pytest.mark.asyncio
    async def test_tutor_scope(self, student_service, mock_db, tutor_user, admin_user, make_rows_result) -> None:
        mock_db.execute.side_effect = [make_rows_result([]), make_rows_result([])]

        await student_service.roster(tutor_user)
        await student_service.roster(admin_user)

        tutor_sql, admin_sql = (str(call.args[0]) for call in mock_db.execute.await_args_list)
        assert "courses.creator_id" in tutor_sql
        assert "courses.creator_id" not in admin_sql


class TestDirectory:
    @pytest.mark.asyncio
    async def test_count(self, student_service, mock_db) -> None:
        mock_db.scalar.return_value = 12

        assert await student_service.count() == 12

    @pytest.mark.asyncio
    async def test_registered(self, student_service, mock_db, student_user, make_rows_result) -> None:
        mock_db.execute.side_effect = [make_rows_result([student_user])]

        students = await student_service.registered()

        assert len(students) == 1
        assert students[0].registered_at == student_user.created_at
        assert students[0].last_active == student_user.updated_at
