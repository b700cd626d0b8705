# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for the material service."""

from datetime import datetime, timezone
from unittest.mock import MagicMock
from uuid import uuid4

import pytest

from learnhub.domains.material import MaterialNotFoundError, MaterialService, NotEnrolledError
from learnhub.infrastructure.database.models import EnrollmentStatus, Progress


@pytest.fixture
def material_service(mock_db) -> MaterialService:
    return MaterialService(mock_db, MagicMock())


class TestCompleteMaterial:
    @pytest.mark.asyncio
    async def test_material_not_found(self, material_service, mock_db, student_user, make_scalar_result) -> None:
        mock_db.execute.side_effect = [make_scalar_result(None)]

        with pytest.raises(MaterialNotFoundError):
            await material_service.complete_material("missing", student_user)

    @pytest.mark.asyncio
    async def test_not_enrolled(
        self, material_service, mock_db, student_user, published_course, make_scalar_result
    ) -> None:
        material = MagicMock()
        material.id = "material-1"
        material.course_id = published_course.id
        mock_db.execute.side_effect = [make_scalar_result(material), make_scalar_result(None)]

        with pytest.raises(NotEnrolledError) as exc_info:
            await material_service.complete_material(material.id, student_user)

        assert exc_info.value.status_code == 403
        mock_db.commit.assert_not_called()

    @pytest.mark.asyncio
    async def test_last_material_completes_enrollment(
        self, material_service, mock_db, student_user, published_course, make_enrollment, make_scalar_result
    ) -> None:
        now = datetime.now(timezone.utc)
        material = MagicMock()
        material.id = str(uuid4())
        material.course_id = published_course.id
        enrollment = make_enrollment(student_user, published_course, progress_percentage=67)
        progress = Progress(
            id=str(uuid4()),
            user_id=student_user.id,
            course_id=published_course.id,
            material_id=material.id,
            is_completed=True,
            completed_at=now,
            time_spent=3,
            last_accessed=now,
        )
        mock_db.execute.side_effect = [
            make_scalar_result(material),
            make_scalar_result(enrollment),
            make_scalar_result(progress),
            make_scalar_result(enrollment),
        ]
        # three materials in the course, all three now completed
        mock_db.scalar.side_effect = [3, 3]

        result = await material_service.complete_material(material.id, student_user)

        assert enrollment.progress_percentage == 100
        assert enrollment.status == EnrollmentStatus.COMPLETED
        assert enrollment.completed_at is not None
        assert result.enrollment.status == "COMPLETED"
        assert result.enrollment.progress_percentage == 100
        assert result.progress.is_completed is True
        mock_db.commit.assert_awaited_once()
