# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Material service.

Materials are the content items of a module. Course owners and admins
manage them; enrolled students read them and mark them complete.

Reading a material as an enrolled student records the visit in the
student's progress row (``last_accessed`` and ``time_spent``). Completing
a material marks the row completed and recomputes the enrollment's
progress percentage in the same transaction. Creating or deleting a
material changes the denominator, so every enrollment of the course is
recomputed as well.

Progress rows are written with a PostgreSQL upsert on
(user, course, material), so concurrent requests never create
duplicates.
"""

import logging

from sqlalchemy import func, select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from learnhub.domains.access import can_manage_course, get_enrollment
from learnhub.domains.errors import (
    NotFoundError,
    PermissionDeniedError,
    ServiceError,
    ValidationFailedError,
)
from learnhub.domains.progress import ProgressCalculator
from learnhub.domains.upload.storage import FileStorage
from learnhub.infrastructure.database.models import (
    Course,
    CourseModule,
    Material,
    MaterialType,
    Progress,
    User,
)
from learnhub.models.enrollment import EnrollmentResponse, MaterialCompletionResponse
from learnhub.models.material import (
    MaterialCreateRequest,
    MaterialResponse,
    MaterialUpdateRequest,
    MaterialWithProgress,
    ProgressResponse,
)
from learnhub.utils.datetime import utc_now

logger = logging.getLogger(__name__)


class MaterialServiceError(ServiceError):
    """Base exception for material service errors."""


class MaterialNotFoundError(MaterialServiceError, NotFoundError):
    def __init__(self, material_id: str) -> None:
        super().__init__("Material not found")
        self.material_id = material_id


class MaterialModuleNotFoundError(MaterialServiceError, NotFoundError):
    def __init__(self, module_id: str) -> None:
        super().__init__("Module not found")
        self.module_id = module_id


class MaterialCourseNotFoundError(MaterialServiceError, NotFoundError):
    def __init__(self, course_id: str) -> None:
        super().__init__("Course not found")
        self.course_id = course_id


class MaterialAccessDeniedError(MaterialServiceError, PermissionDeniedError):
    def __init__(self) -> None:
        super().__init__("Not authorized to manage materials of this course")


class NotEnrolledError(MaterialServiceError, PermissionDeniedError):
    def __init__(self) -> None:
        super().__init__("You are not enrolled in this course")


class LinkUrlRequiredError(MaterialServiceError, ValidationFailedError):
    def __init__(self) -> None:
        super().__init__("A URL is required for link materials")


class MaterialService:
    """Service for course materials and per-material progress.

    Attributes:
        db: Database session.
        storage: File storage used to remove replaced files.
        calculator: Enrollment progress calculator.
    """

    def __init__(self, db: AsyncSession, storage: FileStorage) -> None:
        self.db = db
        self.storage = storage
        self.calculator = ProgressCalculator(db)

    # =========================================================================
    # Reading
    # =========================================================================

    async def list_course_materials(
        self,
        course_id: str,
        viewer: User,
    ) -> list[MaterialWithProgress]:
        """Materials of a course in module and display order.

        Course owners and admins see every material. Enrolled students see
        them together with their own progress.

        Raises:
            MaterialCourseNotFoundError: If the course does not exist.
            NotEnrolledError: If a student is not enrolled.
            MaterialAccessDeniedError: If a staff member does not own the course.
        """
        course = await self.db.get(Course, course_id)
        if course is None:
            raise MaterialCourseNotFoundError(course_id)
        await self._check_read_access(course, viewer)

        result = await self.db.execute(
            select(Material)
            .join(CourseModule, Material.module_id == CourseModule.id)
            .where(Material.course_id == course_id)
            .order_by(CourseModule.order_index, Material.order_index, Material.created_at)
        )
        materials = result.scalars().all()

        progress_by_material: dict[str, Progress] = {}
        if viewer.is_student:
            progress_result = await self.db.execute(
                select(Progress).where(
                    Progress.user_id == viewer.id,
                    Progress.course_id == course_id,
                )
            )
            progress_by_material = {p.material_id: p for p in progress_result.scalars().all()}

        return [self._with_progress(m, progress_by_material.get(m.id)) for m in materials]

    async def get_material(self, material_id: str, viewer: User) -> MaterialWithProgress:
        """Get a material.

        For an enrolled student the visit is recorded: ``last_accessed`` is
        refreshed and ``time_spent`` grows by one.
        """
        material = await self._get_material(material_id)
        await self._check_read_access(material.course, viewer)

        progress = None
        if viewer.is_student:
            progress = await self._upsert_progress(viewer.id, material, visit=True)
            await self.db.commit()

        return self._with_progress(material, progress)

    # =========================================================================
    # Management
    # =========================================================================

    async def create_material(
        self,
        request: MaterialCreateRequest,
        actor: User,
    ) -> MaterialResponse:
        """Add a material to a module.

        Raises:
            LinkUrlRequiredError: If a LINK material has no URL.
            MaterialModuleNotFoundError: If the module does not exist.
            MaterialAccessDeniedError: If the actor may not manage the course.
        """
        if request.type == MaterialType.LINK and not request.file_url:
            raise LinkUrlRequiredError()

        result = await self.db.execute(
            select(CourseModule)
            .options(selectinload(CourseModule.course))
            .where(CourseModule.id == request.module_id)
        )
        module = result.scalar_one_or_none()
        if module is None:
            raise MaterialModuleNotFoundError(request.module_id)
        if not can_manage_course(module.course, actor):
            raise MaterialAccessDeniedError()

        material = Material(
            **request.model_dump(),
            course_id=module.course_id,
            author_id=actor.id,
        )
        self.db.add(material)
        await self.calculator.recalculate_course(module.course_id)
        await self.db.commit()
        await self.db.refresh(material)

        logger.info(
            "Created material: material=%s, module=%s, type=%s",
            material.id,
            module.id,
            material.type,
        )
        return MaterialResponse.model_validate(material)

    async def update_material(
        self,
        material_id: str,
        request: MaterialUpdateRequest,
        actor: User,
    ) -> MaterialResponse:
        """Update a material. A replaced upload is removed after the commit."""
        material = await self._get_material(material_id)
        if not can_manage_course(material.course, actor):
            raise MaterialAccessDeniedError()

        updates = request.model_dump(exclude_unset=True)
        new_type = updates.get("type", material.type)
        new_url = updates.get("file_url", material.file_url)
        if new_type == MaterialType.LINK and not new_url:
            raise LinkUrlRequiredError()

        old_file = material.file_url if material.has_stored_file else None
        for field, value in updates.items():
            setattr(material, field, value)

        await self.db.commit()
        await self.db.refresh(material)

        if old_file and old_file != material.file_url:
            self.storage.delete(old_file)

        logger.info("Updated material: %s", material_id)
        return MaterialResponse.model_validate(material)

    async def delete_material(self, material_id: str, actor: User) -> None:
        """Delete a material and then its uploaded file."""
        material = await self._get_material(material_id)
        if not can_manage_course(material.course, actor):
            raise MaterialAccessDeniedError()

        stored_file = material.file_url if material.has_stored_file else None
        course_id = material.course_id

        await self.db.delete(material)
        await self.calculator.recalculate_course(course_id)
        await self.db.commit()

        if stored_file:
            self.storage.delete(stored_file)
        logger.info("Deleted material: material=%s, course=%s", material_id, course_id)

    # =========================================================================
    # Completion
    # =========================================================================

    async def complete_material(
        self,
        material_id: str,
        student: User,
    ) -> MaterialCompletionResponse:
        """Mark a material completed and update the enrollment.

        The progress row and the enrollment percentage are written in one
        transaction. Completing the last material marks the enrollment
        COMPLETED.

        Raises:
            MaterialNotFoundError: If the material does not exist.
            NotEnrolledError: If the student is not enrolled.
        """
        material = await self._get_material(material_id)
        if await get_enrollment(self.db, student.id, material.course_id) is None:
            raise NotEnrolledError()

        progress = await self._upsert_progress(student.id, material, complete=True)
        enrollment = await self.calculator.update_enrollment(student.id, material.course_id)
        await self.db.commit()

        logger.info(
            "Material completed: material=%s, user=%s, progress=%d",
            material_id,
            student.id,
            enrollment.progress_percentage,
        )
        return MaterialCompletionResponse(
            progress=ProgressResponse.model_validate(progress),
            enrollment=EnrollmentResponse.model_validate(enrollment),
        )

    # =========================================================================
    # Helpers
    # =========================================================================

    async def _get_material(self, material_id: str) -> Material:
        result = await self.db.execute(
            select(Material)
            .options(selectinload(Material.course))
            .where(Material.id == material_id)
        )
        material = result.scalar_one_or_none()
        if material is None:
            raise MaterialNotFoundError(material_id)
        return material

    async def _check_read_access(self, course: Course, viewer: User) -> None:
        if viewer.is_student:
            if await get_enrollment(self.db, viewer.id, course.id) is None:
                raise NotEnrolledError()
        elif not can_manage_course(course, viewer):
            raise MaterialAccessDeniedError()

    async def _upsert_progress(
        self,
        user_id: str,
        material: Material,
        visit: bool = False,
        complete: bool = False,
    ) -> Progress:
        """Insert or update the user's progress row for a material."""
        now = utc_now()
        values = {
            "user_id": user_id,
            "course_id": material.course_id,
            "material_id": material.id,
            "last_accessed": now,
            "time_spent": 1 if visit else 0,
            "is_completed": complete,
            "completed_at": now if complete else None,
        }

        changes = {"last_accessed": now, "updated_at": now}
        if visit:
            changes["time_spent"] = Progress.time_spent + 1
        if complete:
            changes["is_completed"] = True
            changes["completed_at"] = func.coalesce(Progress.completed_at, now)

        stmt = (
            insert(Progress)
            .values(**values)
            .on_conflict_do_update(
                index_elements=[Progress.user_id, Progress.course_id, Progress.material_id],
                set_=changes,
            )
            .returning(Progress)
        )
        result = await self.db.execute(
            select(Progress).from_statement(stmt).execution_options(populate_existing=True)
        )
        return result.scalar_one()

    @staticmethod
    def _with_progress(material: Material, progress: Progress | None) -> MaterialWithProgress:
        response = MaterialWithProgress.model_validate(material)
        if progress is not None:
            response.progress = ProgressResponse.model_validate(progress)
        return response
