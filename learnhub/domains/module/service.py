# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Course module service.

Modules are the ordered sections of a course. Only the course owner or
an admin may manage them. ``order_index`` values stay contiguous from 0:
creating, moving and deleting a module shift its siblings in the same
transaction.
"""

import logging

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from learnhub.domains.access import can_manage_course
from learnhub.domains.errors import (
    ConflictError,
    NotFoundError,
    PermissionDeniedError,
    ServiceError,
)
from learnhub.infrastructure.database.models import Course, CourseModule, Material, User
from learnhub.models.module import (
    ModuleCreateRequest,
    ModuleResponse,
    ModuleUpdateRequest,
    ModuleWithMaterials,
)

logger = logging.getLogger(__name__)


class ModuleServiceError(ServiceError):
    """Base exception for module service errors."""


class CourseModuleNotFoundError(ModuleServiceError, NotFoundError):
    def __init__(self, module_id: str) -> None:
        super().__init__("Module not found")
        self.module_id = module_id


class ModuleCourseNotFoundError(ModuleServiceError, NotFoundError):
    def __init__(self, course_id: str) -> None:
        super().__init__("Course not found")
        self.course_id = course_id


class ModuleAccessDeniedError(ModuleServiceError, PermissionDeniedError):
    def __init__(self) -> None:
        super().__init__("Not authorized to manage modules of this course")


class ModuleHasMaterialsError(ModuleServiceError, ConflictError):
    def __init__(self, material_count: int) -> None:
        super().__init__(
            "Cannot delete module with existing materials",
            details={"material_count": material_count},
        )


def _material_count_column():
    return (
        select(func.count(Material.id))
        .where(Material.module_id == CourseModule.id)
        .correlate(CourseModule)
        .scalar_subquery()
        .label("material_count")
    )


class ModuleService:
    """Service for managing course modules.

    Attributes:
        db: Database session.
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def list_modules(self, course_id: str, actor: User) -> list[ModuleResponse]:
        """Modules of a course in display order."""
        await self._get_managed_course(course_id, actor)

        result = await self.db.execute(
            select(CourseModule, _material_count_column())
            .where(CourseModule.course_id == course_id)
            .order_by(CourseModule.order_index, CourseModule.created_at)
        )
        return [self._to_response(module, count) for module, count in result.all()]

    async def get_module(self, module_id: str, actor: User) -> ModuleWithMaterials:
        """A module with its materials in display order."""
        result = await self.db.execute(
            select(CourseModule)
            .options(
                selectinload(CourseModule.course),
                selectinload(CourseModule.materials),
            )
            .where(CourseModule.id == module_id)
        )
        module = result.scalar_one_or_none()
        if module is None:
            raise CourseModuleNotFoundError(module_id)
        if not can_manage_course(module.course, actor):
            raise ModuleAccessDeniedError()

        response = ModuleWithMaterials.model_validate(module)
        response.material_count = len(module.materials)
        return response

    async def create_module(self, request: ModuleCreateRequest, actor: User) -> ModuleResponse:
        """Create a module. Without an explicit index it goes last.

        An explicit index past the end is clamped to the end. Modules at or
        after the index move down one place.

        Raises:
            ModuleCourseNotFoundError: If the course does not exist.
            ModuleAccessDeniedError: If the actor may not manage the course.
        """
        await self._get_managed_course(request.course_id, actor)

        sibling_count = await self._count_modules(request.course_id)
        order_index = sibling_count
        if request.order_index is not None:
            order_index = min(request.order_index, sibling_count)

        if order_index < sibling_count:
            await self._shift(
                update(CourseModule)
                .where(
                    CourseModule.course_id == request.course_id,
                    CourseModule.order_index >= order_index,
                )
                .values(order_index=CourseModule.order_index + 1)
            )

        module = CourseModule(
            title=request.title,
            description=request.description,
            order_index=order_index,
            course_id=request.course_id,
        )
        self.db.add(module)
        await self.db.commit()
        await self.db.refresh(module)

        logger.info("Created module: module=%s, course=%s", module.id, module.course_id)
        return self._to_response(module, 0)

    async def update_module(
        self,
        module_id: str,
        request: ModuleUpdateRequest,
        actor: User,
    ) -> ModuleResponse:
        """Update a module. A new ``order_index`` moves it like ``reorder_module``."""
        module = await self._get_managed_module(module_id, actor)

        updates = request.model_dump(exclude_unset=True)
        new_order_index = updates.pop("order_index", None)
        for field, value in updates.items():
            setattr(module, field, value)
        if new_order_index is not None:
            await self._move(module, new_order_index)

        await self.db.commit()
        await self.db.refresh(module)
        return self._to_response(module, await self._count_materials(module_id))

    async def delete_module(self, module_id: str, actor: User) -> None:
        """Delete an empty module and close the gap it leaves.

        Raises:
            ModuleHasMaterialsError: If the module still has materials.
        """
        module = await self._get_managed_module(module_id, actor)

        material_count = await self._count_materials(module_id)
        if material_count:
            raise ModuleHasMaterialsError(material_count)

        course_id, order_index = module.course_id, module.order_index
        await self.db.delete(module)
        await self._shift(
            update(CourseModule)
            .where(
                CourseModule.course_id == course_id,
                CourseModule.id != module_id,
                CourseModule.order_index > order_index,
            )
            .values(order_index=CourseModule.order_index - 1)
        )
        await self.db.commit()
        logger.info("Deleted module: %s", module_id)

    async def reorder_module(
        self,
        module_id: str,
        new_order_index: int,
        actor: User,
    ) -> list[ModuleResponse]:
        """Move a module to a new position.

        Siblings between the old and the new position shift by one so the
        order stays contiguous.

        Returns:
            All modules of the course in their new order.
        """
        module = await self._get_managed_module(module_id, actor)
        old_index = module.order_index

        if await self._move(module, new_order_index):
            await self.db.commit()
            logger.info(
                "Reordered module: module=%s, from=%d, to=%d",
                module_id,
                old_index,
                module.order_index,
            )

        return await self.list_modules(module.course_id, actor)

    # =========================================================================
    # Helpers
    # =========================================================================

    async def _move(self, module: CourseModule, new_order_index: int) -> bool:
        """Move ``module`` within its course, clamped to the last position.

        Returns:
            True if the module changed position.
        """
        sibling_count = await self._count_modules(module.course_id) or 1
        new_index = min(new_order_index, sibling_count - 1)
        old_index = module.order_index
        if new_index == old_index:
            return False

        siblings = (
            CourseModule.course_id == module.course_id,
            CourseModule.id != module.id,
        )
        if new_index > old_index:
            stmt = (
                update(CourseModule)
                .where(
                    *siblings,
                    CourseModule.order_index > old_index,
                    CourseModule.order_index <= new_index,
                )
                .values(order_index=CourseModule.order_index - 1)
            )
        else:
            stmt = (
                update(CourseModule)
                .where(
                    *siblings,
                    CourseModule.order_index >= new_index,
                    CourseModule.order_index < old_index,
                )
                .values(order_index=CourseModule.order_index + 1)
            )
        await self._shift(stmt)
        module.order_index = new_index
        return True

    async def _shift(self, stmt) -> None:
        await self.db.execute(stmt.execution_options(synchronize_session="fetch"))

    async def _get_managed_course(self, course_id: str, actor: User) -> Course:
        course = await self.db.get(Course, course_id)
        if course is None:
            raise ModuleCourseNotFoundError(course_id)
        if not can_manage_course(course, actor):
            raise ModuleAccessDeniedError()
        return course

    async def _get_managed_module(self, module_id: str, actor: User) -> CourseModule:
        result = await self.db.execute(
            select(CourseModule)
            .options(selectinload(CourseModule.course))
            .where(CourseModule.id == module_id)
        )
        module = result.scalar_one_or_none()
        if module is None:
            raise CourseModuleNotFoundError(module_id)
        if not can_manage_course(module.course, actor):
            raise ModuleAccessDeniedError()
        return module

    async def _count_modules(self, course_id: str) -> int:
        return await self.db.scalar(
            select(func.count(CourseModule.id)).where(CourseModule.course_id == course_id)
        ) or 0

    async def _count_materials(self, module_id: str) -> int:
        return await self.db.scalar(
            select(func.count(Material.id)).where(Material.module_id == module_id)
        ) or 0

    @staticmethod
    def _to_response(module: CourseModule, material_count: int | None) -> ModuleResponse:
        response = ModuleResponse.model_validate(module)
        response.material_count = material_count or 0
        return response
