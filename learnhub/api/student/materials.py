# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Learning materials for enrolled students.

- GET /course/{course_id} - Materials of a course with the student's progress
- GET /{material_id} - Open a material, recording the visit
- POST /{material_id}/complete - Mark a material completed

Uploaded files are linked through the server's public URL so the
student site can open them from another origin.
"""

from fastapi import APIRouter

from learnhub.api.dependencies import DB, AppSettings, Storage, StudentUser
from learnhub.core.config import Settings
from learnhub.domains.material import MaterialService
from learnhub.models.common import ApiResponse, EntityId, ok
from learnhub.models.enrollment import MaterialCompletionResponse
from learnhub.models.material import MaterialWithProgress

router = APIRouter()


def with_public_file_url(material: MaterialWithProgress, settings: Settings) -> MaterialWithProgress:
    """Prefix a stored file's path with the public server URL."""
    prefix = settings.upload.url_prefix.rstrip("/") + "/"
    if material.file_url and material.file_url.startswith(prefix):
        material.file_url = settings.api.backend_url.rstrip("/") + material.file_url
    return material


@router.get(
    "/course/{course_id}",
    response_model=ApiResponse[list[MaterialWithProgress]],
    summary="Course materials",
)
async def list_course_materials(
    course_id: EntityId,
    db: DB,
    storage: Storage,
    settings: AppSettings,
    current_user: StudentUser,
) -> ApiResponse[list[MaterialWithProgress]]:
    materials = await MaterialService(db, storage).list_course_materials(course_id, current_user)
    return ok([with_public_file_url(material, settings) for material in materials])


@router.get("/{material_id}", response_model=ApiResponse[MaterialWithProgress], summary="Open material")
async def get_material(
    material_id: EntityId,
    db: DB,
    storage: Storage,
    settings: AppSettings,
    current_user: StudentUser,
) -> ApiResponse[MaterialWithProgress]:
    material = await MaterialService(db, storage).get_material(material_id, current_user)
    return ok(with_public_file_url(material, settings))


@router.post(
    "/{material_id}/complete",
    response_model=ApiResponse[MaterialCompletionResponse],
    summary="Complete material",
    description="Marks the material completed and returns the updated course progress.",
)
async def complete_material(
    material_id: EntityId,
    db: DB,
    storage: Storage,
    current_user: StudentUser,
) -> ApiResponse[MaterialCompletionResponse]:
    result = await MaterialService(db, storage).complete_material(material_id, current_user)
    return ok(result, "Material marked as completed")
