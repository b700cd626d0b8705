# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""User administration service.

Admin-only management of every account on the platform: listing with
search, detail views, creation with any role, updates, deletion and a
platform-wide user overview. Tutors also have their own directory
where an admin can activate or deactivate them.
"""

import asyncio
import logging

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from learnhub.domains.auth.password import PasswordHasher
from learnhub.domains.errors import ConflictError, NotFoundError, ServiceError
from learnhub.domains.upload.storage import FileStorage
from learnhub.infrastructure.database.models import Course, Enrollment, User, UserRole
from learnhub.models.common import Page, Pagination
from learnhub.models.user import (
    UserCourseBrief,
    UserCreateRequest,
    UserDetail,
    UserEnrollmentBrief,
    UserListItem,
    UserResponse,
    TutorListItem,
    UserStatsOverview,
    UserUpdateRequest,
)

logger = logging.getLogger(__name__)

RECENT_USERS_LIMIT = 5


class UserServiceError(ServiceError):
    """Base exception for user service errors."""


class UserNotFoundError(UserServiceError, NotFoundError):
    def __init__(self, user_id: str) -> None:
        super().__init__("User not found")
        self.user_id = user_id


class UserEmailExistsError(UserServiceError, ConflictError):
    def __init__(self, email: str) -> None:
        super().__init__("User with this email already exists")
        self.email = email


class TutorNotFoundError(UserServiceError, NotFoundError):
    def __init__(self, tutor_id: str) -> None:
        super().__init__("Tutor not found")
        self.tutor_id = tutor_id


class CannotDeleteSelfError(UserServiceError, ConflictError):
    def __init__(self) -> None:
        super().__init__("Cannot delete your own account")


class UserOwnsCoursesError(UserServiceError, ConflictError):
    def __init__(self, course_count: int) -> None:
        super().__init__(
            "Cannot delete a user who still owns courses",
            details={"course_count": course_count},
        )


def _created_courses_column():
    return (
        select(func.count(Course.id))
        .where(Course.creator_id == User.id)
        .correlate(User)
        .scalar_subquery()
        .label("created_courses_count")
    )


def _count_columns() -> list:
    return [
        _created_courses_column(),
        select(func.count(Enrollment.id))
        .where(Enrollment.user_id == User.id)
        .correlate(User)
        .scalar_subquery()
        .label("enrollments_count"),
    ]


class UserService:
    """Admin service for user accounts.

    Attributes:
        db: Database session.
        hasher: Password hasher for created accounts.
        storage: File storage used to remove avatars of deleted users.
    """

    def __init__(self, db: AsyncSession, password_hasher: PasswordHasher, storage: FileStorage) -> None:
        self.db = db
        self.hasher = password_hasher
        self.storage = storage

    async def list_users(
        self,
        page: int = 1,
        limit: int = 10,
        role: str | None = None,
        search: str | None = None,
    ) -> Page[UserListItem]:
        """Users, newest first, optionally filtered by role and search text."""
        page = max(page, 1)
        limit = max(1, min(limit, 100))

        conditions = []
        if role:
            conditions.append(User.role == role)
        if search:
            pattern = f"%{search.strip()}%"
            conditions.append(
                or_(
                    User.email.ilike(pattern),
                    User.first_name.ilike(pattern),
                    User.last_name.ilike(pattern),
                )
            )

        total = await self.db.scalar(select(func.count(User.id)).where(*conditions)) or 0
        result = await self.db.execute(
            select(User, *_count_columns())
            .where(*conditions)
            .order_by(User.created_at.desc())
            .offset((page - 1) * limit)
            .limit(limit)
        )

        items = []
        for user, courses, enrollments in result.all():
            item = UserListItem.model_validate(user)
            item.created_courses_count = courses or 0
            item.enrollments_count = enrollments or 0
            items.append(item)

        return Page(items=items, pagination=Pagination.build(page, limit, total))

    async def get_user(self, user_id: str) -> UserDetail:
        """A user with the courses they created and their enrollments."""
        result = await self.db.execute(
            select(User)
            .options(
                selectinload(User.created_courses),
                selectinload(User.enrollments).selectinload(Enrollment.course),
            )
            .where(User.id == user_id)
        )
        user = result.scalar_one_or_none()
        if user is None:
            raise UserNotFoundError(user_id)

        detail = UserDetail(**UserResponse.model_validate(user).model_dump())
        detail.created_courses = [UserCourseBrief.model_validate(c) for c in user.created_courses]
        detail.enrollments = [
            UserEnrollmentBrief(
                id=e.id,
                course_id=e.course_id,
                course_title=e.course.title,
                status=e.status,
                progress_percentage=e.progress_percentage,
                enrolled_at=e.enrolled_at,
            )
            for e in user.enrollments
        ]
        return detail

    async def create_user(self, request: UserCreateRequest) -> UserResponse:
        """Create an account with any role.

        Raises:
            UserEmailExistsError: If the email is taken.
        """
        email = request.email.lower()
        existing = await self.db.scalar(select(User.id).where(func.lower(User.email) == email))
        if existing is not None:
            raise UserEmailExistsError(email)

        user = User(
            email=email,
            password_hash=await asyncio.to_thread(self.hasher.hash, request.password),
            first_name=request.first_name,
            last_name=request.last_name,
            role=request.role,
            is_verified=request.is_verified,
            is_active=True,
        )
        self.db.add(user)
        await self.db.commit()
        await self.db.refresh(user)

        logger.info("Created user: user=%s, role=%s", user.id, user.role)
        return UserResponse.model_validate(user)

    async def update_user(self, user_id: str, request: UserUpdateRequest) -> UserResponse:
        """Update names, role or flags.

        Deactivating a user also ends their student session.
        """
        user = await self._get_user(user_id)

        updates = request.model_dump(exclude_unset=True)
        for field, value in updates.items():
            setattr(user, field, value)
        if updates.get("is_active") is False:
            user.active_session_token = None

        await self.db.commit()
        await self.db.refresh(user)

        logger.info("Updated user: user=%s, fields=%s", user_id, sorted(updates))
        return UserResponse.model_validate(user)

    async def delete_user(self, user_id: str, actor: User) -> None:
        """Delete an account.

        Raises:
            CannotDeleteSelfError: If the admin targets their own account.
            UserNotFoundError: If the user does not exist.
            UserOwnsCoursesError: If the user created courses.
        """
        if user_id == actor.id:
            raise CannotDeleteSelfError()

        user = await self._get_user(user_id)
        course_count = await self.db.scalar(
            select(func.count(Course.id)).where(Course.creator_id == user_id)
        ) or 0
        if course_count:
            raise UserOwnsCoursesError(course_count)

        avatar = user.avatar
        await self.db.delete(user)
        await self.db.commit()

        if avatar:
            self.storage.delete(avatar)
        logger.info("Deleted user: user=%s, by=%s", user_id, actor.id)

    async def stats_overview(self) -> UserStatsOverview:
        """Platform totals and the most recently registered users."""
        role_rows = await self.db.execute(select(User.role, func.count(User.id)).group_by(User.role))
        by_role = dict(role_rows.all())

        total_courses = await self.db.scalar(select(func.count(Course.id))) or 0
        total_enrollments = await self.db.scalar(select(func.count(Enrollment.id))) or 0

        recent = await self.db.execute(
            select(User).order_by(User.created_at.desc()).limit(RECENT_USERS_LIMIT)
        )

        return UserStatsOverview(
            total_users=sum(by_role.values()),
            total_admins=by_role.get(UserRole.ADMIN, 0),
            total_tutors=by_role.get(UserRole.TUTOR, 0),
            total_students=by_role.get(UserRole.STUDENT, 0),
            total_courses=total_courses,
            total_enrollments=total_enrollments,
            recent_users=[UserResponse.model_validate(u) for u in recent.scalars().all()],
        )

    async def list_tutors(self, active_only: bool = False) -> list[TutorListItem]:
        """Tutor accounts, newest first, with the number of courses each created."""
        conditions = [User.role == UserRole.TUTOR]
        if active_only:
            conditions.append(User.is_active.is_(True))

        result = await self.db.execute(
            select(User, _created_courses_column())
            .where(*conditions)
            .order_by(User.created_at.desc())
        )

        tutors = []
        for user, course_count in result.all():
            item = TutorListItem.model_validate(user)
            item.course_count = course_count or 0
            tutors.append(item)
        return tutors

    async def set_tutor_status(self, tutor_id: str, is_active: bool) -> TutorListItem:
        """Activate or deactivate a tutor account.

        Raises:
            TutorNotFoundError: If no tutor has this id.
        """
        tutor = await self.db.get(User, tutor_id)
        if tutor is None or tutor.role != UserRole.TUTOR:
            raise TutorNotFoundError(tutor_id)

        tutor.is_active = is_active
        await self.db.commit()
        await self.db.refresh(tutor)

        course_count = await self.db.scalar(
            select(func.count(Course.id)).where(Course.creator_id == tutor_id)
        ) or 0
        logger.info("Tutor status changed: tutor=%s, active=%s", tutor_id, is_active)

        item = TutorListItem.model_validate(tutor)
        item.course_count = course_count
        return item

    async def _get_user(self, user_id: str) -> User:
        user = await self.db.get(User, user_id)
        if user is None:
            raise UserNotFoundError(user_id)
        return user
