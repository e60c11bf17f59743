# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""FastAPI dependency injection definitions.

This module provides dependency functions for FastAPI endpoints.
Dependencies are used to:
- Get database sessions
- Get authenticated users and enforce roles
- Get service instances

Example:
    @router.post("/{classroom_id}/enrol")
    async def enrol(
        classroom_id: str,
        db: DB,
        current_user: StudentUser,
    ):
        ...
"""

import logging
from typing import Annotated, AsyncGenerator

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from learnhub.api.middleware.auth import get_current_user
from learnhub.core.config import get_settings
from learnhub.domains.auth.identity import CurrentUser
from learnhub.domains.auth.jwt import JWTManager
from learnhub.domains.auth.password import PasswordHasher
from learnhub.domains.auth.service import AuthService
from learnhub.domains.classroom.service import ClassroomService
from learnhub.domains.course.service import CourseService
from learnhub.domains.directory.service import DirectoryService
from learnhub.domains.grading.service import GradingService
from learnhub.domains.lesson.service import LessonService
from learnhub.infrastructure.database.connection import (
    close_database,
    create_schema,
    get_session,
    init_database,
)
from learnhub.infrastructure.database.models import ROLE_ADMIN, ROLE_INSTRUCTOR, ROLE_STUDENT

logger = logging.getLogger(__name__)


async def init_db() -> None:
    """Initialize the connection pool and create missing tables."""
    settings = get_settings()
    await init_database(settings)
    await create_schema()


async def close_db() -> None:
    """Close the connection pool."""
    await close_database()


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Get a database session for the request.

    Yields:
        AsyncSession, committed on success and rolled back on error.
    """
    async with get_session() as session:
        yield session


# =========================================================================
# Auth Dependencies
# =========================================================================


def require_auth(request: Request) -> CurrentUser:
    """Require authenticated user.

    Args:
        request: HTTP request.

    Returns:
        CurrentUser.

    Raises:
        HTTPException: If not authenticated.
    """
    user = get_current_user(request)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


class RequireRole:
    """Dependency for requiring specific roles.

    Example:
        @router.delete("/{student_id}")
        async def delete_student(
            user: CurrentUser = Depends(RequireRole("Admin")),
        ):
            ...
    """

    def __init__(self, *roles: str) -> None:
        """Initialize role requirement.

        Args:
            roles: Accepted roles (any of these).
        """
        self.roles = roles

    def __call__(self, request: Request) -> CurrentUser:
        """Check roles and return user.

        Raises:
            HTTPException: If not authenticated or missing required roles.
        """
        user = require_auth(request)

        if not user.has_role(*self.roles):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Requires role: {' or '.join(self.roles)}",
            )

        return user


require_admin = RequireRole(ROLE_ADMIN)
require_instructor = RequireRole(ROLE_INSTRUCTOR)
require_instructor_or_admin = RequireRole(ROLE_INSTRUCTOR, ROLE_ADMIN)
require_student = RequireRole(ROLE_STUDENT)


# =========================================================================
# Service Dependencies
# =========================================================================


def get_jwt_manager() -> JWTManager:
    """Get JWT manager instance."""
    settings = get_settings()
    return JWTManager(settings.jwt)


def get_password_hasher() -> PasswordHasher:
    """Get password hasher instance."""
    settings = get_settings()
    return PasswordHasher(rounds=settings.auth.bcrypt_rounds)


async def get_auth_service(
    db: AsyncSession = Depends(get_db),
    jwt_manager: JWTManager = Depends(get_jwt_manager),
    password_hasher: PasswordHasher = Depends(get_password_hasher),
) -> AuthService:
    """Get AuthService instance."""
    settings = get_settings()
    return AuthService(
        db,
        jwt_manager,
        password_hasher,
        inactive_after_days=settings.auth.inactive_after_days,
    )


async def get_lesson_service(db: AsyncSession = Depends(get_db)) -> LessonService:
    """Get LessonService instance."""
    return LessonService(db)


async def get_course_service(db: AsyncSession = Depends(get_db)) -> CourseService:
    """Get CourseService instance."""
    return CourseService(db)


async def get_classroom_service(db: AsyncSession = Depends(get_db)) -> ClassroomService:
    """Get ClassroomService instance."""
    return ClassroomService(db)


async def get_grading_service(db: AsyncSession = Depends(get_db)) -> GradingService:
    """Get GradingService instance configured with the pass mark."""
    settings = get_settings()
    return GradingService(db, pass_mark=settings.grading.pass_mark)


async def get_directory_service(db: AsyncSession = Depends(get_db)) -> DirectoryService:
    """Get DirectoryService instance."""
    settings = get_settings()
    return DirectoryService(db, inactive_after_days=settings.auth.inactive_after_days)


# Type aliases for cleaner endpoint signatures
DB = Annotated[AsyncSession, Depends(get_db)]
AuthenticatedUser = Annotated[CurrentUser, Depends(require_auth)]
AdminUser = Annotated[CurrentUser, Depends(require_admin)]
InstructorUser = Annotated[CurrentUser, Depends(require_instructor)]
InstructorOrAdmin = Annotated[CurrentUser, Depends(require_instructor_or_admin)]
StudentUser = Annotated[CurrentUser, Depends(require_student)]

Auth = Annotated[AuthService, Depends(get_auth_service)]
Lessons = Annotated[LessonService, Depends(get_lesson_service)]
Courses = Annotated[CourseService, Depends(get_course_service)]
Classrooms = Annotated[ClassroomService, Depends(get_classroom_service)]
Grading = Annotated[GradingService, Depends(get_grading_service)]
Directory = Annotated[DirectoryService, Depends(get_directory_service)]
