# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Instructor directory endpoints.

- GET / - List instructors (admin)
- GET /me - Profile of the calling instructor
- GET /{instructor_id}/lessons|courses|classrooms - Content owned by an instructor
- DELETE /{instructor_id} - Delete an instructor, archiving their lessons (admin)
"""

import logging

from fastapi import APIRouter

from learnhub.api.dependencies import (
    AdminUser,
    Auth,
    Classrooms,
    Courses,
    Directory,
    InstructorOrAdmin,
    InstructorUser,
    Lessons,
)
from learnhub.models.auth import UserResponse
from learnhub.models.classroom import ClassroomResponse
from learnhub.models.common import MessageResponse
from learnhub.models.course import CourseResponse
from learnhub.models.directory import InstructorEntry
from learnhub.models.lesson import LessonResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=list[InstructorEntry], summary="List instructors")
async def list_instructors(current_user: AdminUser, directory: Directory) -> list[InstructorEntry]:
    """Every instructor with the number of lessons they authored."""
    return await directory.list_instructors()


@router.get("/me", response_model=UserResponse, summary="Get my instructor profile")
async def get_my_profile(current_user: InstructorUser, auth_service: Auth) -> UserResponse:
    return await auth_service.get_profile(current_user.id)


@router.get("/{instructor_id}/lessons", response_model=list[LessonResponse], summary="List instructor lessons")
async def list_instructor_lessons(
    instructor_id: str,
    current_user: InstructorOrAdmin,
    service: Lessons,
) -> list[LessonResponse]:
    return await service.list_instructor_lessons(instructor_id)


@router.get("/{instructor_id}/courses", response_model=list[CourseResponse], summary="List instructor courses")
async def list_instructor_courses(
    instructor_id: str,
    current_user: InstructorOrAdmin,
    service: Courses,
) -> list[CourseResponse]:
    return await service.list_instructor_courses(instructor_id)


@router.get(
    "/{instructor_id}/classrooms",
    response_model=list[ClassroomResponse],
    summary="List instructor classrooms",
)
async def list_instructor_classrooms(
    instructor_id: str,
    current_user: InstructorOrAdmin,
    service: Classrooms,
) -> list[ClassroomResponse]:
    return await service.list_created_by(instructor_id)


@router.delete(
    "/{instructor_id}",
    response_model=MessageResponse,
    summary="Delete instructor",
    description="Delete an instructor and archive every lesson they created. Requires admin access.",
)
async def delete_instructor(
    instructor_id: str,
    current_user: AdminUser,
    directory: Directory,
) -> MessageResponse:
    """Delete an instructor.

    Args:
        instructor_id: Instructor reference.
        current_user: Authenticated admin.
        directory: Directory service.

    Returns:
        Confirmation message with the number of archived lessons.
    """
    logger.info("Deleting instructor: %s by %s", instructor_id, current_user.id)
    archived = await directory.delete_instructor(instructor_id)
    return MessageResponse(message=f"Instructor deleted successfully, {archived} lesson(s) archived")
