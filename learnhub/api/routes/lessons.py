# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Lesson API endpoints.

- POST / - Create lesson (instructor/admin)
- GET / - List lessons
- GET /status/{status} - List lessons with a status
- GET /classroom/{classroom_id} - Lessons attached to a classroom
- GET /{lesson_id} - Get lesson
- PUT /{lesson_id} - Update lesson (creator/admin)
- DELETE /{lesson_id} - Delete lesson (creator/admin)
"""

import logging

from fastapi import APIRouter, status

from learnhub.api.dependencies import AuthenticatedUser, InstructorOrAdmin, Lessons
from learnhub.models.common import MessageResponse
from learnhub.models.lesson import LessonCreateRequest, LessonResponse, LessonUpdateRequest

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "",
    response_model=LessonResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create lesson",
    description="Create a new lesson. Requires instructor or admin access.",
)
async def create_lesson(
    data: LessonCreateRequest,
    current_user: InstructorOrAdmin,
    service: Lessons,
) -> LessonResponse:
    """Create a new lesson.

    Args:
        data: Lesson creation request.
        current_user: Authenticated instructor or admin.
        service: Lesson service.

    Returns:
        Created lesson.
    """
    logger.info("Creating lesson: %s by %s", data.lesson_id, current_user.id)
    return await service.create_lesson(data, current_user)


@router.get(
    "",
    response_model=list[LessonResponse],
    summary="List lessons",
)
async def list_lessons(
    current_user: AuthenticatedUser,
    service: Lessons,
) -> list[LessonResponse]:
    """List every lesson."""
    return await service.list_lessons()


@router.get(
    "/status/{lesson_status}",
    response_model=list[LessonResponse],
    summary="List lessons by status",
    description="Status is matched case-insensitively (draft, published, archived).",
)
async def list_lessons_by_status(
    lesson_status: str,
    current_user: AuthenticatedUser,
    service: Lessons,
) -> list[LessonResponse]:
    """List lessons with a given status."""
    return await service.list_by_status(lesson_status)


@router.get(
    "/classroom/{classroom_id}",
    response_model=list[LessonResponse],
    summary="List classroom lessons",
)
async def list_classroom_lessons(
    classroom_id: str,
    current_user: AuthenticatedUser,
    service: Lessons,
) -> list[LessonResponse]:
    """List the lessons attached to a classroom."""
    return await service.list_classroom_lessons(classroom_id)


@router.get(
    "/{lesson_id}",
    response_model=LessonResponse,
    summary="Get lesson",
)
async def get_lesson(
    lesson_id: str,
    current_user: AuthenticatedUser,
    service: Lessons,
) -> LessonResponse:
    """Get lesson details."""
    return await service.get_lesson(lesson_id)


@router.put(
    "/{lesson_id}",
    response_model=LessonResponse,
    summary="Update lesson",
    description="Partially update a lesson. Only its creator or an admin may do this.",
)
async def update_lesson(
    lesson_id: str,
    data: LessonUpdateRequest,
    current_user: InstructorOrAdmin,
    service: Lessons,
) -> LessonResponse:
    """Update a lesson.

    Args:
        lesson_id: Lesson reference.
        data: Fields to change.
        current_user: Authenticated instructor or admin.
        service: Lesson service.

    Returns:
        Updated lesson.
    """
    return await service.update_lesson(lesson_id, data, current_user)


@router.delete(
    "/{lesson_id}",
    response_model=MessageResponse,
    summary="Delete lesson",
    description="Delete a lesson and detach it from courses, classrooms and prerequisite lists.",
)
async def delete_lesson(
    lesson_id: str,
    current_user: InstructorOrAdmin,
    service: Lessons,
) -> MessageResponse:
    """Delete a lesson."""
    await service.delete_lesson(lesson_id, current_user)
    return MessageResponse(message="Lesson deleted successfully")
