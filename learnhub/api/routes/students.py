# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Student directory endpoints.

- GET / - List students (instructor/admin)
- GET /me - Profile of the calling student
- DELETE /{student_id} - Delete a student (admin)
"""

import logging

from fastapi import APIRouter

from learnhub.api.dependencies import AdminUser, Auth, Directory, InstructorOrAdmin, StudentUser
from learnhub.models.auth import UserResponse
from learnhub.models.common import MessageResponse
from learnhub.models.directory import StudentEntry

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get(
    "",
    response_model=list[StudentEntry],
    summary="List students",
    description="Every student with their course and activity status.",
)
async def list_students(current_user: InstructorOrAdmin, directory: Directory) -> list[StudentEntry]:
    return await directory.list_students()


@router.get("/me", response_model=UserResponse, summary="Get my student profile")
async def get_my_profile(current_user: StudentUser, auth_service: Auth) -> UserResponse:
    """Profile of the calling student, including course and classroom."""
    return await auth_service.get_profile(current_user.id)


@router.delete(
    "/{student_id}",
    response_model=MessageResponse,
    summary="Delete student",
    description="Delete a student, removing them from every roster. Requires admin access.",
)
async def delete_student(
    student_id: str,
    current_user: AdminUser,
    directory: Directory,
) -> MessageResponse:
    """Delete a student.

    Args:
        student_id: Student reference.
        current_user: Authenticated admin.
        directory: Directory service.

    Returns:
        Confirmation message.
    """
    logger.info("Deleting student: %s by %s", student_id, current_user.id)
    await directory.delete_student(student_id)
    return MessageResponse(message="Student deleted successfully")
