# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Classroom API endpoints.

Content management (instructor/admin):
- POST / , PUT /{classroom_id}, DELETE /{classroom_id}
- GET/POST /{classroom_id}/students
- DELETE /{classroom_id}/students/{student_id}

Views:
- GET / , GET /published, GET /ongoing, GET /completed, GET /stats
- GET /my-created (instructor/admin)
- GET /my-classrooms, GET /my-enrolled, GET /my-lessons (student)

Student self-service:
- POST /{classroom_id}/enrol
- POST /{classroom_id}/unenrol
"""

import logging

from fastapi import APIRouter, status

from learnhub.api.dependencies import AuthenticatedUser, Classrooms, InstructorOrAdmin, StudentUser
from learnhub.models.classroom import (
    AddStudentRequest,
    ClassroomCreateRequest,
    ClassroomResponse,
    ClassroomStatsResponse,
    ClassroomUpdateRequest,
    EnrollmentResponse,
)
from learnhub.models.common import MessageResponse, UserSummary
from learnhub.models.lesson import LessonResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "",
    response_model=ClassroomResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create classroom",
    description="Create a classroom. `duration` is in weeks. Requires instructor or admin access.",
)
async def create_classroom(
    data: ClassroomCreateRequest,
    current_user: InstructorOrAdmin,
    service: Classrooms,
) -> ClassroomResponse:
    """Create a new classroom.

    Args:
        data: Classroom creation request.
        current_user: Authenticated instructor or admin.
        service: Classroom service.

    Returns:
        Created classroom.
    """
    logger.info("Creating classroom: %s by %s", data.classroom_id, current_user.id)
    return await service.create_classroom(data, current_user)


@router.get("", response_model=list[ClassroomResponse], summary="List classrooms")
async def list_classrooms(current_user: AuthenticatedUser, service: Classrooms) -> list[ClassroomResponse]:
    """List every classroom."""
    return await service.list_classrooms()


@router.get("/published", response_model=list[ClassroomResponse], summary="List published classrooms")
async def list_published_classrooms(
    current_user: AuthenticatedUser,
    service: Classrooms,
) -> list[ClassroomResponse]:
    return await service.list_published()


@router.get(
    "/ongoing",
    response_model=list[ClassroomResponse],
    summary="List ongoing classrooms",
    description="Published classrooms whose window contains the current time.",
)
async def list_ongoing_classrooms(
    current_user: AuthenticatedUser,
    service: Classrooms,
) -> list[ClassroomResponse]:
    return await service.list_ongoing()


@router.get(
    "/completed",
    response_model=list[ClassroomResponse],
    summary="List completed classrooms",
    description="Published classrooms whose window has ended.",
)
async def list_completed_classrooms(
    current_user: AuthenticatedUser,
    service: Classrooms,
) -> list[ClassroomResponse]:
    return await service.list_completed()


@router.get(
    "/stats",
    response_model=ClassroomStatsResponse,
    summary="Classroom statistics",
    description="Average students, linked course credits and duration over all classrooms.",
)
async def classroom_stats(current_user: InstructorOrAdmin, service: Classrooms) -> ClassroomStatsResponse:
    return await service.get_stats()


@router.get(
    "/my-created",
    response_model=list[ClassroomResponse],
    summary="List my classrooms (instructor)",
)
async def list_my_created_classrooms(
    current_user: InstructorOrAdmin,
    service: Classrooms,
) -> list[ClassroomResponse]:
    """List classrooms created by the calling user."""
    return await service.list_created_by(current_user.id)


@router.get(
    "/my-classrooms",
    response_model=list[ClassroomResponse],
    summary="List classrooms of my course (student)",
    description="Published classrooms teaching the calling student's course.",
)
async def list_my_course_classrooms(
    current_user: StudentUser,
    service: Classrooms,
) -> list[ClassroomResponse]:
    return await service.list_for_student_course(current_user)


@router.get(
    "/my-enrolled",
    response_model=list[str],
    summary="List my enrolled classroom ids (student)",
)
async def list_my_enrolled_classrooms(current_user: StudentUser, service: Classrooms) -> list[str]:
    """Ids of the Published classrooms the calling student is on the roster of."""
    return await service.list_enrolled_ids(current_user)


@router.get(
    "/my-lessons",
    response_model=list[LessonResponse],
    summary="List my classroom lessons (student)",
    description="Published lessons of the calling student's classroom.",
)
async def list_my_lessons(current_user: StudentUser, service: Classrooms) -> list[LessonResponse]:
    return await service.list_student_lessons(current_user)


@router.get("/{classroom_id}", response_model=ClassroomResponse, summary="Get classroom")
async def get_classroom(
    classroom_id: str,
    current_user: AuthenticatedUser,
    service: Classrooms,
) -> ClassroomResponse:
    """Get classroom details, including its timeline position."""
    return await service.get_classroom(classroom_id)


@router.put(
    "/{classroom_id}",
    response_model=ClassroomResponse,
    summary="Update classroom",
    description="Partially update a classroom. `students` replaces the roster under the enrollment rules.",
)
async def update_classroom(
    classroom_id: str,
    data: ClassroomUpdateRequest,
    current_user: InstructorOrAdmin,
    service: Classrooms,
) -> ClassroomResponse:
    """Update a classroom.

    Args:
        classroom_id: Classroom reference.
        data: Fields to change.
        current_user: Authenticated instructor or admin.
        service: Classroom service.

    Returns:
        Updated classroom.
    """
    return await service.update_classroom(classroom_id, data, current_user)


@router.delete("/{classroom_id}", response_model=MessageResponse, summary="Delete classroom")
async def delete_classroom(
    classroom_id: str,
    current_user: InstructorOrAdmin,
    service: Classrooms,
) -> MessageResponse:
    """Delete a classroom and release its students."""
    await service.delete_classroom(classroom_id, current_user)
    return MessageResponse(message="Classroom deleted successfully")


@router.post(
    "/{classroom_id}/enrol",
    response_model=EnrollmentResponse,
    summary="Enrol in classroom",
    description="Enrol the calling student. A student holds at most one classroom.",
)
async def enrol_in_classroom(
    classroom_id: str,
    current_user: StudentUser,
    service: Classrooms,
) -> EnrollmentResponse:
    """Enrol the calling student in a classroom.

    Args:
        classroom_id: Classroom reference.
        current_user: Authenticated student.
        service: Classroom service.

    Returns:
        Enrollment result with the new roster size.
    """
    logger.info("Classroom enrolment: student=%s, classroom=%s", current_user.id, classroom_id)
    return await service.enroll(classroom_id, current_user)


@router.post(
    "/{classroom_id}/unenrol",
    response_model=EnrollmentResponse,
    summary="Leave classroom",
)
async def unenrol_from_classroom(
    classroom_id: str,
    current_user: StudentUser,
    service: Classrooms,
) -> EnrollmentResponse:
    """Withdraw the calling student from a classroom."""
    logger.info("Classroom withdrawal: student=%s, classroom=%s", current_user.id, classroom_id)
    return await service.unenroll(classroom_id, current_user)


@router.get(
    "/{classroom_id}/students",
    response_model=list[UserSummary],
    summary="List classroom students",
)
async def list_classroom_students(
    classroom_id: str,
    current_user: InstructorOrAdmin,
    service: Classrooms,
) -> list[UserSummary]:
    return await service.list_students(classroom_id)


@router.post(
    "/{classroom_id}/students",
    response_model=EnrollmentResponse,
    summary="Add student to classroom",
    description="Place a student in the classroom. Only its owner or an admin may do this.",
)
async def add_classroom_student(
    classroom_id: str,
    data: AddStudentRequest,
    current_user: InstructorOrAdmin,
    service: Classrooms,
) -> EnrollmentResponse:
    """Add a student to a classroom.

    Args:
        classroom_id: Classroom reference.
        data: Student to add.
        current_user: Authenticated instructor or admin.
        service: Classroom service.

    Returns:
        Enrollment result with the new roster size.
    """
    return await service.add_student(classroom_id, data.student, current_user)


@router.delete(
    "/{classroom_id}/students/{student_id}",
    response_model=EnrollmentResponse,
    summary="Remove student from classroom",
)
async def remove_classroom_student(
    classroom_id: str,
    student_id: str,
    current_user: InstructorOrAdmin,
    service: Classrooms,
) -> EnrollmentResponse:
    """Remove a student from a classroom, cleaning up both sides."""
    return await service.remove_student(classroom_id, student_id, current_user)
