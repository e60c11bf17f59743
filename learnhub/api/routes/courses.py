# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Course API endpoints.

Content management (instructor/admin):
- POST / - Create course
- PUT /{course_id} - Update course, its lesson list and roster
- DELETE /{course_id} - Delete course

Reads:
- GET / , GET /published, GET /{course_id}
- GET /{course_id}/lessons, GET /{course_id}/published-lessons
- GET /{course_id}/students, GET /{course_id}/students/unassigned

Student self-service:
- POST /{course_id}/enrol
- POST /{course_id}/unenrol
"""

import logging

from fastapi import APIRouter, status

from learnhub.api.dependencies import AuthenticatedUser, Courses, InstructorOrAdmin, StudentUser
from learnhub.models.classroom import EnrollmentResponse
from learnhub.models.common import MessageResponse
from learnhub.models.course import (
    CourseCreateRequest,
    CourseResponse,
    CourseStudent,
    CourseUpdateRequest,
)
from learnhub.models.lesson import LessonResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "",
    response_model=CourseResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create course",
    description="Create a course and link the listed lessons to it. Requires instructor or admin access.",
)
async def create_course(
    data: CourseCreateRequest,
    current_user: InstructorOrAdmin,
    service: Courses,
) -> CourseResponse:
    """Create a new course.

    Args:
        data: Course creation request.
        current_user: Authenticated instructor or admin.
        service: Course service.

    Returns:
        Created course with its lessons and total credit.
    """
    logger.info("Creating course: %s by %s", data.course_id, current_user.id)
    return await service.create_course(data, current_user)


@router.get("", response_model=list[CourseResponse], summary="List courses")
async def list_courses(current_user: AuthenticatedUser, service: Courses) -> list[CourseResponse]:
    """List every course."""
    return await service.list_courses()


@router.get(
    "/published",
    response_model=list[CourseResponse],
    summary="List published courses",
    description="Published courses, newest first.",
)
async def list_published_courses(current_user: AuthenticatedUser, service: Courses) -> list[CourseResponse]:
    return await service.list_published()


@router.get("/{course_id}", response_model=CourseResponse, summary="Get course")
async def get_course(course_id: str, current_user: AuthenticatedUser, service: Courses) -> CourseResponse:
    """Get course details."""
    return await service.get_course(course_id)


@router.get("/{course_id}/lessons", response_model=list[LessonResponse], summary="List course lessons")
async def list_course_lessons(
    course_id: str,
    current_user: AuthenticatedUser,
    service: Courses,
) -> list[LessonResponse]:
    """List every lesson of a course."""
    return await service.get_lessons(course_id)


@router.get(
    "/{course_id}/published-lessons",
    response_model=list[LessonResponse],
    summary="List published course lessons",
)
async def list_published_course_lessons(
    course_id: str,
    current_user: AuthenticatedUser,
    service: Courses,
) -> list[LessonResponse]:
    """List the Published lessons of a course."""
    return await service.get_lessons(course_id, published_only=True)


@router.get("/{course_id}/students", response_model=list[CourseStudent], summary="List course students")
async def list_course_students(
    course_id: str,
    current_user: InstructorOrAdmin,
    service: Courses,
) -> list[CourseStudent]:
    """List the roster of a course."""
    return await service.get_students(course_id)


@router.get(
    "/{course_id}/students/unassigned",
    response_model=list[CourseStudent],
    summary="List students without a classroom",
    description="Students enrolled in the course who are not yet placed in a classroom.",
)
async def list_unassigned_students(
    course_id: str,
    current_user: InstructorOrAdmin,
    service: Courses,
) -> list[CourseStudent]:
    return await service.get_unassigned_students(course_id)


@router.put(
    "/{course_id}",
    response_model=CourseResponse,
    summary="Update course",
    description="""
    Partially update a course. Only its owner or an admin may do this.

    - `lessons` replaces the lesson list; lessons taken from another course
      are unlinked there.
    - `students` replaces the roster under the enrollment rules.
    """,
)
async def update_course(
    course_id: str,
    data: CourseUpdateRequest,
    current_user: InstructorOrAdmin,
    service: Courses,
) -> CourseResponse:
    """Update a course.

    Args:
        course_id: Course reference.
        data: Fields to change.
        current_user: Authenticated instructor or admin.
        service: Course service.

    Returns:
        Updated course.
    """
    return await service.update_course(course_id, data, current_user)


@router.delete("/{course_id}", response_model=MessageResponse, summary="Delete course")
async def delete_course(
    course_id: str,
    current_user: InstructorOrAdmin,
    service: Courses,
) -> MessageResponse:
    """Delete a course, releasing its students and lessons."""
    await service.delete_course(course_id, current_user)
    return MessageResponse(message="Course deleted successfully")


@router.post(
    "/{course_id}/enrol",
    response_model=EnrollmentResponse,
    summary="Enrol in course",
    description="Enrol the calling student. A student holds at most one course.",
)
async def enrol_in_course(
    course_id: str,
    current_user: StudentUser,
    service: Courses,
) -> EnrollmentResponse:
    """Enrol the calling student in a course.

    Args:
        course_id: Course reference.
        current_user: Authenticated student.
        service: Course service.

    Returns:
        Enrollment result.
    """
    logger.info("Course enrolment: student=%s, course=%s", current_user.id, course_id)
    return await service.enroll(course_id, current_user)


@router.post(
    "/{course_id}/unenrol",
    response_model=EnrollmentResponse,
    summary="Leave course",
    description="Withdraw the calling student from the course and every classroom teaching it.",
)
async def unenrol_from_course(
    course_id: str,
    current_user: StudentUser,
    service: Courses,
) -> EnrollmentResponse:
    logger.info("Course withdrawal: student=%s, course=%s", current_user.id, course_id)
    return await service.unenroll(course_id, current_user)
