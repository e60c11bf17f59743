# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Grade and progress API endpoints.

Grading (classroom owner or admin):
- POST / - Record or overwrite one grade
- POST /bulk - Grade many students on one lesson
- PUT /{grade_id}, DELETE /{grade_id}

Reads:
- GET /progress/{student_id} - Course completion of a student
- GET /classroom/{classroom_id} - Grades given in a classroom
- GET /{classroom_id}/grades - Classroom gradebook
- GET /lesson/{lesson_id}, GET /student/{student_id}
- GET /course/{course_id}/stats
- GET /{grade_id}
"""

import logging

from fastapi import APIRouter, status

from learnhub.api.dependencies import AuthenticatedUser, Grading, InstructorOrAdmin
from learnhub.core.errors import ForbiddenError
from learnhub.domains.auth.identity import CurrentUser
from learnhub.models.common import MessageResponse
from learnhub.models.grade import (
    BulkGradeRequest,
    BulkGradeResponse,
    CourseGradeStats,
    GradebookResponse,
    GradeCreateRequest,
    GradeDetail,
    GradeResponse,
    GradeUpdateRequest,
    ProgressResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def _check_student_access(current_user: CurrentUser, student_id: str) -> None:
    """Students may only read their own grades."""
    if current_user.is_student and current_user.id != student_id:
        raise ForbiddenError("You can only view your own grades")


@router.post(
    "",
    response_model=GradeResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Record grade",
    description="""
    Record the grade of a student for a lesson in a classroom.

    Grading the same (student, lesson, classroom) again overwrites the
    previous grade. `passed` is derived from the score; any value sent
    by the client is ignored.
    """,
)
async def record_grade(
    data: GradeCreateRequest,
    current_user: InstructorOrAdmin,
    service: Grading,
) -> GradeResponse:
    """Record a grade.

    Args:
        data: Grade data.
        current_user: Authenticated instructor or admin.
        service: Grading service.

    Returns:
        The stored grade.
    """
    logger.info(
        "Grading: student=%s, lesson=%s, classroom=%s by %s",
        data.student,
        data.lesson,
        data.classroom,
        current_user.id,
    )
    return await service.record_grade(current_user, data)


@router.post(
    "/bulk",
    response_model=BulkGradeResponse,
    summary="Record grades in bulk",
    description="Grade many students on one lesson. Each row succeeds or fails independently.",
)
async def bulk_record_grades(
    data: BulkGradeRequest,
    current_user: InstructorOrAdmin,
    service: Grading,
) -> BulkGradeResponse:
    """Record a batch of grades.

    Args:
        data: Classroom, lesson and per-student rows.
        current_user: Authenticated instructor or admin.
        service: Grading service.

    Returns:
        Per-row results and summary counts.
    """
    return await service.bulk_record_grades(current_user, data)


@router.get(
    "/progress/{student_id}",
    response_model=ProgressResponse,
    summary="Student progress",
    description="Completion of the student's current course. Students may only read their own.",
)
async def get_progress(
    student_id: str,
    current_user: AuthenticatedUser,
    service: Grading,
) -> ProgressResponse:
    """Compute a student's progress.

    Args:
        student_id: Student reference.
        current_user: The student themself, an instructor or an admin.
        service: Grading service.

    Returns:
        Per-lesson progress and the completion percentage.
    """
    _check_student_access(current_user, student_id)
    return await service.compute_progress(student_id)


@router.get(
    "/classroom/{classroom_id}",
    response_model=list[GradeDetail],
    summary="List classroom grades",
)
async def list_classroom_grades(
    classroom_id: str,
    current_user: InstructorOrAdmin,
    service: Grading,
) -> list[GradeDetail]:
    return await service.list_classroom_grades(classroom_id)


@router.get(
    "/lesson/{lesson_id}",
    response_model=list[GradeDetail],
    summary="List lesson grades",
)
async def list_lesson_grades(
    lesson_id: str,
    current_user: InstructorOrAdmin,
    service: Grading,
) -> list[GradeDetail]:
    return await service.list_lesson_grades(lesson_id)


@router.get(
    "/student/{student_id}",
    response_model=list[GradeDetail],
    summary="List student grades",
)
async def list_student_grades(
    student_id: str,
    current_user: AuthenticatedUser,
    service: Grading,
) -> list[GradeDetail]:
    """List every grade of a student across classrooms."""
    _check_student_access(current_user, student_id)
    return await service.list_student_grades(student_id)


@router.get(
    "/course/{course_id}/stats",
    response_model=CourseGradeStats,
    summary="Course grade statistics",
)
async def course_grade_stats(
    course_id: str,
    current_user: InstructorOrAdmin,
    service: Grading,
) -> CourseGradeStats:
    """Per-lesson averages and pass rates of a course."""
    return await service.course_stats(course_id)


@router.get(
    "/{classroom_id}/grades",
    response_model=GradebookResponse,
    summary="Classroom gradebook",
    description="Roster x lessons matrix of a classroom; ungraded cells are null.",
)
async def classroom_gradebook(
    classroom_id: str,
    current_user: InstructorOrAdmin,
    service: Grading,
) -> GradebookResponse:
    return await service.classroom_gradebook(classroom_id)


@router.get("/{grade_id}", response_model=GradeResponse, summary="Get grade")
async def get_grade(
    grade_id: str,
    current_user: AuthenticatedUser,
    service: Grading,
) -> GradeResponse:
    """Get grade details."""
    grade = await service.get_grade(grade_id)
    _check_student_access(current_user, grade.student)
    return grade


@router.put("/{grade_id}", response_model=GradeResponse, summary="Update grade")
async def update_grade(
    grade_id: str,
    data: GradeUpdateRequest,
    current_user: InstructorOrAdmin,
    service: Grading,
) -> GradeResponse:
    """Change the score and/or feedback of a grade."""
    return await service.update_grade(current_user, grade_id, data)


@router.delete("/{grade_id}", response_model=MessageResponse, summary="Delete grade")
async def delete_grade(
    grade_id: str,
    current_user: InstructorOrAdmin,
    service: Grading,
) -> MessageResponse:
    await service.delete_grade(current_user, grade_id)
    return MessageResponse(message="Grade deleted successfully")
