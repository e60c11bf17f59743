# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Directory service for student and instructor accounts.

This module provides the DirectoryService that handles:
- Student and instructor listings with derived activity status
- Account deletion with enrollment and content cascades

Example:
    >>> directory = DirectoryService(db_session, inactive_after_days=30)
    >>> students = await directory.list_students()
"""

import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from learnhub.core.errors import NotFoundError
from learnhub.domains.auth.service import derive_user_status
from learnhub.domains.course.service import to_course_summary
from learnhub.domains.enrollment.coordinator import EnrollmentCoordinator
from learnhub.infrastructure.database.models import (
    USER_STATUS_ACTIVE,
    Course,
    Instructor,
    Lesson,
    Student,
)
from learnhub.models.directory import InstructorEntry, StudentEntry

logger = logging.getLogger(__name__)


class UserNotFoundError(NotFoundError):
    """Raised when a student or instructor is not found."""

    pass


class DirectoryService:
    """Service for listing and removing accounts.

    Attributes:
        _db: Async database session.
        _inactive_after_days: Login recency window for the Active status.
    """

    def __init__(self, db: AsyncSession, inactive_after_days: int = 30) -> None:
        self._db = db
        self._inactive_after_days = inactive_after_days

    async def list_students(self) -> list[StudentEntry]:
        """List every student with their course and activity status."""
        result = await self._db.execute(select(Student).order_by(Student.username))
        students = result.scalars().all()

        course_ids = {s.course_id for s in students if s.course_id}
        courses: dict[str, Course] = {}
        if course_ids:
            found = await self._db.execute(select(Course).where(Course.id.in_(course_ids)))
            courses = {course.id: course for course in found.scalars().all()}

        entries = []
        for student in students:
            status = derive_user_status(student, self._inactive_after_days)
            course = courses.get(student.course_id) if student.course_id else None
            entries.append(
                StudentEntry(
                    id=student.id,
                    email=student.username,
                    title=student.title,
                    first_name=student.first_name,
                    last_name=student.last_name,
                    status=status,
                    is_active=status == USER_STATUS_ACTIVE,
                    last_activity=student.last_login,
                    course=to_course_summary(course) if course else None,
                    classroom=student.classroom_id,
                    created_at=student.created_at,
                )
            )
        return entries

    async def list_instructors(self) -> list[InstructorEntry]:
        """List every instructor with the number of lessons they authored."""
        result = await self._db.execute(select(Instructor).order_by(Instructor.username))
        instructors = result.scalars().all()

        counts_result = await self._db.execute(
            select(Lesson.created_by, func.count(Lesson.id)).group_by(Lesson.created_by)
        )
        counts = dict(counts_result.all())

        entries = []
        for instructor in instructors:
            status = derive_user_status(instructor, self._inactive_after_days)
            entries.append(
                InstructorEntry(
                    id=instructor.id,
                    email=instructor.username,
                    title=instructor.title,
                    first_name=instructor.first_name,
                    last_name=instructor.last_name,
                    status=status,
                    is_active=status == USER_STATUS_ACTIVE,
                    last_activity=instructor.last_login,
                    lessons_created=counts.get(instructor.id, 0),
                    created_at=instructor.created_at,
                )
            )
        return entries

    async def delete_student(self, student_id: str) -> None:
        """Delete a student, removing them from every roster.

        Raises:
            UserNotFoundError: If the student does not exist.
        """
        student = await self._db.get(Student, student_id)
        if student is None:
            raise UserNotFoundError(f"Student {student_id} not found")

        await EnrollmentCoordinator(self._db).on_student_deleted(student)
        await self._db.delete(student)
        await self._db.commit()

        logger.info("Deleted student: %s", student_id)

    async def delete_instructor(self, instructor_id: str) -> int:
        """Delete an instructor and archive the lessons they created.

        Returns:
            Number of lessons archived.

        Raises:
            UserNotFoundError: If the instructor does not exist.
        """
        instructor = await self._db.get(Instructor, instructor_id)
        if instructor is None:
            raise UserNotFoundError(f"Instructor {instructor_id} not found")

        archived = await EnrollmentCoordinator(self._db).on_instructor_deleted(instructor)
        await self._db.delete(instructor)
        await self._db.commit()

        logger.info("Deleted instructor: %s (archived %d lessons)", instructor_id, archived)
        return archived
