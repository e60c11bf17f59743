# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Course service for managing courses.

This module provides the CourseService class for:
- Course CRUD operations
- Lesson list and roster maintenance through the enrollment coordinator
- Student self-enrollment
- Course lesson and roster lookups
"""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from learnhub.core.errors import ConflictError, ForbiddenError, NotFoundError
from learnhub.domains.auth.identity import CurrentUser
from learnhub.domains.common.status import Status, normalize_status
from learnhub.domains.enrollment.coordinator import EnrollmentCoordinator
from learnhub.domains.lesson.service import to_lesson_response, to_lesson_summary
from learnhub.infrastructure.database.models import Course, Student, User
from learnhub.models.classroom import EnrollmentResponse
from learnhub.models.common import UserSummary
from learnhub.models.course import (
    CourseCreateRequest,
    CourseResponse,
    CourseStudent,
    CourseSummary,
    CourseUpdateRequest,
)
from learnhub.models.lesson import LessonResponse

logger = logging.getLogger(__name__)


class CourseNotFoundError(NotFoundError):
    """Raised when course is not found."""

    pass


class CourseIdExistsError(ConflictError):
    """Raised when the human-readable course id is already taken."""

    pass


def to_user_summary(user: User) -> UserSummary:
    """Build the compact user representation."""
    return UserSummary(
        id=user.id,
        email=user.username,
        role=user.role,
        title=user.title,
        first_name=user.first_name,
        last_name=user.last_name,
    )


def to_course_summary(course: Course) -> CourseSummary:
    """Build the compact course representation."""
    return CourseSummary(
        id=course.id,
        course_id=course.course_id,
        title=course.title,
        status=normalize_status(course.status),
        total_credit=course.total_credit or 0,
    )


def to_course_response(course: Course) -> CourseResponse:
    """Build the full course response."""
    return CourseResponse(
        id=course.id,
        course_id=course.course_id,
        title=course.title,
        description=course.description,
        status=normalize_status(course.status),
        total_credit=course.total_credit or 0,
        owner=course.owner_id,
        lessons=[to_lesson_summary(lesson) for lesson in course.lessons],
        students=[_to_course_student(student) for student in course.students],
        num_students=len(course.students),
        created_at=course.created_at,
        updated_at=course.updated_at,
    )


def _to_course_student(student: Student) -> CourseStudent:
    return CourseStudent(
        **to_user_summary(student).model_dump(),
        classroom=student.classroom_id,
    )


class CourseService:
    """Service for managing courses.

    Attributes:
        db: Async database session.
    """

    def __init__(self, db: AsyncSession) -> None:
        """Initialize course service.

        Args:
            db: Async database session.
        """
        self.db = db
        self._coordinator = EnrollmentCoordinator(db)

    async def create_course(self, request: CourseCreateRequest, actor: CurrentUser) -> CourseResponse:
        """Create a new course and link its lessons.

        Args:
            request: Course creation data.
            actor: Instructor or admin creating the course.

        Returns:
            Created course response.

        Raises:
            CourseIdExistsError: If the course id is already taken.
            LessonNotFoundError: If a listed lesson does not exist.
        """
        if await self._get_by_label(request.course_id):
            raise CourseIdExistsError("Course ID already exists")

        course = Course(
            course_id=request.course_id,
            title=request.title,
            description=request.description,
            status=request.status.value,
            total_credit=0,
            owner_id=actor.id,
            lessons=[],
            students=[],
        )
        self.db.add(course)
        await self.db.flush()

        await self._coordinator.on_course_lessons_saved(course, request.lessons)

        await self.db.commit()

        logger.info("Created course: %s (%s) by %s", course.course_id, course.id, actor.id)

        return to_course_response(course)

    async def list_courses(self) -> list[CourseResponse]:
        """List all courses."""
        result = await self.db.execute(select(Course).order_by(Course.course_id))
        return [to_course_response(course) for course in result.scalars().all()]

    async def list_published(self) -> list[CourseResponse]:
        """List Published courses, newest first."""
        result = await self.db.execute(select(Course).order_by(Course.created_at.desc()))
        return [
            to_course_response(course)
            for course in result.scalars().all()
            if normalize_status(course.status) is Status.PUBLISHED
        ]

    async def list_instructor_courses(self, instructor_id: str) -> list[CourseResponse]:
        """List courses owned by an instructor."""
        result = await self.db.execute(
            select(Course).where(Course.owner_id == instructor_id).order_by(Course.course_id)
        )
        return [to_course_response(course) for course in result.scalars().all()]

    async def get_course(self, course_id: str) -> CourseResponse:
        """Get course by ID.

        Raises:
            CourseNotFoundError: If course not found.
        """
        return to_course_response(await self._get_by_id(course_id))

    async def get_lessons(self, course_id: str, published_only: bool = False) -> list[LessonResponse]:
        """List the lessons of a course.

        Args:
            course_id: Course reference.
            published_only: Only return Published lessons.

        Raises:
            CourseNotFoundError: If course not found.
        """
        course = await self._get_by_id(course_id)
        lessons = course.lessons
        if published_only:
            lessons = [lesson for lesson in lessons if normalize_status(lesson.status) is Status.PUBLISHED]
        return [to_lesson_response(lesson) for lesson in lessons]

    async def get_students(self, course_id: str) -> list[CourseStudent]:
        """List the roster of a course.

        Raises:
            CourseNotFoundError: If course not found.
        """
        course = await self._get_by_id(course_id)
        return [_to_course_student(student) for student in course.students]

    async def get_unassigned_students(self, course_id: str) -> list[CourseStudent]:
        """List enrolled students not yet placed in a classroom.

        Raises:
            CourseNotFoundError: If course not found.
        """
        course = await self._get_by_id(course_id)
        return [_to_course_student(student) for student in course.students if student.classroom_id is None]

    async def update_course(
        self,
        course_id: str,
        request: CourseUpdateRequest,
        actor: CurrentUser,
    ) -> CourseResponse:
        """Partially update a course.

        A new ``lessons`` list relinks the lessons; a new ``students`` list
        replaces the roster under the enrollment rules.

        Raises:
            CourseNotFoundError: If course not found.
            ForbiddenError: If the actor neither owns the course nor is an admin.
            CourseIdExistsError: If the new course id is already taken.
        """
        course = await self._get_by_id(course_id, for_update=True)
        if not actor.owns(course.owner_id):
            raise ForbiddenError("You can only edit courses you created")

        if request.course_id is not None and request.course_id != course.course_id:
            if await self._get_by_label(request.course_id):
                raise CourseIdExistsError("Course ID already exists")
            course.course_id = request.course_id

        if request.title is not None:
            course.title = request.title
        if request.description is not None:
            course.description = request.description
        if request.status is not None:
            course.status = request.status.value

        if request.lessons is not None:
            await self._coordinator.on_course_lessons_saved(course, request.lessons)
        if request.students is not None:
            await self._coordinator.sync_course_roster(course, request.students)

        await self.db.commit()

        logger.info("Updated course: %s", course.id)

        return to_course_response(course)

    async def delete_course(self, course_id: str, actor: CurrentUser) -> None:
        """Delete a course, releasing its students and lessons.

        Raises:
            CourseNotFoundError: If course not found.
            ForbiddenError: If the actor neither owns the course nor is an admin.
        """
        course = await self._get_by_id(course_id, for_update=True)
        if not actor.owns(course.owner_id):
            raise ForbiddenError("You can only delete courses you created")

        await self._coordinator.on_course_deleted(course)
        await self.db.delete(course)
        await self.db.commit()

        logger.info("Deleted course: %s", course_id)

    async def enroll(self, course_id: str, actor: CurrentUser) -> EnrollmentResponse:
        """Enroll the calling student in a course."""
        return await self._coordinator.enroll_in_course(actor.id, course_id)

    async def unenroll(self, course_id: str, actor: CurrentUser) -> EnrollmentResponse:
        """Withdraw the calling student from a course and its classrooms."""
        return await self._coordinator.unenroll_from_course(actor.id, course_id)

    async def _get_by_id(self, course_id: str, for_update: bool = False) -> Course:
        """Get course by ID.

        Raises:
            CourseNotFoundError: If not found.
        """
        query = select(Course).where(Course.id == course_id)
        if for_update:
            query = query.with_for_update()
        result = await self.db.execute(query)
        course = result.scalar_one_or_none()

        if not course:
            raise CourseNotFoundError(f"Course {course_id} not found")

        return course

    async def _get_by_label(self, label: str) -> Course | None:
        result = await self.db.execute(select(Course).where(Course.course_id == label))
        return result.scalar_one_or_none()
