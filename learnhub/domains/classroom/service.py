# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Classroom service for managing classrooms.

This module provides the ClassroomService class for:
- Classroom CRUD operations
- Roster maintenance and enrollment through the enrollment coordinator
- Timeline views (ongoing, completed) and aggregate statistics
- Student- and instructor-scoped classroom lookups
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from learnhub.core.errors import ConflictError, ForbiddenError, NotFoundError
from learnhub.domains.auth.identity import CurrentUser
from learnhub.domains.classroom.timeline import COMPLETED, ONGOING, classify, end_time
from learnhub.domains.common.status import Status, normalize_status
from learnhub.domains.course.service import to_course_summary, to_user_summary
from learnhub.domains.enrollment.coordinator import EnrollmentCoordinator
from learnhub.domains.lesson.service import to_lesson_response, to_lesson_summary
from learnhub.infrastructure.database.models import Classroom, Course, Lesson, Student
from learnhub.models.classroom import (
    ClassroomCreateRequest,
    ClassroomResponse,
    ClassroomStatsResponse,
    ClassroomUpdateRequest,
    EnrollmentResponse,
)
from learnhub.models.common import UserSummary
from learnhub.models.lesson import LessonResponse
from learnhub.utils.datetime import utc_now

logger = logging.getLogger(__name__)


class ClassroomNotFoundError(NotFoundError):
    """Raised when classroom is not found."""

    pass


class ClassroomIdExistsError(ConflictError):
    """Raised when the human-readable classroom id is already taken."""

    pass


def to_classroom_response(classroom: Classroom, now: datetime | None = None) -> ClassroomResponse:
    """Build the full classroom response, including its timeline position."""
    return ClassroomResponse(
        id=classroom.id,
        classroom_id=classroom.classroom_id,
        title=classroom.title,
        courses=[to_course_summary(course) for course in classroom.courses],
        lessons=[to_lesson_summary(lesson) for lesson in classroom.lessons],
        students=[to_user_summary(student) for student in classroom.students],
        num_students=classroom.num_students or 0,
        start_time=classroom.start_time,
        duration=classroom.duration,
        end_time=end_time(classroom),
        owner=classroom.owner_id,
        status=normalize_status(classroom.status),
        timeline=classify(classroom, now),
        created_at=classroom.created_at,
        updated_at=classroom.updated_at,
    )


class ClassroomService:
    """Service for managing classrooms.

    Attributes:
        db: Async database session.
    """

    def __init__(self, db: AsyncSession) -> None:
        """Initialize classroom service.

        Args:
            db: Async database session.
        """
        self.db = db
        self._coordinator = EnrollmentCoordinator(db)

    async def create_classroom(self, request: ClassroomCreateRequest, actor: CurrentUser) -> ClassroomResponse:
        """Create a new classroom.

        Args:
            request: Classroom creation data.
            actor: Instructor or admin creating the classroom.

        Returns:
            Created classroom response.

        Raises:
            ClassroomIdExistsError: If the classroom id is already taken.
            NotFoundError: If a listed course, lesson or student does not exist.
            AlreadyEnrolledError: If a listed student is in another classroom.
        """
        if await self._get_by_label(request.classroom_id):
            raise ClassroomIdExistsError("Classroom ID already exists")

        classroom = Classroom(
            classroom_id=request.classroom_id,
            title=request.title,
            start_time=request.start_time,
            duration=request.duration,
            owner_id=actor.id,
            status=request.status.value,
            num_students=0,
            courses=await self._get_courses(request.courses),
            lessons=await self._get_lessons(request.lessons),
            students=[],
        )
        self.db.add(classroom)
        await self.db.flush()

        await self._coordinator.sync_classroom_roster(classroom, request.students)

        await self.db.commit()

        logger.info("Created classroom: %s (%s) by %s", classroom.classroom_id, classroom.id, actor.id)

        return to_classroom_response(classroom)

    async def list_classrooms(self) -> list[ClassroomResponse]:
        """List all classrooms."""
        now = utc_now()
        return [to_classroom_response(c, now) for c in await self._all()]

    async def list_published(self) -> list[ClassroomResponse]:
        """List Published classrooms."""
        now = utc_now()
        return [to_classroom_response(c, now) for c in await self._published()]

    async def list_ongoing(self, now: datetime | None = None) -> list[ClassroomResponse]:
        """List Published classrooms that are currently running."""
        return await self._list_by_timeline(ONGOING, now)

    async def list_completed(self, now: datetime | None = None) -> list[ClassroomResponse]:
        """List Published classrooms whose window has ended."""
        return await self._list_by_timeline(COMPLETED, now)

    async def list_created_by(self, owner_id: str) -> list[ClassroomResponse]:
        """List classrooms created by a user, with their student counts."""
        result = await self.db.execute(
            select(Classroom).where(Classroom.owner_id == owner_id).order_by(Classroom.created_at.desc())
        )
        now = utc_now()
        return [to_classroom_response(c, now) for c in result.scalars().all()]

    async def list_for_student_course(self, actor: CurrentUser) -> list[ClassroomResponse]:
        """List Published classrooms teaching the calling student's course."""
        student = await self._get_student(actor.id)
        if student.course_id is None:
            return []

        now = utc_now()
        return [
            to_classroom_response(c, now)
            for c in await self._published()
            if any(course.id == student.course_id for course in c.courses)
        ]

    async def list_enrolled_ids(self, actor: CurrentUser) -> list[str]:
        """Ids of the Published classrooms whose roster holds the calling student."""
        result = await self.db.execute(
            select(Classroom)
            .where(Classroom.students.any(Student.id == actor.id))
            .order_by(Classroom.classroom_id)
        )
        return [c.id for c in result.scalars().all() if normalize_status(c.status) is Status.PUBLISHED]

    async def list_student_lessons(self, actor: CurrentUser) -> list[LessonResponse]:
        """Published lessons of the calling student's classroom."""
        student = await self._get_student(actor.id)
        if student.classroom_id is None:
            return []

        classroom = await self.db.get(Classroom, student.classroom_id)
        if classroom is None:
            return []

        return [
            to_lesson_response(lesson)
            for lesson in classroom.lessons
            if normalize_status(lesson.status) is Status.PUBLISHED
        ]

    async def get_stats(self) -> ClassroomStatsResponse:
        """Average roster size, linked course credits and duration over all classrooms."""
        classrooms = await self._all()
        total = len(classrooms)
        if not total:
            return ClassroomStatsResponse(
                total_classrooms=0,
                average_students=0,
                average_credits=0,
                average_duration=0,
            )

        students = sum(c.num_students or 0 for c in classrooms)
        credits = sum(sum(course.total_credit or 0 for course in c.courses) for c in classrooms)
        duration = sum(c.duration or 0 for c in classrooms)

        return ClassroomStatsResponse(
            total_classrooms=total,
            average_students=round(students / total, 2),
            average_credits=round(credits / total, 2),
            average_duration=round(duration / total, 2),
        )

    async def get_classroom(self, classroom_id: str) -> ClassroomResponse:
        """Get classroom by ID.

        Raises:
            ClassroomNotFoundError: If classroom not found.
        """
        return to_classroom_response(await self._get_by_id(classroom_id))

    async def list_students(self, classroom_id: str) -> list[UserSummary]:
        """List the roster of a classroom.

        Raises:
            ClassroomNotFoundError: If classroom not found.
        """
        classroom = await self._get_by_id(classroom_id)
        return [to_user_summary(student) for student in classroom.students]

    async def update_classroom(
        self,
        classroom_id: str,
        request: ClassroomUpdateRequest,
        actor: CurrentUser,
    ) -> ClassroomResponse:
        """Partially update a classroom.

        A new ``students`` list replaces the roster under the enrollment rules.

        Raises:
            ClassroomNotFoundError: If classroom not found.
            ForbiddenError: If the actor neither owns the classroom nor is an admin.
            ClassroomIdExistsError: If the new classroom id is already taken.
        """
        classroom = await self._get_by_id(classroom_id, for_update=True)
        if not actor.owns(classroom.owner_id):
            raise ForbiddenError("You can only edit classrooms you created")

        if request.classroom_id is not None and request.classroom_id != classroom.classroom_id:
            if await self._get_by_label(request.classroom_id):
                raise ClassroomIdExistsError("Classroom ID already exists")
            classroom.classroom_id = request.classroom_id

        if request.title is not None:
            classroom.title = request.title
        if request.start_time is not None:
            classroom.start_time = request.start_time
        if request.duration is not None:
            classroom.duration = request.duration
        if request.status is not None:
            classroom.status = request.status.value
        if request.courses is not None:
            classroom.courses = await self._get_courses(request.courses)
        if request.lessons is not None:
            classroom.lessons = await self._get_lessons(request.lessons)
        if request.students is not None:
            await self._coordinator.sync_classroom_roster(classroom, request.students)

        await self.db.commit()

        logger.info("Updated classroom: %s", classroom.id)

        return to_classroom_response(classroom)

    async def delete_classroom(self, classroom_id: str, actor: CurrentUser) -> None:
        """Delete a classroom and release its students.

        Raises:
            ClassroomNotFoundError: If classroom not found.
            ForbiddenError: If the actor neither owns the classroom nor is an admin.
        """
        classroom = await self._get_by_id(classroom_id, for_update=True)
        if not actor.owns(classroom.owner_id):
            raise ForbiddenError("You can only delete classrooms you created")

        await self._coordinator.on_classroom_deleted(classroom)
        await self.db.delete(classroom)
        await self.db.commit()

        logger.info("Deleted classroom: %s", classroom_id)

    async def enroll(self, classroom_id: str, actor: CurrentUser) -> EnrollmentResponse:
        """Enroll the calling student in a classroom."""
        return await self._coordinator.enroll_in_classroom(actor.id, classroom_id)

    async def unenroll(self, classroom_id: str, actor: CurrentUser) -> EnrollmentResponse:
        """Withdraw the calling student from a classroom."""
        return await self._coordinator.unenroll_from_classroom(actor.id, classroom_id)

    async def add_student(self, classroom_id: str, student_id: str, actor: CurrentUser) -> EnrollmentResponse:
        """Place a student in a classroom on behalf of its owner.

        Raises:
            ClassroomNotFoundError: If classroom not found.
            ForbiddenError: If the actor neither owns the classroom nor is an admin.
        """
        classroom = await self._get_by_id(classroom_id)
        if not actor.owns(classroom.owner_id):
            raise ForbiddenError("You can only manage students of classrooms you created")
        return await self._coordinator.add_student_to_classroom(classroom.id, student_id)

    async def remove_student(self, classroom_id: str, student_id: str, actor: CurrentUser) -> EnrollmentResponse:
        """Take a student out of a classroom on behalf of its owner.

        Raises:
            ClassroomNotFoundError: If classroom not found.
            ForbiddenError: If the actor neither owns the classroom nor is an admin.
        """
        classroom = await self._get_by_id(classroom_id)
        if not actor.owns(classroom.owner_id):
            raise ForbiddenError("You can only manage students of classrooms you created")
        return await self._coordinator.remove_student_from_classroom(classroom.id, student_id)

    async def _list_by_timeline(self, timeline: str, now: datetime | None) -> list[ClassroomResponse]:
        reference = now or utc_now()
        return [
            to_classroom_response(c, reference)
            for c in await self._published()
            if classify(c, reference) == timeline
        ]

    async def _all(self) -> list[Classroom]:
        result = await self.db.execute(select(Classroom).order_by(Classroom.classroom_id))
        return list(result.scalars().all())

    async def _published(self) -> list[Classroom]:
        return [c for c in await self._all() if normalize_status(c.status) is Status.PUBLISHED]

    async def _get_by_id(self, classroom_id: str, for_update: bool = False) -> Classroom:
        """Get classroom by ID.

        Raises:
            ClassroomNotFoundError: If not found.
        """
        query = select(Classroom).where(Classroom.id == classroom_id)
        if for_update:
            query = query.with_for_update()
        result = await self.db.execute(query)
        classroom = result.scalar_one_or_none()

        if not classroom:
            raise ClassroomNotFoundError(f"Classroom {classroom_id} not found")

        return classroom

    async def _get_by_label(self, label: str) -> Classroom | None:
        result = await self.db.execute(select(Classroom).where(Classroom.classroom_id == label))
        return result.scalar_one_or_none()

    async def _get_student(self, student_id: str) -> Student:
        student = await self.db.get(Student, student_id)
        if student is None:
            raise NotFoundError(f"Student {student_id} not found")
        return student

    async def _get_courses(self, course_ids: Sequence[str]) -> list[Course]:
        """Load courses by ID, preserving order.

        Raises:
            NotFoundError: If any course is missing.
        """
        wanted = list(dict.fromkeys(course_ids))
        if not wanted:
            return []
        result = await self.db.execute(select(Course).where(Course.id.in_(wanted)))
        found = {course.id: course for course in result.scalars().all()}
        missing = [cid for cid in wanted if cid not in found]
        if missing:
            raise NotFoundError(f"Course(s) not found: {', '.join(missing)}")
        return [found[cid] for cid in wanted]

    async def _get_lessons(self, lesson_ids: Sequence[str]) -> list[Lesson]:
        """Load lessons by ID, preserving order.

        Raises:
            NotFoundError: If any lesson is missing.
        """
        wanted = list(dict.fromkeys(lesson_ids))
        if not wanted:
            return []
        result = await self.db.execute(select(Lesson).where(Lesson.id.in_(wanted)))
        found = {lesson.id: lesson for lesson in result.scalars().all()}
        missing = [lid for lid in wanted if lid not in found]
        if missing:
            raise NotFoundError(f"Lesson(s) not found: {', '.join(missing)}")
        return [found[lid] for lid in wanted]
