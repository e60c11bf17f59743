# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Lesson service for managing lesson content.

This module provides the LessonService class for:
- Lesson CRUD operations
- Prerequisite graph validation
- Lesson lookups by status, classroom and instructor
"""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from learnhub.core.errors import ConflictError, ForbiddenError, NotFoundError, ValidationError
from learnhub.domains.auth.identity import CurrentUser
from learnhub.domains.common.prerequisites import validate_prerequisites
from learnhub.domains.common.status import Status, normalize_status, parse_status
from learnhub.domains.enrollment.coordinator import EnrollmentCoordinator
from learnhub.infrastructure.database.models import Classroom, Lesson, new_id
from learnhub.models.lesson import (
    LessonCreateRequest,
    LessonResponse,
    LessonSummary,
    LessonUpdateRequest,
)

logger = logging.getLogger(__name__)


class LessonNotFoundError(NotFoundError):
    """Raised when lesson is not found."""

    pass


class LessonIdExistsError(ConflictError):
    """Raised when the human-readable lesson id is already taken."""

    pass


def to_lesson_response(lesson: Lesson) -> LessonResponse:
    """Build the full lesson response."""
    return LessonResponse(
        id=lesson.id,
        lesson_id=lesson.lesson_id,
        title=lesson.title,
        description=lesson.description,
        objective=lesson.objective,
        prerequisites=list(lesson.prerequisite_ids or []),
        created_by=lesson.created_by,
        status=normalize_status(lesson.status),
        credit_points=lesson.credit_points or 0,
        readings=list(lesson.readings or []),
        assignments=list(lesson.assignments or []),
        estimated_work=lesson.estimated_work or 0,
        course=lesson.course_id,
        created_at=lesson.created_at,
        updated_at=lesson.updated_at,
    )


def to_lesson_summary(lesson: Lesson) -> LessonSummary:
    """Build the compact lesson representation."""
    return LessonSummary(
        id=lesson.id,
        lesson_id=lesson.lesson_id,
        title=lesson.title,
        status=normalize_status(lesson.status),
        credit_points=lesson.credit_points or 0,
    )


class LessonService:
    """Service for managing lessons.

    Attributes:
        db: Async database session.
    """

    def __init__(self, db: AsyncSession) -> None:
        """Initialize lesson service.

        Args:
            db: Async database session.
        """
        self.db = db

    async def create_lesson(self, request: LessonCreateRequest, actor: CurrentUser) -> LessonResponse:
        """Create a new lesson.

        Args:
            request: Lesson creation data.
            actor: Instructor or admin creating the lesson.

        Returns:
            Created lesson response.

        Raises:
            LessonIdExistsError: If the lesson id is already taken.
            PrerequisiteError: If the prerequisites are invalid.
        """
        if await self._get_by_label(request.lesson_id):
            raise LessonIdExistsError(f"Lesson with id '{request.lesson_id}' already exists")

        lesson_pk = new_id()
        prerequisites = validate_prerequisites(
            lesson_pk,
            request.prerequisites,
            await self._prerequisite_graph(),
        )

        lesson = Lesson(
            id=lesson_pk,
            lesson_id=request.lesson_id,
            title=request.title,
            description=request.description,
            objective=request.objective,
            prerequisite_ids=prerequisites,
            created_by=actor.id,
            status=request.status.value,
            credit_points=request.credit_points,
            readings=[r.model_dump(mode="json") for r in request.readings],
            assignments=[a.model_dump(mode="json") for a in request.assignments],
            estimated_work=request.estimated_work,
        )

        self.db.add(lesson)
        await self.db.commit()

        logger.info("Created lesson: %s (%s) by %s", lesson.lesson_id, lesson.id, actor.id)

        return to_lesson_response(lesson)

    async def list_lessons(self, status: Status | None = None) -> list[LessonResponse]:
        """List lessons, optionally filtered by status.

        Stored status values are normalized before filtering so
        historically inconsistent rows still match.
        """
        result = await self.db.execute(select(Lesson).order_by(Lesson.lesson_id))
        lessons = result.scalars().all()
        if status is not None:
            lessons = [lesson for lesson in lessons if normalize_status(lesson.status) is status]
        return [to_lesson_response(lesson) for lesson in lessons]

    async def list_by_status(self, status: str) -> list[LessonResponse]:
        """List lessons with a status given in any casing.

        Raises:
            ValidationError: If the status is not Draft, Published or Archived.
        """
        try:
            wanted = parse_status(status)
        except ValueError as e:
            raise ValidationError(str(e)) from e
        return await self.list_lessons(wanted)

    async def list_classroom_lessons(self, classroom_id: str) -> list[LessonResponse]:
        """List the lessons attached to a classroom.

        Raises:
            NotFoundError: If the classroom does not exist.
        """
        classroom = await self.db.get(Classroom, classroom_id)
        if classroom is None:
            raise NotFoundError(f"Classroom {classroom_id} not found")
        return [to_lesson_response(lesson) for lesson in classroom.lessons]

    async def list_instructor_lessons(self, instructor_id: str) -> list[LessonResponse]:
        """List lessons created by an instructor."""
        result = await self.db.execute(
            select(Lesson).where(Lesson.created_by == instructor_id).order_by(Lesson.lesson_id)
        )
        return [to_lesson_response(lesson) for lesson in result.scalars().all()]

    async def get_lesson(self, lesson_id: str) -> LessonResponse:
        """Get lesson by ID.

        Raises:
            LessonNotFoundError: If lesson not found.
        """
        return to_lesson_response(await self._get_by_id(lesson_id))

    async def update_lesson(
        self,
        lesson_id: str,
        request: LessonUpdateRequest,
        actor: CurrentUser,
    ) -> LessonResponse:
        """Partially update a lesson.

        Raises:
            LessonNotFoundError: If lesson not found.
            ForbiddenError: If the actor neither created the lesson nor is an admin.
            LessonIdExistsError: If the new lesson id is already taken.
            PrerequisiteError: If the new prerequisites are invalid.
        """
        lesson = await self._get_by_id(lesson_id)
        if not actor.owns(lesson.created_by):
            raise ForbiddenError("You can only edit lessons you created")

        if request.lesson_id is not None and request.lesson_id != lesson.lesson_id:
            existing = await self._get_by_label(request.lesson_id)
            if existing and existing.id != lesson.id:
                raise LessonIdExistsError(f"Lesson with id '{request.lesson_id}' already exists")
            lesson.lesson_id = request.lesson_id

        if request.prerequisites is not None:
            lesson.prerequisite_ids = validate_prerequisites(
                lesson.id,
                request.prerequisites,
                await self._prerequisite_graph(),
            )

        if request.title is not None:
            lesson.title = request.title
        if request.description is not None:
            lesson.description = request.description
        if request.objective is not None:
            lesson.objective = request.objective
        if request.status is not None:
            lesson.status = request.status.value
        if request.credit_points is not None:
            lesson.credit_points = request.credit_points
        if request.readings is not None:
            lesson.readings = [r.model_dump(mode="json") for r in request.readings]
        if request.assignments is not None:
            lesson.assignments = [a.model_dump(mode="json") for a in request.assignments]
        if request.estimated_work is not None:
            lesson.estimated_work = request.estimated_work

        await self.db.commit()

        logger.info("Updated lesson: %s", lesson.id)

        return to_lesson_response(lesson)

    async def delete_lesson(self, lesson_id: str, actor: CurrentUser) -> None:
        """Delete a lesson and detach it from courses, classrooms and prerequisites.

        Raises:
            LessonNotFoundError: If lesson not found.
            ForbiddenError: If the actor neither created the lesson nor is an admin.
        """
        lesson = await self._get_by_id(lesson_id)
        if not actor.owns(lesson.created_by):
            raise ForbiddenError("You can only delete lessons you created")

        await EnrollmentCoordinator(self.db).on_lesson_deleted(lesson)
        await self.db.delete(lesson)
        await self.db.commit()

        logger.info("Deleted lesson: %s", lesson_id)

    async def _prerequisite_graph(self) -> dict[str, list[str]]:
        """Current prerequisite graph indexed by lesson id."""
        result = await self.db.execute(select(Lesson.id, Lesson.prerequisite_ids))
        return {row.id: list(row.prerequisite_ids or []) for row in result.all()}

    async def _get_by_id(self, lesson_id: str) -> Lesson:
        """Get lesson by ID.

        Raises:
            LessonNotFoundError: If not found.
        """
        result = await self.db.execute(select(Lesson).where(Lesson.id == lesson_id))
        lesson = result.scalar_one_or_none()

        if not lesson:
            raise LessonNotFoundError(f"Lesson {lesson_id} not found")

        return lesson

    async def _get_by_label(self, label: str) -> Lesson | None:
        result = await self.db.execute(select(Lesson).where(Lesson.lesson_id == label))
        return result.scalars().first()
