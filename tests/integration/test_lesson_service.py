# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Integration tests for the lesson service."""

import pytest

from learnhub.core.errors import ForbiddenError, ValidationError
from learnhub.domains.auth.identity import CurrentUser
from learnhub.domains.common.prerequisites import PrerequisiteError
from learnhub.domains.common.status import Status
from learnhub.domains.lesson.service import LessonIdExistsError, LessonNotFoundError, LessonService
from learnhub.models.lesson import LessonCreateRequest, LessonUpdateRequest

pytestmark = pytest.mark.integration


@pytest.fixture
def lesson_service(db_session):
    """Lesson service bound to the test session."""
    return LessonService(db_session)


def as_user(user) -> CurrentUser:
    return CurrentUser(id=user.id, role=user.role, email=user.username)


class TestCreateLesson:
    """Tests for lesson creation."""

    @pytest.mark.asyncio
    async def test_create_lesson(self, lesson_service, factory):
        """Test that a created lesson is owned by its creator."""
        instructor = await factory.instructor()

        lesson = await lesson_service.create_lesson(
            LessonCreateRequest(
                lesson_id="L1",
                title="Variables",
                credit_points=5,
                readings=[{"title": "Chapter 1", "url": "https://example.com/1"}],
                isPublished=True,
            ),
            as_user(instructor),
        )

        assert lesson.created_by == instructor.id
        assert lesson.status is Status.PUBLISHED
        assert lesson.readings == [{"title": "Chapter 1", "url": "https://example.com/1"}]
        assert lesson.course is None

    @pytest.mark.asyncio
    async def test_duplicate_lesson_id(self, lesson_service, factory):
        """Test that human-readable lesson ids are unique."""
        instructor = await factory.instructor()
        await factory.lesson(instructor, "L1")

        with pytest.raises(LessonIdExistsError):
            await lesson_service.create_lesson(
                LessonCreateRequest(lesson_id="L1", title="Again"), as_user(instructor)
            )

    @pytest.mark.asyncio
    async def test_unknown_prerequisite(self, lesson_service, factory):
        """Test that prerequisites must reference existing lessons."""
        instructor = await factory.instructor()

        with pytest.raises(PrerequisiteError):
            await lesson_service.create_lesson(
                LessonCreateRequest(lesson_id="L2", title="Loops", prerequisites=["nope"]),
                as_user(instructor),
            )


class TestUpdateLesson:
    """Tests for lesson updates."""

    @pytest.mark.asyncio
    async def test_cycle_rejected(self, lesson_service, factory):
        """Test that an update may not close a prerequisite cycle."""
        instructor = await factory.instructor()
        first = await factory.lesson(instructor, "L1")
        second = await factory.lesson(instructor, "L2", prerequisites=[first.id])

        with pytest.raises(PrerequisiteError, match="cycle"):
            await lesson_service.update_lesson(
                first.id, LessonUpdateRequest(prerequisites=[second.id]), as_user(instructor)
            )

    @pytest.mark.asyncio
    async def test_self_prerequisite_rejected(self, lesson_service, factory):
        """Test that a lesson cannot require itself."""
        instructor = await factory.instructor()
        lesson = await factory.lesson(instructor, "L1")

        with pytest.raises(PrerequisiteError):
            await lesson_service.update_lesson(
                lesson.id, LessonUpdateRequest(prerequisites=[lesson.id]), as_user(instructor)
            )

    @pytest.mark.asyncio
    async def test_only_creator_edits(self, lesson_service, factory):
        """Test that other instructors cannot edit a lesson but admins can."""
        owner = await factory.instructor("owner@example.com")
        other = await factory.instructor("other@example.com")
        lesson = await factory.lesson(owner, "L1")

        with pytest.raises(ForbiddenError):
            await lesson_service.update_lesson(lesson.id, LessonUpdateRequest(title="Mine"), as_user(other))

        admin = CurrentUser(id="admin-1", role="Admin", email="admin@example.com")
        updated = await lesson_service.update_lesson(lesson.id, LessonUpdateRequest(title="Fixed"), admin)
        assert updated.title == "Fixed"

    @pytest.mark.asyncio
    async def test_partial_update_keeps_other_fields(self, lesson_service, factory):
        """Test that omitted fields are left untouched."""
        instructor = await factory.instructor()
        lesson = await factory.lesson(instructor, "L1", credit_points=8)

        updated = await lesson_service.update_lesson(
            lesson.id, LessonUpdateRequest(status="archived"), as_user(instructor)
        )

        assert updated.status is Status.ARCHIVED
        assert updated.credit_points == 8


class TestLessonLookups:
    """Tests for lesson listings."""

    @pytest.mark.asyncio
    async def test_list_by_status_any_casing(self, lesson_service, factory, db_session):
        """Test that inconsistently stored statuses still match."""
        instructor = await factory.instructor()
        published = await factory.lesson(instructor, "L1", status="published")
        await factory.lesson(instructor, "L2", status="Draft")

        lessons = await lesson_service.list_by_status("PUBLISHED")

        assert [lesson.id for lesson in lessons] == [published.id]

    @pytest.mark.asyncio
    async def test_list_by_unknown_status(self, lesson_service, factory):
        """Test that an unknown status filter is a validation error, not a Draft listing."""
        instructor = await factory.instructor()
        await factory.lesson(instructor, "L1", status="Draft")

        with pytest.raises(ValidationError, match="Invalid status"):
            await lesson_service.list_by_status("Publishd")

    @pytest.mark.asyncio
    async def test_list_instructor_lessons(self, lesson_service, factory):
        """Test listing the lessons an instructor created."""
        owner = await factory.instructor("owner@example.com")
        other = await factory.instructor("other@example.com")
        mine = await factory.lesson(owner, "L1")
        await factory.lesson(other, "L2")

        lessons = await lesson_service.list_instructor_lessons(owner.id)

        assert [lesson.id for lesson in lessons] == [mine.id]

    @pytest.mark.asyncio
    async def test_delete_then_get(self, lesson_service, factory):
        """Test that a deleted lesson is gone."""
        instructor = await factory.instructor()
        lesson = await factory.lesson(instructor, "L1")

        await lesson_service.delete_lesson(lesson.id, as_user(instructor))

        with pytest.raises(LessonNotFoundError):
            await lesson_service.get_lesson(lesson.id)
