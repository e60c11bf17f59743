# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for grading preconditions that run before any write."""

from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest

from learnhub.core.errors import ForbiddenError
from learnhub.domains.auth.identity import CurrentUser
from learnhub.domains.enrollment.coordinator import NotEnrolledError
from learnhub.domains.grading.service import GradingService, InvalidScoreError
from learnhub.models.grade import GradeCreateRequest


@pytest.fixture
def mock_db():
    """Create mock database session."""
    db = AsyncMock()
    db.add = MagicMock()
    db.flush = AsyncMock()
    db.commit = AsyncMock()
    db.get = AsyncMock()
    db.execute = AsyncMock()
    return db


@pytest.fixture
def grading_service(mock_db):
    """Create grading service with mock database."""
    return GradingService(db=mock_db, pass_mark=50)


@pytest.fixture
def instructor():
    """Instructor identity."""
    return CurrentUser(id=str(uuid4()), role="Instructor", email="grace@example.com")


def make_request(score: float) -> GradeCreateRequest:
    return GradeCreateRequest(
        student=str(uuid4()),
        lesson=str(uuid4()),
        classroom=str(uuid4()),
        score=score,
    )


class TestRecordGradePreconditions:
    """Tests for record_grade checks."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("score", [-1, 100.5, 250])
    async def test_out_of_range_score(self, grading_service, mock_db, instructor, score):
        """Test that scores outside 0-100 are rejected before touching the store."""
        with pytest.raises(InvalidScoreError, match="between 0 and 100"):
            await grading_service.record_grade(instructor, make_request(score))

        mock_db.get.assert_not_called()
        mock_db.commit.assert_not_called()

    @pytest.mark.asyncio
    async def test_student_without_classroom(self, grading_service, mock_db, instructor):
        """Test that only students with a course and a classroom can be graded."""
        student = MagicMock(course_id="c-1", classroom_id=None)
        mock_db.get.side_effect = [student, MagicMock(), MagicMock(owner_id=instructor.id)]

        with pytest.raises(NotEnrolledError):
            await grading_service.record_grade(instructor, make_request(70))

        mock_db.commit.assert_not_called()

    @pytest.mark.asyncio
    async def test_other_instructors_classroom(self, grading_service, mock_db, instructor):
        """Test that instructors only grade in their own classrooms."""
        student = MagicMock(course_id="c-1", classroom_id="cr-1")
        mock_db.get.side_effect = [student, MagicMock(), MagicMock(owner_id=str(uuid4()))]

        with pytest.raises(ForbiddenError):
            await grading_service.record_grade(instructor, make_request(70))

        mock_db.add.assert_not_called()
