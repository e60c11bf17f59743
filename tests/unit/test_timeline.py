# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for classroom timeline classification."""

from datetime import datetime, timedelta, timezone

from learnhub.domains.classroom.timeline import COMPLETED, ONGOING, UPCOMING, classify, end_time
from learnhub.infrastructure.database.models import Classroom

NOW = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)


def make_classroom(start: datetime | None, duration: float | None, status: str = "Published") -> Classroom:
    return Classroom(
        classroom_id="CR-1",
        title="Spring cohort",
        owner_id="i-1",
        status=status,
        start_time=start,
        duration=duration,
    )


class TestClassify:
    """Tests for classify."""

    def test_running_classroom_is_ongoing(self) -> None:
        """Test a classroom that started two weeks ago and lasts four."""
        classroom = make_classroom(NOW - timedelta(weeks=2), 4)

        assert classify(classroom, NOW) == ONGOING

    def test_finished_classroom_is_completed(self) -> None:
        """Test a classroom that started two weeks ago and lasted one."""
        classroom = make_classroom(NOW - timedelta(weeks=2), 1)

        assert classify(classroom, NOW) == COMPLETED

    def test_future_classroom_is_upcoming(self) -> None:
        """Test a classroom that has not started."""
        classroom = make_classroom(NOW + timedelta(days=1), 4)

        assert classify(classroom, NOW) == UPCOMING

    def test_window_bounds_are_inclusive(self) -> None:
        """Test that start and end instants count as ongoing."""
        start = NOW - timedelta(weeks=1)

        assert classify(make_classroom(NOW, 1), NOW) == ONGOING
        assert classify(make_classroom(start, 1), NOW) == ONGOING

    def test_unknown_window_is_ongoing(self) -> None:
        """Test that a missing start or duration counts as ongoing."""
        assert classify(make_classroom(None, 4), NOW) == ONGOING
        assert classify(make_classroom(NOW, None), NOW) == ONGOING

    def test_unpublished_is_not_classified(self) -> None:
        """Test that Draft and Archived classrooms are skipped."""
        assert classify(make_classroom(NOW, 1, status="Draft"), NOW) is None
        assert classify(make_classroom(NOW, 1, status="Archived"), NOW) is None

    def test_naive_times_are_utc(self) -> None:
        """Test that naive datetimes read back from SQLite are treated as UTC."""
        classroom = make_classroom((NOW - timedelta(weeks=2)).replace(tzinfo=None), 1)

        assert classify(classroom, NOW.replace(tzinfo=None)) == COMPLETED


class TestEndTime:
    """Tests for end_time."""

    def test_fractional_weeks(self) -> None:
        """Test that durations are measured in weeks."""
        classroom = make_classroom(NOW, 1.5)

        assert end_time(classroom) == NOW + timedelta(days=10, hours=12)

    def test_unknown_window(self) -> None:
        """Test that no end is computed without a start."""
        assert end_time(make_classroom(None, 2)) is None
