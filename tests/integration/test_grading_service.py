# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Integration tests for grade recording and progress calculation."""

import pytest
import pytest_asyncio
from sqlalchemy import func, select

from learnhub.core.errors import ForbiddenError
from learnhub.domains.auth.identity import CurrentUser
from learnhub.domains.enrollment.coordinator import EnrollmentCoordinator
from learnhub.domains.grading.service import GradeNotFoundError, GradingService, InvalidScoreError
from learnhub.infrastructure.database.models import Grade
from learnhub.models.grade import BulkGradeRequest, BulkGradeRow, GradeCreateRequest, GradeUpdateRequest

pytestmark = pytest.mark.integration


def as_user(user) -> CurrentUser:
    return CurrentUser(id=user.id, role=user.role, email=user.username)


@pytest.fixture
def grading_service(db_session):
    """Grading service with a pass mark of 50."""
    return GradingService(db_session, pass_mark=50)


@pytest_asyncio.fixture
async def graded_class(factory, db_session):
    """Instructor, course of three lessons, classroom and one enrolled student."""
    instructor = await factory.instructor()
    lessons = [await factory.lesson(instructor, f"L{i}") for i in (1, 2, 3)]
    course = await factory.course(instructor, "CS101", lessons=lessons)
    classroom = await factory.classroom(instructor, "CR-1", courses=[course], lessons=lessons)
    student = await factory.student()
    coordinator = EnrollmentCoordinator(db_session)
    await coordinator.enroll_in_course(student.id, course.id)
    await coordinator.enroll_in_classroom(student.id, classroom.id)
    return {
        "instructor": instructor,
        "lessons": lessons,
        "course": course,
        "classroom": classroom,
        "student": student,
    }


def grade_request(graded_class, lesson_index: int, score: float, **kwargs) -> GradeCreateRequest:
    return GradeCreateRequest(
        student=graded_class["student"].id,
        lesson=graded_class["lessons"][lesson_index].id,
        classroom=graded_class["classroom"].id,
        score=score,
        **kwargs,
    )


class TestRecordGrade:
    """Tests for record_grade."""

    @pytest.mark.asyncio
    async def test_passed_is_derived(self, grading_service, graded_class):
        """Test that passed follows the score, whatever the client sends."""
        instructor = as_user(graded_class["instructor"])

        failed = await grading_service.record_grade(instructor, grade_request(graded_class, 0, 49.5, passed=True))
        passed = await grading_service.record_grade(instructor, grade_request(graded_class, 1, 50, passed=False))

        assert failed.passed is False
        assert passed.passed is True
        assert passed.feedback == "Graded: 50/100"

    @pytest.mark.asyncio
    async def test_regrading_overwrites(self, grading_service, graded_class, db_session):
        """Test that the (student, lesson, classroom) triple holds one grade."""
        instructor = as_user(graded_class["instructor"])

        first = await grading_service.record_grade(instructor, grade_request(graded_class, 0, 30))
        second = await grading_service.record_grade(
            instructor, grade_request(graded_class, 0, 90, feedback="Much better")
        )

        count = await db_session.execute(select(func.count()).select_from(Grade))
        assert count.scalar_one() == 1
        assert second.id == first.id
        assert second.score == 90
        assert second.passed is True
        assert second.feedback == "Much better"

    @pytest.mark.asyncio
    async def test_other_instructor_forbidden(self, grading_service, graded_class, factory):
        """Test that only the classroom owner or an admin grades."""
        other = await factory.instructor("other@example.com")

        with pytest.raises(ForbiddenError):
            await grading_service.record_grade(as_user(other), grade_request(graded_class, 0, 80))

        admin = CurrentUser(id="admin-1", role="Admin", email="admin@example.com")
        grade = await grading_service.record_grade(admin, grade_request(graded_class, 0, 80))
        assert grade.graded_by == "admin-1"


class TestBulkGrades:
    """Tests for bulk grading."""

    @pytest.mark.asyncio
    async def test_rows_fail_independently(self, grading_service, graded_class, factory):
        """Test that one bad row does not undo the others."""
        outsider = await factory.student("outsider@example.com")

        response = await grading_service.bulk_record_grades(
            as_user(graded_class["instructor"]),
            BulkGradeRequest(
                classroom=graded_class["classroom"].id,
                lesson=graded_class["lessons"][0].id,
                grades=[
                    BulkGradeRow(student=graded_class["student"].id, score=75),
                    BulkGradeRow(student=outsider.id, score=60),
                    BulkGradeRow(student=graded_class["student"].id, score=120),
                ],
            ),
        )

        assert response.total_succeeded == 1
        assert response.total_failed == 2
        assert [r.success for r in response.results] == [True, False, False]
        assert response.results[2].error == "Score must be between 0 and 100"


class TestProgress:
    """Tests for compute_progress."""

    @pytest.mark.asyncio
    async def test_one_of_three_passed(self, grading_service, graded_class):
        """Test that progress is passed lessons over course lessons."""
        instructor = as_user(graded_class["instructor"])
        await grading_service.record_grade(instructor, grade_request(graded_class, 0, 80))
        await grading_service.record_grade(instructor, grade_request(graded_class, 1, 30))

        progress = await grading_service.compute_progress(graded_class["student"].id)

        assert progress.progress_percent == 33.33
        assert progress.passed_lessons == 1
        assert progress.total_lessons == 3
        assert progress.summary.graded == 2
        assert progress.summary.ungraded == 1
        ungraded = progress.lessons[2]
        assert ungraded.status == "ungraded"
        assert ungraded.score is None
        assert ungraded.feedback == "Not graded yet"

    @pytest.mark.asyncio
    async def test_student_without_course(self, grading_service, factory):
        """Test the zero report of a student without a course."""
        student = await factory.student("new@example.com")

        progress = await grading_service.compute_progress(student.id)

        assert progress.progress_percent == 0
        assert progress.total_lessons == 0
        assert progress.message == "Student not enrolled in any course"

    @pytest.mark.asyncio
    async def test_grades_from_other_classroom_ignored(self, grading_service, graded_class, factory, db_session):
        """Test that only grades from the current classroom count."""
        instructor = as_user(graded_class["instructor"])
        await grading_service.record_grade(instructor, grade_request(graded_class, 0, 80))

        coordinator = EnrollmentCoordinator(db_session)
        other = await factory.classroom(graded_class["instructor"], "CR-2", courses=[graded_class["course"]])
        await coordinator.unenroll_from_classroom(graded_class["student"].id, graded_class["classroom"].id)
        await coordinator.enroll_in_classroom(graded_class["student"].id, other.id)

        progress = await grading_service.compute_progress(graded_class["student"].id)

        assert progress.passed_lessons == 0
        assert progress.summary.graded == 0


class TestGradeMaintenance:
    """Tests for update, delete and read-side views."""

    @pytest.mark.asyncio
    async def test_update_recomputes_passed(self, grading_service, graded_class):
        """Test that changing the score recomputes passed."""
        instructor = as_user(graded_class["instructor"])
        grade = await grading_service.record_grade(instructor, grade_request(graded_class, 0, 20))

        updated = await grading_service.update_grade(instructor, grade.id, GradeUpdateRequest(score=70))

        assert updated.passed is True
        with pytest.raises(InvalidScoreError):
            await grading_service.update_grade(instructor, grade.id, GradeUpdateRequest(score=-5))

    @pytest.mark.asyncio
    async def test_delete_grade(self, grading_service, graded_class):
        """Test that a deleted grade cannot be read back."""
        instructor = as_user(graded_class["instructor"])
        grade = await grading_service.record_grade(instructor, grade_request(graded_class, 0, 20))

        await grading_service.delete_grade(instructor, grade.id)

        with pytest.raises(GradeNotFoundError):
            await grading_service.get_grade(grade.id)

    @pytest.mark.asyncio
    async def test_gradebook_and_stats(self, grading_service, graded_class):
        """Test the classroom gradebook and course statistics."""
        instructor = as_user(graded_class["instructor"])
        await grading_service.record_grade(instructor, grade_request(graded_class, 0, 80))
        await grading_service.record_grade(instructor, grade_request(graded_class, 1, 40))

        gradebook = await grading_service.classroom_gradebook(graded_class["classroom"].id)
        stats = await grading_service.course_stats(graded_class["course"].id)
        details = await grading_service.list_student_grades(graded_class["student"].id)

        row = gradebook.rows[0]
        assert row.student == graded_class["student"].id
        assert row.grades[graded_class["lessons"][0].id].score == 80
        assert row.grades[graded_class["lessons"][2].id] is None
        assert stats.total_grades == 2
        assert stats.students_graded == 1
        assert stats.overall_pass_rate == 50
        assert [d.lesson_title for d in details] == ["Lesson L1", "Lesson L2"]
        assert details[0].student_name == "Ada Lovelace"
