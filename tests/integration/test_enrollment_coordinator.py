# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Integration tests for the enrollment coordinator.

Runs against a SQLite database file so the conditional updates and
association tables behave as they do in production.
"""

import pytest
from sqlalchemy import func, select

from learnhub.domains.enrollment.coordinator import (
    AlreadyEnrolledError,
    ClassroomNotFoundError,
    CourseNotFoundError,
    EnrollmentCoordinator,
    LessonNotFoundError,
    NotEnrolledError,
    StudentNotFoundError,
)
from learnhub.infrastructure.database.models import (
    Classroom,
    Course,
    Lesson,
    Student,
    classroom_students,
    course_students,
)

pytestmark = pytest.mark.integration


@pytest.fixture
def coordinator(db_session):
    """Coordinator bound to the test session."""
    return EnrollmentCoordinator(db_session)


async def roster_size(session, table, column, value) -> int:
    result = await session.execute(select(func.count()).select_from(table).where(column == value))
    return result.scalar_one()


class TestCourseEnrollment:
    """Tests for course enrollment."""

    @pytest.mark.asyncio
    async def test_enroll_links_both_sides(self, coordinator, factory, db_session):
        """Test that enrolling sets the student's course and the course roster."""
        instructor = await factory.instructor()
        course = await factory.course(instructor, "CS101")
        student = await factory.student()

        result = await coordinator.enroll_in_course(student.id, course.id)

        assert result.message == "Enrolled successfully"
        assert result.course == course.id
        assert student.course_id == course.id
        assert student in course.students
        assert await roster_size(db_session, course_students, course_students.c.course_id, course.id) == 1

    @pytest.mark.asyncio
    async def test_enroll_twice_in_same_course(self, coordinator, factory):
        """Test that a second enrollment in the same course conflicts."""
        instructor = await factory.instructor()
        course = await factory.course(instructor, "CS101")
        student = await factory.student()
        await coordinator.enroll_in_course(student.id, course.id)

        with pytest.raises(AlreadyEnrolledError, match="Already enrolled in this course"):
            await coordinator.enroll_in_course(student.id, course.id)

    @pytest.mark.asyncio
    async def test_enroll_in_second_course_names_the_first(self, coordinator, factory):
        """Test that a student holds at most one course."""
        instructor = await factory.instructor()
        first = await factory.course(instructor, "CS101")
        second = await factory.course(instructor, "CS102")
        student = await factory.student()
        await coordinator.enroll_in_course(student.id, first.id)

        with pytest.raises(AlreadyEnrolledError, match="Course CS101"):
            await coordinator.enroll_in_course(student.id, second.id)

        assert second.students == []

    @pytest.mark.asyncio
    async def test_unknown_references(self, coordinator, factory):
        """Test that unknown students and courses are not found."""
        instructor = await factory.instructor()
        course = await factory.course(instructor, "CS101")
        student = await factory.student()

        with pytest.raises(StudentNotFoundError):
            await coordinator.enroll_in_course("missing", course.id)
        with pytest.raises(CourseNotFoundError):
            await coordinator.enroll_in_course(student.id, "missing")

    @pytest.mark.asyncio
    async def test_unenroll_twice(self, coordinator, factory):
        """Test that leaving a course the student is not in fails."""
        instructor = await factory.instructor()
        course = await factory.course(instructor, "CS101")
        student = await factory.student()
        await coordinator.enroll_in_course(student.id, course.id)

        result = await coordinator.unenroll_from_course(student.id, course.id)

        assert result.message == "Unenrolled successfully"
        assert student.course_id is None
        with pytest.raises(NotEnrolledError, match="not enrolled in this course"):
            await coordinator.unenroll_from_course(student.id, course.id)

    @pytest.mark.asyncio
    async def test_unenroll_cascades_to_classrooms(self, coordinator, factory, db_session):
        """Test that leaving a course also leaves the classrooms teaching it."""
        instructor = await factory.instructor()
        course = await factory.course(instructor, "CS101")
        classroom = await factory.classroom(instructor, "CR-1", courses=[course])
        student = await factory.student()
        await coordinator.enroll_in_course(student.id, course.id)
        await coordinator.enroll_in_classroom(student.id, classroom.id)
        assert classroom.num_students == 1

        await coordinator.unenroll_from_course(student.id, course.id)

        assert student.course_id is None
        assert student.classroom_id is None
        assert classroom.students == []
        assert classroom.num_students == 0
        assert await roster_size(
            db_session, classroom_students, classroom_students.c.classroom_id, classroom.id
        ) == 0


class TestWriteTimeGuard:
    """Tests for the conditional update that closes the check-then-act race."""

    @pytest.mark.asyncio
    async def test_stale_read_cannot_double_enroll(self, db_sessionmaker, factory):
        """Test that a session holding a stale student still cannot claim a second course."""
        instructor = await factory.instructor()
        first = await factory.course(instructor, "CS101")
        second = await factory.course(instructor, "CS102")
        student = await factory.student()

        async with db_sessionmaker() as session_a, db_sessionmaker() as session_b:
            # Session B reads the student before session A enrolls it.
            stale = await session_b.get(Student, student.id)
            assert stale.course_id is None

            await EnrollmentCoordinator(session_a).enroll_in_course(student.id, first.id)

            with pytest.raises(AlreadyEnrolledError, match="Course CS101"):
                await EnrollmentCoordinator(session_b).enroll_in_course(student.id, second.id)
            await session_b.rollback()

        async with db_sessionmaker() as session:
            fresh = await session.get(Student, student.id)
            other = await session.get(Course, second.id)
            assert fresh.course_id == first.id
            assert other.students == []

    @pytest.mark.asyncio
    async def test_stale_read_cannot_join_second_classroom(self, db_sessionmaker, factory):
        """Test the same guard for classroom enrollment."""
        instructor = await factory.instructor()
        first = await factory.classroom(instructor, "CR-1")
        second = await factory.classroom(instructor, "CR-2")
        student = await factory.student()

        async with db_sessionmaker() as session_a, db_sessionmaker() as session_b:
            await session_b.get(Student, student.id)

            await EnrollmentCoordinator(session_a).enroll_in_classroom(student.id, first.id)

            with pytest.raises(AlreadyEnrolledError, match="Please leave it first"):
                await EnrollmentCoordinator(session_b).enroll_in_classroom(student.id, second.id)
            await session_b.rollback()

        async with db_sessionmaker() as session:
            other = await session.get(Classroom, second.id)
            assert other.num_students == 0
            assert other.students == []


class TestClassroomEnrollment:
    """Tests for classroom enrollment."""

    @pytest.mark.asyncio
    async def test_enroll_updates_roster_and_count(self, coordinator, factory):
        """Test that num_students follows the roster."""
        instructor = await factory.instructor()
        classroom = await factory.classroom(instructor, "CR-1")
        ada = await factory.student("ada@example.com")
        alan = await factory.student("alan@example.com")

        await coordinator.enroll_in_classroom(ada.id, classroom.id)
        result = await coordinator.enroll_in_classroom(alan.id, classroom.id)

        assert result.num_students == 2
        assert classroom.num_students == len(classroom.students) == 2
        assert ada.classroom_id == alan.classroom_id == classroom.id

    @pytest.mark.asyncio
    async def test_second_classroom_conflicts(self, coordinator, factory):
        """Test that a student holds at most one classroom."""
        instructor = await factory.instructor()
        first = await factory.classroom(instructor, "CR-1")
        second = await factory.classroom(instructor, "CR-2")
        student = await factory.student()
        await coordinator.enroll_in_classroom(student.id, first.id)

        with pytest.raises(AlreadyEnrolledError, match="Classroom CR-1"):
            await coordinator.enroll_in_classroom(student.id, second.id)
        with pytest.raises(AlreadyEnrolledError, match="Already enrolled in this classroom"):
            await coordinator.enroll_in_classroom(student.id, first.id)

    @pytest.mark.asyncio
    async def test_unenroll_not_enrolled(self, coordinator, factory):
        """Test that leaving a classroom the student is not in fails."""
        instructor = await factory.instructor()
        classroom = await factory.classroom(instructor, "CR-1")
        student = await factory.student()

        with pytest.raises(NotEnrolledError, match="not enrolled in this classroom"):
            await coordinator.unenroll_from_classroom(student.id, classroom.id)

    @pytest.mark.asyncio
    async def test_unknown_classroom(self, coordinator, factory):
        """Test that an unknown classroom is not found."""
        student = await factory.student()

        with pytest.raises(ClassroomNotFoundError):
            await coordinator.enroll_in_classroom(student.id, "missing")

    @pytest.mark.asyncio
    async def test_staff_add_and_remove(self, coordinator, factory):
        """Test instructor-initiated placement and removal."""
        instructor = await factory.instructor()
        classroom = await factory.classroom(instructor, "CR-1")
        student = await factory.student()

        added = await coordinator.add_student_to_classroom(classroom.id, student.id)
        assert added.message == "Student added successfully"
        assert added.num_students == 1

        with pytest.raises(AlreadyEnrolledError, match="Student is already enrolled in this classroom"):
            await coordinator.add_student_to_classroom(classroom.id, student.id)

        removed = await coordinator.remove_student_from_classroom(classroom.id, student.id)
        assert removed.message == "Student removed successfully"
        assert removed.num_students == 0
        assert student.classroom_id is None

        with pytest.raises(NotEnrolledError):
            await coordinator.remove_student_from_classroom(classroom.id, student.id)

    @pytest.mark.asyncio
    async def test_staff_remove_cleans_one_sided_reference(self, coordinator, factory, db_session):
        """Test that removal works when only the roster still lists the student."""
        instructor = await factory.instructor()
        classroom = await factory.classroom(instructor, "CR-1")
        student = await factory.student()
        classroom.students.append(student)
        classroom.sync_num_students()
        await db_session.commit()

        await coordinator.remove_student_from_classroom(classroom.id, student.id)

        assert classroom.students == []
        assert classroom.num_students == 0


class TestHooks:
    """Tests for the cascade hooks used by the entity services."""

    @pytest.mark.asyncio
    async def test_lessons_saved_computes_credit(self, factory):
        """Test that saving a lesson list links the lessons and sums their credit."""
        instructor = await factory.instructor()
        lessons = [
            await factory.lesson(instructor, "L1", credit_points=5),
            await factory.lesson(instructor, "L2", credit_points=7.5),
        ]

        course = await factory.course(instructor, "CS101", lessons=lessons)

        assert course.total_credit == 12.5
        assert all(lesson.course_id == course.id for lesson in lessons)

    @pytest.mark.asyncio
    async def test_lesson_moves_between_courses(self, coordinator, factory, db_session):
        """Test that a lesson taken by another course leaves the first one."""
        instructor = await factory.instructor()
        shared = await factory.lesson(instructor, "L1", credit_points=5)
        kept = await factory.lesson(instructor, "L2", credit_points=3)
        first = await factory.course(instructor, "CS101", lessons=[shared, kept])

        second = await factory.course(instructor, "CS102", lessons=[shared])

        assert shared.course_id == second.id
        assert [lesson.id for lesson in first.lessons] == [kept.id]
        assert first.total_credit == 3
        assert second.total_credit == 5

    @pytest.mark.asyncio
    async def test_relink_unlinks_dropped_lessons(self, coordinator, factory, db_session):
        """Test that lessons dropped from the list lose their course."""
        instructor = await factory.instructor()
        dropped = await factory.lesson(instructor, "L1")
        kept = await factory.lesson(instructor, "L2")
        course = await factory.course(instructor, "CS101", lessons=[dropped, kept])

        await coordinator.on_course_lessons_saved(course, [kept.id])
        await db_session.commit()

        assert dropped.course_id is None
        assert kept.course_id == course.id

    @pytest.mark.asyncio
    async def test_unknown_lesson(self, coordinator, factory):
        """Test that linking a missing lesson fails."""
        instructor = await factory.instructor()
        course = await factory.course(instructor, "CS101")

        with pytest.raises(LessonNotFoundError):
            await coordinator.on_course_lessons_saved(course, ["missing"])

    @pytest.mark.asyncio
    async def test_course_deleted_releases_everything(self, coordinator, factory, db_session):
        """Test that deleting a course clears students, lessons and classrooms."""
        instructor = await factory.instructor()
        lesson = await factory.lesson(instructor, "L1")
        course = await factory.course(instructor, "CS101", lessons=[lesson])
        classroom = await factory.classroom(instructor, "CR-1", courses=[course])
        student = await factory.student()
        await coordinator.enroll_in_course(student.id, course.id)
        await coordinator.enroll_in_classroom(student.id, classroom.id)

        await coordinator.on_course_deleted(course)
        await db_session.delete(course)
        await db_session.commit()

        assert student.course_id is None
        assert student.classroom_id is None
        assert lesson.course_id is None
        assert classroom.courses == []
        assert classroom.num_students == 0

    @pytest.mark.asyncio
    async def test_lesson_deleted_cleans_references(self, coordinator, factory, db_session):
        """Test that a deleted lesson disappears from courses, classrooms and prerequisites."""
        instructor = await factory.instructor()
        base = await factory.lesson(instructor, "L1", credit_points=4)
        advanced = await factory.lesson(instructor, "L2", credit_points=6, prerequisites=[base.id])
        course = await factory.course(instructor, "CS101", lessons=[base, advanced])
        classroom = await factory.classroom(instructor, "CR-1", lessons=[base, advanced])

        await coordinator.on_lesson_deleted(base)
        await db_session.delete(base)
        await db_session.commit()

        assert [lesson.id for lesson in course.lessons] == [advanced.id]
        assert course.total_credit == 6
        assert [lesson.id for lesson in classroom.lessons] == [advanced.id]
        assert advanced.prerequisite_ids == []
        assert await db_session.get(Lesson, base.id) is None

    @pytest.mark.asyncio
    async def test_sync_classroom_roster(self, coordinator, factory, db_session):
        """Test that replacing a roster releases and claims students."""
        instructor = await factory.instructor()
        classroom = await factory.classroom(instructor, "CR-1")
        ada = await factory.student("ada@example.com")
        alan = await factory.student("alan@example.com")
        await coordinator.enroll_in_classroom(ada.id, classroom.id)

        await coordinator.sync_classroom_roster(classroom, [alan.id])
        await db_session.commit()

        assert ada.classroom_id is None
        assert alan.classroom_id == classroom.id
        assert classroom.students == [alan]
        assert classroom.num_students == 1
