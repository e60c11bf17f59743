# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Enrollment coordinator.

Keeps the two sides of every enrollment reference in step:

- ``Student.course_id``    <-> ``Course.students``
- ``Student.classroom_id`` <-> ``Classroom.students`` (+ ``num_students``)
- ``Lesson.course_id``     <-> ``Course.lessons``

Student- and instructor-initiated operations run as one transaction and
commit at the end; any failure leaves the session to be rolled back by
the caller, so a half-applied enrollment is never committed.

Cascade hooks (``on_*``) are called by the entity services from inside
their own transactions and therefore never commit.

"Not enrolled yet" is re-checked at write time with a conditional UPDATE
on the student row, so two concurrent enrollments of the same student
cannot both succeed.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.attributes import set_committed_value

from learnhub.core.errors import ConflictError, NotFoundError, ValidationError
from learnhub.domains.common.status import Status
from learnhub.infrastructure.database.models import (
    Classroom,
    Course,
    Grade,
    Instructor,
    Lesson,
    Student,
)
from learnhub.models.classroom import EnrollmentResponse
from learnhub.utils.datetime import utc_now

logger = logging.getLogger(__name__)


class EnrollmentError(Exception):
    """Base exception for enrollment coordinator errors."""

    pass


class StudentNotFoundError(NotFoundError, EnrollmentError):
    """Raised when a student is not found."""

    pass


class CourseNotFoundError(NotFoundError, EnrollmentError):
    """Raised when a course is not found."""

    pass


class ClassroomNotFoundError(NotFoundError, EnrollmentError):
    """Raised when a classroom is not found."""

    pass


class LessonNotFoundError(NotFoundError, EnrollmentError):
    """Raised when a lesson is not found."""

    pass


class AlreadyEnrolledError(ConflictError, EnrollmentError):
    """Raised when a student already holds the enrollment slot."""

    pass


class NotEnrolledError(ValidationError, EnrollmentError):
    """Raised when a student does not hold the enrollment being removed."""

    pass


class EnrollmentCoordinator:
    """Maintains bidirectional enrollment references.

    Attributes:
        db: Async database session.
    """

    def __init__(self, db: AsyncSession) -> None:
        """Initialize the coordinator.

        Args:
            db: Async database session. Every operation shares it.
        """
        self.db = db

    # =========================================================================
    # Course enrollment
    # =========================================================================

    async def enroll_in_course(self, student_id: str, course_id: str) -> EnrollmentResponse:
        """Enroll a student in a course.

        Args:
            student_id: Student reference.
            course_id: Course reference.

        Returns:
            Enrollment result.

        Raises:
            StudentNotFoundError: If the student does not exist.
            CourseNotFoundError: If the course does not exist.
            AlreadyEnrolledError: If the student already has a course.
        """
        student = await self._get_student(student_id)
        course = await self._get_course(course_id, for_update=True)

        if student.course_id is not None:
            raise await self._course_conflict(student, course)

        await self._claim_course(student, course)

        await self.db.commit()

        logger.info("Enrolled in course: student=%s, course=%s", student.id, course.id)

        return EnrollmentResponse(
            message="Enrolled successfully",
            student=student.id,
            course=course.id,
        )

    async def unenroll_from_course(self, student_id: str, course_id: str) -> EnrollmentResponse:
        """Remove a student from a course and from the course's classrooms.

        Raises:
            StudentNotFoundError: If the student does not exist.
            CourseNotFoundError: If the course does not exist.
            NotEnrolledError: If the student is not enrolled in this course.
        """
        student = await self._get_student(student_id)
        course = await self._get_course(course_id, for_update=True)

        if student.course_id != course.id:
            raise NotEnrolledError("You are not enrolled in this course")

        await self._release_course(student, course)

        await self.db.commit()

        logger.info("Unenrolled from course: student=%s, course=%s", student.id, course.id)

        return EnrollmentResponse(
            message="Unenrolled successfully",
            student=student.id,
            course=None,
            classroom=student.classroom_id,
        )

    # =========================================================================
    # Classroom enrollment
    # =========================================================================

    async def enroll_in_classroom(self, student_id: str, classroom_id: str) -> EnrollmentResponse:
        """Student-initiated classroom enrollment.

        Raises:
            StudentNotFoundError: If the student does not exist.
            ClassroomNotFoundError: If the classroom does not exist.
            AlreadyEnrolledError: If the student is already in this or
                another classroom.
        """
        student = await self._get_student(student_id)
        classroom = await self._get_classroom(classroom_id, for_update=True)

        if student.classroom_id is not None:
            raise await self._classroom_conflict(student, classroom)

        await self._claim_classroom(student, classroom)

        await self.db.commit()

        logger.info(
            "Enrolled in classroom: student=%s, classroom=%s, num_students=%d",
            student.id,
            classroom.id,
            classroom.num_students,
        )

        return EnrollmentResponse(
            message="Enrolled successfully",
            student=student.id,
            course=student.course_id,
            classroom=classroom.id,
            num_students=classroom.num_students,
        )

    async def unenroll_from_classroom(self, student_id: str, classroom_id: str) -> EnrollmentResponse:
        """Student-initiated classroom withdrawal.

        Raises:
            StudentNotFoundError: If the student does not exist.
            ClassroomNotFoundError: If the classroom does not exist.
            NotEnrolledError: If the student is not enrolled in this classroom.
        """
        student = await self._get_student(student_id)
        classroom = await self._get_classroom(classroom_id, for_update=True)

        if student.classroom_id != classroom.id:
            raise NotEnrolledError("You are not enrolled in this classroom")

        self._release_classroom(student, classroom)

        await self.db.commit()

        logger.info(
            "Unenrolled from classroom: student=%s, classroom=%s, num_students=%d",
            student.id,
            classroom.id,
            classroom.num_students,
        )

        return EnrollmentResponse(
            message="Unenrolled successfully",
            student=student.id,
            course=student.course_id,
            classroom=None,
            num_students=classroom.num_students,
        )

    async def add_student_to_classroom(self, classroom_id: str, student_id: str) -> EnrollmentResponse:
        """Instructor/admin-initiated classroom enrollment.

        Raises:
            ClassroomNotFoundError: If the classroom does not exist.
            StudentNotFoundError: If the student does not exist.
            AlreadyEnrolledError: If the student already has a classroom.
        """
        classroom = await self._get_classroom(classroom_id, for_update=True)
        student = await self._get_student(student_id)

        if student.classroom_id is not None:
            raise await self._classroom_conflict(student, classroom, self_service=False)

        await self._claim_classroom(student, classroom, self_service=False)

        await self.db.commit()

        logger.info(
            "Added student to classroom: student=%s, classroom=%s, num_students=%d",
            student.id,
            classroom.id,
            classroom.num_students,
        )

        return EnrollmentResponse(
            message="Student added successfully",
            student=student.id,
            course=student.course_id,
            classroom=classroom.id,
            num_students=classroom.num_students,
        )

    async def remove_student_from_classroom(self, classroom_id: str, student_id: str) -> EnrollmentResponse:
        """Instructor/admin-initiated removal, without the student-side precondition.

        Cleans up whichever side still references the other.

        Raises:
            ClassroomNotFoundError: If the classroom does not exist.
            StudentNotFoundError: If the student does not exist.
            NotEnrolledError: If neither side references the other.
        """
        classroom = await self._get_classroom(classroom_id, for_update=True)
        student = await self._get_student(student_id)

        if student.classroom_id != classroom.id and student not in classroom.students:
            raise NotEnrolledError("Student is not enrolled in this classroom")

        self._release_classroom(student, classroom)

        await self.db.commit()

        logger.info(
            "Removed student from classroom: student=%s, classroom=%s, num_students=%d",
            student.id,
            classroom.id,
            classroom.num_students,
        )

        return EnrollmentResponse(
            message="Student removed successfully",
            student=student.id,
            course=student.course_id,
            classroom=None,
            num_students=classroom.num_students,
        )

    # =========================================================================
    # Hooks used by the entity services (no commit)
    # =========================================================================

    async def on_course_lessons_saved(self, course: Course, lesson_ids: Sequence[str]) -> list[Lesson]:
        """Relink lessons after a course's lesson list is saved.

        Phase one unlinks every lesson that points at this course, phase two
        links every lesson in the new list. A lesson taken over from another
        course is also dropped from that course's lesson list.

        Args:
            course: The course being saved.
            lesson_ids: New lesson references.

        Returns:
            The lessons now belonging to the course.

        Raises:
            LessonNotFoundError: If a referenced lesson does not exist.
        """
        wanted = list(dict.fromkeys(lesson_ids))
        lessons = await self._get_lessons(wanted)

        # Phase 1: clear every existing link to this course
        linked = await self.db.execute(select(Lesson).where(Lesson.course_id == course.id))
        for lesson in linked.scalars().all():
            lesson.course_id = None

        # Phase 2: link the new list
        previous_courses = {
            lesson.course_id for lesson in lessons if lesson.course_id not in (None, course.id)
        }
        for lesson in lessons:
            lesson.course_id = course.id

        for other_id in previous_courses:
            other = await self.db.get(Course, other_id)
            if other is not None:
                other.lessons = [lesson for lesson in other.lessons if lesson.course_id == other.id]
                other.total_credit = _sum_credits(other.lessons)

        course.lessons = lessons
        course.total_credit = _sum_credits(lessons)

        logger.debug(
            "Relinked lessons: course=%s, lessons=%d, taken_from=%s",
            course.id,
            len(lessons),
            sorted(previous_courses),
        )

        return lessons

    async def sync_course_roster(self, course: Course, student_ids: Sequence[str]) -> None:
        """Replace a course roster, applying enroll/unenroll rules per student.

        Raises:
            StudentNotFoundError: If a referenced student does not exist.
            AlreadyEnrolledError: If an added student holds another course.
        """
        wanted = list(dict.fromkeys(student_ids))
        new_students = [await self._get_student(sid) for sid in wanted]

        for student in list(course.students):
            if student.id not in wanted and student.course_id in (None, course.id):
                await self._release_course(student, course)

        for student in new_students:
            if student.course_id == course.id:
                if student not in course.students:
                    course.students.append(student)
                continue
            if student.course_id is not None:
                raise await self._course_conflict(student, course, self_service=False)
            await self._claim_course(student, course, self_service=False)

    async def sync_classroom_roster(self, classroom: Classroom, student_ids: Sequence[str]) -> None:
        """Replace a classroom roster, applying enroll/unenroll rules per student.

        Raises:
            StudentNotFoundError: If a referenced student does not exist.
            AlreadyEnrolledError: If an added student holds another classroom.
        """
        wanted = list(dict.fromkeys(student_ids))
        new_students = [await self._get_student(sid) for sid in wanted]

        for student in list(classroom.students):
            if student.id not in wanted:
                self._release_classroom(student, classroom)

        for student in new_students:
            if student.classroom_id == classroom.id:
                if student not in classroom.students:
                    classroom.students.append(student)
                continue
            if student.classroom_id is not None:
                raise await self._classroom_conflict(student, classroom, self_service=False)
            await self._claim_classroom(student, classroom, self_service=False)

        classroom.sync_num_students()

    async def on_classroom_deleted(self, classroom: Classroom) -> None:
        """Clear the classroom on every student that referenced it."""
        result = await self.db.execute(select(Student).where(Student.classroom_id == classroom.id))
        affected = {s.id: s for s in result.scalars().all()}
        for student in classroom.students:
            affected.setdefault(student.id, student)

        for student in affected.values():
            if student.classroom_id == classroom.id:
                student.classroom_id = None

        classroom.students = []
        classroom.sync_num_students()

        logger.info("Classroom deleted: classroom=%s, students_released=%d", classroom.id, len(affected))

    async def on_course_deleted(self, course: Course) -> None:
        """Detach a course from its students, lessons and classrooms.

        Enrolled students are also removed from every classroom that
        teaches the course.
        """
        result = await self.db.execute(select(Student).where(Student.course_id == course.id))
        enrolled = {s.id: s for s in result.scalars().all()}
        for student in course.students:
            enrolled.setdefault(student.id, student)

        for student in enrolled.values():
            await self._release_course(student, course)

        linked = await self.db.execute(select(Lesson).where(Lesson.course_id == course.id))
        for lesson in linked.scalars().all():
            lesson.course_id = None
        course.lessons = []

        for classroom in await self._classrooms_teaching(course):
            classroom.courses = [c for c in classroom.courses if c.id != course.id]

        logger.info("Course deleted: course=%s, students_released=%d", course.id, len(enrolled))

    async def on_instructor_deleted(self, instructor: Instructor) -> int:
        """Archive every lesson the instructor created.

        Returns:
            Number of lessons archived.
        """
        result = await self.db.execute(select(Lesson).where(Lesson.created_by == instructor.id))
        lessons = result.scalars().all()
        for lesson in lessons:
            lesson.status = Status.ARCHIVED.value

        logger.info("Instructor deleted: instructor=%s, lessons_archived=%d", instructor.id, len(lessons))
        return len(lessons)

    async def on_student_deleted(self, student: Student) -> None:
        """Remove a student from every roster and drop their grades."""
        if student.course_id is not None:
            course = await self.db.get(Course, student.course_id)
            if course is not None and student in course.students:
                course.students.remove(student)
            student.course_id = None

        result = await self.db.execute(
            select(Classroom).where(Classroom.students.any(Student.id == student.id))
        )
        for classroom in result.scalars().all():
            self._release_classroom(student, classroom)
        student.classroom_id = None

        grades = await self.db.execute(select(Grade).where(Grade.student_id == student.id))
        for grade in grades.scalars().all():
            await self.db.delete(grade)

        logger.info("Student deleted: student=%s", student.id)

    async def on_lesson_deleted(self, lesson: Lesson) -> None:
        """Remove a lesson from course/classroom lists and prerequisite lists."""
        if lesson.course_id is not None:
            course = await self.db.get(Course, lesson.course_id)
            if course is not None:
                course.lessons = [item for item in course.lessons if item.id != lesson.id]
                course.total_credit = _sum_credits(course.lessons)
            lesson.course_id = None

        result = await self.db.execute(
            select(Classroom).where(Classroom.lessons.any(Lesson.id == lesson.id))
        )
        for classroom in result.scalars().all():
            classroom.lessons = [item for item in classroom.lessons if item.id != lesson.id]

        dependants = await self.db.execute(select(Lesson).where(Lesson.id != lesson.id))
        for other in dependants.scalars().all():
            if lesson.id in (other.prerequisite_ids or []):
                other.prerequisite_ids = [pid for pid in other.prerequisite_ids if pid != lesson.id]

        grades = await self.db.execute(select(Grade).where(Grade.lesson_id == lesson.id))
        for grade in grades.scalars().all():
            await self.db.delete(grade)

        logger.info("Lesson deleted: lesson=%s", lesson.id)

    # =========================================================================
    # Write-time guarded claims and releases
    # =========================================================================

    async def _claim_course(self, student: Student, course: Course, self_service: bool = True) -> None:
        """Set ``student.course_id`` only if it is still empty in the store."""
        result = await self.db.execute(
            update(Student)
            .where(Student.id == student.id, Student.course_id.is_(None))
            .values(course_id=course.id, updated_at=utc_now())
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            await self.db.refresh(student)
            raise await self._course_conflict(student, course, self_service)

        set_committed_value(student, "course_id", course.id)
        if student not in course.students:
            course.students.append(student)

    async def _release_course(self, student: Student, course: Course) -> None:
        """Clear a course enrollment and remove the student from its classrooms."""
        if student.course_id == course.id:
            student.course_id = None
        if student in course.students:
            course.students.remove(student)

        for classroom in await self._classrooms_teaching(course):
            if student in classroom.students or student.classroom_id == classroom.id:
                self._release_classroom(student, classroom)

    async def _claim_classroom(self, student: Student, classroom: Classroom, self_service: bool = True) -> None:
        """Set ``student.classroom_id`` only if it is still empty in the store."""
        result = await self.db.execute(
            update(Student)
            .where(Student.id == student.id, Student.classroom_id.is_(None))
            .values(classroom_id=classroom.id, updated_at=utc_now())
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            await self.db.refresh(student)
            raise await self._classroom_conflict(student, classroom, self_service)

        set_committed_value(student, "classroom_id", classroom.id)
        if student not in classroom.students:
            classroom.students.append(student)
        classroom.sync_num_students()

    def _release_classroom(self, student: Student, classroom: Classroom) -> None:
        if student.classroom_id == classroom.id:
            student.classroom_id = None
        if student in classroom.students:
            classroom.students.remove(student)
        classroom.sync_num_students()

    async def _course_conflict(
        self,
        student: Student,
        course: Course,
        self_service: bool = True,
    ) -> AlreadyEnrolledError:
        if student.course_id == course.id:
            message = "Already enrolled in this course" if self_service else "Student is already enrolled in this course"
        else:
            current = await self.db.get(Course, student.course_id) if student.course_id else None
            name = current.title if current else "another course"
            if self_service:
                message = f"You are already enrolled in {name}. Please unenrol first before joining a new course."
            else:
                message = f"Student is already enrolled in {name}"
        return AlreadyEnrolledError(message)

    async def _classroom_conflict(
        self,
        student: Student,
        classroom: Classroom,
        self_service: bool = True,
    ) -> AlreadyEnrolledError:
        if student.classroom_id == classroom.id:
            message = (
                "Already enrolled in this classroom"
                if self_service
                else "Student is already enrolled in this classroom"
            )
        else:
            current = await self.db.get(Classroom, student.classroom_id) if student.classroom_id else None
            name = current.title if current else "another classroom"
            if self_service:
                message = (
                    f"You are already enrolled in {name}. "
                    "Please leave it first before joining a new classroom."
                )
            else:
                message = f"Student is already enrolled in {name}"
        return AlreadyEnrolledError(message)

    # =========================================================================
    # Lookups
    # =========================================================================

    async def _classrooms_teaching(self, course: Course) -> list[Classroom]:
        result = await self.db.execute(
            select(Classroom).where(Classroom.courses.any(Course.id == course.id))
        )
        return list(result.scalars().all())

    async def _get_student(self, student_id: str) -> Student:
        """Get student by ID.

        Raises:
            StudentNotFoundError: If not found.
        """
        result = await self.db.execute(select(Student).where(Student.id == student_id))
        student = result.scalar_one_or_none()
        if not student:
            raise StudentNotFoundError(f"Student {student_id} not found")
        return student

    async def _get_course(self, course_id: str, for_update: bool = False) -> Course:
        """Get course by ID, optionally locking its row.

        Raises:
            CourseNotFoundError: If not found.
        """
        query = select(Course).where(Course.id == course_id)
        if for_update:
            query = query.with_for_update().execution_options(populate_existing=True)
        result = await self.db.execute(query)
        course = result.scalar_one_or_none()
        if not course:
            raise CourseNotFoundError(f"Course {course_id} not found")
        return course

    async def _get_classroom(self, classroom_id: str, for_update: bool = False) -> Classroom:
        """Get classroom by ID, optionally locking its row.

        Raises:
            ClassroomNotFoundError: If not found.
        """
        query = select(Classroom).where(Classroom.id == classroom_id)
        if for_update:
            query = query.with_for_update().execution_options(populate_existing=True)
        result = await self.db.execute(query)
        classroom = result.scalar_one_or_none()
        if not classroom:
            raise ClassroomNotFoundError(f"Classroom {classroom_id} not found")
        return classroom

    async def _get_lessons(self, lesson_ids: Sequence[str]) -> list[Lesson]:
        """Load lessons by ID, preserving the requested order.

        Raises:
            LessonNotFoundError: If any lesson is missing.
        """
        if not lesson_ids:
            return []
        result = await self.db.execute(select(Lesson).where(Lesson.id.in_(lesson_ids)))
        found = {lesson.id: lesson for lesson in result.scalars().all()}
        missing = [lid for lid in lesson_ids if lid not in found]
        if missing:
            raise LessonNotFoundError(f"Lesson(s) not found: {', '.join(missing)}")
        return [found[lid] for lid in lesson_ids]


def _sum_credits(lessons: Sequence[Lesson]) -> float:
    return float(sum(lesson.credit_points or 0 for lesson in lessons))
