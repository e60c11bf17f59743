# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Grading service: grade recording and progress calculation.

A grade is scoped to a (student, lesson, classroom) triple and recording
the same triple again overwrites it. ``passed`` is always derived from
the score and the configured pass mark.

Progress is computed over every lesson of the student's current course,
counting only grades given in the student's current classroom.

Example:
    >>> service = GradingService(db, pass_mark=50)
    >>> progress = await service.compute_progress(student_id)
    >>> progress.progress_percent
    33.33
"""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Sequence

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from learnhub.core.errors import ForbiddenError, LearnHubError, NotFoundError, ValidationError
from learnhub.domains.auth.identity import CurrentUser
from learnhub.domains.enrollment.coordinator import NotEnrolledError
from learnhub.infrastructure.database.models import Classroom, Course, Grade, Lesson, Student, User
from learnhub.models.grade import (
    BulkGradeRequest,
    BulkGradeResponse,
    BulkGradeRowResult,
    CourseGradeStats,
    GradebookResponse,
    GradebookRow,
    GradeCreateRequest,
    GradeDetail,
    GradeResponse,
    GradeUpdateRequest,
    LessonGradeStats,
    LessonProgress,
    ProgressResponse,
    ProgressStudent,
    ProgressSummary,
)

logger = logging.getLogger(__name__)

MIN_SCORE = 0.0
MAX_SCORE = 100.0

NOT_GRADED_FEEDBACK = "Not graded yet"


class GradeNotFoundError(NotFoundError):
    """Raised when grade is not found."""

    pass


class InvalidScoreError(ValidationError):
    """Raised when a score is outside 0-100."""

    pass


def to_grade_response(grade: Grade) -> GradeResponse:
    """Build the grade response."""
    return GradeResponse(
        id=grade.id,
        student=grade.student_id,
        lesson=grade.lesson_id,
        classroom=grade.classroom_id,
        score=grade.score,
        passed=grade.passed,
        feedback=grade.feedback,
        graded_by=grade.graded_by,
        created_at=grade.created_at,
        updated_at=grade.updated_at,
    )


def _to_grade_detail(grade: Grade, student: User, lesson: Lesson) -> GradeDetail:
    return GradeDetail(
        **to_grade_response(grade).model_dump(),
        student_name=student.full_name,
        student_email=student.username,
        lesson_title=lesson.title,
    )


def _percent(part: int, whole: int) -> float:
    if not whole:
        return 0.0
    return round(100 * part / whole, 2)


class GradingService:
    """Records grades and computes student progress.

    Attributes:
        db: Async database session.
        pass_mark: Minimum score that counts as passed.
    """

    def __init__(self, db: AsyncSession, pass_mark: float = 50.0) -> None:
        self.db = db
        self.pass_mark = pass_mark

    # =========================================================================
    # Progress
    # =========================================================================

    async def compute_progress(self, student_id: str) -> ProgressResponse:
        """Compute a student's completion of their current course.

        Args:
            student_id: Student reference.

        Returns:
            Per-lesson progress with summary counts. A student without a
            course gets a zero report with an explanatory message.

        Raises:
            NotFoundError: If the student does not exist.
        """
        student = await self._get_student(student_id)
        header = ProgressStudent(
            id=student.id,
            name=student.full_name,
            course=student.course_id,
            classroom=student.classroom_id,
        )

        if student.course_id is None:
            return ProgressResponse(
                student=header,
                progress_percent=0,
                passed_lessons=0,
                total_lessons=0,
                lessons=[],
                summary=ProgressSummary(graded=0, ungraded=0, total=0),
                message="Student not enrolled in any course",
            )

        result = await self.db.execute(
            select(Lesson).where(Lesson.course_id == student.course_id).order_by(Lesson.lesson_id)
        )
        lessons = result.scalars().all()

        grades: dict[str, Grade] = {}
        if student.classroom_id is not None and lessons:
            result = await self.db.execute(
                select(Grade).where(
                    Grade.student_id == student.id,
                    Grade.classroom_id == student.classroom_id,
                    Grade.lesson_id.in_([lesson.id for lesson in lessons]),
                )
            )
            grades = {grade.lesson_id: grade for grade in result.scalars().all()}

        rows = []
        for lesson in lessons:
            grade = grades.get(lesson.id)
            if grade is None:
                rows.append(
                    LessonProgress(
                        lesson=lesson.id,
                        lesson_id=lesson.lesson_id,
                        lesson_title=lesson.title,
                        score=None,
                        passed=False,
                        feedback=NOT_GRADED_FEEDBACK,
                        status="ungraded",
                    )
                )
            else:
                rows.append(
                    LessonProgress(
                        lesson=lesson.id,
                        lesson_id=lesson.lesson_id,
                        lesson_title=lesson.title,
                        score=grade.score,
                        passed=grade.passed,
                        feedback=grade.feedback or "",
                        status="graded",
                        graded_at=grade.updated_at,
                    )
                )

        passed = sum(1 for row in rows if row.passed)
        graded = sum(1 for row in rows if row.status == "graded")

        return ProgressResponse(
            student=header,
            progress_percent=_percent(passed, len(rows)),
            passed_lessons=passed,
            total_lessons=len(rows),
            lessons=rows,
            summary=ProgressSummary(graded=graded, ungraded=len(rows) - graded, total=len(rows)),
            message=None if student.classroom_id else "Student is not enrolled in a classroom",
        )

    # =========================================================================
    # Recording
    # =========================================================================

    async def record_grade(self, actor: CurrentUser, request: GradeCreateRequest) -> GradeResponse:
        """Record or overwrite the grade of a (student, lesson, classroom) triple.

        Any client-supplied ``passed`` value is ignored.

        Raises:
            InvalidScoreError: If the score is outside 0-100.
            NotFoundError: If the student, lesson or classroom does not exist.
            NotEnrolledError: If the student lacks a course or a classroom.
            ForbiddenError: If the actor neither owns the classroom nor is an admin.
        """
        self._check_score(request.score)

        student = await self._get_student(request.student)
        lesson = await self._get_lesson(request.lesson)
        classroom = await self._get_classroom(request.classroom)

        if student.course_id is None or student.classroom_id is None:
            raise NotEnrolledError("Student must be enrolled in a course and a classroom to be graded")

        if not actor.owns(classroom.owner_id):
            raise ForbiddenError("You can only grade students in classrooms you created")

        feedback = request.feedback or f"Graded: {request.score:g}/100"
        key = (student.id, lesson.id, classroom.id)

        try:
            grade = await self._upsert(*key, request.score, feedback, actor.id)
            await self.db.commit()
        except IntegrityError:
            # Lost an insert race on the unique triple; the row exists now.
            await self.db.rollback()
            grade = await self._upsert(*key, request.score, feedback, actor.id)
            await self.db.commit()

        logger.info(
            "Recorded grade: student=%s, lesson=%s, classroom=%s, score=%s, passed=%s",
            *key,
            grade.score,
            grade.passed,
        )

        return to_grade_response(grade)

    async def bulk_record_grades(self, actor: CurrentUser, request: BulkGradeRequest) -> BulkGradeResponse:
        """Grade many students on one lesson; each row succeeds or fails on its own."""
        results: list[BulkGradeRowResult] = []

        for row in request.grades:
            try:
                grade = await self.record_grade(
                    actor,
                    GradeCreateRequest(
                        student=row.student,
                        lesson=request.lesson,
                        classroom=request.classroom,
                        score=row.score,
                        feedback=row.feedback,
                    ),
                )
            except LearnHubError as e:
                logger.info("Bulk grade row failed: student=%s, error=%s", row.student, e.message)
                results.append(BulkGradeRowResult(student=row.student, success=False, error=e.message))
            else:
                results.append(BulkGradeRowResult(student=row.student, success=True, grade=grade))

        succeeded = sum(1 for r in results if r.success)

        logger.info(
            "Bulk grading finished: classroom=%s, lesson=%s, succeeded=%d, failed=%d",
            request.classroom,
            request.lesson,
            succeeded,
            len(results) - succeeded,
        )

        return BulkGradeResponse(
            results=results,
            total_succeeded=succeeded,
            total_failed=len(results) - succeeded,
        )

    async def update_grade(self, actor: CurrentUser, grade_id: str, request: GradeUpdateRequest) -> GradeResponse:
        """Change the score and/or feedback of a grade.

        Raises:
            GradeNotFoundError: If grade not found.
            ForbiddenError: If the actor neither owns the classroom nor is an admin.
            InvalidScoreError: If the new score is outside 0-100.
        """
        grade = await self._get_grade(grade_id)
        await self._check_grader(actor, grade.classroom_id)

        if request.score is not None:
            self._check_score(request.score)
            grade.score = request.score
            grade.passed = request.score >= self.pass_mark
        if request.feedback is not None:
            grade.feedback = request.feedback
        grade.graded_by = actor.id

        await self.db.commit()

        logger.info("Updated grade: %s", grade.id)

        return to_grade_response(grade)

    async def delete_grade(self, actor: CurrentUser, grade_id: str) -> None:
        """Delete a grade.

        Raises:
            GradeNotFoundError: If grade not found.
            ForbiddenError: If the actor neither owns the classroom nor is an admin.
        """
        grade = await self._get_grade(grade_id)
        await self._check_grader(actor, grade.classroom_id)

        await self.db.delete(grade)
        await self.db.commit()

        logger.info("Deleted grade: %s", grade_id)

    # =========================================================================
    # Reads
    # =========================================================================

    async def get_grade(self, grade_id: str) -> GradeResponse:
        """Get grade by ID.

        Raises:
            GradeNotFoundError: If grade not found.
        """
        return to_grade_response(await self._get_grade(grade_id))

    async def list_classroom_grades(self, classroom_id: str) -> list[GradeDetail]:
        """List every grade given in a classroom.

        Raises:
            NotFoundError: If the classroom does not exist.
        """
        await self._get_classroom(classroom_id)
        return await self._list_details(Grade.classroom_id == classroom_id)

    async def list_lesson_grades(self, lesson_id: str) -> list[GradeDetail]:
        """List every grade given for a lesson.

        Raises:
            NotFoundError: If the lesson does not exist.
        """
        await self._get_lesson(lesson_id)
        return await self._list_details(Grade.lesson_id == lesson_id)

    async def list_student_grades(self, student_id: str) -> list[GradeDetail]:
        """List every grade of a student, across classrooms.

        Raises:
            NotFoundError: If the student does not exist.
        """
        await self._get_student(student_id)
        return await self._list_details(Grade.student_id == student_id)

    async def classroom_gradebook(self, classroom_id: str) -> GradebookResponse:
        """Roster x lessons matrix of a classroom.

        Raises:
            NotFoundError: If the classroom does not exist.
        """
        classroom = await self._get_classroom(classroom_id)

        result = await self.db.execute(select(Grade).where(Grade.classroom_id == classroom.id))
        by_student: dict[str, dict[str, Grade]] = defaultdict(dict)
        for grade in result.scalars().all():
            by_student[grade.student_id][grade.lesson_id] = grade

        rows = []
        for student in classroom.students:
            graded = by_student.get(student.id, {})
            rows.append(
                GradebookRow(
                    student=student.id,
                    student_name=student.full_name,
                    student_email=student.username,
                    grades={
                        lesson.id: to_grade_response(graded[lesson.id]) if lesson.id in graded else None
                        for lesson in classroom.lessons
                    },
                )
            )

        return GradebookResponse(
            classroom=classroom.id,
            classroom_title=classroom.title,
            lessons=[
                {"id": lesson.id, "lesson_id": lesson.lesson_id, "title": lesson.title}
                for lesson in classroom.lessons
            ],
            rows=rows,
        )

    async def course_stats(self, course_id: str) -> CourseGradeStats:
        """Aggregate grade figures of a course's lessons across all classrooms.

        Raises:
            NotFoundError: If the course does not exist.
        """
        course = await self.db.get(Course, course_id)
        if course is None:
            raise NotFoundError(f"Course {course_id} not found")

        result = await self.db.execute(
            select(Lesson).where(Lesson.course_id == course.id).order_by(Lesson.lesson_id)
        )
        lessons = result.scalars().all()

        grades: Sequence[Grade] = []
        if lessons:
            result = await self.db.execute(
                select(Grade).where(Grade.lesson_id.in_([lesson.id for lesson in lessons]))
            )
            grades = result.scalars().all()

        by_lesson: dict[str, list[Grade]] = defaultdict(list)
        for grade in grades:
            by_lesson[grade.lesson_id].append(grade)

        lesson_stats = []
        for lesson in lessons:
            graded = by_lesson.get(lesson.id, [])
            lesson_stats.append(
                LessonGradeStats(
                    lesson=lesson.id,
                    lesson_title=lesson.title,
                    graded=len(graded),
                    average_score=round(sum(g.score for g in graded) / len(graded), 2) if graded else 0,
                    pass_rate=_percent(sum(1 for g in graded if g.passed), len(graded)),
                )
            )

        return CourseGradeStats(
            course=course.id,
            total_lessons=len(lessons),
            total_grades=len(grades),
            students_graded=len({g.student_id for g in grades}),
            overall_pass_rate=_percent(sum(1 for g in grades if g.passed), len(grades)),
            lessons=lesson_stats,
        )

    # =========================================================================
    # Helpers
    # =========================================================================

    async def _upsert(
        self,
        student_id: str,
        lesson_id: str,
        classroom_id: str,
        score: float,
        feedback: str,
        graded_by: str,
    ) -> Grade:
        result = await self.db.execute(
            select(Grade).where(
                Grade.student_id == student_id,
                Grade.lesson_id == lesson_id,
                Grade.classroom_id == classroom_id,
            )
        )
        grade = result.scalar_one_or_none()

        if grade is None:
            grade = Grade(student_id=student_id, lesson_id=lesson_id, classroom_id=classroom_id)
            self.db.add(grade)

        grade.score = score
        grade.passed = score >= self.pass_mark
        grade.feedback = feedback
        grade.graded_by = graded_by

        await self.db.flush()
        return grade

    async def _list_details(self, condition) -> list[GradeDetail]:
        result = await self.db.execute(
            select(Grade, User, Lesson)
            .join(User, User.id == Grade.student_id)
            .join(Lesson, Lesson.id == Grade.lesson_id)
            .where(condition)
            .order_by(Lesson.lesson_id, User.username)
        )
        return [_to_grade_detail(grade, user, lesson) for grade, user, lesson in result.all()]

    async def _check_grader(self, actor: CurrentUser, classroom_id: str) -> None:
        classroom = await self._get_classroom(classroom_id)
        if not actor.owns(classroom.owner_id):
            raise ForbiddenError("You can only manage grades in classrooms you created")

    @staticmethod
    def _check_score(score: float) -> None:
        if not MIN_SCORE <= score <= MAX_SCORE:
            raise InvalidScoreError("Score must be between 0 and 100")

    async def _get_grade(self, grade_id: str) -> Grade:
        grade = await self.db.get(Grade, grade_id)
        if grade is None:
            raise GradeNotFoundError(f"Grade {grade_id} not found")
        return grade

    async def _get_student(self, student_id: str) -> Student:
        student = await self.db.get(Student, student_id)
        if student is None:
            raise NotFoundError(f"Student {student_id} not found")
        return student

    async def _get_lesson(self, lesson_id: str) -> Lesson:
        lesson = await self.db.get(Lesson, lesson_id)
        if lesson is None:
            raise NotFoundError(f"Lesson {lesson_id} not found")
        return lesson

    async def _get_classroom(self, classroom_id: str) -> Classroom:
        classroom = await self.db.get(Classroom, classroom_id)
        if classroom is None:
            raise NotFoundError(f"Classroom {classroom_id} not found")
        return classroom
