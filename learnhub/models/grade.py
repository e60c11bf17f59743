# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Grade and progress request/response schemas.

Score bounds are enforced by the grading service rather than the schema,
so an out-of-range score is a 400 like every other failed precondition.
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field


class GradeCreateRequest(BaseModel):
    """Record (or overwrite) one grade.

    ``passed`` is accepted for compatibility and ignored.
    """

    student: str = Field(..., description="Student reference")
    lesson: str = Field(..., description="Lesson reference")
    classroom: str = Field(..., description="Classroom reference")
    score: float = Field(..., description="Score between 0 and 100")
    feedback: str | None = None
    passed: bool | None = Field(None, description="Ignored; derived from score")


class GradeUpdateRequest(BaseModel):
    """Change the score and/or feedback of an existing grade."""

    score: float | None = None
    feedback: str | None = None


class GradeResponse(BaseModel):
    """Grade details."""

    id: str
    student: str
    lesson: str
    classroom: str
    score: float
    passed: bool
    feedback: str | None = None
    graded_by: str | None = None
    created_at: datetime
    updated_at: datetime


class GradeDetail(GradeResponse):
    """Grade with the names needed by instructor views."""

    student_name: str
    student_email: str
    lesson_title: str


class BulkGradeRow(BaseModel):
    """One row of a bulk grading request."""

    student: str
    score: float
    feedback: str | None = None


class BulkGradeRequest(BaseModel):
    """Grade many students on one lesson in one classroom."""

    classroom: str
    lesson: str
    grades: list[BulkGradeRow] = Field(..., min_length=1)


class BulkGradeRowResult(BaseModel):
    """Outcome of one bulk grading row."""

    student: str
    success: bool
    grade: GradeResponse | None = None
    error: str | None = None


class BulkGradeResponse(BaseModel):
    """Per-row results plus summary counts."""

    results: list[BulkGradeRowResult]
    total_succeeded: int
    total_failed: int


class LessonProgress(BaseModel):
    """Progress row for one lesson of the student's course."""

    lesson: str = Field(..., description="Lesson reference")
    lesson_id: str = Field(..., description="Human-readable lesson id")
    lesson_title: str
    score: float | None = Field(None, description="None while ungraded")
    passed: bool
    feedback: str
    status: Literal["graded", "ungraded"]
    graded_at: datetime | None = None


class ProgressSummary(BaseModel):
    """Graded/ungraded counts."""

    graded: int
    ungraded: int
    total: int


class ProgressStudent(BaseModel):
    """Student block of a progress report."""

    id: str
    name: str
    course: str | None = None
    classroom: str | None = None


class ProgressResponse(BaseModel):
    """Completion of a student's current course."""

    student: ProgressStudent
    progress_percent: float
    passed_lessons: int
    total_lessons: int
    lessons: list[LessonProgress] = Field(default_factory=list)
    summary: ProgressSummary
    message: str | None = None


class GradebookRow(BaseModel):
    """One student's line in a classroom gradebook."""

    student: str
    student_name: str
    student_email: str
    grades: dict[str, GradeResponse | None] = Field(
        default_factory=dict, description="Lesson reference -> grade (None if ungraded)"
    )


class GradebookResponse(BaseModel):
    """Roster x lessons matrix of a classroom."""

    classroom: str
    classroom_title: str
    lessons: list[dict[str, str]]
    rows: list[GradebookRow]


class LessonGradeStats(BaseModel):
    """Aggregate grade figures of one lesson."""

    lesson: str
    lesson_title: str
    graded: int
    average_score: float
    pass_rate: float


class CourseGradeStats(BaseModel):
    """Aggregate grade figures of a course."""

    course: str
    total_lessons: int
    total_grades: int
    students_graded: int
    overall_pass_rate: float
    lessons: list[LessonGradeStats]
