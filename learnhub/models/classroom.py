# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Classroom and enrollment request/response schemas."""

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, Field, model_validator

from learnhub.domains.common.status import Status
from learnhub.models.common import StatusInput, StatusValue, UserSummary, fold_legacy_status
from learnhub.models.course import CourseSummary
from learnhub.models.lesson import LessonSummary


class ClassroomCreateRequest(BaseModel):
    """Create classroom request. ``duration`` is in weeks."""

    classroom_id: str = Field(..., min_length=1, max_length=100, description="Human-readable classroom id")
    title: str = Field(..., min_length=1, max_length=255)
    courses: list[str] = Field(default_factory=list, description="Course references")
    lessons: list[str] = Field(default_factory=list, description="Lesson references")
    students: list[str] = Field(default_factory=list, description="Student references")
    start_time: datetime | None = None
    duration: float | None = Field(None, gt=0, description="Length in weeks")
    status: StatusInput = Status.DRAFT

    @model_validator(mode="before")
    @classmethod
    def fold_legacy_flags(cls, data: Any) -> Any:
        return fold_legacy_status(data)


class ClassroomUpdateRequest(BaseModel):
    """Partial classroom update. ``students`` replaces the roster."""

    classroom_id: str | None = Field(None, min_length=1, max_length=100)
    title: str | None = Field(None, min_length=1, max_length=255)
    courses: list[str] | None = None
    lessons: list[str] | None = None
    students: list[str] | None = None
    start_time: datetime | None = None
    duration: float | None = Field(None, gt=0)
    status: StatusInput | None = None

    @model_validator(mode="before")
    @classmethod
    def fold_legacy_flags(cls, data: Any) -> Any:
        return fold_legacy_status(data)


class ClassroomResponse(BaseModel):
    """Classroom details."""

    id: str
    classroom_id: str
    title: str
    courses: list[CourseSummary] = Field(default_factory=list)
    lessons: list[LessonSummary] = Field(default_factory=list)
    students: list[UserSummary] = Field(default_factory=list)
    num_students: int
    start_time: datetime | None = None
    duration: float | None = Field(None, description="Length in weeks")
    end_time: datetime | None = None
    owner: str = Field(..., description="Creator reference")
    status: StatusValue
    timeline: Literal["ongoing", "completed", "upcoming"] | None = None
    created_at: datetime
    updated_at: datetime


class ClassroomStatsResponse(BaseModel):
    """Aggregate figures over all classrooms."""

    total_classrooms: int
    average_students: float
    average_credits: float
    average_duration: float


class AddStudentRequest(BaseModel):
    """Instructor/admin request to place a student in a classroom."""

    student: str = Field(..., description="Student reference")


class EnrollmentResponse(BaseModel):
    """Result of an enroll or unenroll operation."""

    message: str
    student: str
    course: str | None = None
    classroom: str | None = None
    num_students: int | None = None
