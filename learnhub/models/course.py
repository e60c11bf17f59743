# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Course request/response schemas."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, model_validator

from learnhub.domains.common.status import Status
from learnhub.models.common import StatusInput, StatusValue, UserSummary, fold_legacy_status
from learnhub.models.lesson import LessonSummary


class CourseCreateRequest(BaseModel):
    """Create course request."""

    course_id: str = Field(..., min_length=1, max_length=100, description="Human-readable course id")
    title: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    lessons: list[str] = Field(default_factory=list, description="Lesson references, in order")
    status: StatusInput = Status.DRAFT

    @model_validator(mode="before")
    @classmethod
    def fold_legacy_flags(cls, data: Any) -> Any:
        return fold_legacy_status(data)


class CourseUpdateRequest(BaseModel):
    """Partial course update.

    ``lessons`` replaces the lesson list and relinks the lessons;
    ``students`` replaces the roster through the enrollment rules.
    """

    course_id: str | None = Field(None, min_length=1, max_length=100)
    title: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    lessons: list[str] | None = None
    students: list[str] | None = None
    status: StatusInput | None = None

    @model_validator(mode="before")
    @classmethod
    def fold_legacy_flags(cls, data: Any) -> Any:
        return fold_legacy_status(data)


class CourseStudent(UserSummary):
    """Course roster entry."""

    classroom: str | None = Field(None, description="Classroom the student is placed in")


class CourseResponse(BaseModel):
    """Course details."""

    id: str
    course_id: str
    title: str
    description: str | None = None
    status: StatusValue
    total_credit: float
    owner: str = Field(..., description="Creator reference")
    lessons: list[LessonSummary] = Field(default_factory=list)
    students: list[CourseStudent] = Field(default_factory=list)
    num_students: int = 0
    created_at: datetime
    updated_at: datetime


class CourseSummary(BaseModel):
    """Compact course representation embedded in other responses."""

    id: str
    course_id: str
    title: str
    status: StatusValue
    total_credit: float
