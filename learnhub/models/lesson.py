# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Lesson request/response schemas."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field, model_validator

from learnhub.domains.common.status import Status
from learnhub.models.common import StatusInput, StatusValue, fold_legacy_status


class Reading(BaseModel):
    """Reading material attached to a lesson."""

    title: str = Field(..., min_length=1)
    url: str = Field(..., min_length=1)


class Assignment(BaseModel):
    """Assignment attached to a lesson."""

    title: str = Field(..., min_length=1)
    due_date: datetime | None = None
    points: float = Field(default=0, ge=0)


class LessonCreateRequest(BaseModel):
    """Create lesson request."""

    lesson_id: str = Field(..., min_length=1, max_length=100, description="Human-readable lesson id")
    title: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    objective: str | None = None
    prerequisites: list[str] = Field(default_factory=list, description="Lesson references")
    status: StatusInput = Status.DRAFT
    credit_points: float = Field(default=0, ge=0)
    readings: list[Reading] = Field(default_factory=list)
    assignments: list[Assignment] = Field(default_factory=list)
    estimated_work: float = Field(default=0, ge=0, description="Hours per week")

    @model_validator(mode="before")
    @classmethod
    def fold_legacy_flags(cls, data: Any) -> Any:
        return fold_legacy_status(data)


class LessonUpdateRequest(BaseModel):
    """Partial lesson update. Omitted fields are left untouched."""

    lesson_id: str | None = Field(None, min_length=1, max_length=100)
    title: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    objective: str | None = None
    prerequisites: list[str] | None = None
    status: StatusInput | None = None
    credit_points: float | None = Field(None, ge=0)
    readings: list[Reading] | None = None
    assignments: list[Assignment] | None = None
    estimated_work: float | None = Field(None, ge=0)

    @model_validator(mode="before")
    @classmethod
    def fold_legacy_flags(cls, data: Any) -> Any:
        return fold_legacy_status(data)


class LessonResponse(BaseModel):
    """Lesson details."""

    id: str
    lesson_id: str
    title: str
    description: str | None = None
    objective: str | None = None
    prerequisites: list[str] = Field(default_factory=list)
    created_by: str
    status: StatusValue
    credit_points: float
    readings: list[dict[str, Any]] = Field(default_factory=list)
    assignments: list[dict[str, Any]] = Field(default_factory=list)
    estimated_work: float
    course: str | None = Field(None, description="Course the lesson currently belongs to")
    created_at: datetime
    updated_at: datetime


class LessonSummary(BaseModel):
    """Compact lesson representation embedded in course/classroom responses."""

    id: str
    lesson_id: str
    title: str
    status: StatusValue
    credit_points: float
