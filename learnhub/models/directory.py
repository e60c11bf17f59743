# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Student and instructor directory schemas."""

from datetime import datetime

from pydantic import BaseModel, Field

from learnhub.models.course import CourseSummary


class StudentEntry(BaseModel):
    """Student as listed in the admin/instructor directory."""

    id: str
    email: str
    title: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    status: str
    is_active: bool
    last_activity: datetime | None = None
    course: CourseSummary | None = None
    classroom: str | None = None
    created_at: datetime


class InstructorEntry(BaseModel):
    """Instructor as listed in the admin directory."""

    id: str
    email: str
    title: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    status: str
    is_active: bool
    last_activity: datetime | None = None
    lessons_created: int = Field(0, description="Number of lessons authored")
    created_at: datetime
