# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Classroom model and its association tables."""

from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import Column, DateTime, Float, ForeignKey, Integer, String, Table
from sqlalchemy.orm import Mapped, mapped_column, relationship

from learnhub.infrastructure.database.models.base import Base, IdMixin, TimestampMixin

if TYPE_CHECKING:
    from learnhub.infrastructure.database.models.course import Course
    from learnhub.infrastructure.database.models.lesson import Lesson
    from learnhub.infrastructure.database.models.user import Student


classroom_courses = Table(
    "classroom_courses",
    Base.metadata,
    Column("classroom_id", String(36), ForeignKey("classrooms.id", ondelete="CASCADE"), primary_key=True),
    Column("course_id", String(36), ForeignKey("courses.id", ondelete="CASCADE"), primary_key=True),
)

classroom_lessons = Table(
    "classroom_lessons",
    Base.metadata,
    Column("classroom_id", String(36), ForeignKey("classrooms.id", ondelete="CASCADE"), primary_key=True),
    Column("lesson_id", String(36), ForeignKey("lessons.id", ondelete="CASCADE"), primary_key=True),
)

classroom_students = Table(
    "classroom_students",
    Base.metadata,
    Column("classroom_id", String(36), ForeignKey("classrooms.id", ondelete="CASCADE"), primary_key=True),
    Column("student_id", String(36), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
)


class Classroom(Base, IdMixin, TimestampMixin):
    """A scheduled run of a course with its own roster.

    ``duration`` is measured in weeks. ``num_students`` always equals the
    size of ``students``; call sync_num_students() after touching the roster.
    """

    __tablename__ = "classrooms"

    classroom_id: Mapped[str] = mapped_column(String(100), unique=True, index=True)
    title: Mapped[str] = mapped_column(String(255))
    num_students: Mapped[int] = mapped_column(Integer, default=0)
    start_time: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    duration: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    owner_id: Mapped[str] = mapped_column(String(36), index=True)
    status: Mapped[str] = mapped_column(String(20), default="Draft", index=True)

    courses: Mapped[list["Course"]] = relationship(
        secondary=classroom_courses,
        lazy="selectin",
        order_by="Course.course_id",
    )
    lessons: Mapped[list["Lesson"]] = relationship(
        secondary=classroom_lessons,
        lazy="selectin",
        order_by="Lesson.lesson_id",
    )
    students: Mapped[list["Student"]] = relationship(
        secondary=classroom_students,
        lazy="selectin",
        order_by="User.username",
    )

    def sync_num_students(self) -> None:
        """Recompute the cached roster size."""
        self.num_students = len(self.students)

    def __repr__(self) -> str:
        return f"<Classroom {self.classroom_id}>"
