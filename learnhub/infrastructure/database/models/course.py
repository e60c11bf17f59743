# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Course model and its lesson and student association tables."""

from typing import TYPE_CHECKING, Optional

from sqlalchemy import Column, Float, ForeignKey, String, Table, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from learnhub.infrastructure.database.models.base import Base, IdMixin, TimestampMixin

if TYPE_CHECKING:
    from learnhub.infrastructure.database.models.lesson import Lesson
    from learnhub.infrastructure.database.models.user import Student


course_lessons = Table(
    "course_lessons",
    Base.metadata,
    Column("course_id", String(36), ForeignKey("courses.id", ondelete="CASCADE"), primary_key=True),
    Column("lesson_id", String(36), ForeignKey("lessons.id", ondelete="CASCADE"), primary_key=True),
)

course_students = Table(
    "course_students",
    Base.metadata,
    Column("course_id", String(36), ForeignKey("courses.id", ondelete="CASCADE"), primary_key=True),
    Column("student_id", String(36), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
)


class Course(Base, IdMixin, TimestampMixin):
    """A named bundle of lessons.

    ``students`` is the course roster. It mirrors ``Student.course_id``;
    the enrollment coordinator keeps both sides in step.
    ``total_credit`` is computed when the lesson list is saved.
    """

    __tablename__ = "courses"

    course_id: Mapped[str] = mapped_column(String(100), unique=True, index=True)
    title: Mapped[str] = mapped_column(String(255))
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String(20), default="Draft", index=True)
    total_credit: Mapped[float] = mapped_column(Float, default=0)
    owner_id: Mapped[str] = mapped_column(String(36), index=True)

    lessons: Mapped[list["Lesson"]] = relationship(
        secondary=course_lessons,
        lazy="selectin",
        order_by="Lesson.lesson_id",
    )
    students: Mapped[list["Student"]] = relationship(
        secondary=course_students,
        lazy="selectin",
        order_by="User.username",
    )

    def __repr__(self) -> str:
        return f"<Course {self.course_id}>"
