# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Grade model."""

from typing import Optional

from sqlalchemy import Boolean, Float, ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from learnhub.infrastructure.database.models.base import Base, IdMixin, TimestampMixin


class Grade(Base, IdMixin, TimestampMixin):
    """Score of one student on one lesson within one classroom.

    The (student, lesson, classroom) triple is unique, so re-grading
    overwrites instead of duplicating.
    """

    __tablename__ = "grades"
    __table_args__ = (
        UniqueConstraint("student_id", "lesson_id", "classroom_id", name="uq_grades_student_lesson_classroom"),
    )

    student_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("users.id", ondelete="CASCADE"), index=True
    )
    lesson_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("lessons.id", ondelete="CASCADE"), index=True
    )
    classroom_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("classrooms.id", ondelete="CASCADE"), index=True
    )
    score: Mapped[float] = mapped_column(Float)
    passed: Mapped[bool] = mapped_column(Boolean, default=False)
    feedback: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    graded_by: Mapped[Optional[str]] = mapped_column(String(36), nullable=True)

    def __repr__(self) -> str:
        return f"<Grade {self.student_id}/{self.lesson_id}/{self.classroom_id}: {self.score}>"
