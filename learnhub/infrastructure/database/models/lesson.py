# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Lesson model."""

from typing import Any, Optional

from sqlalchemy import JSON, Float, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from learnhub.infrastructure.database.models.base import Base, IdMixin, TimestampMixin


class Lesson(Base, IdMixin, TimestampMixin):
    """Smallest unit of content.

    ``prerequisite_ids`` holds ids of other lessons. The graph they form is
    validated by the lesson service before every write; the store does not
    enforce it. ``course_id`` is rewritten whenever a course saves its
    lesson list.
    """

    __tablename__ = "lessons"

    lesson_id: Mapped[str] = mapped_column(String(100), index=True)
    title: Mapped[str] = mapped_column(String(255))
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    objective: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    prerequisite_ids: Mapped[list[str]] = mapped_column(JSON, default=list)
    created_by: Mapped[str] = mapped_column(String(36), index=True)
    status: Mapped[str] = mapped_column(String(20), default="Draft", index=True)
    credit_points: Mapped[float] = mapped_column(Float, default=0)
    readings: Mapped[list[dict[str, Any]]] = mapped_column(JSON, default=list)
    assignments: Mapped[list[dict[str, Any]]] = mapped_column(JSON, default=list)
    estimated_work: Mapped[float] = mapped_column(Float, default=0)
    course_id: Mapped[Optional[str]] = mapped_column(
        String(36),
        ForeignKey("courses.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )

    def __repr__(self) -> str:
        return f"<Lesson {self.lesson_id}>"
