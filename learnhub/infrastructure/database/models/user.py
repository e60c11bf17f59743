# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""User accounts.

All roles share one ``users`` table; the ``role`` column is the
discriminator. Student-only columns (title, names, course, classroom) are
nullable so instructors and admins can live in the same table.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from learnhub.infrastructure.database.models.base import Base, IdMixin, TimestampMixin

ROLE_STUDENT = "Student"
ROLE_INSTRUCTOR = "Instructor"
ROLE_ADMIN = "Admin"

ROLES = (ROLE_STUDENT, ROLE_INSTRUCTOR, ROLE_ADMIN)

USER_STATUS_ACTIVE = "Active"
USER_STATUS_INACTIVE = "Inactive"


class User(Base, IdMixin, TimestampMixin):
    """Base account row for every role."""

    __tablename__ = "users"
    __mapper_args__ = {
        "polymorphic_on": "role",
        "polymorphic_identity": "User",
        # Base-class queries load the Student columns too; no lazy loads under asyncio
        "with_polymorphic": "*",
    }

    username: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    password_hash: Mapped[str] = mapped_column(String(255))
    role: Mapped[str] = mapped_column(String(20), index=True)
    status: Mapped[str] = mapped_column(String(20), default=USER_STATUS_INACTIVE)
    last_login: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    title: Mapped[Optional[str]] = mapped_column(String(10), nullable=True)
    first_name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    last_name: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    @property
    def email(self) -> str:
        """Usernames are email addresses."""
        return self.username

    @property
    def full_name(self) -> str:
        """First and last name joined, falling back to the username."""
        parts = [p for p in (self.first_name, self.last_name) if p]
        return " ".join(parts) if parts else self.username

    def __repr__(self) -> str:
        return f"<{self.role} {self.username}>"


class Student(User):
    """A learner. Holds at most one course and one classroom enrollment."""

    __mapper_args__ = {"polymorphic_identity": "Student"}

    course_id: Mapped[Optional[str]] = mapped_column(
        String(36),
        ForeignKey("courses.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    classroom_id: Mapped[Optional[str]] = mapped_column(
        String(36),
        ForeignKey("classrooms.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    lesson_id: Mapped[Optional[str]] = mapped_column(
        String(36),
        ForeignKey("lessons.id", ondelete="SET NULL"),
        nullable=True,
    )


class Instructor(User):
    """Creates lessons and courses, runs classrooms and grades students."""

    __mapper_args__ = {"polymorphic_identity": "Instructor"}


class Admin(User):
    """Platform administrator."""

    __mapper_args__ = {"polymorphic_identity": "Admin"}
