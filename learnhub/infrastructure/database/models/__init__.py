# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""SQLAlchemy ORM models.

Importing this package registers every table with Base.metadata.
"""

from learnhub.infrastructure.database.models.base import Base, new_id
from learnhub.infrastructure.database.models.classroom import (
    Classroom,
    classroom_courses,
    classroom_lessons,
    classroom_students,
)
from learnhub.infrastructure.database.models.course import Course, course_lessons, course_students
from learnhub.infrastructure.database.models.grade import Grade
from learnhub.infrastructure.database.models.lesson import Lesson
from learnhub.infrastructure.database.models.user import (
    ROLE_ADMIN,
    ROLE_INSTRUCTOR,
    ROLE_STUDENT,
    ROLES,
    USER_STATUS_ACTIVE,
    USER_STATUS_INACTIVE,
    Admin,
    Instructor,
    Student,
    User,
)

__all__ = [
    "Base",
    "new_id",
    # Users
    "User",
    "Student",
    "Instructor",
    "Admin",
    "ROLES",
    "ROLE_STUDENT",
    "ROLE_INSTRUCTOR",
    "ROLE_ADMIN",
    "USER_STATUS_ACTIVE",
    "USER_STATUS_INACTIVE",
    # Content
    "Lesson",
    "Course",
    "Classroom",
    "Grade",
    # Association tables
    "course_lessons",
    "course_students",
    "classroom_courses",
    "classroom_lessons",
    "classroom_students",
]
