# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Enrollment domain: keeps student, course and classroom references in step."""

from learnhub.domains.enrollment.coordinator import (
    AlreadyEnrolledError,
    ClassroomNotFoundError,
    CourseNotFoundError,
    EnrollmentCoordinator,
    EnrollmentError,
    LessonNotFoundError,
    NotEnrolledError,
    StudentNotFoundError,
)

__all__ = [
    "EnrollmentCoordinator",
    "EnrollmentError",
    "AlreadyEnrolledError",
    "NotEnrolledError",
    "StudentNotFoundError",
    "CourseNotFoundError",
    "ClassroomNotFoundError",
    "LessonNotFoundError",
]
