# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Course domain."""

from learnhub.domains.course.service import (
    CourseIdExistsError,
    CourseNotFoundError,
    CourseService,
    to_course_response,
    to_course_summary,
    to_user_summary,
)

__all__ = [
    "CourseService",
    "CourseNotFoundError",
    "CourseIdExistsError",
    "to_course_response",
    "to_course_summary",
    "to_user_summary",
]
