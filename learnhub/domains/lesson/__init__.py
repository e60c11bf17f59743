# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Lesson domain."""

from learnhub.domains.lesson.service import (
    LessonIdExistsError,
    LessonNotFoundError,
    LessonService,
    to_lesson_response,
    to_lesson_summary,
)

__all__ = [
    "LessonService",
    "LessonNotFoundError",
    "LessonIdExistsError",
    "to_lesson_response",
    "to_lesson_summary",
]
