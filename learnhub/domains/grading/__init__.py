# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Grading domain: grade recording and progress calculation."""

from learnhub.domains.grading.service import (
    GradeNotFoundError,
    GradingService,
    InvalidScoreError,
    to_grade_response,
)

__all__ = [
    "GradingService",
    "GradeNotFoundError",
    "InvalidScoreError",
    "to_grade_response",
]
