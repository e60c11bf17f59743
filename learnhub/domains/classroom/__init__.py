# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Classroom domain: classroom management and timeline classification."""

from learnhub.domains.classroom.service import (
    ClassroomIdExistsError,
    ClassroomNotFoundError,
    ClassroomService,
    to_classroom_response,
)
from learnhub.domains.classroom.timeline import COMPLETED, ONGOING, UPCOMING, classify, end_time

__all__ = [
    "ClassroomService",
    "ClassroomNotFoundError",
    "ClassroomIdExistsError",
    "to_classroom_response",
    "classify",
    "end_time",
    "ONGOING",
    "COMPLETED",
    "UPCOMING",
]
