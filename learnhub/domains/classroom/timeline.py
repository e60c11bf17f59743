# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Classroom timeline classification.

A Published classroom runs from ``start_time`` for ``duration`` weeks.
Classification rules:

- ``start <= now <= end``  -> ongoing
- ``now > end``            -> completed
- ``now < start``          -> upcoming
- start or duration unknown -> ongoing

Classrooms in any other status are not classified.
"""

from datetime import datetime

from learnhub.domains.common.status import Status, normalize_status
from learnhub.infrastructure.database.models import Classroom
from learnhub.utils.datetime import add_weeks, ensure_utc, utc_now

ONGOING = "ongoing"
COMPLETED = "completed"
UPCOMING = "upcoming"


def end_time(classroom: Classroom) -> datetime | None:
    """End of the classroom window, or None when it cannot be computed."""
    if classroom.start_time is None or classroom.duration is None:
        return None
    return add_weeks(classroom.start_time, classroom.duration)


def classify(classroom: Classroom, now: datetime | None = None) -> str | None:
    """Classify a classroom relative to ``now``.

    Args:
        classroom: Classroom to classify.
        now: Reference time; naive values are taken as UTC. Defaults to
            the current time.

    Returns:
        ``"ongoing"``, ``"completed"`` or ``"upcoming"``; None for
        classrooms that are not Published.
    """
    if normalize_status(classroom.status) is not Status.PUBLISHED:
        return None

    end = end_time(classroom)
    if end is None:
        return ONGOING

    reference = ensure_utc(now) if now is not None else utc_now()
    start = ensure_utc(classroom.start_time)

    if reference > end:
        return COMPLETED
    if reference < start:
        return UPCOMING
    return ONGOING
