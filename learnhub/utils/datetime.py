# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""DateTime utilities for LearnHub.

All timestamps are stored and compared as timezone-aware UTC datetimes.
SQLite hands back naive values, so anything read from the store goes
through ensure_utc() before it is compared with utc_now().

Usage:
------
    from learnhub.utils.datetime import utc_now

    # For SQLAlchemy model defaults
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utc_now)
"""

from datetime import datetime, timedelta, timezone


def utc_now() -> datetime:
    """Get current UTC time as timezone-aware datetime.

    Returns:
        Timezone-aware datetime representing current UTC time.
    """
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime | None) -> datetime | None:
    """Ensure a datetime is timezone-aware UTC.

    Args:
        dt: A datetime object (naive or aware) or None.

    Returns:
        Timezone-aware UTC datetime or None.

    Note:
        - If dt is None, returns None
        - If dt is naive, assumes UTC and adds tzinfo
        - If dt is aware, converts to UTC
    """
    if dt is None:
        return None

    if dt.tzinfo is None:
        # Naive datetime - assume UTC
        return dt.replace(tzinfo=timezone.utc)

    return dt.astimezone(timezone.utc)


def add_weeks(dt: datetime, weeks: float) -> datetime:
    """Shift a datetime forward by a (possibly fractional) number of weeks.

    Args:
        dt: Starting datetime.
        weeks: Number of weeks to add.

    Returns:
        The shifted datetime, normalized to UTC.
    """
    return ensure_utc(dt) + timedelta(weeks=weeks)


def is_recent(dt: datetime | None, days: int, now: datetime | None = None) -> bool:
    """Check whether a timestamp falls within the last N days.

    Args:
        dt: Timestamp to check, None counts as never.
        days: Size of the window in days.
        now: Reference time, defaults to the current UTC time.

    Returns:
        True if dt is within the window.
    """
    if dt is None:
        return False
    reference = ensure_utc(now) if now is not None else utc_now()
    return ensure_utc(dt) >= reference - timedelta(days=days)
