# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Publication status shared by lessons, courses and classrooms.

Historic records carry the status in several shapes: different casing,
a boolean ``isPublished`` / ``is_published`` flag, or an ``archived``
flag. normalize_status() reads those shapes leniently for stored data;
parse_status() accepts the same shapes from clients but rejects anything
else. Everything past the service boundary sees a Status member.
"""

from collections.abc import Mapping
from enum import Enum
from typing import Any


class Status(str, Enum):
    """Publication status."""

    DRAFT = "Draft"
    PUBLISHED = "Published"
    ARCHIVED = "Archived"


_BY_LOWER = {member.value.lower(): member for member in Status}

_PUBLISHED_FLAGS = ("is_published", "isPublished")
_ARCHIVED_FLAGS = ("archived", "is_archived", "isArchived")


def normalize_status(value: Any, default: Status = Status.DRAFT) -> Status:
    """Map any historical status representation to a Status member.

    Args:
        value: A Status, a string in any casing, or a mapping holding a
            ``status`` key and/or legacy boolean flags.
        default: Returned when nothing recognizable is found.

    Returns:
        The canonical Status.

    Example:
        >>> normalize_status("PUBLISHED")
        <Status.PUBLISHED: 'Published'>
        >>> normalize_status({"isPublished": True})
        <Status.PUBLISHED: 'Published'>
    """
    if isinstance(value, Status):
        return value

    if isinstance(value, str):
        return _BY_LOWER.get(value.strip().lower(), default)

    if isinstance(value, Mapping):
        if "status" in value and value["status"] is not None:
            status = normalize_status(value["status"], default=None)  # type: ignore[arg-type]
            if status is not None:
                return status
        if any(value.get(flag) is True for flag in _ARCHIVED_FLAGS):
            return Status.ARCHIVED
        for flag in _PUBLISHED_FLAGS:
            if flag in value and value[flag] is not None:
                return Status.PUBLISHED if value[flag] else Status.DRAFT

    return default


def is_published(value: Any) -> bool:
    """Check whether a status value normalizes to Published."""
    return normalize_status(value) is Status.PUBLISHED


def parse_status(value: Any) -> Status:
    """Strictly parse a client-supplied status.

    Accepts the same shapes as normalize_status() but raises instead of
    falling back to Draft, so a typo never gets stored silently.

    Raises:
        ValueError: If nothing in ``value`` names a status.
    """
    if isinstance(value, Status):
        return value

    if isinstance(value, str):
        status = _BY_LOWER.get(value.strip().lower())
        if status is None:
            raise ValueError(f"Invalid status {value!r}. Must be one of: Draft, Published, Archived")
        return status

    if isinstance(value, Mapping):
        if value.get("status") is not None:
            return parse_status(value["status"])
        flags = {k: v for k, v in value.items() if k in _PUBLISHED_FLAGS + _ARCHIVED_FLAGS and v is not None}
        if flags and all(isinstance(v, bool) for v in flags.values()):
            return normalize_status(flags)

    raise ValueError(f"Invalid status {value!r}. Must be one of: Draft, Published, Archived")
