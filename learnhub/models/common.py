# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Shared request/response building blocks.

Naming convention used by every schema: ``*_id`` fields carry the
human-readable label of an entity (``course_id="CS101"``), while fields
named after the entity itself (``course``, ``lessons``, ``owner``) carry
server-side references.
"""

from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, Field

from learnhub.domains.common.status import Status, normalize_status, parse_status

# Responses tolerate historic values; requests reject anything unrecognized
StatusValue = Annotated[Status, BeforeValidator(normalize_status)]
StatusInput = Annotated[Status, BeforeValidator(parse_status)]

_LEGACY_KEYS = ("is_published", "isPublished", "archived", "is_archived", "isArchived")


def fold_legacy_status(data: Any) -> Any:
    """Turn legacy ``is_published`` / ``archived`` flags into ``status``.

    Meant for ``model_validator(mode="before")`` hooks on write requests.
    An explicit ``status`` always wins. Non-boolean flags are rejected.
    """
    if isinstance(data, dict) and data.get("status") is None:
        legacy = {k: v for k, v in data.items() if k in _LEGACY_KEYS}
        if legacy:
            data = {k: v for k, v in data.items() if k not in _LEGACY_KEYS}
            data["status"] = parse_status(legacy)
    return data


class MessageResponse(BaseModel):
    """Plain acknowledgement."""

    message: str = Field(..., description="Human-readable result")


class UserSummary(BaseModel):
    """Compact user representation embedded in other responses."""

    id: str = Field(..., description="User reference")
    email: str = Field(..., description="Email / username")
    role: str = Field(..., description="Student, Instructor or Admin")
    title: str | None = Field(None, description="Salutation")
    first_name: str | None = Field(None, description="First name")
    last_name: str | None = Field(None, description="Last name")
