# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Verified caller identity.

A CurrentUser is built from a verified token by the auth middleware and
handed explicitly to every service call that needs to know who is acting.
"""

from learnhub.domains.auth.jwt import TokenPayload
from learnhub.infrastructure.database.models.user import ROLE_ADMIN, ROLE_INSTRUCTOR, ROLE_STUDENT


class CurrentUser:
    """Authenticated user.

    Attributes:
        id: User reference.
        role: Student, Instructor or Admin.
        email: Email / username.
    """

    def __init__(self, id: str, role: str, email: str) -> None:
        self.id = id
        self.role = role
        self.email = email

    @classmethod
    def from_payload(cls, payload: TokenPayload) -> "CurrentUser":
        """Build from a decoded token payload."""
        return cls(id=payload.sub, role=payload.role, email=payload.email)

    def has_role(self, *roles: str) -> bool:
        """Check if the user has any of the given roles."""
        return self.role in roles

    @property
    def is_admin(self) -> bool:
        """Check if user is an admin."""
        return self.role == ROLE_ADMIN

    @property
    def is_instructor(self) -> bool:
        """Check if user is an instructor."""
        return self.role == ROLE_INSTRUCTOR

    @property
    def is_student(self) -> bool:
        """Check if user is a student."""
        return self.role == ROLE_STUDENT

    @property
    def is_staff(self) -> bool:
        """Instructors and admins manage content."""
        return self.role in (ROLE_INSTRUCTOR, ROLE_ADMIN)

    def owns(self, owner_id: str | None) -> bool:
        """Check whether the user may act on a resource owned by owner_id."""
        return self.is_admin or (owner_id is not None and owner_id == self.id)

    def __repr__(self) -> str:
        return f"<CurrentUser {self.role} {self.id}>"
