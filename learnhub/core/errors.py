# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Error taxonomy shared by all LearnHub services.

Domain services raise subclasses of these errors. The API layer maps each
category to an HTTP status code in a single exception handler, so services
never deal with HTTP concerns.

Categories:
- NotFoundError: entity id absent (404)
- ConflictError: duplicate human-readable id or double enrollment (409)
- ValidationError: invalid field values or failed preconditions (400)
- UnauthorizedError: missing or invalid credential (401)
- ForbiddenError: acting on a resource not owned by the caller (403)

Store failures surface as DatabaseError from the connection module (500).
"""


class LearnHubError(Exception):
    """Base exception for all LearnHub domain errors.

    Attributes:
        message: Human-readable error description.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(LearnHubError):
    """Raised when a referenced entity does not exist."""

    pass


class ConflictError(LearnHubError):
    """Raised when a write would violate a uniqueness rule."""

    pass


class ValidationError(LearnHubError):
    """Raised when input values or preconditions are invalid."""

    pass


class UnauthorizedError(LearnHubError):
    """Raised when a credential is missing or invalid."""

    pass


class ForbiddenError(LearnHubError):
    """Raised when the caller may not act on a resource."""

    pass
