# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Helpers shared by the entity services."""

from learnhub.domains.common.prerequisites import (
    PrerequisiteError,
    find_cycle,
    validate_prerequisites,
)
from learnhub.domains.common.status import Status, is_published, normalize_status

__all__ = [
    "Status",
    "normalize_status",
    "is_published",
    "PrerequisiteError",
    "validate_prerequisites",
    "find_cycle",
]
