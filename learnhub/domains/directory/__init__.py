# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Directory domain: student and instructor accounts."""

from learnhub.domains.directory.service import DirectoryService, UserNotFoundError

__all__ = ["DirectoryService", "UserNotFoundError"]
