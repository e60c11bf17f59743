# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""LearnHub - learning management API.

Instructors and admins author lessons, bundle them into courses and run
classrooms; students enroll, get graded and follow their progress.
"""

__version__ = "0.1.0"
