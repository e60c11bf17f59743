# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for the domain error to HTTP status mapping."""

import pytest

from learnhub.api.errors import status_code_for
from learnhub.core.errors import LearnHubError
from learnhub.domains.auth.jwt import TokenExpiredError
from learnhub.domains.auth.service import EmailInUseError, InvalidRoleError
from learnhub.domains.common.prerequisites import PrerequisiteError
from learnhub.domains.enrollment.coordinator import (
    AlreadyEnrolledError,
    CourseNotFoundError,
    NotEnrolledError,
)
from learnhub.domains.grading.service import InvalidScoreError


class TestStatusCodeFor:
    """Tests for status_code_for."""

    @pytest.mark.parametrize(
        "error, expected",
        [
            (CourseNotFoundError("missing"), 404),
            (AlreadyEnrolledError("twice"), 409),
            (EmailInUseError("taken"), 409),
            (NotEnrolledError("not in it"), 400),
            (InvalidScoreError("range"), 400),
            (InvalidRoleError("role"), 400),
            (PrerequisiteError("cycle"), 400),
            (TokenExpiredError("old"), 401),
        ],
    )
    def test_categories(self, error: LearnHubError, expected: int) -> None:
        """Test that each error category maps to its status code."""
        assert status_code_for(error) == expected

    def test_uncategorized_error_is_server_error(self) -> None:
        """Test that a bare domain error is a 500."""
        assert status_code_for(LearnHubError("boom")) == 500
