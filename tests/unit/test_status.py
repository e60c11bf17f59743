# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for publication status normalization."""

import pytest
from pydantic import ValidationError

from learnhub.domains.common.status import Status, is_published, normalize_status, parse_status
from learnhub.models.course import CourseCreateRequest, CourseUpdateRequest
from learnhub.models.lesson import LessonCreateRequest


class TestNormalizeStatus:
    """Tests for normalize_status."""

    @pytest.mark.parametrize(
        "value, expected",
        [
            ("Published", Status.PUBLISHED),
            ("published", Status.PUBLISHED),
            ("  DRAFT ", Status.DRAFT),
            ("archived", Status.ARCHIVED),
            (Status.ARCHIVED, Status.ARCHIVED),
        ],
    )
    def test_strings_in_any_casing(self, value, expected) -> None:
        """Test that casing and whitespace do not matter."""
        assert normalize_status(value) is expected

    def test_unknown_falls_back_to_default(self) -> None:
        """Test that unrecognized values yield the default."""
        assert normalize_status("live") is Status.DRAFT
        assert normalize_status(None) is Status.DRAFT
        assert normalize_status(42, default=Status.ARCHIVED) is Status.ARCHIVED

    def test_legacy_published_flag(self) -> None:
        """Test that boolean published flags are understood."""
        assert normalize_status({"isPublished": True}) is Status.PUBLISHED
        assert normalize_status({"is_published": False}) is Status.DRAFT

    def test_archived_flag_wins_over_published(self) -> None:
        """Test that an archived flag takes precedence."""
        assert normalize_status({"isPublished": True, "archived": True}) is Status.ARCHIVED

    def test_explicit_status_wins(self) -> None:
        """Test that a status key beats legacy flags."""
        assert normalize_status({"status": "draft", "isPublished": True}) is Status.DRAFT

    def test_is_published(self) -> None:
        """Test the Published shortcut."""
        assert is_published("PUBLISHED")
        assert not is_published("Draft")


class TestLegacyStatusOnRequests:
    """Tests for legacy flags on write requests."""

    def test_is_published_flag_becomes_status(self) -> None:
        """Test that a request carrying isPublished gets a Published status."""
        request = CourseCreateRequest.model_validate(
            {"course_id": "CS101", "title": "Intro", "isPublished": True}
        )

        assert request.status is Status.PUBLISHED

    def test_status_is_normalized(self) -> None:
        """Test that request statuses are normalized."""
        request = CourseCreateRequest.model_validate(
            {"course_id": "CS101", "title": "Intro", "status": "archived"}
        )

        assert request.status is Status.ARCHIVED


class TestParseStatus:
    """Tests for strict parsing of client-supplied statuses."""

    @pytest.mark.parametrize(
        "value, expected",
        [
            ("published", Status.PUBLISHED),
            (" ARCHIVED", Status.ARCHIVED),
            ({"isPublished": True}, Status.PUBLISHED),
            ({"is_published": False}, Status.DRAFT),
            ({"archived": True}, Status.ARCHIVED),
        ],
    )
    def test_known_values(self, value, expected) -> None:
        """Test that every accepted shape parses."""
        assert parse_status(value) is expected

    @pytest.mark.parametrize("value", ["Publishd", "", "live", 42, None, {"isPublished": "yes"}])
    def test_unknown_values_raise(self, value) -> None:
        """Test that nothing falls back to Draft."""
        with pytest.raises(ValueError, match="Invalid status"):
            parse_status(value)

    def test_typo_rejected_on_create(self) -> None:
        """Test that a misspelt status fails request validation."""
        with pytest.raises(ValidationError):
            LessonCreateRequest.model_validate({"lesson_id": "L1", "title": "Intro", "status": "Publishd"})

    def test_non_boolean_legacy_flag_rejected(self) -> None:
        """Test that legacy flags must be booleans."""
        with pytest.raises(ValidationError):
            CourseCreateRequest.model_validate({"course_id": "CS101", "title": "Intro", "isPublished": "maybe"})

    def test_update_without_status_keeps_none(self) -> None:
        """Test that omitting the status on an update leaves it unset."""
        assert CourseUpdateRequest.model_validate({"title": "Renamed"}).status is None
