# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Unit tests for JWT token management."""

from unittest.mock import MagicMock

import pytest
from jose import jwt
from pydantic import SecretStr

from learnhub.domains.auth.identity import CurrentUser
from learnhub.domains.auth.jwt import InvalidTokenError, JWTManager, TokenExpiredError


@pytest.fixture
def jwt_settings() -> MagicMock:
    """Create mock JWT settings."""
    settings = MagicMock()
    settings.secret_key = SecretStr("test-secret-key-for-jwt-testing")
    settings.algorithm = "HS256"
    settings.access_token_expire_minutes = 30
    return settings


@pytest.fixture
def jwt_manager(jwt_settings: MagicMock) -> JWTManager:
    """Create JWT manager with test settings."""
    return JWTManager(jwt_settings)


class TestJWTManager:
    """Tests for JWTManager."""

    def test_create_and_decode_access_token(self, jwt_manager: JWTManager) -> None:
        """Test that a created token decodes back to its claims."""
        token = jwt_manager.create_access_token(user_id="u-1", role="Student", email="ada@example.com")

        payload = jwt_manager.decode_token(token)

        assert payload.sub == "u-1"
        assert payload.role == "Student"
        assert payload.email == "ada@example.com"
        assert payload.type == "access"
        assert payload.exp - payload.iat == 30 * 60

    def test_expires_in_seconds(self, jwt_manager: JWTManager) -> None:
        """Test that the token lifetime is reported in seconds."""
        assert jwt_manager.expires_in == 1800

    def test_expired_token_raises(self, jwt_settings: MagicMock, jwt_manager: JWTManager) -> None:
        """Test that an expired token is rejected."""
        jwt_settings.access_token_expire_minutes = -1
        token = jwt_manager.create_access_token(user_id="u-1", role="Student", email="a@b.co")

        with pytest.raises(TokenExpiredError):
            jwt_manager.decode_token(token)

    def test_wrong_secret_raises(self, jwt_manager: JWTManager) -> None:
        """Test that a token signed with another key is rejected."""
        other = MagicMock()
        other.secret_key = SecretStr("another-secret")
        other.algorithm = "HS256"
        other.access_token_expire_minutes = 30
        token = JWTManager(other).create_access_token(user_id="u-1", role="Admin", email="a@b.co")

        with pytest.raises(InvalidTokenError):
            jwt_manager.decode_token(token)

    def test_non_access_token_raises(self, jwt_settings: MagicMock, jwt_manager: JWTManager) -> None:
        """Test that tokens of another type are rejected."""
        token = jwt.encode(
            {"sub": "u-1", "type": "refresh", "role": "Student", "email": "a@b.co"},
            jwt_settings.secret_key.get_secret_value(),
            algorithm="HS256",
        )

        with pytest.raises(InvalidTokenError):
            jwt_manager.decode_token(token)

    def test_verify_token(self, jwt_manager: JWTManager) -> None:
        """Test the boolean verification helper."""
        token = jwt_manager.create_access_token(user_id="u-1", role="Student", email="a@b.co")

        assert jwt_manager.verify_token(token) is True
        assert jwt_manager.verify_token("garbage") is False


class TestCurrentUser:
    """Tests for the verified identity."""

    def test_from_payload(self, jwt_manager: JWTManager) -> None:
        """Test building the identity from token claims."""
        token = jwt_manager.create_access_token(user_id="u-9", role="Instructor", email="g@h.co")

        user = CurrentUser.from_payload(jwt_manager.decode_token(token))

        assert user.id == "u-9"
        assert user.is_instructor
        assert user.is_staff
        assert not user.is_admin

    def test_owns(self) -> None:
        """Test that owners and admins may act on a resource."""
        instructor = CurrentUser(id="i-1", role="Instructor", email="i@x.co")
        admin = CurrentUser(id="a-1", role="Admin", email="a@x.co")

        assert instructor.owns("i-1")
        assert not instructor.owns("i-2")
        assert not instructor.owns(None)
        assert admin.owns("i-2")
