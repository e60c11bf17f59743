# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""JWT token management utilities.

Access tokens bind a request to a user identity: id, role and email.
Tokens are signed with python-jose using the configured secret.

Example:
    >>> from learnhub.core.config import get_settings
    >>> jwt_manager = JWTManager(get_settings().jwt)
    >>> token = jwt_manager.create_access_token(user_id="u-1", role="Student", email="a@b.c")
    >>> claims = jwt_manager.decode_token(token)
"""

import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Literal

from jose import ExpiredSignatureError, JWTError as JoseJWTError, jwt
from pydantic import BaseModel

from learnhub.core.config.settings import JWTSettings
from learnhub.core.errors import UnauthorizedError

logger = logging.getLogger(__name__)


class TokenPayload(BaseModel):
    """JWT token payload structure.

    Attributes:
        sub: Subject (user ID).
        type: Token type.
        role: User role (Student, Instructor, Admin).
        email: User email / username.
        exp: Expiration timestamp.
        iat: Issued at timestamp.
        jti: JWT ID for token tracking.
    """

    sub: str
    type: Literal["access"] = "access"
    role: str
    email: str
    exp: int
    iat: int
    jti: str


class JWTError(UnauthorizedError):
    """Base exception for JWT operations."""

    pass


class TokenExpiredError(JWTError):
    """Raised when a token has expired."""

    pass


class InvalidTokenError(JWTError):
    """Raised when a token is invalid."""

    pass


class JWTManager:
    """JWT token creation and validation manager.

    Attributes:
        _settings: JWT configuration settings.
    """

    def __init__(self, settings: JWTSettings) -> None:
        """Initialize the JWT manager.

        Args:
            settings: JWT configuration settings.
        """
        self._settings = settings

    @property
    def expires_in(self) -> int:
        """Access token lifetime in seconds."""
        return self._settings.access_token_expire_minutes * 60

    def create_access_token(self, user_id: str, role: str, email: str) -> str:
        """Create an access token.

        Args:
            user_id: User identifier.
            role: User role.
            email: User email.

        Returns:
            JWT access token string.
        """
        now = datetime.now(timezone.utc)
        exp = now + timedelta(minutes=self._settings.access_token_expire_minutes)

        payload = {
            "sub": str(user_id),
            "type": "access",
            "role": role,
            "email": email,
            "exp": int(exp.timestamp()),
            "iat": int(now.timestamp()),
            "jti": secrets.token_urlsafe(16),
        }

        return jwt.encode(
            payload,
            self._settings.secret_key.get_secret_value(),
            algorithm=self._settings.algorithm,
        )

    def decode_token(self, token: str) -> TokenPayload:
        """Decode and validate a JWT token.

        Args:
            token: JWT token string.

        Returns:
            TokenPayload with decoded claims.

        Raises:
            TokenExpiredError: If the token has expired.
            InvalidTokenError: If the token is invalid or malformed.
        """
        try:
            payload = jwt.decode(
                token,
                self._settings.secret_key.get_secret_value(),
                algorithms=[self._settings.algorithm],
            )
        except ExpiredSignatureError:
            raise TokenExpiredError("Token has expired")
        except JoseJWTError as e:
            logger.warning("Token decode failed: %s", str(e))
            raise InvalidTokenError(f"Invalid token: {str(e)}")

        if payload.get("type") != "access":
            raise InvalidTokenError(f"Expected access token, got {payload.get('type')}")

        try:
            return TokenPayload(**payload)
        except ValueError as e:
            raise InvalidTokenError(f"Invalid token claims: {str(e)}")

    def verify_token(self, token: str) -> bool:
        """Verify if a token is valid.

        Args:
            token: JWT token string.

        Returns:
            True if token is valid, False otherwise.
        """
        try:
            self.decode_token(token)
            return True
        except JWTError:
            return False
