# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Authentication service: signup, login and profile lookup.

Example:
    >>> auth_service = AuthService(db, jwt_manager, password_hasher)
    >>> response = await auth_service.login(LoginRequest(email="a@b.c", password="secret"))
"""

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from learnhub.core.errors import ConflictError, NotFoundError, UnauthorizedError, ValidationError
from learnhub.domains.auth.jwt import JWTManager
from learnhub.domains.auth.password import PasswordHasher
from learnhub.infrastructure.database.models.user import (
    ROLE_INSTRUCTOR,
    ROLE_STUDENT,
    USER_STATUS_ACTIVE,
    USER_STATUS_INACTIVE,
    Instructor,
    Student,
    User,
)
from learnhub.models.auth import LoginRequest, LoginResponse, SignupRequest, UserResponse
from learnhub.utils.datetime import is_recent, utc_now

logger = logging.getLogger(__name__)

SIGNUP_ROLES = {ROLE_STUDENT: Student, ROLE_INSTRUCTOR: Instructor}


class AuthenticationError(UnauthorizedError):
    """Raised when credentials do not match."""

    pass


class AccountNotFoundError(NotFoundError):
    """Raised when no account exists for an email."""

    pass


class EmailInUseError(ConflictError):
    """Raised when signing up with an email that is already registered."""

    pass


class InvalidRoleError(ValidationError):
    """Raised when signing up with a role that cannot self-register."""

    pass


def derive_user_status(user: User, inactive_after_days: int) -> str:
    """Active if the user logged in within the window, Inactive otherwise."""
    if is_recent(user.last_login, inactive_after_days):
        return USER_STATUS_ACTIVE
    return USER_STATUS_INACTIVE


def to_user_response(user: User, inactive_after_days: int) -> UserResponse:
    """Build the profile response of any user."""
    return UserResponse(
        id=user.id,
        email=user.username,
        role=user.role,
        title=user.title,
        first_name=user.first_name,
        last_name=user.last_name,
        status=derive_user_status(user, inactive_after_days),
        last_login=user.last_login,
        course=getattr(user, "course_id", None),
        classroom=getattr(user, "classroom_id", None),
        created_at=user.created_at,
    )


class AuthService:
    """Authentication service.

    Attributes:
        _db: Database session for queries.
        _jwt_manager: JWT token manager.
        _hasher: Password hasher.
        _inactive_after_days: Login recency window for the Active status.
    """

    def __init__(
        self,
        db: AsyncSession,
        jwt_manager: JWTManager,
        password_hasher: PasswordHasher,
        inactive_after_days: int = 30,
    ) -> None:
        self._db = db
        self._jwt_manager = jwt_manager
        self._hasher = password_hasher
        self._inactive_after_days = inactive_after_days

    async def signup(self, request: SignupRequest) -> UserResponse:
        """Register a student or instructor account.

        Args:
            request: Signup data.

        Returns:
            The created user.

        Raises:
            InvalidRoleError: If the role is not Student or Instructor.
            EmailInUseError: If the email is already registered.
        """
        model = SIGNUP_ROLES.get(request.role)
        if model is None:
            raise InvalidRoleError("Invalid role. Must be Student or Instructor")

        email = request.email.lower()
        if await self._get_by_username(email) is not None:
            raise EmailInUseError("Email already in use")

        user = model(
            username=email,
            password_hash=self._hasher.hash(request.password),
            title=request.title,
            first_name=request.first_name,
            last_name=request.last_name,
            status=USER_STATUS_INACTIVE,
        )
        self._db.add(user)

        try:
            await self._db.commit()
        except IntegrityError:
            await self._db.rollback()
            raise EmailInUseError("Email already in use")

        logger.info("User signed up: id=%s, role=%s", user.id, user.role)
        return to_user_response(user, self._inactive_after_days)

    async def login(self, request: LoginRequest) -> LoginResponse:
        """Authenticate with email and password.

        Raises:
            AccountNotFoundError: If no account exists for the email.
            AuthenticationError: If the password does not match.
        """
        user = await self._get_by_username(request.email.lower())
        if user is None:
            raise AccountNotFoundError("No account found with this email")

        if not self._hasher.verify(request.password, user.password_hash):
            logger.info("Failed login: user=%s", user.id)
            raise AuthenticationError("Invalid password")

        user.last_login = utc_now()
        user.status = USER_STATUS_ACTIVE
        if self._hasher.needs_rehash(user.password_hash):
            user.password_hash = self._hasher.hash(request.password)
        await self._db.commit()

        token = self._jwt_manager.create_access_token(
            user_id=user.id,
            role=user.role,
            email=user.username,
        )

        logger.info("User logged in: id=%s, role=%s", user.id, user.role)

        return LoginResponse(
            role=user.role,
            token=token,
            expires_in=self._jwt_manager.expires_in,
            user_id=user.id,
        )

    async def get_profile(self, user_id: str) -> UserResponse:
        """Get the profile of a user.

        Raises:
            AccountNotFoundError: If the user does not exist.
        """
        user = await self._db.get(User, user_id)
        if user is None:
            raise AccountNotFoundError("User not found")
        return to_user_response(user, self._inactive_after_days)

    async def _get_by_username(self, username: str) -> User | None:
        result = await self._db.execute(select(User).where(User.username == username))
        return result.scalar_one_or_none()
