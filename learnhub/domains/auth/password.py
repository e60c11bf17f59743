# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Password hashing utilities using bcrypt.

Example:
    >>> hasher = PasswordHasher(rounds=4)
    >>> hashed = hasher.hash("my_password")
    >>> hasher.verify("my_password", hashed)
    True
"""

import logging

import bcrypt

logger = logging.getLogger(__name__)


class PasswordHasher:
    """Secure password hashing using bcrypt.

    Attributes:
        _rounds: Number of bcrypt rounds for hashing.
    """

    def __init__(self, rounds: int = 12) -> None:
        """Initialize the password hasher.

        Args:
            rounds: Number of bcrypt rounds. Higher is more secure but slower.
        """
        self._rounds = rounds

    def hash(self, password: str) -> str:
        """Hash a password using bcrypt.

        Args:
            password: Plain text password to hash.

        Returns:
            Bcrypt hash string with salt embedded.

        Raises:
            ValueError: If password is empty.
        """
        if not password:
            raise ValueError("Password cannot be empty")

        salt = bcrypt.gensalt(rounds=self._rounds)
        hashed = bcrypt.hashpw(password.encode("utf-8"), salt)
        return hashed.decode("utf-8")

    def verify(self, password: str, password_hash: str) -> bool:
        """Verify a password against a hash.

        Args:
            password: Plain text password to verify.
            password_hash: Bcrypt hash to verify against.

        Returns:
            True if password matches the hash, False otherwise.
        """
        if not password or not password_hash:
            return False

        try:
            return bcrypt.checkpw(
                password.encode("utf-8"),
                password_hash.encode("utf-8"),
            )
        except ValueError as e:
            logger.warning("Password verification failed: %s", str(e))
            return False

    def needs_rehash(self, password_hash: str) -> bool:
        """Check whether a hash was produced with a different cost factor.

        Args:
            password_hash: Existing bcrypt hash, e.g. ``$2b$12$...``.

        Returns:
            True if the hash should be regenerated.
        """
        if not password_hash:
            return False

        parts = password_hash.split("$")
        if len(parts) < 4 or not parts[2].isdigit():
            return True
        return int(parts[2]) != self._rounds
