# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Database seed data.

Admin accounts cannot sign up through the API; the first one is seeded
from AUTH_ADMIN_EMAIL / AUTH_ADMIN_PASSWORD at startup.
"""

import asyncio
import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from learnhub.domains.auth.password import PasswordHasher
from learnhub.infrastructure.database.models import USER_STATUS_INACTIVE, Admin, User

logger = logging.getLogger(__name__)


async def seed_admin(
    session: AsyncSession,
    admin_email: str,
    admin_password: str,
    password_hasher: Optional[PasswordHasher] = None,
) -> Optional[Admin]:
    """Create the admin account unless the email is already registered.

    Args:
        session: Database session.
        admin_email: Admin email address.
        admin_password: Admin password.
        password_hasher: Hasher to use, defaults to PasswordHasher().

    Returns:
        The created admin, or None if the email was taken.
    """
    email = admin_email.lower()
    result = await session.execute(select(User).where(User.username == email))
    if result.scalar_one_or_none() is not None:
        logger.info("Admin seed skipped, account exists: %s", email)
        return None

    hasher = password_hasher or PasswordHasher()
    admin = Admin(
        username=email,
        password_hash=hasher.hash(admin_password),
        first_name="LearnHub",
        last_name="Admin",
        status=USER_STATUS_INACTIVE,
    )
    session.add(admin)
    await session.commit()

    logger.info("Seeded admin account: %s", email)
    return admin


if __name__ == "__main__":
    from learnhub.core.config import get_settings
    from learnhub.infrastructure.database.connection import (
        close_database,
        create_schema,
        get_session,
        init_database,
    )

    async def main():
        settings = get_settings()
        if not settings.auth.admin_email or settings.auth.admin_password is None:
            raise SystemExit("AUTH_ADMIN_EMAIL and AUTH_ADMIN_PASSWORD must be set")

        await init_database(settings)
        await create_schema()
        async with get_session() as session:
            await seed_admin(
                session,
                settings.auth.admin_email,
                settings.auth.admin_password.get_secret_value(),
                PasswordHasher(rounds=settings.auth.bcrypt_rounds),
            )
        await close_database()

    asyncio.run(main())
